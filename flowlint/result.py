# flowlint/result.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Severity(str, Enum):
    ERROR = "error"      # blocks deployment
    WARNING = "warning"  # may be a false positive


class IssueCode(str, Enum):
    # document
    INVALID_DOCUMENT = "invalid_document"
    # structure
    DUPLICATE_NAME = "duplicate_name"
    DUPLICATE_ID = "duplicate_id"
    UNKNOWN_CONNECTION_NODE = "unknown_connection_node"
    MISSING_CONNECTION = "missing_connection"
    CIRCULAR_DEPENDENCY = "circular_dependency"
    NO_TRIGGER = "no_trigger"
    # AI wiring
    INVALID_AI_CONNECTION = "invalid_ai_connection"
    MISSING_LANGUAGE_MODEL = "missing_language_model"
    TOO_MANY_LANGUAGE_MODELS = "too_many_language_models"
    # node types / parameters
    UNKNOWN_NODE_TYPE = "unknown_node_type"
    MISSING_REQUIRED = "missing_required"
    TYPE_MISMATCH = "type_mismatch"
    UNKNOWN_PROPERTY = "unknown_property"
    HIDDEN_PROPERTY = "hidden_property"
    DEPRECATED_PROPERTY = "deprecated_property"
    OPTIONAL_DEFAULT = "optional_default"
    # expressions
    MALFORMED_EXPRESSION = "malformed_expression"
    EXPRESSION_PREFIX = "expression_prefix"
    RUNTIME_EXPRESSION = "runtime_expression"
    # credentials
    CREDENTIAL_MISMATCH = "credential_mismatch"
    MISSING_CREDENTIAL = "missing_credential"
    # documentation
    NODE_TYPE_NAMING = "node_type_naming"
    EXAMPLE_SECRET = "example_secret"
    SECRET_NOT_IGNORED = "secret_not_ignored"


class FalsePositive(str, Enum):
    """Warning patterns that are known to be overridable."""
    OPTIONAL_DEFAULTS = "optional_defaults"
    DEV_CREDENTIALS = "dev_credentials"
    RUNTIME_EXPRESSION = "runtime_expression"
    COMMUNITY_SCHEMA = "community_schema"
    DEPRECATED_PROPERTY = "deprecated_property"
    AI_TOOL_FLEXIBILITY = "ai_tool_flexibility"


@dataclass
class Issue:
    code: IssueCode
    severity: Severity
    message: str
    node: Optional[str] = None
    path: Optional[str] = None          # parameter path or file path
    fix: Optional[str] = None
    false_positive: Optional[FalsePositive] = None

    def __str__(self) -> str:
        tag = self.code.value.upper()
        text = f"[{tag}] {self.message}"
        if self.fix:
            text += f" (fix: {self.fix})"
        return text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "severity": self.severity.value,
            "message": self.message,
            "node": self.node,
            "path": self.path,
            "fix": self.fix,
            "false_positive": self.false_positive.value if self.false_positive else None,
        }


def error(code: IssueCode, message: str, **kwargs) -> Issue:
    return Issue(code, Severity.ERROR, message, **kwargs)


def warning(code: IssueCode, message: str, **kwargs) -> Issue:
    return Issue(code, Severity.WARNING, message, **kwargs)


@dataclass
class ValidationResult:
    """
    Outcome of validating one workflow.

    `errors` must be resolved before deployment. `warnings` are reported but
    do not block unless the profile says so. `suppressed` holds warnings that
    matched an accepted false-positive category.
    """
    errors: List[Issue] = field(default_factory=list)
    warnings: List[Issue] = field(default_factory=list)
    suppressed: List[Issue] = field(default_factory=list)
    detail: Dict[str, Any] = field(default_factory=dict)
    fail_on_warnings: bool = False

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def issues(self) -> List[Issue]:
        return self.errors + self.warnings

    def passed(self, fail_on_warnings: Optional[bool] = None) -> bool:
        if fail_on_warnings is None:
            fail_on_warnings = self.fail_on_warnings
        if fail_on_warnings:
            return self.valid and not self.warnings
        return self.valid

    def add(self, issue: Issue) -> None:
        if issue.severity is Severity.ERROR:
            self.errors.append(issue)
        else:
            self.warnings.append(issue)

    def extend(self, issues: List[Issue]) -> None:
        for it in issues:
            self.add(it)

    def codes(self) -> List[str]:
        return [it.code.value for it in self.issues]

    def summary(self) -> Dict[str, int]:
        return {
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "suppressed": len(self.suppressed),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "passed": self.passed(),
            "summary": self.summary(),
            "errors": [it.to_dict() for it in self.errors],
            "warnings": [it.to_dict() for it in self.warnings],
            "suppressed": [it.to_dict() for it in self.suppressed],
            "detail": self.detail,
        }
