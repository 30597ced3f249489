# flowlint/validator.py

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from flowlint.config import Settings, get_environment, get_profile, parse_accept
from flowlint.credentials import CredentialStore, check_credentials
from flowlint.errors import WorkflowLoadError
from flowlint.parameters.checker import check_parameters
from flowlint.parameters.expressions import check_expressions
from flowlint.registry.model import NodeRegistry, is_community_node, normalize_node_type
from flowlint.result import (
    FalsePositive,
    Issue,
    IssueCode,
    Severity,
    ValidationResult,
    error,
    warning,
)
from flowlint.structural.ai import check_ai_connections
from flowlint.structural.checker import check_structure
from flowlint.structural.schema import check_document, is_usable, node_list
from flowlint.utils.graph import extract_edges, is_annotation_node, node_names
from flowlint.utils.io import load_any
from flowlint.utils.logger import get_logger

logger = get_logger("validator")


# ---------- Public API ----------

def validate_workflow(
    workflow: Any,
    registry: Optional[NodeRegistry] = None,
    credentials: Optional[CredentialStore] = None,
    profile: str = "runtime",
    environment: str = "production",
    accept: Union[str, Iterable[Any], None] = (),
) -> ValidationResult:
    """
    Validate one workflow document.

    Pipeline:
      1) document shape (JSON schema); stops here only if `nodes` is unusable
      2) graph structure and AI wiring
      3) per node: type lookup, parameters, expressions, credentials
      4) warnings in an accepted false-positive category move to `suppressed`

    Returns a ValidationResult; problems in the workflow are never raised.
    Unknown profile, environment or false-positive names raise ConfigError.
    """
    prof = get_profile(profile)
    environment = get_environment(environment)
    accepted = set(prof.accept) | set(parse_accept(accept))
    registry = registry if registry is not None else NodeRegistry.default()

    result = ValidationResult(fail_on_warnings=prof.fail_on_warnings)
    result.detail = {"profile": prof.name, "environment": environment}
    issues: List[Issue] = []

    # 1) Document
    issues.extend(check_document(workflow))
    if not is_usable(workflow):
        _finish(result, issues, accepted, prof.emit_warnings)
        logger.info("Workflow is not usable: %d document errors", len(result.errors))
        return result

    # 2) Graph
    edges = extract_edges(workflow)
    s_issues, s_detail = check_structure(workflow, edges, registry)
    issues.extend(s_issues)
    issues.extend(check_ai_connections(workflow, edges, registry))
    result.detail["structure"] = s_detail

    # 3) Nodes
    names = node_names(workflow)
    node_detail: Dict[str, Any] = {"checked": 0, "skipped": [], "unknown_types": []}
    for node in node_list(workflow):
        nname = str(node.get("name") or node.get("id") or "<unnamed>")
        if is_annotation_node(node):
            continue
        if node.get("disabled") is True:
            node_detail["skipped"].append(nname)
            continue

        ntype = str(node.get("type") or "")
        schema = registry.get(ntype, node.get("typeVersion"))
        if schema is None:
            node_detail["unknown_types"].append(ntype)
            issues.append(_unknown_type(nname, ntype, registry))
            # expressions do not depend on the schema
            if prof.check_expressions:
                issues.extend(check_expressions(node, names))
            continue

        logger.debug("Checking node '%s' as %s v%s", nname, schema.name, node.get("typeVersion"))
        node_detail["checked"] += 1
        issues.extend(check_parameters(node, schema, prof))
        if prof.check_expressions:
            issues.extend(check_expressions(node, names))
        if prof.check_credentials:
            issues.extend(check_credentials(node, schema, credentials, environment))

    result.detail["nodes"] = node_detail
    _finish(result, issues, accepted, prof.emit_warnings)
    logger.info(
        "Validated %d nodes (%s): %d errors, %d warnings, %d suppressed",
        len(names), prof.name, len(result.errors), len(result.warnings), len(result.suppressed),
    )
    return result


def load_workflow(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a workflow from JSON or YAML; anything but an object is rejected."""
    try:
        data = load_any(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise WorkflowLoadError(f"Cannot read workflow {path}: {e}") from e
    if not isinstance(data, dict):
        raise WorkflowLoadError(f"{path}: a workflow must be a JSON/YAML object, got {type(data).__name__}")
    return data


def validate_file(path: Union[str, Path], settings: Optional[Settings] = None) -> ValidationResult:
    """Load the workflow, registry and credential store named by `settings`, then validate."""
    settings = settings or Settings()
    workflow = load_workflow(path)

    registry = (
        NodeRegistry.from_file(settings.registry_path)
        if settings.registry_path is not None
        else NodeRegistry.default()
    )
    store = (
        CredentialStore.from_file(settings.credentials_path)
        if settings.credentials_path is not None
        else None
    )
    result = validate_workflow(
        workflow,
        registry=registry,
        credentials=store,
        profile=settings.profile,
        environment=settings.environment,
        accept=settings.accept,
    )
    result.detail["input"] = str(path)
    return result


# ---------- Helpers ----------

def _unknown_type(nname: str, ntype: str, registry: NodeRegistry) -> Issue:
    full = normalize_node_type(ntype)
    if is_community_node(full):
        return warning(
            IssueCode.UNKNOWN_NODE_TYPE,
            f"Node '{nname}' uses community node type '{ntype}', which has no schema in the registry; "
            "its parameters were not checked",
            node=nname, false_positive=FalsePositive.COMMUNITY_SCHEMA,
            fix="load a registry export that includes the package with --registry",
        )
    hint = difflib.get_close_matches(full, registry.names(), n=1, cutoff=0.8)
    fix = f"did you mean '{hint[0]}'" if hint else None
    return error(
        IssueCode.UNKNOWN_NODE_TYPE,
        f"Node '{nname}' has unknown node type '{ntype}'",
        node=nname, fix=fix or "check the type name against the node registry",
    )


def _finish(result: ValidationResult, issues: List[Issue], accepted: set, emit_warnings: bool) -> None:
    for it in issues:
        if it.severity is Severity.WARNING:
            if not emit_warnings:
                continue
            if it.false_positive is not None and it.false_positive in accepted:
                result.suppressed.append(it)
                continue
        result.add(it)
