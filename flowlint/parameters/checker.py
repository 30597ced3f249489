# flowlint/parameters/checker.py

from __future__ import annotations

import difflib
from typing import Any, Dict, List, Optional

from flowlint.config import Profile
from flowlint.registry.model import NodeTypeSchema, PropertySchema
from flowlint.result import FalsePositive, Issue, IssueCode, error, warning

# ---------- Public API ----------

def check_parameters(
    node: Dict[str, Any],
    schema: NodeTypeSchema,
    profile: Profile,
) -> List[Issue]:
    """
    Check a node's `parameters` against its type schema.

    Visibility is resolved first (displayOptions), so a property only counts as
    required, or as known-and-active, for the resource/operation combination
    the node is actually configured with.
    """
    issues: List[Issue] = []
    nname = str(node.get("name") or node.get("id") or "<unnamed>")
    params = node.get("parameters") or {}
    if not isinstance(params, dict):
        return [error(
            IssueCode.TYPE_MISMATCH,
            f"Node '{nname}' parameters must be an object, got {_type_name(params)}",
            node=nname, path="parameters",
        )]
    version = node.get("typeVersion")

    visible: Dict[str, PropertySchema] = {}
    for p in schema.properties:
        if p.name not in visible and p.is_visible(params, schema, version):
            visible[p.name] = p

    # 1) required properties for the resolved configuration
    for p in visible.values():
        if p.required and _is_missing(params, p):
            issues.append(error(
                IssueCode.MISSING_REQUIRED,
                f"Node '{nname}' is missing required property '{p.name}'{_context(params, p, schema)}",
                node=nname, path=f"parameters.{p.name}",
                fix=f"set parameters.{p.name}",
            ))

    # 2) every configured parameter
    known = schema.property_names()
    for key, value in params.items():
        if key not in known:
            if profile.check_unknown:
                hint = difflib.get_close_matches(key, known, n=3, cutoff=0.6)
                issues.append(error(
                    IssueCode.UNKNOWN_PROPERTY,
                    f"Node '{nname}' has unknown property '{key}' for type '{schema.name}'",
                    node=nname, path=f"parameters.{key}",
                    fix=("did you mean " + ", ".join(f"'{h}'" for h in hint)) if hint else "remove it",
                ))
            continue

        prop = visible.get(key)
        if prop is None:
            issues.append(warning(
                IssueCode.HIDDEN_PROPERTY,
                f"Node '{nname}' sets '{key}', which is not shown for the current configuration and will be ignored",
                node=nname, path=f"parameters.{key}",
            ))
            continue

        if profile.check_types and not (prop.required and _is_empty(value)):
            problem = type_problem(prop, value)
            if problem:
                issues.append(error(
                    IssueCode.TYPE_MISMATCH,
                    f"Node '{nname}' property '{key}' {problem}",
                    node=nname, path=f"parameters.{key}",
                ))

        if prop.deprecated:
            issues.append(warning(
                IssueCode.DEPRECATED_PROPERTY,
                f"Node '{nname}' uses deprecated property '{key}'",
                node=nname, path=f"parameters.{key}",
                false_positive=FalsePositive.DEPRECATED_PROPERTY,
            ))

    # 3) optional properties left to n8n's defaults (strict only)
    if profile.optional_warnings:
        for p in visible.values():
            if not p.required and not p.has_default and p.name not in params:
                issues.append(warning(
                    IssueCode.OPTIONAL_DEFAULT,
                    f"Node '{nname}' leaves optional property '{p.name}' unset",
                    node=nname, path=f"parameters.{p.name}",
                    false_positive=FalsePositive.OPTIONAL_DEFAULTS,
                ))

    return issues


# ---------- Type checks ----------

_STRING_TYPES = ("string", "dateTime", "color", "hidden", "credentialsSelect")
_OBJECT_TYPES = ("collection", "fixedCollection", "filter", "assignmentCollection")


def type_problem(prop: PropertySchema, value: Any) -> Optional[str]:
    """
    Return a short description of why `value` does not fit `prop.type`,
    or None when it fits. Expressions ("=...") fit every type.
    """
    if is_expression(value):
        return None
    t = prop.type

    if t in _STRING_TYPES:
        if not isinstance(value, str):
            return f"expects a string, got {_type_name(value)}"
    elif t == "number":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return f"expects a number, got {_type_name(value)}"
    elif t == "boolean":
        if not isinstance(value, bool):
            return f"expects a boolean, got {_type_name(value)}"
    elif t == "options":
        if isinstance(value, (dict, list)):
            return f"expects one option value, got {_type_name(value)}"
        if prop.options and value not in prop.options:
            return f"value {value!r} is not one of {prop.options}"
    elif t == "multiOptions":
        if not isinstance(value, list):
            return f"expects a list of option values, got {_type_name(value)}"
        bad = [v for v in value if prop.options and v not in prop.options]
        if bad:
            return f"values {bad} are not among {prop.options}"
    elif t in _OBJECT_TYPES:
        if not isinstance(value, dict):
            return f"expects an object ({t}), got {_type_name(value)}"
    elif t == "json":
        if not isinstance(value, (str, dict, list)):
            return f"expects JSON text or an object, got {_type_name(value)}"
    elif t == "resourceLocator":
        if isinstance(value, dict):
            if "value" not in value:
                return "expects a resource locator object with a 'value' key"
        elif not isinstance(value, str):
            return f"expects a resource locator, got {_type_name(value)}"
    # notice and unrecognised types carry no value constraint
    return None


def is_expression(value: Any) -> bool:
    return isinstance(value, str) and value.startswith("=")


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, dict):
        if "value" in value and "mode" in value:   # resource locator
            return _is_empty(value.get("value"))
        return len(value) == 0
    if isinstance(value, list):
        return len(value) == 0
    return False


def _is_missing(params: Dict[str, Any], prop: PropertySchema) -> bool:
    if prop.name in params:
        return _is_empty(params[prop.name])
    return not prop.has_default or _is_empty(prop.default)


def _context(params: Dict[str, Any], prop: PropertySchema, schema: NodeTypeSchema) -> str:
    """Describe the values that made `prop` required, e.g. ' (resource=message, operation=post)'."""
    show = prop.display_options.get("show") or {}
    parts = []
    for key in show:
        if key.startswith("@"):
            continue
        if key in params:
            val = params[key]
        else:
            defaults = [p.default for p in schema.properties_named(key) if p.has_default]
            val = defaults[0] if defaults else None
        parts.append(f"{key}={val}")
    return f" ({', '.join(parts)})" if parts else ""


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
