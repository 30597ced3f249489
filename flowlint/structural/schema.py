#flowlint/structural/schema.py
from typing import Any, Dict, List

from jsonschema import Draft7Validator

from flowlint.result import Issue, IssueCode, error

_HOP = {
    "type": "object",
    "required": ["node"],
    "properties": {
        "node": {"type": "string", "minLength": 1},
        # input type on the target node (usually "main")
        "type": {"type": "string", "minLength": 1},
        "index": {"type": "integer", "minimum": 0},
    },
    "additionalProperties": True,
}

WORKFLOW_SCHEMA = {
    "type": "object",
    "required": ["nodes"],
    "anyOf": [
        {"required": ["connections"]},
        {"required": ["edges"]},
    ],
    "properties": {
        "name": {"type": "string"},
        "nodes": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["name", "type"],
                "properties": {
                    "id": {"type": ["string", "number"]},
                    "name": {"type": "string", "minLength": 1},
                    "type": {
                        "type": "string",
                        # package.nodeName, optionally scoped: @scope/package.nodeName
                        "pattern": "^(@[A-Za-z0-9_-]+/)?[A-Za-z0-9_-]+\\.[A-Za-z0-9_.-]+$",
                    },
                    "typeVersion": {"type": ["integer", "number"]},
                    "parameters": {"type": "object"},
                    "credentials": {
                        "type": "object",
                        "additionalProperties": {
                            "type": "object",
                            "properties": {
                                "id": {"type": ["string", "number", "null"]},
                                "name": {"type": "string"},
                            },
                        },
                    },
                    "disabled": {"type": "boolean"},
                    "position": {
                        "anyOf": [
                            {"type": "array", "items": {"type": "number"}, "minItems": 2, "maxItems": 2},
                            {
                                "type": "object",
                                "properties": {"x": {"type": "number"}, "y": {"type": "number"}},
                                "required": ["x", "y"],
                            },
                        ]
                    },
                },
                "additionalProperties": True,
            },
        },
        "connections": {
            "type": "object",
            # source node name -> output type -> [output index] -> hops
            "additionalProperties": {
                "type": "object",
                "additionalProperties": {
                    "type": "array",
                    "items": {
                        "anyOf": [
                            {"type": "null"},
                            {"type": "array", "items": _HOP},
                            _HOP,
                        ]
                    },
                },
            },
        },
        "edges": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["source", "target"],
                "properties": {
                    "source": {"type": "string", "minLength": 1},
                    "target": {"type": "string", "minLength": 1},
                    "sourcePort": {"type": "string"},
                    "targetPort": {"type": "string"},
                    "type": {"type": "string"},
                },
            },
        },
    },
}

_VALIDATOR = Draft7Validator(WORKFLOW_SCHEMA)


def check_document(workflow: Any) -> List[Issue]:
    """Every JSON-schema violation of the workflow document, in path order."""
    issues: List[Issue] = []
    errors = sorted(_VALIDATOR.iter_errors(workflow), key=lambda e: [str(p) for p in e.absolute_path])
    for e in errors:
        path = "/".join(str(p) for p in e.absolute_path) or "<root>"
        issues.append(error(
            IssueCode.INVALID_DOCUMENT,
            f"Schema validation error at {path}: {e.message}",
            path=path,
        ))
    return issues


def is_usable(workflow: Any) -> bool:
    """True when there is enough structure to run graph and node checks."""
    return isinstance(workflow, dict) and isinstance(workflow.get("nodes"), list)


def node_list(workflow: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [n for n in workflow.get("nodes") or [] if isinstance(n, dict)]
