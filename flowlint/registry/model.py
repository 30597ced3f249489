# flowlint/registry/model.py

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from flowlint.errors import RegistryError
from flowlint.utils.graph import MAIN, normalize_node_type
from flowlint.utils.io import load_any
from flowlint.utils.logger import get_logger

logger = get_logger("registry")

CORE_PREFIXES = ("n8n-nodes-base.", "@n8n/n8n-nodes-langchain.")


def is_community_node(node_type: str) -> bool:
    return not normalize_node_type(node_type).startswith(CORE_PREFIXES)


def _as_versions(value: Any) -> List[float]:
    if value is None:
        return [1.0]
    if isinstance(value, (list, tuple)):
        return sorted(float(v) for v in value)
    return [float(value)]


@dataclass
class PortSpec:
    type: str = MAIN
    required: bool = False
    max_connections: Optional[int] = None

    @classmethod
    def from_raw(cls, raw: Union[str, Dict[str, Any]]) -> "PortSpec":
        if isinstance(raw, str):
            return cls(type=raw)
        if isinstance(raw, dict) and raw.get("type"):
            return cls(
                type=str(raw["type"]),
                required=bool(raw.get("required", False)),
                max_connections=raw.get("maxConnections"),
            )
        raise RegistryError(f"Invalid port definition: {raw!r}")


@dataclass
class CredentialRequirement:
    name: str
    required: bool = False
    display_options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PropertySchema:
    name: str
    type: str = "string"
    required: bool = False
    default: Any = None
    has_default: bool = False
    display_options: Dict[str, Any] = field(default_factory=dict)
    options: List[Any] = field(default_factory=list)   # allowed values for options/multiOptions
    deprecated: bool = False
    display_name: str = ""

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PropertySchema":
        if not isinstance(d, dict) or not d.get("name"):
            raise RegistryError(f"Property definition without a name: {d!r}")
        ptype = str(d.get("type", "string"))
        values: List[Any] = []
        if ptype in ("options", "multiOptions"):
            for o in d.get("options") or []:
                if isinstance(o, dict) and "value" in o:
                    values.append(o["value"])
        return cls(
            name=str(d["name"]),
            type=ptype,
            required=bool(d.get("required", False)),
            default=d.get("default"),
            has_default="default" in d,
            display_options=d.get("displayOptions") or {},
            options=values,
            deprecated=bool(d.get("deprecated", False)),
            display_name=str(d.get("displayName", d["name"])),
        )

    def is_visible(
        self,
        parameters: Dict[str, Any],
        schema: "NodeTypeSchema",
        version: Optional[float] = None,
    ) -> bool:
        return display_matches(self.display_options, parameters, schema, version)


_MISSING = object()


def display_matches(
    display_options: Dict[str, Any],
    parameters: Dict[str, Any],
    schema: "NodeTypeSchema",
    version: Optional[float] = None,
    _seen: frozenset = frozenset(),
) -> bool:
    """
    Resolve displayOptions against sibling values (falling back to defaults):
      - show: every listed key must currently hold one of the listed values
      - hide: any listed key holding one of the listed values hides the entry
    `@version` keys compare against the node's typeVersion.
    """
    show = (display_options or {}).get("show") or {}
    hide = (display_options or {}).get("hide") or {}

    for key, allowed in show.items():
        current = _current_value(key, parameters, schema, version, _seen)
        if current is _MISSING or not _matches(current, allowed):
            return False
    for key, blocked in hide.items():
        current = _current_value(key, parameters, schema, version, _seen)
        if current is not _MISSING and _matches(current, blocked):
            return False
    return True


def _matches(current: Any, allowed: Any) -> bool:
    allowed_list = allowed if isinstance(allowed, list) else [allowed]
    values = current if isinstance(current, list) else [current]
    return any(v in allowed_list for v in values)


def _current_value(key: str, parameters: Dict[str, Any], schema: "NodeTypeSchema",
                   version: Optional[float], _seen: frozenset) -> Any:
    if key == "@version":
        return version if version is not None else schema.latest_version
    if key in parameters:
        return parameters[key]
    # same-named siblings (e.g. "operation" per resource): use the default of the
    # one that is itself visible
    seen = _seen | {key}
    for p in schema.properties_named(key):
        if not p.has_default:
            continue
        if key in _seen or display_matches(p.display_options, parameters, schema, version, seen):
            return p.default
    return _MISSING


@dataclass
class NodeTypeSchema:
    name: str
    display_name: str = ""
    group: List[str] = field(default_factory=list)
    versions: List[float] = field(default_factory=lambda: [1.0])
    inputs: List[PortSpec] = field(default_factory=lambda: [PortSpec()])
    outputs: List[str] = field(default_factory=lambda: [MAIN])
    credentials: List[CredentialRequirement] = field(default_factory=list)
    properties: List[PropertySchema] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "NodeTypeSchema":
        if not isinstance(d, dict) or not d.get("name"):
            raise RegistryError(f"Node type definition without a name: {d!r}")
        inputs = d.get("inputs", [MAIN])
        outputs = d.get("outputs", [MAIN])
        if not isinstance(inputs, list) or not isinstance(outputs, list):
            raise RegistryError(f"{d['name']}: inputs/outputs must be lists")
        creds = [
            CredentialRequirement(
                name=str(c["name"]),
                required=bool(c.get("required", False)),
                display_options=c.get("displayOptions") or {},
            )
            for c in d.get("credentials") or []
            if isinstance(c, dict) and c.get("name")
        ]
        return cls(
            name=normalize_node_type(str(d["name"])),
            display_name=str(d.get("displayName", d["name"])),
            group=list(d.get("group") or []),
            versions=_as_versions(d.get("version")),
            inputs=[PortSpec.from_raw(i) for i in inputs],
            outputs=[o if isinstance(o, str) else str(o.get("type", MAIN)) for o in outputs],
            credentials=creds,
            properties=[PropertySchema.from_dict(p) for p in d.get("properties") or []],
        )

    @property
    def latest_version(self) -> float:
        return max(self.versions)

    @property
    def is_trigger(self) -> bool:
        return "trigger" in self.group

    @property
    def is_ai_subnode(self) -> bool:
        """Outputs exist and all are ai_* ports (language models, tools, memory...)."""
        return bool(self.outputs) and all(o.startswith("ai_") for o in self.outputs)

    @property
    def input_types(self) -> List[str]:
        return [p.type for p in self.inputs]

    def accepts_input(self, port: str) -> bool:
        return port in self.input_types

    def port(self, port: str) -> Optional[PortSpec]:
        for p in self.inputs:
            if p.type == port:
                return p
        return None

    def properties_named(self, name: str) -> List[PropertySchema]:
        return [p for p in self.properties if p.name == name]

    def property_names(self) -> List[str]:
        return list(dict.fromkeys(p.name for p in self.properties))

    def credential_names(self) -> List[str]:
        return [c.name for c in self.credentials]


class NodeRegistry:
    """
    In-memory node type registry. Schemas come from an external registry export
    (JSON/YAML, a list of n8n node descriptions or {"nodes": [...]}), optionally
    layered over the bundled snapshot.
    """

    def __init__(self, schemas: Optional[Iterable[NodeTypeSchema]] = None):
        self._by_type: Dict[str, List[NodeTypeSchema]] = {}
        for s in schemas or []:
            self.register(s)

    def register(self, schema: NodeTypeSchema) -> None:
        entries = self._by_type.setdefault(schema.name, [])
        # same type + overlapping versions: the newer registration wins
        entries[:] = [e for e in entries if not set(e.versions) & set(schema.versions)]
        entries.append(schema)
        entries.sort(key=lambda s: s.latest_version)

    def get(self, node_type: str, version: Any = None) -> Optional[NodeTypeSchema]:
        entries = self._by_type.get(normalize_node_type(node_type))
        if not entries:
            return None
        if version is not None:
            try:
                v = float(version)
            except (TypeError, ValueError):
                v = None
            if v is not None:
                for s in entries:
                    if v in s.versions:
                        return s
        return entries[-1]

    def names(self) -> List[str]:
        return sorted(self._by_type)

    def __contains__(self, node_type: str) -> bool:
        return normalize_node_type(node_type) in self._by_type

    def __len__(self) -> int:
        return len(self._by_type)

    @classmethod
    def from_dicts(cls, items: Iterable[Dict[str, Any]]) -> "NodeRegistry":
        return cls(NodeTypeSchema.from_dict(d) for d in items)

    @classmethod
    def default(cls) -> "NodeRegistry":
        from flowlint.registry.builtin import BUILTIN_NODE_TYPES
        return cls.from_dicts(BUILTIN_NODE_TYPES)

    @classmethod
    def from_file(cls, path: Union[str, Path], include_builtin: bool = True) -> "NodeRegistry":
        try:
            data = load_any(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise RegistryError(f"Cannot read node registry {path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("nodes")
        if not isinstance(data, list):
            raise RegistryError(f"{path}: expected a list of node types or {{'nodes': [...]}}")

        registry = cls.default() if include_builtin else cls()
        for d in data:
            registry.register(NodeTypeSchema.from_dict(d))
        logger.info("Loaded %d node types from %s", len(data), path)
        return registry
