# flowlint/structural/ai.py
# Checks for LangChain-style wiring: models, memory, tools and parsers attach to
# agents/chains through typed ai_* connections, never through `main`.

import difflib
from collections import Counter
from typing import Any, Dict, List, Optional

from flowlint.registry.model import NodeRegistry, NodeTypeSchema
from flowlint.result import FalsePositive, Issue, IssueCode, error, warning
from flowlint.structural.schema import node_list
from flowlint.utils.graph import AI_CONNECTION_TYPES, MAIN, Edge

LANGUAGE_MODEL = "ai_languageModel"
TOOL = "ai_tool"


def check_ai_connections(
    workflow: Dict[str, Any],
    edges: List[Edge],
    registry: Optional[NodeRegistry] = None,
) -> List[Issue]:
    issues: List[Issue] = []
    nodes: Dict[str, Dict[str, Any]] = {}
    for n in node_list(workflow):
        if n.get("name"):
            nodes.setdefault(str(n["name"]), n)

    def schema_of(name: str) -> Optional[NodeTypeSchema]:
        node = nodes.get(name)
        if node is None or registry is None:
            return None
        return registry.get(str(node.get("type", "")), node.get("typeVersion"))

    for e in edges:
        if e.source not in nodes or e.target not in nodes:
            continue  # reported by the structural checker
        src_schema = schema_of(e.source)
        tgt_schema = schema_of(e.target)
        label = f"{e.source} -> {e.target}"

        unknown = [t for t in dict.fromkeys((e.type, e.target_port))
                   if t.startswith("ai_") and t not in AI_CONNECTION_TYPES]
        if unknown:
            for t in unknown:
                hint = difflib.get_close_matches(t, AI_CONNECTION_TYPES, n=1, cutoff=0.5)
                issues.append(error(
                    IssueCode.INVALID_AI_CONNECTION,
                    f"Connection {label} uses unknown AI connection type '{t}'",
                    node=e.target,
                    fix=f"use '{hint[0]}'" if hint else "use one of " + ", ".join(AI_CONNECTION_TYPES),
                ))
            continue

        # 1) `main` where an AI port is meant
        if e.type == MAIN:
            expected = None
            if e.target_port in AI_CONNECTION_TYPES:
                expected = e.target_port
            elif src_schema is not None and src_schema.is_ai_subnode:
                expected = src_schema.outputs[0]
            if expected:
                issues.append(error(
                    IssueCode.INVALID_AI_CONNECTION,
                    f"Connection {label} uses type 'main' but '{e.source}' must attach through '{expected}'",
                    node=e.target,
                    fix=f"connect with type '{expected}' (sourcePort/targetPort '{expected}')",
                ))
            continue

        # 2) AI output wired into a different input type
        if e.type != e.target_port:
            issues.append(error(
                IssueCode.INVALID_AI_CONNECTION,
                f"Connection {label} leaves output '{e.type}' but enters input '{e.target_port}'",
                node=e.target, fix=f"use '{e.type}' on both ends",
            ))
            continue

        # 3) the target must accept this AI input
        if tgt_schema is not None and not tgt_schema.accepts_input(e.type):
            accepted = [t for t in tgt_schema.input_types if t.startswith("ai_")]
            issues.append(error(
                IssueCode.INVALID_AI_CONNECTION,
                f"'{e.target}' ({tgt_schema.name}) does not accept '{e.type}' connections",
                node=e.target,
                fix=("it accepts " + ", ".join(accepted)) if accepted else "connect to an AI agent or chain instead",
            ))
            continue

        # 4) the source should produce it
        if src_schema is not None and e.type not in src_schema.outputs:
            if e.type == TOOL:
                issues.append(warning(
                    IssueCode.INVALID_AI_CONNECTION,
                    f"'{e.source}' ({src_schema.name}) is wired as an AI tool but declares no '{TOOL}' output",
                    node=e.source,
                    fix="make sure the node is usable as a tool, or use its *Tool variant",
                    false_positive=FalsePositive.AI_TOOL_FLEXIBILITY,
                ))
            else:
                issues.append(error(
                    IssueCode.INVALID_AI_CONNECTION,
                    f"'{e.source}' ({src_schema.name}) does not produce '{e.type}'",
                    node=e.source,
                    fix=("its outputs are " + ", ".join(src_schema.outputs)) if src_schema.outputs else None,
                ))

    issues.extend(_check_ai_inputs(nodes, edges, schema_of))
    return issues


def _check_ai_inputs(nodes, edges, schema_of) -> List[Issue]:
    """Required AI inputs (e.g. an agent's language model) and their maxConnections."""
    issues: List[Issue] = []
    counts = Counter(
        (e.target, e.type) for e in edges
        if e.type in AI_CONNECTION_TYPES and e.type == e.target_port and e.source in nodes
    )
    for name in nodes:
        schema = schema_of(name)
        if schema is None:
            continue
        for port in schema.inputs:
            if not port.type.startswith("ai_"):
                continue
            n = counts.get((name, port.type), 0)
            is_model = port.type == LANGUAGE_MODEL
            if port.required and n == 0:
                issues.append(error(
                    IssueCode.MISSING_LANGUAGE_MODEL if is_model else IssueCode.INVALID_AI_CONNECTION,
                    f"'{name}' ({schema.name}) needs a '{port.type}' connection",
                    node=name,
                    fix=f"connect a chat model with type '{port.type}'" if is_model else f"connect a '{port.type}' node",
                ))
            elif port.max_connections is not None and n > port.max_connections:
                issues.append(error(
                    IssueCode.TOO_MANY_LANGUAGE_MODELS if is_model else IssueCode.INVALID_AI_CONNECTION,
                    f"'{name}' ({schema.name}) has {n} '{port.type}' connections; at most {port.max_connections} allowed",
                    node=name,
                ))
    return issues
