# flowlint/structural/checker.py

from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

from flowlint.registry.model import NodeRegistry, normalize_node_type
from flowlint.result import Issue, IssueCode, error, warning
from flowlint.structural.schema import node_list
from flowlint.utils.graph import (
    MAIN,
    Edge,
    cycle_through,
    find_cycles,
    is_annotation_node,
    is_trigger_node,
    main_graph,
)

LOOP_NODE_TYPES = ("n8n-nodes-base.splitInBatches",)


def check_structure(
    workflow: Dict[str, Any],
    edges: List[Edge],
    registry: Optional[NodeRegistry] = None,
) -> Tuple[List[Issue], Dict[str, Any]]:
    """
    Graph-level checks that do not depend on node configuration.

    Returns:
        issues, detail (counts, triggers, cycles) for the report
    """
    issues: List[Issue] = []
    nodes = node_list(workflow)

    # 1) Unique names / ids
    names = [str(n["name"]) for n in nodes if n.get("name")]
    for name, count in Counter(names).items():
        if count > 1:
            issues.append(error(
                IssueCode.DUPLICATE_NAME,
                f"Node name '{name}' is used by {count} nodes (connections are keyed by name)",
                node=name, fix="give each node a unique name",
            ))
    ids = [str(n["id"]) for n in nodes if n.get("id") is not None]
    for nid, count in Counter(ids).items():
        if count > 1:
            issues.append(error(
                IssueCode.DUPLICATE_ID,
                f"Node id '{nid}' is used by {count} nodes",
                fix="give each node a unique id",
            ))

    # 2) Edges must point at real nodes
    known = set(names)
    for e in edges:
        for end, label in ((e.source, "source"), (e.target, "target")):
            if end not in known:
                issues.append(error(
                    IssueCode.UNKNOWN_CONNECTION_NODE,
                    f"Connection {label} '{end}' ({e.source} -> {e.target}, {e.type}) is not a node in this workflow",
                    node=end,
                ))

    # 3) Every non-trigger node needs an incoming edge
    incoming = Counter(e.target for e in edges if e.source in known)
    incoming_main = Counter(e.target for e in edges if e.source in known and e.type == MAIN)
    outgoing_types: Dict[str, set] = {}
    for e in edges:
        outgoing_types.setdefault(e.source, set()).add(e.type)

    triggers: List[str] = []
    seen = set()
    for n in nodes:
        name = n.get("name")
        if not name or name in seen or is_annotation_node(n):
            continue
        seen.add(name)
        schema = registry.get(str(n.get("type", "")), n.get("typeVersion")) if registry else None
        if is_trigger_node(n, schema):
            triggers.append(str(name))
            continue
        # AI sub-nodes (models, tools, memory) are attached through their outgoing ai_* edge
        outs = outgoing_types.get(name, set())
        if outs and all(t.startswith("ai_") for t in outs):
            continue
        if schema is not None and schema.is_ai_subnode and outs:
            continue
        # agents and chains only run when items arrive on `main`; ai_* inputs just configure them
        needs_main = schema is not None and not schema.is_ai_subnode and schema.accepts_input(MAIN)
        if (incoming_main if needs_main else incoming).get(name, 0) > 0:
            continue
        if needs_main and incoming.get(name, 0) > 0:
            message = f"Node '{name}' only has ai_* inputs and no incoming main connection; it will never run"
        else:
            message = f"Node '{name}' has no incoming connection and is not a trigger; it will never run"
        issues.append(error(
            IssueCode.MISSING_CONNECTION, message,
            node=str(name), fix="connect it to an upstream node or remove it",
        ))

    # 4) The main data-flow graph must be acyclic
    G = main_graph(workflow, edges=edges)
    loop_nodes = sorted(
        str(n["name"]) for n in nodes
        if n.get("name") and normalize_node_type(str(n.get("type", ""))) in LOOP_NODE_TYPES and str(n["name"]) in G
    )
    # cycles through Loop Over Items are iterations; any cycle avoiding every loop node is real
    cycles = find_cycles(G.subgraph(n for n in G if n not in loop_nodes))
    loops: List[List[str]] = []
    for name in loop_nodes:
        cyc = cycle_through(G, name)
        if cyc is not None and cyc not in loops:
            loops.append(cyc)
    for cyc in cycles:
        loop = " -> ".join(cyc + [cyc[0]])
        issues.append(error(
            IssueCode.CIRCULAR_DEPENDENCY,
            f"Circular dependency among main connections: {loop}",
            node=cyc[0], fix="break the loop, or iterate with a Loop Over Items (splitInBatches) node",
        ))

    if nodes and not triggers:
        issues.append(warning(
            IssueCode.NO_TRIGGER,
            "Workflow has no trigger node (webhook, schedule, manual, chat...) and can only be run as a sub-workflow",
        ))

    detail = {
        "n_nodes": len(nodes),
        "n_edges": len(edges),
        "n_main_edges": G.number_of_edges(),
        "triggers": triggers,
        "cycles": cycles,
        "loops": loops,
    }
    return issues, detail
