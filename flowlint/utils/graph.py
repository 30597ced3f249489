# utils/graph.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import networkx as nx

MAIN = "main"

# Port types reserved for LangChain-style agent wiring
AI_CONNECTION_TYPES = (
    "ai_agent",
    "ai_languageModel",
    "ai_tool",
    "ai_memory",
    "ai_outputParser",
)

# Short type names (lowercased) that start executions without ending in "trigger"
TRIGGER_TYPES = ("webhook", "cron", "interval", "emailreadimap", "start")

ANNOTATION_TYPES = ("n8n-nodes-base.stickyNote",)

# Short forms used by search tools, mapped to the package names workflows use
_SHORT_PREFIXES = {
    "nodes-base.": "n8n-nodes-base.",
    "nodes-langchain.": "@n8n/n8n-nodes-langchain.",
    "n8n-nodes-langchain.": "@n8n/n8n-nodes-langchain.",
}


@dataclass(frozen=True)
class Edge:
    source: str
    target: str
    type: str = MAIN            # output type on the source node
    target_port: str = MAIN     # input type on the target node
    source_index: int = 0
    target_index: int = 0

    @property
    def is_ai(self) -> bool:
        return self.type.startswith("ai_") or self.target_port.startswith("ai_")


def _as_index(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int) and value >= 0:
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return default


def _native_edges(connections: Dict[str, Any]) -> List[Edge]:
    """
    n8n connections:
      connections[<source name>][<output type>][<output index>] = [ {node, type, index}, ... ]
    A single hop dict in place of the inner list is accepted as well.
    """
    edges: List[Edge] = []
    for src_name, outs in connections.items():
        if not isinstance(outs, dict):
            continue
        for out_type, paths in outs.items():
            if not isinstance(paths, list):
                continue
            for out_idx, path in enumerate(paths):
                if path is None:
                    continue  # unused output slot
                hops = [path] if isinstance(path, dict) else path
                if not isinstance(hops, list):
                    continue
                for hop in hops:
                    if not isinstance(hop, dict) or not hop.get("node"):
                        continue
                    edges.append(Edge(
                        source=str(src_name),
                        target=str(hop["node"]),
                        type=str(out_type),
                        target_port=str(hop.get("type") or out_type),
                        source_index=out_idx,
                        target_index=_as_index(hop.get("index")),
                    ))
    return edges


def _simple_edges(items: Iterable[Any]) -> List[Edge]:
    """
    Simplified edge list using the MCP diff vocabulary:
      {"source": A, "target": B, "sourcePort": "main", "targetPort": "main", "type": ...}
    """
    edges: List[Edge] = []
    for e in items:
        if not isinstance(e, dict):
            continue
        src, tgt = e.get("source"), e.get("target")
        if not src or not tgt:
            continue
        etype = str(e.get("type") or e.get("sourcePort") or MAIN)
        edges.append(Edge(
            source=str(src),
            target=str(tgt),
            type=etype,
            target_port=str(e.get("targetPort") or etype),
            source_index=_as_index(e.get("sourceIndex")),
            target_index=_as_index(e.get("targetIndex")),
        ))
    return edges


def extract_edges(workflow: Dict[str, Any]) -> List[Edge]:
    """
    Extract typed edges from either:
      1) n8n native json (nodes + connections)
      2) simplified format (nodes + edges)
    Both may be present; duplicates are removed while keeping first-seen order.
    """
    edges: List[Edge] = []
    conns = workflow.get("connections")
    if isinstance(conns, dict):
        edges.extend(_native_edges(conns))
    simple = workflow.get("edges")
    if isinstance(simple, list):
        edges.extend(_simple_edges(simple))
    return list(dict.fromkeys(edges))


def node_names(workflow: Dict[str, Any]) -> List[str]:
    names = []
    for n in workflow.get("nodes") or []:
        if isinstance(n, dict) and n.get("name"):
            names.append(str(n["name"]))
    return names


def build_graph(
    workflow: Dict[str, Any],
    edges: Optional[List[Edge]] = None,
    types: Optional[Iterable[str]] = None,
) -> nx.MultiDiGraph:
    """
    Build a typed multigraph keyed by node name.
    When `types` is given, only edges whose type is in it are kept.
    Edges to names missing from nodes[] still add those names as bare nodes.
    """
    G = nx.MultiDiGraph()
    for n in workflow.get("nodes") or []:
        if isinstance(n, dict) and n.get("name"):
            G.add_node(str(n["name"]), type=n.get("type"))

    wanted = set(types) if types is not None else None
    for e in edges if edges is not None else extract_edges(workflow):
        if wanted is not None and e.type not in wanted:
            continue
        G.add_edge(e.source, e.target, type=e.type, port=e.target_port)
    return G


def main_graph(workflow: Dict[str, Any], edges: Optional[List[Edge]] = None) -> nx.DiGraph:
    """Plain digraph over `main` edges only (the data-flow graph)."""
    return nx.DiGraph(build_graph(workflow, edges=edges, types=(MAIN,)))


def find_cycles(G: nx.DiGraph) -> List[List[str]]:
    """
    One concrete cycle per strongly connected component (self-loops included).
    Each cycle is the first node path a DFS from the component's smallest
    name runs into.
    """
    cycles: List[List[str]] = []
    comps = [c for c in nx.strongly_connected_components(G)
             if len(c) > 1 or any(G.has_edge(n, n) for n in c)]
    for comp in sorted(comps, key=lambda c: min(c)):
        start = min(comp)
        sub = G.subgraph(comp)
        cycle_edges = nx.find_cycle(sub, source=start)
        cycles.append([u for u, _v in cycle_edges])
    return cycles


def cycle_through(G: nx.DiGraph, node: str) -> Optional[List[str]]:
    """
    Shortest cycle that passes through `node`, rotated to start at its
    smallest name; None when `node` is on no cycle.
    """
    if G.has_edge(node, node):
        return [node]
    best: Optional[List[str]] = None
    for succ in sorted(G.successors(node)):
        if not nx.has_path(G, succ, node):
            continue
        path = nx.shortest_path(G, succ, node)
        if best is None or len(path) < len(best):
            best = path
    if best is None:
        return None
    cyc = [node] + best[:-1]
    i = cyc.index(min(cyc))
    return cyc[i:] + cyc[:i]


def is_annotation_node(node: Dict[str, Any]) -> bool:
    return normalize_node_type(str(node.get("type", ""))) in ANNOTATION_TYPES


def is_trigger_node(node: Dict[str, Any], schema: Any = None) -> bool:
    """
    Trigger detection: registry group first, type-name heuristic second.
    """
    if schema is not None and "trigger" in (getattr(schema, "group", None) or ()):
        return True
    ntype = str(node.get("type", "")).lower()
    short = ntype.rsplit(".", 1)[-1]
    return short.endswith("trigger") or short in TRIGGER_TYPES


def normalize_node_type(node_type: str) -> str:
    """
    Map the short forms used by search tools to the full workflow form:
      nodes-base.slack            -> n8n-nodes-base.slack
      nodes-langchain.agent       -> @n8n/n8n-nodes-langchain.agent
      n8n-nodes-langchain.agent   -> @n8n/n8n-nodes-langchain.agent
    """
    t = (node_type or "").strip()
    for short, full in _SHORT_PREFIXES.items():
        if t.startswith(short):
            return full + t[len(short):]
    return t
