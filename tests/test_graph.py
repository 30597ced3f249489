# tests/test_graph.py

import networkx as nx

from flowlint.registry.model import NodeTypeSchema
from flowlint.utils.graph import (
    Edge,
    cycle_through,
    extract_edges,
    find_cycles,
    is_annotation_node,
    is_trigger_node,
    main_graph,
)


def test_extract_edges_native_and_simplified_are_merged():
    wf = {
        "nodes": [{"name": "A", "type": "n8n-nodes-base.manualTrigger"}, {"name": "B", "type": "n8n-nodes-base.noOp"}],
        "connections": {"A": {"main": [[{"node": "B", "type": "main", "index": 0}], None]}},
        "edges": [{"source": "A", "target": "B"}],
    }
    assert extract_edges(wf) == [Edge("A", "B")]


def test_extract_edges_accepts_bare_hop_and_ai_ports():
    wf = {
        "nodes": [],
        "connections": {
            "A": {"main": [{"node": "B"}]},
            "Model": {"ai_languageModel": [[{"node": "Agent", "type": "ai_languageModel", "index": 0}]]},
        },
    }
    edges = extract_edges(wf)
    assert Edge("A", "B") in edges
    ai = [e for e in edges if e.is_ai]
    assert ai == [Edge("Model", "Agent", type="ai_languageModel", target_port="ai_languageModel")]


def test_simplified_edges_keep_target_port():
    wf = {"nodes": [], "edges": [{"source": "M", "target": "Agent", "sourcePort": "main", "targetPort": "ai_tool"}]}
    (e,) = extract_edges(wf)
    assert e.type == "main"
    assert e.target_port == "ai_tool"
    assert e.is_ai


def test_main_graph_ignores_ai_edges():
    wf = {
        "nodes": [{"name": "T"}, {"name": "Agent"}, {"name": "Model"}],
        "connections": {
            "T": {"main": [[{"node": "Agent", "type": "main", "index": 0}]]},
            "Model": {"ai_languageModel": [[{"node": "Agent", "type": "ai_languageModel", "index": 0}]]},
        },
    }
    G = main_graph(wf)
    assert set(G.edges()) == {("T", "Agent")}
    assert "Model" in G.nodes


def test_find_cycles_one_per_component():
    G = nx.DiGraph([("b", "c"), ("c", "b"), ("a", "a"), ("x", "y")])
    assert find_cycles(G) == [["a"], ["b", "c"]]


def test_find_cycles_acyclic():
    G = nx.DiGraph([("a", "b"), ("b", "c")])
    assert find_cycles(G) == []


def test_cycle_through_picks_shortest_cycle_at_node():
    G = nx.DiGraph([("Loop", "Body"), ("Body", "Step"), ("Step", "Loop"), ("Body", "Loop"), ("x", "x"), ("x", "y")])
    assert cycle_through(G, "Loop") == ["Body", "Loop"]
    assert cycle_through(G, "Step") == ["Body", "Step", "Loop"]
    assert cycle_through(G, "x") == ["x"]
    assert cycle_through(G, "y") is None


def test_is_annotation_node_accepts_short_type():
    assert is_annotation_node({"type": "n8n-nodes-base.stickyNote"})
    assert is_annotation_node({"type": "nodes-base.stickyNote"})
    assert not is_annotation_node({"type": "n8n-nodes-base.noOp"})


def test_is_trigger_node():
    assert is_trigger_node({"type": "n8n-nodes-base.webhook"})
    assert is_trigger_node({"type": "n8n-nodes-base.scheduleTrigger"})
    assert is_trigger_node({"type": "@n8n/n8n-nodes-langchain.chatTrigger"})
    assert not is_trigger_node({"type": "n8n-nodes-base.set"})

    schema = NodeTypeSchema(name="n8n-nodes-acme.poller", group=["trigger"])
    assert is_trigger_node({"type": "n8n-nodes-acme.poller"}, schema)
