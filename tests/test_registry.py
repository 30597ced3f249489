# tests/test_registry.py

import pytest

from flowlint.errors import RegistryError
from flowlint.registry.model import (
    NodeRegistry,
    NodeTypeSchema,
    PortSpec,
    PropertySchema,
    is_community_node,
    normalize_node_type,
)


@pytest.fixture(scope="module")
def registry():
    return NodeRegistry.default()


def _visible(schema, params, name):
    return [p for p in schema.properties_named(name) if p.is_visible(params, schema)]


def test_normalize_node_type():
    assert normalize_node_type("nodes-base.slack") == "n8n-nodes-base.slack"
    assert normalize_node_type("nodes-langchain.agent") == "@n8n/n8n-nodes-langchain.agent"
    assert normalize_node_type("n8n-nodes-langchain.agent") == "@n8n/n8n-nodes-langchain.agent"
    assert normalize_node_type("n8n-nodes-base.slack") == "n8n-nodes-base.slack"


def test_is_community_node():
    assert is_community_node("n8n-nodes-weatherstack.weatherLookup")
    assert not is_community_node("nodes-base.slack")
    assert not is_community_node("@n8n/n8n-nodes-langchain.agent")


def test_slack_channel_id_depends_on_select(registry):
    slack = registry.get("n8n-nodes-base.slack", 2.2)
    params = {"resource": "message", "operation": "post", "select": "channel"}

    (channel,) = _visible(slack, params, "channelId")
    assert channel.required
    assert channel.type == "resourceLocator"

    params["select"] = "user"
    assert _visible(slack, params, "channelId") == []
    assert len(_visible(slack, params, "user")) == 1


def test_visibility_falls_back_to_visible_defaults(registry):
    slack = registry.get("n8n-nodes-base.slack")
    # resource defaults to message, operation to post, select to "" -> no channel yet
    assert _visible(slack, {}, "channelId") == []
    assert len(_visible(slack, {}, "text")) == 1

    # the channel resource has its own operation default (create)
    (channel,) = _visible(slack, {"resource": "channel"}, "channelId")
    assert channel.type == "string"


def test_hide_display_option(registry):
    webhook = registry.get("n8n-nodes-base.webhook")
    assert _visible(webhook, {}, "responseCode")
    assert _visible(webhook, {"responseMode": "responseNode"}, "responseCode") == []


def test_get_by_version_and_short_name(registry):
    assert registry.get("nodes-base.slack") is registry.get("n8n-nodes-base.slack")
    assert 1.0 in registry.get("n8n-nodes-base.webhook", 1).versions
    # unknown version falls back to the newest schema
    assert registry.get("n8n-nodes-base.webhook", 99) is registry.get("n8n-nodes-base.webhook")
    assert registry.get("n8n-nodes-base.doesNotExist") is None
    assert "n8n-nodes-base.httpRequest" in registry


def test_ai_ports(registry):
    agent = registry.get("@n8n/n8n-nodes-langchain.agent")
    port = agent.port("ai_languageModel")
    assert port.required and port.max_connections == 1
    assert agent.accepts_input("ai_tool")
    assert not agent.is_ai_subnode
    assert registry.get("@n8n/n8n-nodes-langchain.lmChatOpenAi").is_ai_subnode


def test_port_spec_from_raw():
    assert PortSpec.from_raw("main") == PortSpec()
    assert PortSpec.from_raw({"type": "ai_memory", "maxConnections": 1}).max_connections == 1
    with pytest.raises(RegistryError):
        PortSpec.from_raw({"required": True})


def test_register_replaces_overlapping_versions():
    reg = NodeRegistry.default()
    reg.register(NodeTypeSchema(name="n8n-nodes-base.noOp", versions=[1.0], properties=[PropertySchema("foo")]))
    assert reg.get("n8n-nodes-base.noOp").property_names() == ["foo"]


def test_from_file_yaml(tmp_path):
    fp = tmp_path / "registry.yaml"
    fp.write_text(
        "nodes:\n"
        "  - name: n8n-nodes-weatherstack.weatherLookup\n"
        "    version: 1\n"
        "    properties:\n"
        "      - name: city\n"
        "        type: string\n"
        "        required: true\n",
        encoding="utf-8",
    )
    reg = NodeRegistry.from_file(fp)
    assert "n8n-nodes-weatherstack.weatherLookup" in reg
    assert "n8n-nodes-base.slack" in reg

    only = NodeRegistry.from_file(fp, include_builtin=False)
    assert only.names() == ["n8n-nodes-weatherstack.weatherLookup"]


def test_from_file_errors(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("[1, 2", encoding="utf-8")
    with pytest.raises(RegistryError):
        NodeRegistry.from_file(broken)

    nameless = tmp_path / "nameless.json"
    nameless.write_text('[{"displayName": "No name"}]', encoding="utf-8")
    with pytest.raises(RegistryError):
        NodeRegistry.from_file(nameless)

    with pytest.raises(RegistryError):
        NodeRegistry.from_file(tmp_path / "missing.json")
