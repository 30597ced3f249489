# tests/test_parameters.py

import pytest

from flowlint.config import get_profile
from flowlint.parameters.checker import check_parameters, type_problem
from flowlint.registry.model import NodeRegistry, PropertySchema
from flowlint.result import FalsePositive, Severity


@pytest.fixture(scope="module")
def registry():
    return NodeRegistry.default()


def _check(registry, ntype, params, profile="runtime"):
    node = {"name": "N", "type": ntype, "parameters": params}
    return check_parameters(node, registry.get(ntype), get_profile(profile))


def _codes(issues):
    return [it.code.value for it in issues]


def test_slack_post_requires_channel(registry):
    issues = _check(registry, "n8n-nodes-base.slack",
                    {"resource": "message", "operation": "post", "select": "channel", "text": "hi"})
    assert _codes(issues) == ["missing_required"]
    assert "channelId" in issues[0].message
    assert "select=channel" in issues[0].message
    assert issues[0].path == "parameters.channelId"


def test_slack_post_complete(registry):
    params = {
        "resource": "message", "operation": "post", "select": "channel",
        "channelId": {"__rl": True, "mode": "id", "value": "C1"}, "text": "hi",
    }
    assert _check(registry, "n8n-nodes-base.slack", params) == []


def test_unknown_property_suggests_close_name(registry):
    issues = _check(registry, "n8n-nodes-base.httpRequest", {"url": "https://x", "metod": "GET"})
    assert _codes(issues) == ["unknown_property"]
    assert "'method'" in issues[0].fix


def test_minimal_profile_skips_unknown_and_types(registry):
    assert _check(registry, "n8n-nodes-base.httpRequest", {"url": "https://x", "metod": "GET"}, "minimal") == []
    assert _check(registry, "n8n-nodes-base.httpRequest", {"url": "https://x", "sendBody": "yes"}, "minimal") == []
    # required properties are still checked
    assert _codes(_check(registry, "n8n-nodes-base.httpRequest", {}, "minimal")) == ["missing_required"]


def test_type_mismatch(registry):
    assert _codes(_check(registry, "n8n-nodes-base.httpRequest", {"url": 5})) == ["type_mismatch"]
    assert _codes(_check(registry, "n8n-nodes-base.httpRequest", {"url": "https://x", "method": "FETCH"})) == ["type_mismatch"]


def test_expressions_satisfy_every_type(registry):
    params = {"url": "={{ $json.url }}", "sendBody": "={{ $json.hasBody }}"}
    assert _check(registry, "n8n-nodes-base.httpRequest", params) == []


def test_hidden_property_warning(registry):
    issues = _check(registry, "n8n-nodes-base.httpRequest", {"url": "https://x", "jsonBody": "{}"})
    assert _codes(issues) == ["hidden_property"]
    assert issues[0].severity is Severity.WARNING


def test_deprecated_property_warning(registry):
    params = {
        "resource": "message", "operation": "post", "select": "channel",
        "channelId": {"mode": "id", "value": "C1"}, "text": "hi", "as_user": True,
    }
    issues = _check(registry, "n8n-nodes-base.slack", params)
    assert _codes(issues) == ["deprecated_property"]
    assert issues[0].false_positive is FalsePositive.DEPRECATED_PROPERTY


def test_optional_defaults_only_in_strict(registry):
    params = {"fromEmail": "a@example.com", "toEmail": "b@example.com"}
    assert _check(registry, "n8n-nodes-base.emailSend", params) == []
    issues = _check(registry, "n8n-nodes-base.emailSend", params, "strict")
    assert _codes(issues) == ["optional_default"]
    assert issues[0].path == "parameters.subject"
    assert issues[0].false_positive is FalsePositive.OPTIONAL_DEFAULTS


def test_parameters_must_be_object(registry):
    assert _codes(_check(registry, "n8n-nodes-base.noOp", ["x"])) == ["type_mismatch"]


@pytest.mark.parametrize("ptype, value, ok", [
    ("number", 3, True),
    ("number", True, False),
    ("boolean", "true", False),
    ("json", {"a": 1}, True),
    ("collection", [], False),
    ("resourceLocator", {"mode": "id"}, False),
    ("string", "=anything", True),
])
def test_type_problem(ptype, value, ok):
    assert (type_problem(PropertySchema("p", type=ptype), value) is None) == ok
