# tests/test_expressions.py

import pytest

from flowlint.parameters.expressions import check_expressions, check_value, iter_strings, split_blocks
from flowlint.result import FalsePositive

NAMES = ["Start", "Fetch Prices"]


def _codes(text):
    return [it.code.value for it in check_value(text, "N", "parameters.x", NAMES)]


@pytest.mark.parametrize("text", [
    "plain text",
    "={{ $json.name }}",
    "=Hello {{ $json.user?.email }}!",
    "={{ $('Fetch Prices').item.json.price }}",
    "={{ $node[\"Start\"].json.id }}",
    "={{ $json['first-name'] }}",
    "={{ $json.items.map(i => i.id) }}",
    "={{ $json.name.toUpperCase() }}",
    "={{ $now.toISO() }}",
])
def test_clean_expressions(text):
    assert _codes(text) == []


@pytest.mark.parametrize("text", [
    "={{ $json.name",
    "={{ }}",
    "={{ a }} }}",
    "={{ {{ $json.a }} }}",
    "={{ $node[\"Missing\"].json.x }}",
    "={{ $jsn.name }}",
    "={{ $json.class }}",
    "={{ $json.first-name }}",
])
def test_malformed_expressions(text):
    assert _codes(text) == ["malformed_expression"]


def test_missing_prefix_warning():
    assert _codes("Hello {{ $json.name }}") == ["expression_prefix"]


def test_deep_path_without_optional_chaining():
    (issue,) = check_value("={{ $json.user.email }}", "N", "parameters.x", NAMES)
    assert issue.code.value == "runtime_expression"
    assert issue.false_positive is FalsePositive.RUNTIME_EXPRESSION
    assert "$json.user?.email" in issue.fix


def test_suggestions():
    (issue,) = check_value("={{ $('Fetch Price').item.json.price }}", "N", "parameters.x", NAMES)
    assert "'Fetch Prices'" in issue.fix
    (issue,) = check_value("={{ $jsn.name }}", "N", "parameters.x", NAMES)
    assert "'$json'" in issue.fix


def test_split_blocks():
    assert split_blocks("a {{ 1 }} b {{ 2 }}") == ([" 1 ", " 2 "], None)
    blocks, problem = split_blocks("{{ 1 }} }}")
    assert blocks == [" 1 "]
    assert "without a matching" in problem


def test_iter_strings_paths_and_code_bodies():
    params = {"a": [{"b": "x"}], "jsCode": "const t = `{{ x }}`;", "n": 3}
    assert list(iter_strings(params, "parameters")) == [("parameters.a[0].b", "x")]


def test_check_expressions_on_node():
    node = {
        "name": "Map",
        "parameters": {
            "assignments": {"assignments": [{"name": "x", "value": "={{ $json.a"}]},
            "jsCode": "return `{{ broken`;",
        },
    }
    (issue,) = check_expressions(node, NAMES)
    assert issue.node == "Map"
    assert issue.path == "parameters.assignments.assignments[0].value"
