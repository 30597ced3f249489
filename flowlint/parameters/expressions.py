# flowlint/parameters/expressions.py
from __future__ import annotations

import difflib
import re
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from flowlint.result import FalsePositive, Issue, IssueCode, error, warning

# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------

KNOWN_VARIABLES = frozenset({
    "$json", "$binary", "$input", "$node", "$now", "$today", "$workflow",
    "$execution", "$env", "$vars", "$secrets", "$item", "$items", "$parameter",
    "$prevNode", "$runIndex", "$itemIndex", "$position", "$jmespath", "$jmesPath",
    "$if", "$ifEmpty", "$min", "$max", "$evaluateExpression",
    "$getWorkflowStaticData", "$fromAI", "$fromai", "$response", "$request",
    "$pageCount", "$nodeVersion", "$nodeId", "$webhookId", "$mode", "$data",
    "$self", "$agentInfo", "$thisItem", "$thisItemIndex", "$thisRunIndex",
    "$getPairedItem", "$tool",
})

# JavaScript reserved words: must be accessed with bracket notation
RESERVED_WORDS = frozenset({
    "break", "case", "catch", "class", "const", "continue", "debugger", "default",
    "delete", "do", "else", "enum", "export", "extends", "false", "finally", "for",
    "function", "if", "implements", "import", "in", "instanceof", "interface",
    "let", "new", "null", "package", "private", "protected", "public", "return",
    "static", "super", "switch", "this", "throw", "true", "try", "typeof", "var",
    "void", "while", "with", "yield", "await",
})

# Parameters holding program text rather than expressions
CODE_KEYS = ("jsCode", "pythonCode", "functionCode", "functionItemCode")

_STRING_LITERAL_RE = re.compile(r"'(?:\\.|[^'\\])*'|\"(?:\\.|[^\"\\])*\"|`(?:\\.|[^`\\])*`")

# $node["Name"], $('Name'), $items("Name")
_NODE_REF_RES = (
    re.compile(r"\$node\s*\[\s*(['\"])(.*?)\1\s*\]"),
    re.compile(r"\$\(\s*(['\"])(.*?)\1"),
    re.compile(r"\$items\(\s*(['\"])(.*?)\1"),
)

_VARIABLE_RE = re.compile(r"(?<![\w$.])(\$[A-Za-z_][A-Za-z0-9_]*)")

# $json.a.b / $json?.a / .json.a (after a node reference)
_SEGMENT = r"(?:\?\.|\.)[A-Za-z0-9_$]+(?:-[A-Za-z][A-Za-z0-9_$]*)*"
_PATH_RE = re.compile(r"(\$json|\.json)((?:" + _SEGMENT + r")+)")
_SEGMENT_RE = re.compile(r"(\?\.|\.)([A-Za-z0-9_$]+(?:-[A-Za-z][A-Za-z0-9_$]*)*)")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def check_expressions(node: dict, node_names: Sequence[str]) -> List[Issue]:
    """
    Check every n8n expression found in a node's parameters.

    Values starting with "=" are expressions; `{{ ... }}` blocks inside them are
    evaluated by n8n. Errors:
      - unbalanced or empty `{{ }}` blocks
      - references to nodes that do not exist in the workflow
      - unknown `$` variables
      - dot access to reserved words / non-identifier keys
    Warnings:
      - `{{ }}` in a value without the leading "=" (treated as literal text)
      - nested paths without optional chaining (may be undefined at runtime)
    """
    nname = str(node.get("name") or node.get("id") or "<unnamed>")
    params = node.get("parameters") or {}
    issues: List[Issue] = []
    for path, text in iter_strings(params, prefix="parameters"):
        issues.extend(check_value(text, nname, path, node_names))
    return issues


def iter_strings(value: Any, prefix: str = "") -> Iterator[Tuple[str, str]]:
    """Yield (path, string) for every string nested in dicts/lists, skipping code bodies."""
    if isinstance(value, str):
        yield prefix, value
    elif isinstance(value, dict):
        for k, v in value.items():
            if k in CODE_KEYS:
                continue
            yield from iter_strings(v, f"{prefix}.{k}" if prefix else str(k))
    elif isinstance(value, list):
        for i, v in enumerate(value):
            yield from iter_strings(v, f"{prefix}[{i}]")


def check_value(text: str, node_name: str, path: str, node_names: Sequence[str]) -> List[Issue]:
    if "{{" not in text and "}}" not in text:
        return []

    if not text.startswith("="):
        return [warning(
            IssueCode.EXPRESSION_PREFIX,
            f"Node '{node_name}' {path} contains '{{{{ }}}}' but does not start with '='; "
            "n8n will treat it as literal text",
            node=node_name, path=path, fix="prefix the value with '='",
        )]

    blocks, problem = split_blocks(text[1:])
    issues: List[Issue] = []
    if problem:
        issues.append(_malformed(node_name, path, problem))

    for body in blocks:
        issues.extend(_check_block(body, node_name, path, node_names))
    return issues


def split_blocks(text: str) -> Tuple[List[str], Optional[str]]:
    """
    Return the bodies of `{{ ... }}` blocks and a description of the first
    balance problem (or None).
    """
    blocks: List[str] = []
    pos = 0
    while True:
        open_i = text.find("{{", pos)
        close_i = text.find("}}", pos)
        if open_i == -1 and close_i == -1:
            return blocks, None
        if open_i == -1 or (close_i != -1 and close_i < open_i):
            return blocks, "has '}}' without a matching '{{'"
        end = text.find("}}", open_i + 2)
        if end == -1:
            return blocks, "has '{{' that is never closed"
        nested = text.find("{{", open_i + 2)
        if nested != -1 and nested < end:
            return blocks, "has a '{{' nested inside another expression"
        blocks.append(text[open_i + 2:end])
        pos = end + 2


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _malformed(node_name: str, path: str, problem: str, fix: Optional[str] = None) -> Issue:
    return error(
        IssueCode.MALFORMED_EXPRESSION,
        f"Node '{node_name}' {path}: expression {problem}",
        node=node_name, path=path, fix=fix,
    )


def _suggest(word: str, candidates: Sequence[str]) -> Optional[str]:
    matches = difflib.get_close_matches(word, list(dict.fromkeys(candidates)), n=3, cutoff=0.6)
    return "did you mean " + ", ".join(f"'{m}'" for m in matches) if matches else None


def _check_block(body: str, node_name: str, path: str, node_names: Sequence[str]) -> List[Issue]:
    issues: List[Issue] = []
    if not body.strip():
        return [_malformed(node_name, path, "is empty ('{{ }}')")]

    # node references are read before string literals are blanked out
    for rx in _NODE_REF_RES:
        for m in rx.finditer(body):
            ref = m.group(2)
            if ref not in node_names:
                issues.append(_malformed(
                    node_name, path, f"references undefined node '{ref}'",
                    fix=_suggest(ref, node_names),
                ))

    code = _STRING_LITERAL_RE.sub('""', body)

    for m in _VARIABLE_RE.finditer(code):
        var = m.group(1)
        if var not in KNOWN_VARIABLES:
            issues.append(_malformed(
                node_name, path, f"uses unknown variable '{var}'",
                fix=_suggest(var, sorted(KNOWN_VARIABLES)),
            ))

    for m in _PATH_RE.finditer(code):
        root, tail = m.group(1), m.group(2)
        segments = _SEGMENT_RE.findall(tail)
        if code[m.end():].lstrip().startswith("("):
            segments = segments[:-1]   # trailing method call, not a field

        for _sep, key in segments:
            if not _IDENTIFIER_RE.match(key):
                issues.append(_malformed(
                    node_name, path, f"accesses key '{key}' with dot notation",
                    fix=f'use bracket notation: {root}["{key}"]',
                ))
            elif key in RESERVED_WORDS:
                issues.append(_malformed(
                    node_name, path, f"uses reserved identifier '{key}' unescaped",
                    fix=f'use bracket notation: {root}["{key}"]',
                ))

        if len(segments) >= 2 and any(sep == "." for sep, _ in segments[1:]):
            dotted = root + "".join(sep + key for sep, key in segments)
            guarded = root + segments[0][0] + segments[0][1] + "".join("?." + key for _, key in segments[1:])
            issues.append(warning(
                IssueCode.RUNTIME_EXPRESSION,
                f"Node '{node_name}' {path}: nested path '{dotted}' is not guarded and may be undefined at runtime",
                node=node_name, path=path, fix=f"use optional chaining: {guarded}",
                false_positive=FalsePositive.RUNTIME_EXPRESSION,
            ))
    return issues
