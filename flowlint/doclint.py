# flowlint/doclint.py
# Consistency checks for a repository of agent docs / rule files that go with
# n8n workflows: node type spelling, placeholder-only *.example files, and
# secret-bearing files kept out of git.

from __future__ import annotations

import re
from fnmatch import fnmatchcase
from pathlib import Path
from typing import List, Sequence, Union

from flowlint.registry.model import normalize_node_type
from flowlint.result import Issue, IssueCode, ValidationResult, error, warning
from flowlint.utils.io import read_text, walk_files
from flowlint.utils.logger import get_logger

logger = get_logger("doclint")

DOC_SUFFIXES = (".md", ".mdc", ".markdown")
SKIP_DIRS = (".git", "node_modules", ".venv", "venv", "__pycache__", ".pytest_cache")

# Files that hold real secrets and must never be committed
SECRET_FILES = (".env", ".cursor/mcp.json")

# ---------- Node type strings ----------

# n8n-nodes-base.x, @n8n/n8n-nodes-langchain.x, and the short nodes-base.x forms
_TYPE_CANDIDATE_RE = re.compile(
    r"(?<![\w@/.-])((?:@[\w-]+/)?(?:n8n-)?nodes-(?:base|langchain))\.([\w-]+)"
)
_VALID_PACKAGES = ("n8n-nodes-base", "@n8n/n8n-nodes-langchain")
_CAMEL_RE = re.compile(r"^[a-z][a-zA-Z0-9]*$")


def check_node_type_strings(text: str, source: str = "<text>") -> List[Issue]:
    """
    Every node type mentioned in `text` must read `n8n-nodes-base.<camelCase>`
    or `@n8n/n8n-nodes-langchain.<camelCase>`. The short forms used by search
    tools (`nodes-base.x`) are only warned about.
    """
    issues: List[Issue] = []
    for m in _TYPE_CANDIDATE_RE.finditer(text):
        package, node = m.group(1), m.group(2)
        found = f"{package}.{node}"
        where = f"{source}:{text.count(chr(10), 0, m.start()) + 1}"

        if package in ("nodes-base", "nodes-langchain"):
            issues.append(warning(
                IssueCode.NODE_TYPE_NAMING,
                f"{where}: '{found}' is the short search form, not a workflow node type",
                path=where, fix=f"use '{normalize_node_type(found)}' in workflow JSON",
            ))
            continue
        if package not in _VALID_PACKAGES:
            full = normalize_node_type(found.split("/", 1)[-1])
            issues.append(error(
                IssueCode.NODE_TYPE_NAMING,
                f"{where}: '{found}' has the wrong package prefix",
                path=where, fix=f"use '{full}'",
            ))
            continue
        if not _CAMEL_RE.match(node):
            issues.append(error(
                IssueCode.NODE_TYPE_NAMING,
                f"{where}: node name '{node}' in '{found}' is not camelCase",
                path=where, fix=f"use '{package}.{_camel(node)}'",
            ))
    return issues


def _camel(name: str) -> str:
    parts = [p for p in re.split(r"[-_]", name) if p]
    if not parts:
        return name
    head = parts[0][0].lower() + parts[0][1:]
    return head + "".join(p[0].upper() + p[1:] for p in parts[1:])


# ---------- *.example files ----------

_SECRET_PATTERNS = (
    ("OpenAI/Anthropic-style API key", re.compile(r"\bsk-(?:proj-|ant-)?[A-Za-z0-9_-]{20,}")),
    ("JWT (n8n API keys are JWTs)", re.compile(r"\beyJ[A-Za-z0-9_-]{8,}\.[A-Za-z0-9_-]{8,}\.[A-Za-z0-9_-]{8,}")),
    ("bearer token", re.compile(r"\bBearer\s+(?!<)[A-Za-z0-9._~+/-]{20,}=*")),
    ("GitHub token", re.compile(r"\bgh[pousr]_[A-Za-z0-9]{30,}")),
)

# KEY=value / "KEY": "value" for secret-looking names
_ASSIGNMENT_RE = re.compile(
    r"""(?i)\b([A-Z0-9_]*(?:API_KEY|TOKEN|SECRET|PASSWORD)[A-Z0-9_]*)["']?\s*[=:]\s*["']?([^\s"',#]+)"""
)
_PLACEHOLDER_RE = re.compile(
    r"(?i)your|xxx|<[^>]*>|\$\{|changeme|change-me|replace|example|placeholder|dummy|\.\.\.|^\*+$"
)


def check_example_file(path: Union[str, Path], text: str) -> List[Issue]:
    issues: List[Issue] = []
    reported = set()
    for lineno, line in enumerate(text.splitlines(), start=1):
        where = f"{path}:{lineno}"
        for label, rx in _SECRET_PATTERNS:
            for m in rx.finditer(line):
                if _PLACEHOLDER_RE.search(m.group(0)):
                    continue
                reported.add(lineno)
                issues.append(error(
                    IssueCode.EXAMPLE_SECRET,
                    f"{where}: looks like a real {label} ({_mask(m.group(0))})",
                    path=where, fix="replace it with a placeholder such as 'your-api-key-here'",
                ))
        if lineno in reported:
            continue
        for m in _ASSIGNMENT_RE.finditer(line):
            key, value = m.group(1), m.group(2)
            if len(value) < 16 or _PLACEHOLDER_RE.search(value):
                continue
            issues.append(warning(
                IssueCode.EXAMPLE_SECRET,
                f"{where}: {key} holds a value that does not look like a placeholder ({_mask(value)})",
                path=where, fix="use an obvious placeholder value",
            ))
    return issues


def check_example_files(root: Union[str, Path]) -> List[Issue]:
    """Scan every committed `*.example` file under `root`."""
    issues: List[Issue] = []
    for fp in walk_files(root, ("*.example",), SKIP_DIRS):
        issues.extend(check_example_file(fp.relative_to(root), read_text(fp)))
    return issues


def _mask(secret: str) -> str:
    return secret[:6] + "..." if len(secret) > 6 else "..."


# ---------- .gitignore ----------

def read_gitignore(root: Union[str, Path]) -> List[str]:
    fp = Path(root) / ".gitignore"
    if not fp.is_file():
        return []
    patterns = []
    for line in read_text(fp).splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            patterns.append(line)
    return patterns


def is_ignored(path: str, patterns: Sequence[str]) -> bool:
    """Approximate git's rules: last matching pattern wins, `!` re-includes."""
    ignored = False
    for raw in patterns:
        negate = raw.startswith("!")
        pat = raw[1:] if negate else raw
        if _gitignore_match(path, pat):
            ignored = not negate
    return ignored


def _gitignore_match(path: str, pattern: str) -> bool:
    if pattern.startswith("**/"):
        pattern = pattern[3:]
    anchored = "/" in pattern.rstrip("/")
    pattern = pattern.strip("/")
    parts = path.strip("/").split("/")
    if anchored:
        return any(fnmatchcase("/".join(parts[:i]), pattern) for i in range(1, len(parts) + 1))
    return any(fnmatchcase(p, pattern) for p in parts)


def check_gitignore(root: Union[str, Path], secret_files: Sequence[str] = SECRET_FILES) -> List[Issue]:
    """
    Secret-bearing files must be gitignored. A file that exists and is not
    ignored is an error; a missing rule for a file that does not exist yet is
    a warning.
    """
    root = Path(root)
    patterns = read_gitignore(root)
    issues: List[Issue] = []
    for rel in secret_files:
        if is_ignored(rel, patterns):
            continue
        if (root / rel).exists():
            issues.append(error(
                IssueCode.SECRET_NOT_IGNORED,
                f"{rel} exists but is not listed in .gitignore",
                path=rel, fix=f"add '{rel}' to .gitignore and remove it from the index",
            ))
        else:
            issues.append(warning(
                IssueCode.SECRET_NOT_IGNORED,
                f".gitignore has no rule for {rel}",
                path=rel, fix=f"add '{rel}' to .gitignore",
            ))
    return issues


# ---------- Runner ----------

def lint_docs(root: Union[str, Path]) -> ValidationResult:
    """Run all documentation checks over a directory tree."""
    root = Path(root)
    result = ValidationResult()
    if not root.is_dir():
        result.add(error(IssueCode.INVALID_DOCUMENT, f"Path not found or not a directory: {root}", path=str(root)))
        return result

    docs = list(walk_files(root, tuple(f"*{s}" for s in DOC_SUFFIXES), SKIP_DIRS))
    for fp in docs:
        result.extend(check_node_type_strings(read_text(fp), str(fp.relative_to(root))))
    result.extend(check_example_files(root))
    result.extend(check_gitignore(root))

    result.detail = {
        "root": str(root),
        "docs": len(docs),
        "examples": len(list(walk_files(root, ("*.example",), SKIP_DIRS))),
    }
    logger.info("Linted %d docs under %s: %d errors, %d warnings",
                len(docs), root, len(result.errors), len(result.warnings))
    return result
