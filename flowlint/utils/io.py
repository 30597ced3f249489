# utils/io.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator, Sequence, Union

import yaml

PathLike = Union[str, Path]

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")


def to_path(p: PathLike) -> Path:
    return p if isinstance(p, Path) else Path(p)


def ensure_parent(path: PathLike) -> Path:
    """Create the parent directory of a report/output file."""
    p = to_path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    return p


# -------- Reading --------
def read_text(path: PathLike) -> str:
    """Read UTF-8 text; a leading BOM (editor / n8n desktop exports) is dropped."""
    return to_path(path).read_text(encoding="utf-8-sig")


def read_json(path: PathLike) -> Any:
    return json.loads(read_text(path))


def read_yaml(path: PathLike) -> Any:
    return yaml.safe_load(read_text(path))


def load_any(path: PathLike) -> Any:
    """
    Load a workflow / registry / credential / config file:
      - .json -> JSON
      - .yaml/.yml -> YAML
      - anything else (e.g. `n8n export:workflow --output=-` piped to a file):
        JSON when the text starts like JSON, YAML otherwise
    Raises OSError, ValueError (bad JSON) or yaml.YAMLError.
    """
    p = to_path(path)
    suf = p.suffix.lower()
    if suf in JSON_SUFFIXES:
        return read_json(p)
    if suf in YAML_SUFFIXES:
        return read_yaml(p)

    text = read_text(p)
    if text.lstrip()[:1] in ("{", "["):
        return json.loads(text)
    return yaml.safe_load(text)


# -------- Writing --------
def write_json(path: PathLike, data: Any, indent: int = 2) -> Path:
    """Write a JSON report atomically (temp file then replace)."""
    p = ensure_parent(path)
    tmp = p.with_suffix(p.suffix + ".tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False, indent=indent, default=str) + "\n", encoding="utf-8")
    tmp.replace(p)
    return p


# -------- Directory walking --------
def walk_files(root: PathLike, patterns: Sequence[str], skip_dirs: Sequence[str] = ()) -> Iterator[Path]:
    """
    Yield files under `root` matching any glob in `patterns`, recursively and
    in sorted order, each at most once. Paths with a component in `skip_dirs`
    are left out.
    """
    root = to_path(root)
    seen = set()
    for pattern in patterns:
        for fp in sorted(root.rglob(pattern)):
            if fp in seen or not fp.is_file():
                continue
            if any(part in skip_dirs for part in fp.relative_to(root).parts):
                continue
            seen.add(fp)
            yield fp
