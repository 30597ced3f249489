# flowlint/config.py
"""
Validation profiles and runtime settings.

Settings are merged in this order (later wins):
  defaults < config file (flowlint.yaml / .json) < FLOWLINT_* env vars < explicit overrides

  FLOWLINT_PROFILE       minimal | runtime | ai-friendly | strict   (default: runtime)
  FLOWLINT_ENV           production | staging | development        (default: production)
  FLOWLINT_REGISTRY      path to a node registry export (JSON/YAML)
  FLOWLINT_CREDENTIALS   path to a credential export (JSON/YAML)
  FLOWLINT_ACCEPT        comma-separated false-positive categories to suppress
  LOG_LEVEL              logging level for the flowlint logger
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple, Union

import yaml

from flowlint.errors import ConfigError
from flowlint.result import FalsePositive
from flowlint.utils.io import load_any

ENVIRONMENTS = ("production", "staging", "development")
DEFAULT_PROFILE = "runtime"
DEFAULT_CONFIG_FILES = ("flowlint.yaml", "flowlint.yml", "flowlint.json")


@dataclass(frozen=True)
class Profile:
    name: str
    check_types: bool = True
    check_unknown: bool = True
    check_expressions: bool = True
    check_credentials: bool = True
    emit_warnings: bool = True
    optional_warnings: bool = False
    fail_on_warnings: bool = False
    accept: Tuple[FalsePositive, ...] = ()


PROFILES: Dict[str, Profile] = {
    # required properties and graph structure only
    "minimal": Profile(
        "minimal",
        check_types=False,
        check_unknown=False,
        check_expressions=False,
        check_credentials=False,
        emit_warnings=False,
    ),
    "runtime": Profile("runtime"),
    # drops the warnings agents most often trip over while building
    "ai-friendly": Profile(
        "ai-friendly",
        accept=(FalsePositive.RUNTIME_EXPRESSION, FalsePositive.AI_TOOL_FLEXIBILITY),
    ),
    "strict": Profile("strict", optional_warnings=True, fail_on_warnings=True),
}

PROFILE_NAMES = tuple(PROFILES)


def get_profile(name: Optional[str]) -> Profile:
    key = (name or DEFAULT_PROFILE).strip().lower()
    if key not in PROFILES:
        raise ConfigError(f"Unknown profile '{name}'. Choose one of: {', '.join(PROFILE_NAMES)}")
    return PROFILES[key]


def get_environment(name: Optional[str]) -> str:
    key = (name or "production").strip().lower()
    if key not in ENVIRONMENTS:
        raise ConfigError(f"Unknown environment '{name}'. Choose one of: {', '.join(ENVIRONMENTS)}")
    return key


def parse_accept(values: Union[str, Iterable[Any], None]) -> Tuple[FalsePositive, ...]:
    """Parse false-positive categories from a comma-separated string or an iterable."""
    if values is None:
        return ()
    if isinstance(values, str):
        values = values.split(",")
    out = []
    for v in values:
        if isinstance(v, FalsePositive):
            out.append(v)
            continue
        key = str(v).strip().lower().replace("-", "_")
        if not key:
            continue
        try:
            out.append(FalsePositive(key))
        except ValueError:
            choices = ", ".join(fp.value for fp in FalsePositive)
            raise ConfigError(f"Unknown false-positive category '{v}'. Choose from: {choices}") from None
    return tuple(dict.fromkeys(out))


@dataclass
class Settings:
    profile: str = DEFAULT_PROFILE
    environment: str = "production"
    registry_path: Optional[Path] = None
    credentials_path: Optional[Path] = None
    accept: Tuple[FalsePositive, ...] = field(default_factory=tuple)
    log_level: str = "WARNING"

    def __post_init__(self):
        get_profile(self.profile)
        self.profile = self.profile.strip().lower()
        self.environment = get_environment(self.environment)
        if self.registry_path is not None:
            self.registry_path = Path(self.registry_path)
        if self.credentials_path is not None:
            self.credentials_path = Path(self.credentials_path)
        self.accept = parse_accept(self.accept)

    @property
    def profile_obj(self) -> Profile:
        return get_profile(self.profile)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


_FILE_KEYS = {
    "profile": "profile",
    "environment": "environment",
    "env": "environment",
    "registry": "registry_path",
    "credentials": "credentials_path",
    "accept": "accept",
    "log_level": "log_level",
}

_ENV_KEYS = {
    "FLOWLINT_PROFILE": "profile",
    "FLOWLINT_ENV": "environment",
    "FLOWLINT_REGISTRY": "registry_path",
    "FLOWLINT_CREDENTIALS": "credentials_path",
    "FLOWLINT_ACCEPT": "accept",
    "LOG_LEVEL": "log_level",
}


def _from_file(path: Path) -> Dict[str, Any]:
    try:
        data = load_any(path) or {}
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: config must be a mapping")
    section = data.get("flowlint", data)
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: the flowlint section must be a mapping")
    out: Dict[str, Any] = {}
    for key, value in section.items():
        attr = _FILE_KEYS.get(key)
        if attr is None:
            raise ConfigError(f"{path}: unknown config key '{key}'")
        if attr.endswith("_path") and value is not None:
            # relative paths resolve against the config file's directory
            value = (path.parent / value).resolve()
        out[attr] = value
    return out


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    base = Path(start) if start else Path.cwd()
    for name in DEFAULT_CONFIG_FILES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def load_settings(config_path: Optional[Union[str, Path]] = None, **overrides: Any) -> Settings:
    """
    Build Settings from defaults, an optional config file, FLOWLINT_* env vars
    and explicit overrides (None values are ignored).
    """
    merged: Dict[str, Any] = {}

    path = Path(config_path) if config_path else find_config_file()
    if config_path and not Path(config_path).is_file():
        raise ConfigError(f"Config file not found: {config_path}")
    if path is not None:
        merged.update(_from_file(path))

    for env_key, attr in _ENV_KEYS.items():
        value = os.getenv(env_key)
        if value:
            merged[attr] = value

    merged.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**merged)
