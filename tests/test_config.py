# tests/test_config.py

import pytest

from flowlint.config import Settings, get_profile, load_settings, parse_accept
from flowlint.errors import ConfigError
from flowlint.result import FalsePositive

ENV_VARS = ("FLOWLINT_PROFILE", "FLOWLINT_ENV", "FLOWLINT_REGISTRY", "FLOWLINT_CREDENTIALS",
            "FLOWLINT_ACCEPT", "LOG_LEVEL")


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for key in ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def test_profiles():
    assert get_profile(None).name == "runtime"
    assert get_profile("STRICT").fail_on_warnings
    assert not get_profile("minimal").emit_warnings
    assert FalsePositive.RUNTIME_EXPRESSION in get_profile("ai-friendly").accept
    with pytest.raises(ConfigError):
        get_profile("paranoid")


def test_parse_accept():
    assert parse_accept("runtime-expression, community_schema") == (
        FalsePositive.RUNTIME_EXPRESSION,
        FalsePositive.COMMUNITY_SCHEMA,
    )
    assert parse_accept(None) == ()
    with pytest.raises(ConfigError):
        parse_accept(["bogus"])


def test_settings_validation():
    assert Settings(environment="Staging").environment == "staging"
    with pytest.raises(ConfigError):
        Settings(environment="prod")


def test_defaults(clean_env):
    s = load_settings()
    assert s.profile == "runtime"
    assert s.is_production
    assert s.registry_path is None


def test_file_env_override_precedence(clean_env, tmp_path):
    (tmp_path / "flowlint.yaml").write_text(
        "flowlint:\n"
        "  profile: minimal\n"
        "  env: staging\n"
        "  registry: registry.yaml\n"
        "  accept: [dev_credentials]\n",
        encoding="utf-8",
    )
    s = load_settings()
    assert s.profile == "minimal"
    assert s.environment == "staging"
    assert s.registry_path == (tmp_path / "registry.yaml").resolve()
    assert s.accept == (FalsePositive.DEV_CREDENTIALS,)

    clean_env.setenv("FLOWLINT_PROFILE", "strict")
    assert load_settings().profile == "strict"
    assert load_settings(profile="ai-friendly").profile == "ai-friendly"


def test_config_errors(clean_env, tmp_path):
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "nope.yaml")

    bad = tmp_path / "bad.yaml"
    bad.write_text("profle: strict\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(bad)
