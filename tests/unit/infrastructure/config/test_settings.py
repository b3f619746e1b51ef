import os
from dataclasses import fields

import pytest

from jikanclient.infrastructure.config.settings import ENV_PREFIX, ClientSettings, load_settings

ENV_KEYS = [ENV_PREFIX + f.name.upper() for f in fields(ClientSettings)]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolates the test from real JIKAN_* variables and stray .env files."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    # load_dotenv writes straight into os.environ
    for key in ENV_KEYS:
        os.environ.pop(key, None)


def test_defaults_without_any_source(clean_env):
    settings = load_settings(config_file=None)

    assert settings == ClientSettings()


def test_yaml_file(clean_env, tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("max_retries: 3\nrate_limit: 2\ncache_backend: memory\n")

    settings = load_settings(config_file=config_file)

    assert settings.max_retries == 3
    assert settings.rate_limit == 2
    assert settings.cache_backend == "memory"


def test_yaml_nested_section(clean_env, tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("jikan:\n  base_url: https://mirror.example/v4\n  timeout: 5\n")

    settings = load_settings(config_file=config_file)

    assert settings.base_url == "https://mirror.example/v4"
    assert settings.timeout == 5.0


def test_missing_yaml_file_is_ignored(clean_env, tmp_path):
    assert load_settings(config_file=tmp_path / "nope.yaml") == ClientSettings()


def test_non_mapping_yaml_is_rejected(clean_env, tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("- just\n- a list\n")

    with pytest.raises(ValueError):
        load_settings(config_file=config_file)


def test_env_file_overrides_yaml(clean_env, tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("max_retries: 3\ncache_ttl: 10\n")
    env_file = tmp_path / "custom.env"
    env_file.write_text("JIKAN_MAX_RETRIES=5\n")

    settings = load_settings(config_file=config_file, env_file=env_file)

    assert settings.max_retries == 5
    assert settings.cache_ttl == 10.0


def test_dotenv_found_in_working_directory(clean_env, tmp_path):
    (tmp_path / ".env").write_text("JIKAN_USER_AGENT=my-app/2.0\n")

    assert load_settings(config_file=None).user_agent == "my-app/2.0"


def test_environment_beats_env_file(clean_env, tmp_path, monkeypatch):
    env_file = tmp_path / "custom.env"
    env_file.write_text("JIKAN_RATE_LIMIT=1\n")
    monkeypatch.setenv("JIKAN_RATE_LIMIT", "3")

    assert load_settings(config_file=None, env_file=env_file).rate_limit == 3


def test_invalid_number_is_rejected(clean_env, monkeypatch):
    monkeypatch.setenv("JIKAN_MAX_RETRIES", "lots")

    with pytest.raises(ValueError, match="max_retries"):
        load_settings(config_file=None)


def test_invalid_cache_backend_is_rejected(clean_env, monkeypatch):
    monkeypatch.setenv("JIKAN_CACHE_BACKEND", "redis")

    with pytest.raises(ValueError, match="cache_backend"):
        load_settings(config_file=None)


def test_unknown_keys_are_ignored_with_warning(clean_env, tmp_path, caplog):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("max_retries: 1\nfavourite_anime: bebop\n")

    settings = load_settings(config_file=config_file)

    assert settings.max_retries == 1
    assert "favourite_anime" in caplog.text
