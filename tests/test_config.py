import json

import pytest

from i18n_recreate import config as cfg
from i18n_recreate.exceptions import ConfigError


def test_defaults_when_file_is_missing():
    config = cfg.load_config()

    assert config["translator"] == "google"
    assert config["google"]["api_key"] == cfg.API_KEY_PLACEHOLDER
    assert config["translation"]["max_concurrent_requests"] == 1


def test_file_is_merged_over_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"google": {"api_key": "abc"}, "translation": {"batch_size": 32}}), encoding="utf-8")

    config = cfg.load_config(str(path))

    assert config["google"]["api_key"] == "abc"
    assert config["google"]["timeout"] == 60
    assert config["translation"]["batch_size"] == 32
    assert config["translation"]["preserve_variables"] is True


def test_environment_credentials_win(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"openai": {"api_key": "from-file"}}), encoding="utf-8")
    monkeypatch.setenv("OPENAI_API_KEY", "from-env")
    monkeypatch.setenv("GOOGLE_TRANSLATE_API_KEY", "g-env")

    config = cfg.load_config(str(path))

    assert config["openai"]["api_key"] == "from-env"
    assert config["google"]["api_key"] == "g-env"


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_invalid_file(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        cfg.load_config(str(path))
    assert excinfo.value.code == "config_invalid"


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "custom.json"
    monkeypatch.setenv(cfg.CONFIG_ENV, str(path))

    assert cfg.resolve_config_path() == path
    assert cfg.resolve_config_path("explicit.json").name == "explicit.json"


def test_create_default_config(tmp_path):
    path = tmp_path / "nested" / "config.json"

    created = cfg.create_default_config(str(path))

    assert created == path
    assert json.loads(path.read_text(encoding="utf-8")) == cfg.DEFAULT_CONFIG
    assert cfg.load_config(str(created))["translator"] == "google"


def test_credentials_from_dotenv_file(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("GOOGLE_TRANSLATE_API_KEY=from-dotenv\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    config = cfg.load_config()

    assert config["google"]["api_key"] == "from-dotenv"
    assert cfg.validate_translator_config(config) == "google"


def test_environment_wins_over_dotenv_file(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("OPENAI_API_KEY=from-dotenv\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("OPENAI_API_KEY", "from-env")

    assert cfg.load_config()["openai"]["api_key"] == "from-env"


def test_translation_settings_fill_defaults():
    settings = cfg.get_translation_settings({"translation": {"deduplicate": True}})

    assert settings["deduplicate"] is True
    assert settings["indent"] == 2
    assert settings["variable_patterns"] == cfg.DEFAULT_CONFIG["translation"]["variable_patterns"]


def test_validate_translator_config():
    config = cfg.load_config()
    config["google"]["api_key"] = "k"

    assert cfg.validate_translator_config(config) == "google"
    assert cfg.validate_translator_config(config, "echo") == "echo"

    with pytest.raises(ConfigError) as excinfo:
        cfg.validate_translator_config(config, "openai")
    assert excinfo.value.details == {"provider": "openai", "missing_field": "api_key"}
    assert "OPENAI_API_KEY" in str(excinfo.value)
