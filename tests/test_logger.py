import logging

import pytest

import i18n_recreate.config
from i18n_recreate import logger as log_module


@pytest.fixture
def unresolved_log_mode(tmp_path, monkeypatch):
    monkeypatch.setattr(log_module, "LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(log_module, "LOG_FILE", tmp_path / "logs" / "app.log")
    monkeypatch.setattr(log_module, "_log_mode_cache", None)
    monkeypatch.setattr(log_module, "_log_mode_override", None)
    yield
    for name in list(log_module._configured):
        log_module._apply_mode(logging.getLogger(name), "off")


def test_early_loggers_follow_configured_mode(unresolved_log_mode, monkeypatch):
    early = logging.getLogger("i18n_recreate.early")
    log_module._configured.add(early.name)
    log_module._apply_mode(early, "off")
    monkeypatch.setattr(i18n_recreate.config, "load_config", lambda: {"log_mode": "info"})

    later = log_module.get_logger("i18n_recreate.later")

    assert later.level == logging.INFO
    assert early.level == logging.INFO
    assert (log_module.LOG_FILE).exists()


def test_unknown_mode_falls_back_to_off(unresolved_log_mode, monkeypatch):
    monkeypatch.setattr(i18n_recreate.config, "load_config", lambda: {"log_mode": "loud"})

    assert log_module._get_log_mode() == "off"


def test_unknown_log_mode_is_rejected():
    with pytest.raises(ValueError):
        log_module.set_log_mode("verbose")
