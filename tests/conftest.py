"""
Shared pytest fixtures.

- isolated_environment: keeps the user's config file and credentials out of tests
- RecordingTranslator: deterministic in-process translator that records calls
- locale_project: a project tree with assets/i18n/en.json
"""

import json
import threading

import pytest

from i18n_recreate.exceptions import TranslationFailure
from i18n_recreate.translators.base import Translator


class RecordingTranslator(Translator):
    """Applies `func` to every string and records what it was asked."""

    name = "recording"

    def __init__(self, func=None, fail_on=(), max_retries=1):
        super().__init__(max_retries=max_retries, sleep=lambda seconds: None)
        self.func = func or (lambda text, target_language: text)
        self.fail_on = set(fail_on)
        self.calls = []
        self.batch_calls = 0
        self.closed = False
        self._lock = threading.Lock()

    def _translate_once(self, text, target_language):
        with self._lock:
            self.calls.append(text)
        if text in self.fail_on:
            raise TranslationFailure(text, target_language, "quota exceeded", retryable=False)
        return self.func(text, target_language)

    def _translate_batch_once(self, texts, target_language):
        with self._lock:
            self.batch_calls += 1
        return super()._translate_batch_once(texts, target_language)

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("I18N_RECREATE_CONFIG", str(tmp_path / "no-config" / "config.json"))
    # No stray .env file is picked up from the repository checkout
    monkeypatch.chdir(tmp_path)
    for name in ("GOOGLE_TRANSLATE_API_KEY", "OPENAI_API_KEY"):
        # setenv first so values a .env file loads later are removed on teardown
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def recording_translator():
    return RecordingTranslator()


@pytest.fixture
def sample_tree():
    return {
        "title": "Welcome",
        "count": 3,
        "active": True,
        "tags": None,
        "menu": {"file": "File", "edit": "Edit"},
        "items": ["One", "Two", 5, [True, "Nested"]],
        "ratio": 0.5,
    }


@pytest.fixture
def locale_project(tmp_path, sample_tree):
    locales = tmp_path / "project" / "assets" / "i18n"
    locales.mkdir(parents=True)
    (locales / "en.json").write_text(json.dumps(sample_tree, indent=2), encoding="utf-8")
    return tmp_path / "project"
