import json

import pytest

from conftest import RecordingTranslator
from i18n_recreate import cli


def suffix_x(text, target_language):
    return f"{text}-X"


@pytest.fixture
def fake_translator(monkeypatch):
    translator = RecordingTranslator(suffix_x)

    def factory(config, provider=None, source_language=None, client=None):
        translator.provider = provider
        return translator

    monkeypatch.setattr(cli, "create_translator", factory)
    return translator


def test_recreates_locale_file(locale_project, fake_translator, capsys):
    code = cli.main(["-s", "en", "-t", "de", "-r", str(locale_project)])

    output = locale_project / "assets" / "i18n" / "de.json"
    assert code == cli.EXIT_OK
    assert json.loads(output.read_text(encoding="utf-8"))["title"] == "Welcome-X"
    assert fake_translator.closed
    assert fake_translator.provider == "google"
    assert "Wrote" in capsys.readouterr().out


def test_summary_reports_token_usage(locale_project, monkeypatch, capsys):
    class Metered(RecordingTranslator):
        def get_total_token_usage(self):
            return {"prompt_tokens": 120, "completion_tokens": 30}

    monkeypatch.setattr(cli, "create_translator", lambda *args, **kwargs: Metered(suffix_x))

    assert cli.main(["-s", "en", "-t", "de", "-r", str(locale_project)]) == cli.EXIT_OK
    assert "120 prompt + 30 completion tokens" in capsys.readouterr().out


def test_summary_without_token_usage(locale_project, fake_translator, capsys):
    cli.main(["-s", "en", "-t", "de", "-r", str(locale_project)])

    assert "completion tokens" not in capsys.readouterr().out


def test_explicit_source_defaults_output_next_to_it(tmp_path, fake_translator):
    source = tmp_path / "locales" / "en.json"
    source.parent.mkdir()
    source.write_text('{"a": "b"}', encoding="utf-8")

    code = cli.main(["-t", "pl", "--source", str(source), "--indent", "0", "--provider", "openai"])

    assert code == cli.EXIT_OK
    assert (tmp_path / "locales" / "pl.json").read_text(encoding="utf-8") == '{\n"a": "b-X"\n}\n'
    assert fake_translator.provider == "openai"


def test_options_reach_the_recreator(locale_project, fake_translator, monkeypatch):
    seen = {}
    original = cli.build_recreator

    def spy(translator, config, **overrides):
        recreator = original(translator, config, **overrides)
        seen["recreator"] = recreator
        return recreator

    monkeypatch.setattr(cli, "build_recreator", spy)

    cli.main(["-s", "en", "-t", "de", "-r", str(locale_project), "--concurrency", "3", "--batch-size", "2", "--dedupe"])

    recreator = seen["recreator"]
    assert recreator.max_concurrent_requests == 3
    assert recreator.batch_size == 2
    assert recreator.deduplicate is True


def test_dry_run_writes_nothing(locale_project, capsys):
    code = cli.main(["-s", "en", "-t", "de", "-r", str(locale_project), "--dry-run"])

    assert code == cli.EXIT_OK
    assert not (locale_project / "assets" / "i18n" / "de.json").exists()
    assert "Dry run" in capsys.readouterr().out


def test_translation_failure_exit_code(locale_project, monkeypatch, capsys):
    translator = RecordingTranslator(fail_on={"Two"})
    monkeypatch.setattr(cli, "create_translator", lambda *args, **kwargs: translator)

    code = cli.main(["-s", "en", "-t", "de", "-r", str(locale_project)])

    err = capsys.readouterr().err
    assert code == cli.EXIT_TRANSLATION_ERROR
    assert "/items/1" in err
    assert "No output was written" in err
    assert not (locale_project / "assets" / "i18n" / "de.json").exists()


def test_write_failure_saves_fallback(tmp_path, locale_project, fake_translator, monkeypatch, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    fallback_dir = tmp_path / "fallback"
    monkeypatch.setattr(cli.tempfile, "gettempdir", lambda: str(fallback_dir))

    code = cli.main(["-s", "en", "-t", "de", "-r", str(locale_project), "-o", str(blocker / "de.json")])

    assert code == cli.EXIT_WRITE_ERROR
    assert json.loads((fallback_dir / "de.json").read_text(encoding="utf-8"))["title"] == "Welcome-X"
    assert "saved to" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [
    ["-s", "fr", "-t", "de"],
    ["-t", "de"],
    ["-s", "en"],
])
def test_input_errors(locale_project, fake_translator, argv):
    assert cli.main(argv + ["-r", str(locale_project)]) == cli.EXIT_INPUT_ERROR
    assert fake_translator.calls == []


def test_missing_locale_directory(tmp_path, fake_translator, capsys):
    assert cli.main(["-s", "en", "-t", "de", "-r", str(tmp_path)]) == cli.EXIT_INPUT_ERROR
    assert "Assets directory not found" in capsys.readouterr().err


def test_missing_credentials(locale_project, capsys):
    code = cli.main(["-s", "en", "-t", "de", "-r", str(locale_project)])

    assert code == cli.EXIT_INPUT_ERROR
    assert "API key not configured" in capsys.readouterr().err


def test_cancel_exit_code(locale_project, monkeypatch):
    class Interrupting(RecordingTranslator):
        def _translate_once(self, text, target_language):
            raise KeyboardInterrupt

    monkeypatch.setattr(cli, "create_translator", lambda *args, **kwargs: Interrupting())

    assert cli.main(["-s", "en", "-t", "de", "-r", str(locale_project)]) == cli.EXIT_CANCELLED


def test_init_config(tmp_path, capsys):
    path = tmp_path / "config.json"

    assert cli.main(["--init-config", "-c", str(path)]) == cli.EXIT_OK
    assert json.loads(path.read_text(encoding="utf-8"))["translator"] == "google"
