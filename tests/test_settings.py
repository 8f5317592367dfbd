from __future__ import annotations

import os
from pathlib import Path

import pytest

from nano_banana import cli
from nano_banana.models.registry import PRO_MODEL
from nano_banana.providers.dryrun import DryRunProvider
from nano_banana.providers.gemini import GeminiProvider
from nano_banana.settings import Settings
from nano_banana.utils import getenv_flag, load_dotenv, read_json, sanitize_payload, write_json


def test_settings_from_env_defaults() -> None:
    settings = Settings.from_env({})
    assert settings == Settings()


def test_settings_from_env_reads_overrides(tmp_path: Path) -> None:
    settings = Settings.from_env(
        {
            "NANO_BANANA_DEFAULT_MODEL": PRO_MODEL,
            "NANO_BANANA_OUTPUT_DIR": str(tmp_path),
            "NANO_BANANA_LOG_LEVEL": "debug",
            "NANO_BANANA_DRYRUN": "yes",
        }
    )
    assert settings.default_model == PRO_MODEL
    assert settings.output_dir == tmp_path
    assert settings.log_level == "DEBUG"
    assert settings.dry_run is True


def test_getenv_flag_values() -> None:
    assert getenv_flag("FLAG", environ={"FLAG": "1"}) is True
    assert getenv_flag("FLAG", environ={"FLAG": "off"}) is False
    assert getenv_flag("FLAG", True, environ={}) is True


def test_sanitize_payload_redacts_secrets() -> None:
    payload = {"apiKey": "secret", "prompt": "boat", "nested": [{"data": b"1234"}], "path": Path("/tmp/x")}
    assert sanitize_payload(payload) == {
        "apiKey": "<redacted>",
        "prompt": "boat",
        "nested": [{"data": "<omitted>"}],
        "path": "/tmp/x",
    }


def test_json_helpers(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"
    assert read_json(path, {"missing": True}) == {"missing": True}
    write_json(path, {"geminiApiKey": "k"})
    assert read_json(path, None) == {"geminiApiKey": "k"}
    path.write_text("{broken", encoding="utf-8")
    assert read_json(path, "fallback") == "fallback"


def test_load_dotenv_respects_existing_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "# comment\nexport NB_TEST_A='quoted'\nNB_TEST_B=plain\nNB_TEST_C=from-file\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("NB_TEST_C", "from-env")
    monkeypatch.delenv("NB_TEST_A", raising=False)
    monkeypatch.delenv("NB_TEST_B", raising=False)

    assert load_dotenv(env_path) is True

    assert os.environ["NB_TEST_A"] == "quoted"
    assert os.environ["NB_TEST_B"] == "plain"
    assert os.environ["NB_TEST_C"] == "from-env"
    monkeypatch.delenv("NB_TEST_A")
    monkeypatch.delenv("NB_TEST_B")


def test_cli_selects_provider_from_settings() -> None:
    assert isinstance(cli._select_provider(Settings(dry_run=True)), DryRunProvider)
    assert isinstance(cli._select_provider(Settings()), GeminiProvider)


def test_cli_overrides_take_precedence(tmp_path: Path) -> None:
    args = cli._build_parser().parse_args(["serve", "--dry-run", "--output-dir", str(tmp_path), "--log-level", "warning"])
    settings = cli._apply_overrides(Settings(log_level="INFO"), args)
    assert settings.dry_run is True
    assert settings.output_dir == tmp_path
    assert settings.log_level == "WARNING"


def test_cli_status_reports_configuration(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["status", "--output-dir", str(tmp_path / "images")])

    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert "configured and ready" in out
    assert str(tmp_path / "images") in out
    assert "env-key" not in out
