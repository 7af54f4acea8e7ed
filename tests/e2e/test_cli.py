"""End-to-end CLI coverage for the commands exposed by lib-layered-store."""

from __future__ import annotations

import json
from pathlib import Path

import lib_cli_exit_tools
from click.testing import CliRunner

from lib_layered_store import cli


def _runner() -> CliRunner:
    return CliRunner()


def _layers(tmp_path: Path) -> list[str]:
    base = tmp_path / "base.toml"
    base.write_text("[service]\ntimeout = 5\nretries = 2\n", encoding="utf-8")
    local = tmp_path / "local.json"
    local.write_text('{"service": {"timeout": 30}}', encoding="utf-8")
    return ["--file", str(base), "--file", str(local)]


def test_cli_get_resolves_later_file_first(tmp_path: Path) -> None:
    result = _runner().invoke(cli.cli, ["get", "service.timeout", *_layers(tmp_path)])
    assert result.exit_code == 0
    assert result.output.strip() == "30"


def test_cli_get_reads_environment(tmp_path: Path) -> None:
    result = _runner().invoke(
        cli.cli,
        ["get", "service.timeout", "--slug", "demo-app", *_layers(tmp_path)],
        env={"DEMO_APP_SERVICE__TIMEOUT": "45"},
    )
    assert result.exit_code == 0
    assert result.output.strip() == "45"


def test_cli_get_missing_key_fails(tmp_path: Path) -> None:
    result = _runner().invoke(cli.cli, ["get", "service.nope", *_layers(tmp_path)])
    assert result.exit_code != 0
    assert "Key not found: service.nope" in result.output


def test_cli_keys_lists_union(tmp_path: Path) -> None:
    result = _runner().invoke(cli.cli, ["keys", "service", *_layers(tmp_path)])
    assert result.exit_code == 0
    assert result.output.split() == ["timeout", "retries"]


def test_cli_dump_with_provenance(tmp_path: Path) -> None:
    result = _runner().invoke(cli.cli, ["dump", *_layers(tmp_path), "--provenance"])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["config"] == {"service.timeout": "30", "service.retries": "2"}
    assert payload["provenance"]["service.timeout"]["layer"].endswith("local.json")
    assert payload["provenance"]["service.retries"]["priority"] == 100


def test_cli_dump_with_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("FEATURE__ENABLED=yes\n", encoding="utf-8")
    result = _runner().invoke(cli.cli, ["dump", "feature", "--dotenv", "--start-dir", str(tmp_path)])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"feature.enabled": "yes"}


def test_cli_env_prefix() -> None:
    result = _runner().invoke(cli.cli, ["env-prefix", "config-kit"])
    assert result.exit_code == 0
    assert result.output.strip() == "CONFIG_KIT"


def test_cli_info_runs() -> None:
    result = _runner().invoke(cli.cli, ["info"])
    assert result.exit_code == 0
    assert "layered" in result.output.lower()


def test_main_restores_traceback_flags() -> None:
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    exit_code = cli.main(["--traceback", "env-prefix", "demo"])
    assert exit_code == 0
    assert lib_cli_exit_tools.config.traceback is False
    assert lib_cli_exit_tools.config.traceback_force_color is False
