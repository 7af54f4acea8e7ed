from __future__ import annotations

from pathlib import Path

import pytest

from lib_layered_store import (
    PRIORITY_ENV,
    PRIORITY_OVERRIDES,
    LayerLoadError,
    build_store,
    snapshot,
)
from lib_layered_store.adapters.file_loaders.structured import FileSource


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_build_store_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    base = write(tmp_path / "base.toml", "[service]\ntimeout = 5\nretries = 1\n")
    local = write(tmp_path / "local.json", '{"service": {"timeout": 10, "endpoint": "https://api"}}')
    write(tmp_path / "project" / ".env", "SERVICE__TIMEOUT=15\nSERVICE__MODE=dotenv\n")
    monkeypatch.setenv("CONFIG_KIT_SERVICE__MODE", "debug")

    store = build_store(
        files=[base, tmp_path / "missing.yaml", local],
        slug="config-kit",
        dotenv=True,
        start_dir=str(tmp_path / "project"),
    )

    assert store.get_raw("service.retries") == "1"
    assert store.get_raw("service.endpoint") == "https://api"
    assert store.get_raw("service.timeout") == "15"
    assert store.get_raw("service.mode") == "debug"
    assert [entry.name for entry in store.entries] == [
        "overrides",
        "env",
        "dotenv",
        f"file:{local}",
        f"file:{base}",
    ]
    assert store.origin("service.retries").name == f"file:{base}"
    assert store.origin("service.mode").priority == PRIORITY_ENV


def test_build_store_writes_go_to_overrides(tmp_path: Path) -> None:
    base = write(tmp_path / "base.toml", "[service]\ntimeout = 5\n")
    store = build_store(files=[base])

    store.set_raw("service.timeout", "99")

    assert store.get_raw("service.timeout") == "99"
    assert store.origin("service.timeout").priority == PRIORITY_OVERRIDES
    assert store.entries[-1].source.get_raw("service.timeout") == "5"


def test_build_store_owns_its_sources(tmp_path: Path) -> None:
    base = write(tmp_path / "base.toml", "a = 1\n")
    store = build_store(files=[base], overrides={"b": "2"})
    sources = [entry.source for entry in store.entries]

    store.close()

    assert all(source.closed for source in sources)


def test_build_store_wraps_invalid_files(tmp_path: Path) -> None:
    broken = write(tmp_path / "broken.toml", "[service\n")
    with pytest.raises(LayerLoadError, match="broken.toml"):
        build_store(files=[broken])


def test_build_store_wraps_invalid_dotenv(tmp_path: Path) -> None:
    write(tmp_path / ".env", "not a pair\n")
    with pytest.raises(LayerLoadError):
        build_store(dotenv=True, start_dir=str(tmp_path))


def test_build_store_closes_loaded_files_when_a_later_layer_fails(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    closed: list[str] = []
    monkeypatch.setattr(FileSource, "close", lambda self: closed.append(self.path))
    base = write(tmp_path / "base.toml", "a = 1\n")
    write(tmp_path / ".env", "not a pair\n")

    with pytest.raises(LayerLoadError):
        build_store(files=[base], dotenv=True, start_dir=str(tmp_path))

    assert closed == [str(base)]


def test_build_store_snapshot(tmp_path: Path) -> None:
    base = write(tmp_path / "base.yaml", "service:\n  timeout: 5\nflag: true\n")
    store = build_store(files=[base], overrides={"service": {"timeout": "7"}})
    assert snapshot(store) == {"service.timeout": "7", "flag": "true"}
