"""Environment adapter tests covering prefix filtering and ``__`` nesting."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_layered_store.adapters.env.default import DefaultEnvLoader, EnvSource, assign_nested, default_env_prefix
from lib_layered_store.application import ports


def test_default_env_prefix() -> None:
    assert default_env_prefix("lib-layered-store") == "LIB_LAYERED_STORE"


def test_env_loader_nested() -> None:
    environ = {
        "DEMO_DB__HOST": "db.example.com",
        "DEMO_DB__PORT": "5432",
        "DEMO_FEATURE": "true",
        "OTHER": "ignored",
    }
    loader = DefaultEnvLoader(environ=environ)
    assert isinstance(loader, ports.EnvLoader)
    data = loader.load("DEMO")
    assert data == {"db": {"host": "db.example.com", "port": "5432"}, "feature": "true"}


def test_env_source_is_read_only_view(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEMO_SERVICE__TIMEOUT", "20")
    source = EnvSource.from_environ("DEMO")
    assert source.prefix == "DEMO"
    assert source.get_raw("service.timeout") == "20"
    assert "service" in source.enumerate()
    assert source.read_only is True


def test_assign_nested_overwrites_scalar_raises() -> None:
    container: dict[str, object] = {"a": "value"}
    with pytest.raises(ValueError):
        assign_nested(container, "A__B", "1")


NAMESPACE_KEYS = st.sampled_from(["SERVICE__TIMEOUT", "SERVICE__ENDPOINT", "LOGGING__LEVEL", "MODE"])
VALUES = st.text(min_size=1, max_size=8, alphabet=st.characters(min_codepoint=97, max_codepoint=122))


@given(st.dictionaries(NAMESPACE_KEYS, VALUES, max_size=4))
def test_env_source_resolves_dotted_keys(entries: dict[str, str]) -> None:
    environ = {f"DEMO_{key}": value for key, value in entries.items()}
    environ["IGNORED"] = "1"
    source = EnvSource.from_environ("DEMO", environ)

    for key, value in entries.items():
        assert source.get_raw(key.lower().replace("__", ".")) == value
    assert "ignored" not in source.enumerate()
