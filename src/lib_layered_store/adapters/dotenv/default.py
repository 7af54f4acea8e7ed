"""`.env` adapter.

Purpose
-------
Implement the :class:`lib_layered_store.application.ports.DotEnvLoader`
protocol by scanning for `.env` files from a start directory upwards, and wrap
the parsed result in a read-only source.

Contents
--------
* :class:`DefaultDotEnvLoader` – entry point with optional extra search paths.
* :class:`DotEnvSource` – read-only layer remembering which file it came from.
* :func:`_parse_dotenv` / :func:`_strip_quotes` – strict line parser.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Iterable

from ...domain.errors import InvalidFormat
from ...observability import log_debug, log_error
from ..env.default import assign_nested
from ..memory.default import MappingSource


class DefaultDotEnvLoader:
    """Load a dotenv file into a nested configuration dictionary."""

    def __init__(self, *, extras: Iterable[str] | None = None) -> None:
        """Append *extras* (absolute file paths) to the upward search order."""

        self._extras = [Path(p) for p in extras or []]
        self.last_loaded_path: str | None = None

    def load(self, start_dir: str | None = None) -> Mapping[str, object]:
        """Return the first parsed dotenv file discovered in the search order.

        Side Effects
        ------------
        Sets :attr:`last_loaded_path` and emits structured logging events.

        Examples
        --------
        >>> from tempfile import TemporaryDirectory
        >>> tmp = TemporaryDirectory()
        >>> _ = (Path(tmp.name) / '.env').write_text('SERVICE__TOKEN=secret', encoding='utf-8')
        >>> DefaultDotEnvLoader().load(tmp.name)["service"]["token"]
        'secret'
        >>> tmp.cleanup()
        """

        self.last_loaded_path = None
        for candidate in [*_iter_candidates(start_dir), *self._extras]:
            if candidate.is_file():
                self.last_loaded_path = str(candidate)
                data = _parse_dotenv(candidate)
                log_debug("dotenv_loaded", layer="dotenv", path=self.last_loaded_path, keys=sorted(data.keys()))
                return data
        log_debug("dotenv_not_found", layer="dotenv", path=None)
        return {}


class DotEnvSource(MappingSource):
    """Read-only layer holding the contents of one `.env` file."""

    def __init__(self, data: Mapping[str, object], *, path: str | None = None) -> None:
        super().__init__(data, read_only=True)
        self.path = path

    @classmethod
    def discover(cls, start_dir: str | None = None, *, extras: Iterable[str] | None = None) -> DotEnvSource | None:
        """Return a source for the first `.env` file found, or ``None``."""

        loader = DefaultDotEnvLoader(extras=extras)
        data = loader.load(start_dir)
        if loader.last_loaded_path is None:
            return None
        return cls(data, path=loader.last_loaded_path)


def _iter_candidates(start_dir: str | None) -> Iterable[Path]:
    """Yield candidate dotenv paths walking from ``start_dir`` to filesystem root."""

    base = Path(start_dir) if start_dir else Path.cwd()
    for directory in [base, *base.parents]:
        yield directory / ".env"


def _parse_dotenv(path: Path) -> dict[str, object]:
    """Parse ``path`` into a nested dictionary, raising ``InvalidFormat`` on malformed lines."""

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except UnicodeDecodeError as exc:
        log_error("dotenv_invalid_encoding", layer="dotenv", path=str(path), error=str(exc))
        raise InvalidFormat(f"Invalid UTF-8 in {path}: {exc}") from exc

    result: dict[str, object] = {}
    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        if "=" not in line:
            log_error("dotenv_invalid_line", layer="dotenv", path=str(path), line=line_number)
            raise InvalidFormat(f"Malformed line {line_number} in {path}")
        key, value = line.split("=", 1)
        assign_nested(result, key.strip(), _strip_quotes(value.strip()), error_cls=InvalidFormat)
    return result


def _strip_quotes(value: str) -> str:
    """Trim surrounding quotes and inline comments from ``value``.

    Examples
    --------
    >>> _strip_quotes('"token"')
    'token'
    >>> _strip_quotes("value # comment")
    'value'
    """

    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    if value.startswith("#"):
        return ""
    if " #" in value:
        return value.split(" #", 1)[0].strip()
    return value
