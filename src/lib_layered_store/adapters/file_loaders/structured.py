"""Structured configuration file loaders.

Purpose
-------
Turn on-disk artifacts into read-only configuration layers. Loaders are small
wrappers around ``tomllib``/``json``/``yaml.safe_load`` so error handling and
observability live in one place.

Contents
--------
* :class:`BaseFileLoader` – shared helpers for reading files and validating
  mapping outputs.
* :class:`TOMLFileLoader` / :class:`JSONFileLoader` / :class:`YAMLFileLoader`.
* :data:`FILE_LOADERS` – loaders keyed by file suffix.
* :class:`FileSource` – read-only layer built from one file.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Final, Mapping

import yaml

from ...domain.errors import InvalidFormat, NotFound
from ...observability import log_debug, log_error
from ..memory.default import MappingSource


class BaseFileLoader:
    """Common utilities shared by the structured file loaders."""

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`NotFound` when the file is missing."""

        file_path = Path(path)
        if not file_path.is_file():
            raise NotFound(f"Configuration file not found: {path}")
        payload = file_path.read_bytes()
        log_debug("config_file_read", layer="file", path=path, size=len(payload))
        return payload

    @staticmethod
    def _ensure_mapping(data: object, *, path: str) -> Mapping[str, object]:
        """Ensure *data* behaves like a mapping, otherwise raise ``InvalidFormat``.

        Examples
        --------
        >>> BaseFileLoader._ensure_mapping({"key": 1}, path="demo")
        {'key': 1}
        >>> BaseFileLoader._ensure_mapping(42, path="demo")
        Traceback (most recent call last):
        ...
        lib_layered_store.domain.errors.InvalidFormat: File demo did not produce a mapping
        """

        if not isinstance(data, Mapping):
            raise InvalidFormat(f"File {path} did not produce a mapping")
        return data


class TOMLFileLoader(BaseFileLoader):
    """Load TOML documents using the standard library parser."""

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = tomllib.loads(self._read(path).decode("utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            log_error("config_file_invalid", layer="file", path=path, format="toml", error=str(exc))
            raise InvalidFormat(f"Invalid TOML in {path}: {exc}") from exc
        result = self._ensure_mapping(data, path=path)
        log_debug("config_file_loaded", layer="file", path=path, format="toml")
        return result


class JSONFileLoader(BaseFileLoader):
    """Load JSON documents."""

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = json.loads(self._read(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            log_error("config_file_invalid", layer="file", path=path, format="json", error=str(exc))
            raise InvalidFormat(f"Invalid JSON in {path}: {exc}") from exc
        result = self._ensure_mapping(data, path=path)
        log_debug("config_file_loaded", layer="file", path=path, format="json")
        return result


class YAMLFileLoader(BaseFileLoader):
    """Load YAML documents; an empty document yields an empty mapping."""

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = yaml.safe_load(self._read(path))
        except yaml.YAMLError as exc:
            log_error("config_file_invalid", layer="file", path=path, format="yaml", error=str(exc))
            raise InvalidFormat(f"Invalid YAML in {path}: {exc}") from exc
        if data is None:
            data = {}
        result = self._ensure_mapping(data, path=path)
        log_debug("config_file_loaded", layer="file", path=path, format="yaml")
        return result


FILE_LOADERS: Final[dict[str, BaseFileLoader]] = {
    ".toml": TOMLFileLoader(),
    ".json": JSONFileLoader(),
    ".yaml": YAMLFileLoader(),
    ".yml": YAMLFileLoader(),
}


class FileSource(MappingSource):
    """Read-only layer holding the contents of one structured file.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> target = Path(tmp.name) / "config.toml"
    >>> _ = target.write_text("[service]\\ntimeout = 5\\n", encoding="utf-8")
    >>> source = FileSource.from_path(target)
    >>> source.get_raw("service.timeout"), source.read_only
    ('5', True)
    >>> tmp.cleanup()
    """

    def __init__(self, data: Mapping[str, object], *, path: str) -> None:
        super().__init__(data, read_only=True)
        self.path = path

    @classmethod
    def from_path(cls, path: str | Path) -> FileSource:
        """Parse *path* with the loader registered for its suffix.

        Raises
        ------
        InvalidFormat
            When the suffix is unsupported or the content is malformed.
        NotFound
            When the file does not exist.
        """

        location = str(path)
        loader = FILE_LOADERS.get(Path(location).suffix.lower())
        if loader is None:
            raise InvalidFormat(f"Unsupported configuration file type: {location}")
        return cls(loader.load(location), path=location)
