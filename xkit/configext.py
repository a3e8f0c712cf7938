"""Configuration sources (files, in-memory documents, key maps) and helpers."""

from __future__ import annotations

import copy
import csv
import io
import json
import os
import tomllib
from collections.abc import Iterable, Sequence
from typing import Any

import yaml

DELIMITER = "."
FLAG_CONFIG = "config"


class ImmutableError(Exception):
    """An immutable configuration key changed value."""

    def __init__(self, key: str, from_: Any, to: Any) -> None:
        self.key = key
        self.from_ = from_
        self.to = to
        super().__init__(str(self))

    def __str__(self) -> str:
        return (
            f'immutable configuration key "{self.key}" was changed '
            f'from "{self.from_}" to "{self.to}"'
        )


def register_flags(flags: Any) -> None:
    """Register the --config/-c flag on an appcmd FlagSet."""
    flags.string_list(
        FLAG_CONFIG,
        [],
        "Path to one or more .json, .yaml, .yml, .toml config files. Values are "
        "loaded in the order provided, meaning that the last config file "
        "overwrites values from the previous config file.",
        shorthand="c",
    )


def get_address(host: str, port: int) -> str:
    """Return host unchanged for "unix:" sockets, else "host:port"."""
    if host.startswith("unix:"):
        return host
    return f"{host}:{port}"


def _to_float(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, (str, bytes)):
        return float(value)
    raise TypeError(f"unable to cast {value!r} to float")


def to_float_slice(value: Any) -> list[float]:
    """Convert a list or tuple to floats; anything unconvertible gives []."""
    if not isinstance(value, (list, tuple)):
        return []
    try:
        return [_to_float(item) for item in value]
    except (TypeError, ValueError):
        return []


def _to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode()
    return str(value)


def to_string_slice(value: Any) -> list[str]:
    """Convert to a list of strings; a string is read as one CSV record."""
    if isinstance(value, str):
        try:
            return next(csv.reader(io.StringIO(value)), [])
        except csv.Error:
            return []
    if isinstance(value, (list, tuple)):
        return [_to_string(item) for item in value]
    return []


def _jsonify(value: Any) -> Any:
    if isinstance(value, (str, bytes, bytearray)):
        try:
            return json.loads(value)
        except (ValueError, UnicodeDecodeError):
            return value
    return value


def _keys_to_strings(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(key): _keys_to_strings(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_keys_to_strings(item) for item in value]
    return value


def _unflatten(flat: dict[str, Any], delim: str) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in flat.items():
        parts = key.split(delim) if delim else [key]
        current = out
        for part in parts[:-1]:
            sub = current.setdefault(part, {})
            if isinstance(sub, dict):
                current = sub
        current[parts[-1]] = value
    return out


class KoanfConfmap:
    """A source built from (key, value) pairs with dotted keys.

    String and bytes values holding valid JSON are decoded.
    """

    def __init__(self, tuples: Iterable[tuple[str, Any]]) -> None:
        self._tuples = [(key, _jsonify(value)) for key, value in tuples]

    def read(self) -> dict[str, Any]:
        values = {key: value for key, value in self._tuples}
        return _unflatten(_keys_to_strings(copy.deepcopy(values)), DELIMITER)


def _parse_json(data: bytes) -> Any:
    return json.loads(data)


def _parse_yaml(data: bytes) -> Any:
    return yaml.safe_load(data)


def _parse_toml(data: bytes) -> Any:
    return tomllib.loads(data.decode("utf-8"))


_PARSERS = {
    ".toml": _parse_toml,
    ".json": _parse_json,
    ".yaml": _parse_yaml,
    ".yml": _parse_yaml,
}


def _as_mapping(parsed: Any) -> dict[str, Any]:
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError("configuration document must be an object")
    return parsed


class KoanfFile:
    """A configuration file in JSON, YAML or TOML, optionally nested under a key."""

    def __init__(self, path: str, sub_key: str = "") -> None:
        ext = os.path.splitext(path)[1]
        parser = _PARSERS.get(ext)
        if parser is None:
            raise ValueError(f"unknown config file extension: {ext}")
        self.path = os.path.normpath(path)
        self.sub_key = sub_key
        self._parser = parser

    def read(self) -> dict[str, Any]:
        """Read and parse the file, wrapping it under sub_key if one is set."""
        with open(self.path, "rb") as handle:
            data = handle.read()
        value: dict[str, Any] = _as_mapping(self._parser(data))
        if not self.sub_key:
            return value
        for key in reversed(self.sub_key.split(DELIMITER)):
            value = {key: value}
        return value


class KoanfMemory:
    """A configuration source holding a JSON document in memory."""

    def __init__(self, doc: bytes | str) -> None:
        self._doc = doc

    def set_doc(self, doc: bytes | str) -> None:
        self._doc = doc

    def read(self) -> dict[str, Any]:
        parsed = json.loads(self._doc)
        if not isinstance(parsed, dict):
            raise ValueError("configuration document must be an object")
        return parsed


def _sequence(values: Sequence[Any]) -> list[Any]:
    return list(values)