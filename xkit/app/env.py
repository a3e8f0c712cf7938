"""Environment variable access, device paths and per-user directories."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable, Iterator, Mapping

if sys.platform == "win32":
    DEV_STDIN_FILE_PATH = ""
    DEV_STDOUT_FILE_PATH = ""
    DEV_STDERR_FILE_PATH = ""
    DEV_NULL_FILE_PATH = "nul"
else:
    DEV_STDIN_FILE_PATH = "/dev/stdin"
    DEV_STDOUT_FILE_PATH = "/dev/stdout"
    DEV_STDERR_FILE_PATH = "/dev/stderr"
    DEV_NULL_FILE_PATH = "/dev/null"

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class EnvContainer:
    """An immutable set of environment variables; empty values are dropped."""

    def __init__(self, variables: Mapping[str, str] | None = None) -> None:
        self._variables: dict[str, str] = {
            key: value for key, value in (variables or {}).items() if value
        }

    def env(self, key: str) -> str:
        """Return the value for key, or "" if it is unset or empty."""
        return self._variables.get(key, "")

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield every (key, value) pair; values are never empty."""
        for key, value in self._variables.items():
            if value:
                yield key, value

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        return f"EnvContainer(<{len(self._variables)} variables>)"


def env_container_from_environ(environ: Iterable[str]) -> EnvContainer:
    """Build an EnvContainer from "KEY=VALUE" strings."""
    variables: dict[str, str] = {}
    for elem in environ:
        if "=" not in elem:
            # The entry itself is not shown, as it may hold a secret.
            raise ValueError("environment variable does not contain =")
        key, value = elem.split("=", 1)
        if value:
            variables[key] = value
    return EnvContainer(variables)


def env_container_for_os() -> EnvContainer:
    """Build an EnvContainer from the process environment."""
    return EnvContainer(dict(os.environ))


def env_container_with_overrides(
    env_container: EnvContainer, overrides: Mapping[str, str]
) -> EnvContainer:
    """Copy env_container with overrides applied; "" unsets a key."""
    variables = environ_map(env_container)
    variables.update(overrides)
    return EnvContainer(variables)


def environ(env_container: EnvContainer) -> list[str]:
    """Return all variables as sorted "KEY=VALUE" strings."""
    return sorted(f"{key}={value}" for key, value in env_container.items())


def environ_map(env_container: EnvContainer) -> dict[str, str]:
    """Return all variables as a dict with no empty values."""
    return {key: value for key, value in env_container.items() if value}


def env_bool(env_container: EnvContainer, key: str, default: bool) -> bool:
    """Parse the variable as a boolean, returning default when unset."""
    value = env_container.env(key)
    if not value:
        return default
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean value {value!r} for {key}")


def is_dev_stdin(path: str) -> bool:
    return bool(path) and path == DEV_STDIN_FILE_PATH


def is_dev_stdout(path: str) -> bool:
    return bool(path) and path == DEV_STDOUT_FILE_PATH


def is_dev_stderr(path: str) -> bool:
    return bool(path) and path == DEV_STDERR_FILE_PATH


def is_dev_null(path: str) -> bool:
    return bool(path) and path == DEV_NULL_FILE_PATH


def is_dev_path(path: str) -> bool:
    """True if path is the stdin, stdout, stderr or null device."""
    return (
        is_dev_stdin(path)
        or is_dev_stdout(path)
        or is_dev_stderr(path)
        or is_dev_null(path)
    )


def _is_windows() -> bool:
    return sys.platform == "win32"


def _required(env_container: EnvContainer, key: str, label: str) -> str:
    value = env_container.env(key)
    if not value:
        raise LookupError(f"{label} is not set")
    return value


def _xdg_dir_path(env_container: EnvContainer, key: str, *fallback: str) -> str:
    value = env_container.env(key)
    if value:
        return value
    home = env_container.env("HOME")
    if home:
        return os.path.join(home, *fallback)
    raise LookupError(f"${key} and $HOME are not set")


def home_dir_path(env_container: EnvContainer) -> str:
    """$HOME, or %USERPROFILE% on Windows."""
    if _is_windows():
        return _required(env_container, "USERPROFILE", "%USERPROFILE%")
    return _required(env_container, "HOME", "$HOME")


def cache_dir_path(env_container: EnvContainer) -> str:
    """$XDG_CACHE_HOME or $HOME/.cache, or %LocalAppData% on Windows."""
    if _is_windows():
        return _required(env_container, "LOCALAPPDATA", "%LocalAppData%")
    return _xdg_dir_path(env_container, "XDG_CACHE_HOME", ".cache")


def config_dir_path(env_container: EnvContainer) -> str:
    """$XDG_CONFIG_HOME or $HOME/.config, or %AppData% on Windows."""
    if _is_windows():
        return _required(env_container, "APPDATA", "%AppData%")
    return _xdg_dir_path(env_container, "XDG_CONFIG_HOME", ".config")


def data_dir_path(env_container: EnvContainer) -> str:
    """$XDG_DATA_HOME or $HOME/.local/share, or %LocalAppData% on Windows."""
    if _is_windows():
        return _required(env_container, "LOCALAPPDATA", "%LocalAppData%")
    return _xdg_dir_path(env_container, "XDG_DATA_HOME", ".local", "share")