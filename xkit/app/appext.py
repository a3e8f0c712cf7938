"""Named-application helpers: per-app directories, port, log level and interceptors."""

from __future__ import annotations

import logging
import os
import re
import threading
from collections.abc import Callable
from typing import Any

from xkit.app.env import EnvContainer, cache_dir_path, config_dir_path, data_dir_path

RunFunc = Callable[..., Any]
Interceptor = Callable[[RunFunc], RunFunc]

_APP_NAME_RE = re.compile(r"[a-zA-Z0-9_-]+")
_DIGITS_RE = re.compile(r"[0-9]+")
_MAX_PORT = 0xFFFF


def _validate_app_name(app_name: str) -> None:
    if not app_name:
        raise ValueError("empty application name")
    if not _APP_NAME_RE.fullmatch(app_name):
        raise ValueError(f"invalid application name: {app_name}")


def _env_prefix(app_name: str) -> str:
    return app_name.replace("-", "_").upper() + "_"


class NameContainer:
    """Environment-derived settings for an application with a given name.

    The name foo-bar maps to the environment variable prefix FOO_BAR_.
    """

    def __init__(self, env_container: EnvContainer, app_name: str) -> None:
        _validate_app_name(app_name)
        self._env = env_container
        self._app_name = app_name
        self._lock = threading.Lock()
        self._dirs: dict[str, str] = {}
        self._port: tuple[int, ValueError | None] | None = None

    @property
    def app_name(self) -> str:
        return self._app_name

    def _dir_path(self, env_suffix: str, base: Callable[[EnvContainer], str]) -> str:
        with self._lock:
            if env_suffix not in self._dirs:
                path = self._env.env(_env_prefix(self._app_name) + env_suffix)
                if not path:
                    try:
                        path = os.path.join(base(self._env), self._app_name)
                    except LookupError:
                        path = ""
                self._dirs[env_suffix] = path
            return self._dirs[env_suffix]

    def config_dir_path(self) -> str:
        """$APP_NAME_CONFIG_DIR, else the config directory joined with the app name."""
        return self._dir_path("CONFIG_DIR", config_dir_path)

    def cache_dir_path(self) -> str:
        """$APP_NAME_CACHE_DIR, else the cache directory joined with the app name."""
        return self._dir_path("CACHE_DIR", cache_dir_path)

    def data_dir_path(self) -> str:
        """$APP_NAME_DATA_DIR, else the data directory joined with the app name."""
        return self._dir_path("DATA_DIR", data_dir_path)

    def _parse_port(self) -> int:
        raw = self._env.env(_env_prefix(self._app_name) + "PORT")
        if not raw:
            raw = self._env.env("PORT")
            if not raw:
                return 0
        if not _DIGITS_RE.fullmatch(raw):
            raise ValueError(f'could not parse port "{raw}" to uint16: invalid syntax')
        value = int(raw, 10)
        if value > _MAX_PORT:
            raise ValueError(f'could not parse port "{raw}" to uint16: value out of range')
        return value

    def port(self) -> int:
        """$APP_NAME_PORT, else $PORT, else 0; raises ValueError if unparsable."""
        with self._lock:
            if self._port is None:
                try:
                    self._port = (self._parse_port(), None)
                except ValueError as err:
                    self._port = (0, err)
        value, err = self._port
        if err is not None:
            raise err
        return value


def get_log_level(default_level: int, debug: bool, no_warn: bool) -> int:
    """Pick the logging level from the --debug and --no-warn flags."""
    if debug and no_warn:
        raise ValueError("cannot set both --debug and --no-warn")
    if no_warn:
        return logging.ERROR
    if debug:
        return logging.DEBUG
    return default_level


def chain_interceptors(*args: Interceptor | None) -> Interceptor | None:
    """Combine interceptors into one; they apply in the order given."""
    filtered = [interceptor for interceptor in args if interceptor is not None]
    if not filtered:
        return None
    if len(filtered) == 1:
        return filtered[0]
    first, rest = filtered[0], filtered[1:]

    def chained(next_func: RunFunc) -> RunFunc:
        for interceptor in reversed(rest):
            next_func = interceptor(next_func)
        return first(next_func)

    return chained