"""Application container bundling environment, stdio and arguments, and the run loop."""

from __future__ import annotations

import io
import sys
import threading
from collections.abc import Callable, Iterator, Mapping
from typing import IO, Any, NoReturn

from xkit.app.env import EnvContainer, env_container_for_os
from xkit.app.errors import get_exit_code


class _DiscardWriter:
    """A writer that drops everything."""

    def write(self, data: Any) -> int:
        return len(data)

    def flush(self) -> None:
        pass


class _LockedWriter:
    """A writer that serialises writes with a lock."""

    def __init__(self, writer: Any) -> None:
        self._writer = writer
        self._lock = threading.Lock()

    def write(self, data: Any) -> int:
        with self._lock:
            result = self._writer.write(data)
        return len(data) if result is None else result

    def flush(self) -> None:
        flush = getattr(self._writer, "flush", None)
        if flush is not None:
            with self._lock:
                flush()


def _locked(writer: Any) -> Any:
    if writer is None:
        writer = _DiscardWriter()
    if isinstance(writer, _LockedWriter):
        return writer
    return _LockedWriter(writer)


class Container:
    """Environment variables, stdin, stdout, stderr and arguments."""

    def __init__(
        self,
        env_container: EnvContainer,
        stdin: IO[Any] | None,
        stdout: Any,
        stderr: Any,
        args: tuple[str, ...] | list[str] = (),
    ) -> None:
        self.env_container = env_container
        self.stdin = stdin if stdin is not None else io.StringIO("")
        self.stdout = _locked(stdout)
        self.stderr = _locked(stderr)
        self.args: tuple[str, ...] = tuple(args)

    def env(self, key: str) -> str:
        """Return the environment value for key, or "" if unset."""
        return self.env_container.env(key)

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield every non-empty environment variable."""
        return self.env_container.items()


def new_container(
    env: Mapping[str, str] | None,
    stdin: IO[Any] | None,
    stdout: Any,
    stderr: Any,
    *args: str,
) -> Container:
    """Build a Container; missing stdio discards output and reads nothing."""
    return Container(EnvContainer(env), stdin, stdout, stderr, args)


def container_for_os() -> Container:
    """Build a Container from the running process."""
    return Container(
        env_container_for_os(), sys.stdin, sys.stdout, sys.stderr, tuple(sys.argv)
    )


def container_for_args(container: Container, *args: str) -> Container:
    """Copy container with the arguments replaced."""
    return Container(
        container.env_container,
        container.stdin,
        container.stdout,
        container.stderr,
        args,
    )


def _print_error(container: Container, err: BaseException) -> None:
    message = str(err)
    if message:
        container.stderr.write(message + "\n")


def run(container: Container, func: Callable[[Container], Any]) -> None:
    """Call func with container, printing any error to stderr before re-raising it."""
    try:
        func(container)
    except Exception as err:
        _print_error(container, err)
        raise


def main(func: Callable[[Container], Any]) -> NoReturn:
    """Run func against the OS container and exit with the matching exit code."""
    container = container_for_os()
    try:
        run(container, func)
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as err:
        sys.exit(get_exit_code(err))
    sys.exit(0)