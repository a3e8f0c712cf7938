"""Errors that carry a process exit code."""

from __future__ import annotations


class AppError(Exception):
    """An error with a non-zero exit code."""

    def __init__(self, exit_code: int, err: BaseException | None) -> None:
        if exit_code == 0:
            err = RuntimeError(
                f"got invalid exit code {exit_code} when constructing AppError "
                f"(original error was {err})"
            )
            exit_code = 1
        if err is None:
            err = RuntimeError("got no error when constructing AppError")
        super().__init__(str(err))
        self.exit_code = exit_code
        self.err = err
        self.__cause__ = err

    def __str__(self) -> str:
        return str(self.err)


def new_error(exit_code: int, message: str) -> AppError:
    """Return an AppError with the given exit code and message."""
    return AppError(exit_code, RuntimeError(message))


def wrap_error(exit_code: int, err: BaseException) -> AppError:
    """Return an AppError wrapping err."""
    return AppError(exit_code, err)


def get_exit_code(err: BaseException | None) -> int:
    """0 for None, the carried code for an AppError in the cause chain, else 1."""
    if err is None:
        return 0
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        if isinstance(current, AppError):
            return current.exit_code
        seen.add(id(current))
        current = current.__cause__
    return 1