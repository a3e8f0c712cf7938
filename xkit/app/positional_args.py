"""Validators for positional command arguments and shell completion directives."""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence


class PositionalArgsError(ValueError):
    """Raised when positional arguments do not satisfy a validator."""


class ShellCompDirective(enum.IntFlag):
    """Hints given to the shell alongside completion candidates."""

    DEFAULT = 0
    ERROR = 1
    NO_SPACE = 2
    NO_FILE_COMP = 4
    FILTER_FILE_EXT = 8
    FILTER_DIRS = 16
    KEEP_ORDER = 32


_Check = Callable[[list[str], list[str]], None]


class PositionalArgs:
    """A validator for the positional arguments of a command."""

    def __init__(self, check: _Check) -> None:
        self._check = check

    def validate(
        self, args: Sequence[str], valid_args: Sequence[str] = ()
    ) -> list[str]:
        """Return the arguments as a list, or raise PositionalArgsError."""
        checked = list(args)
        self._check(checked, list(valid_args))
        return checked


def _no_args(args: list[str], valid_args: list[str]) -> None:
    if args:
        raise PositionalArgsError(f'unknown command "{args[0]}"')


def _only_valid_args(args: list[str], valid_args: list[str]) -> None:
    if not valid_args:
        return
    allowed = {value.split("\t", 1)[0] for value in valid_args}
    for arg in args:
        if arg not in allowed:
            raise PositionalArgsError(f'invalid argument "{arg}"')


def _arbitrary_args(args: list[str], valid_args: list[str]) -> None:
    return None


NO_ARGS = PositionalArgs(_no_args)
ONLY_VALID_ARGS = PositionalArgs(_only_valid_args)
ARBITRARY_ARGS = PositionalArgs(_arbitrary_args)


def minimum_n_args(n: int) -> PositionalArgs:
    """Require at least n arguments."""

    def check(args: list[str], valid_args: list[str]) -> None:
        if len(args) < n:
            raise PositionalArgsError(
                f"requires at least {n} arg(s), only received {len(args)}"
            )

    return PositionalArgs(check)


def maximum_n_args(n: int) -> PositionalArgs:
    """Allow at most n arguments."""

    def check(args: list[str], valid_args: list[str]) -> None:
        if len(args) > n:
            raise PositionalArgsError(
                f"accepts at most {n} arg(s), received {len(args)}"
            )

    return PositionalArgs(check)


def exact_args(n: int) -> PositionalArgs:
    """Require exactly n arguments."""

    def check(args: list[str], valid_args: list[str]) -> None:
        if len(args) != n:
            raise PositionalArgsError(f"accepts {n} arg(s), received {len(args)}")

    return PositionalArgs(check)


def range_args(minimum: int, maximum: int) -> PositionalArgs:
    """Require between minimum and maximum arguments, inclusive."""

    def check(args: list[str], valid_args: list[str]) -> None:
        if len(args) < minimum or len(args) > maximum:
            raise PositionalArgsError(
                f"accepts between {minimum} and {maximum} arg(s), "
                f"received {len(args)}"
            )

    return PositionalArgs(check)


def match_all(*args: PositionalArgs) -> PositionalArgs:
    """Require every given validator to pass, checked in order."""
    validators = tuple(args)

    def check(values: list[str], valid_args: list[str]) -> None:
        for validator in validators:
            validator.validate(values, valid_args)

    return PositionalArgs(check)