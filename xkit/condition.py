"""Expression-style conditionals: ternaries, if/else chains and switches."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def ternary(condition: bool, if_output: T, else_output: T) -> T:
    """Return if_output when condition holds, else else_output."""
    return if_output if condition else else_output


def ternary_f(condition: bool, if_func: Callable[[], T], else_func: Callable[[], T]) -> T:
    """Call and return if_func when condition holds, else else_func."""
    return if_func() if condition else else_func()


class IfElse(Generic[T]):
    """A chain of conditions; the first one that holds decides the result."""

    def __init__(self, result: T | None = None, done: bool = False) -> None:
        self._result = result
        self._done = done

    def else_if(self, condition: bool, result: T) -> IfElse[T]:
        if not self._done and condition:
            self._result = result
            self._done = True
        return self

    def else_if_f(self, condition: bool, result_f: Callable[[], T]) -> IfElse[T]:
        if not self._done and condition:
            self._result = result_f()
            self._done = True
        return self

    def else_(self, result: T) -> T:
        return self._result if self._done else result  # type: ignore[return-value]

    def else_f(self, result_f: Callable[[], T]) -> T:
        return self._result if self._done else result_f()  # type: ignore[return-value]


def if_(condition: bool, result: T) -> IfElse[T]:
    """Start an if/else chain."""
    return IfElse(result, True) if condition else IfElse()


def if_f(condition: bool, result_f: Callable[[], T]) -> IfElse[T]:
    """Start an if/else chain whose result is computed only when needed."""
    return IfElse(result_f(), True) if condition else IfElse()


class SwitchCase(Generic[T, R]):
    """Compare a predicate with cases; the first equal case decides the result."""

    def __init__(self, predicate: T) -> None:
        self._predicate = predicate
        self._result: Any = None
        self._done = False

    def case(self, value: T, result: R) -> SwitchCase[T, R]:
        if not self._done and self._predicate == value:
            self._result = result
            self._done = True
        return self

    def case_f(self, value: T, callback: Callable[[], R]) -> SwitchCase[T, R]:
        if not self._done and self._predicate == value:
            self._result = callback()
            self._done = True
        return self

    def default(self, result: R) -> R:
        if not self._done:
            self._result = result
        return self._result

    def default_f(self, callback: Callable[[], R]) -> R:
        if not self._done:
            self._result = callback()
        return self._result


def switch(predicate: T) -> SwitchCase[T, Any]:
    """Start a switch on predicate."""
    return SwitchCase(predicate)