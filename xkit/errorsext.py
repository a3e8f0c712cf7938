"""Structured errors with a reason, a user-facing message, details and a cause.

Each error kind maps to a well-known class of failure (not found, permission
denied, ...). Matching follows the same rules everywhere: a target matches
when every non-empty field it sets (reason, message, cause) agrees.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any


def _chain(err: BaseException | None) -> Iterator[BaseException]:
    """Yield err and every error it was caused by, guarding against cycles."""
    seen: set[int] = set()
    current = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def _find(err: BaseException | None, kind: type[XError]) -> XError | None:
    return next((e for e in _chain(err) if isinstance(e, kind)), None)


class XError(Exception):
    """An error carrying a reason code, a readable message, details and a cause."""

    def __init__(
        self,
        reason: str,
        message: str,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message
        self._details: dict[str, Any] = {}
        self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        """The original error, if any."""
        return self.__cause__

    @property
    def details(self) -> dict[str, Any]:
        """A copy of the extra details attached to the error."""
        return dict(self._details)

    def with_message(self, message: str) -> None:
        """Replace the message."""
        self.message = message

    def with_details(self, details: Mapping[str, Any]) -> None:
        """Merge details into the error's details."""
        self._details.update(details)

    def _fields_match(self, target: BaseException | None) -> bool:
        found = _find(target, XError)
        if found is None:
            return False
        if found.reason and found.reason != self.reason:
            return False
        if found.message and found.message != self.message:
            return False
        if found.cause is not None and not is_error(self.cause, found.cause):
            return False
        return True

    def matches(self, target: BaseException | None) -> bool:
        """True if target holds an error of this kind whose set fields agree."""
        kind = type(self)
        if kind is XError:
            return self._fields_match(target)
        found = _find(target, kind)
        if found is None:
            return False
        return self._fields_match(found)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"reason={self.reason} message={self.message} cause={self.cause}"
        return f"reason={self.reason} message={self.message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(reason={self.reason!r}, "
            f"message={self.message!r}, cause={self.cause!r})"
        )


class AlreadyExistsError(XError):
    """The resource already exists (HTTP 409)."""


class DeadlineExceededError(XError):
    """The operation timed out (HTTP 408)."""


class InternalError(XError):
    """An internal error, not meant to be shown to users (HTTP 500)."""

    def __str__(self) -> str:
        return f"InternalError: reason={self.reason}, message={self.message}"


class InvalidArgumentError(XError):
    """A request argument is missing or malformed (HTTP 400)."""


class NotFoundError(XError):
    """The requested resource does not exist (HTTP 404)."""


class PermissionDeniedError(XError):
    """The caller may not perform the operation (HTTP 403)."""


class PreconditionFailedError(XError):
    """A precondition of the operation is not met (HTTP 412)."""


class ResourceExhaustedError(XError):
    """A quota or resource is exhausted (HTTP 429)."""


class UnauthenticatedError(XError):
    """The caller is not authenticated (HTTP 401)."""


class UnavailableError(XError):
    """The service or resource is unavailable (HTTP 503)."""


class UnimplementedError(XError):
    """The operation is not implemented (HTTP 501)."""


class UnknownError(XError):
    """An unrecognised error (HTTP 500)."""


def is_error(err: BaseException | None, target: BaseException | None) -> bool:
    """True if err, or any error in its cause chain, is or matches target."""
    if err is None or target is None:
        return err is target
    for current in _chain(err):
        if current is target:
            return True
        if isinstance(current, XError):
            if current.matches(target) or current._fields_match(target):
                return True
    return False


def is_xerror(err: BaseException | None) -> bool:
    return _find(err, XError) is not None


def is_already_exists(err: BaseException | None) -> bool:
    return _find(err, AlreadyExistsError) is not None


def is_deadline_exceeded(err: BaseException | None) -> bool:
    return _find(err, DeadlineExceededError) is not None


def is_internal(err: BaseException | None) -> bool:
    return _find(err, InternalError) is not None


def is_invalid_argument(err: BaseException | None) -> bool:
    return _find(err, InvalidArgumentError) is not None


def is_not_found(err: BaseException | None) -> bool:
    return _find(err, NotFoundError) is not None


def is_permission_denied(err: BaseException | None) -> bool:
    return _find(err, PermissionDeniedError) is not None


def is_precondition_failed(err: BaseException | None) -> bool:
    return _find(err, PreconditionFailedError) is not None


def is_resource_exhausted(err: BaseException | None) -> bool:
    return _find(err, ResourceExhaustedError) is not None


def is_unauthenticated(err: BaseException | None) -> bool:
    return _find(err, UnauthenticatedError) is not None


def is_unavailable(err: BaseException | None) -> bool:
    return _find(err, UnavailableError) is not None


def is_unimplemented(err: BaseException | None) -> bool:
    return _find(err, UnimplementedError) is not None


def is_unknown(err: BaseException | None) -> bool:
    return _find(err, UnknownError) is not None