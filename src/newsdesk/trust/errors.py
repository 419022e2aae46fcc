"""Exceptions raised by the trust harness.

Assembly and dispatch errors mean the test itself is broken and stop the
calling flow at once. ValidationError is the expected outcome of a failed
check and always carries the full report.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .report import VerificationReport


class TrustError(Exception):
    """Base class for all harness failures."""


class EncodingError(TrustError):
    """A snapshot could not be turned into a well-formed request."""


class DispatchError(TrustError):
    """A malformed request was handed to the dispatcher."""


class Unauthenticated(TrustError):
    """A credential was required but the session context is empty."""


class AuthenticationError(TrustError):
    """Login answered with a status that does not establish a session."""

    def __init__(self, status: int, message: str | None = None):
        self.status = status
        super().__init__(message or f"Authentication failed with status {status}")


class MissingCredentialError(AuthenticationError):
    """Login succeeded by status but no session cookie was set."""

    def __init__(self, status: int):
        super().__init__(status, f"Login answered {status} without a session cookie")


class ValidationError(TrustError):
    """One or more queued checks did not hold."""

    def __init__(self, report: VerificationReport):
        self.report = report
        super().__init__(report.message())


class CollaboratorError(TrustError):
    """A router or repository call raised."""

    def __init__(self, operation: str, cause: BaseException):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause!r}")
