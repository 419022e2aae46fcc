"""Queued assertions over one captured response."""
from __future__ import annotations

from typing import Callable, Iterable, List, Union

from .dispatcher import CapturedResponse
from .errors import MissingCredentialError
from .report import ABSENT, VerificationReport
from .session import SessionContext

Check = Callable[[VerificationReport], None]


def _as_bytes(value: Union[str, bytes]) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


class ResponseVerifier:
    """Chainable checks on status, headers and body.

    Checks are only queued by the fluent methods. `verify()` runs all of them
    in order and raises one ValidationError listing every mismatch.

    Usage:
        (await flow.execute()).status(303).header_location("/account").verify()
    """

    def __init__(self, response: CapturedResponse, subject: str = "response", excerpt: int = 200):
        self.response = response
        self.subject = subject
        self.excerpt = excerpt
        self._checks: List[Check] = []

    def _queue(self, check: Check) -> "ResponseVerifier":
        self._checks.append(check)
        return self

    def _actual_header(self, name: str):
        values = self.response.header_all(name)
        if not values:
            return ABSENT
        return values[0] if len(values) == 1 else values

    def status(self, expected: int) -> "ResponseVerifier":
        def check(report: VerificationReport):
            if self.response.status != expected:
                report.add("status", expected, self.response.status)
        return self._queue(check)

    def header(self, name: str, expected: str) -> "ResponseVerifier":
        """Some `name` header equals `expected`."""
        def check(report: VerificationReport):
            if expected not in self.response.header_all(name):
                report.add(f"header {name}", expected, self._actual_header(name))
        return self._queue(check)

    def header_contains(self, name: str, substrings: Union[str, Iterable[str]]) -> "ResponseVerifier":
        """Some `name` header contains every one of `substrings`."""
        wanted = [substrings] if isinstance(substrings, str) else list(substrings)

        def check(report: VerificationReport):
            values = self.response.header_all(name)
            if not any(all(part in value for part in wanted) for value in values):
                report.add(f"header {name} contains", wanted, self._actual_header(name))
        return self._queue(check)

    def header_location(self, path: str) -> "ResponseVerifier":
        return self.header("Location", path)

    def header_cookie(self, attributes: Union[str, Iterable[str]]) -> "ResponseVerifier":
        """Some Set-Cookie header carries all `attributes` (e.g. "HttpOnly")."""
        return self.header_contains("Set-Cookie", attributes)

    def body_contains(self, needle: Union[str, bytes]) -> "ResponseVerifier":
        def check(report: VerificationReport):
            if _as_bytes(needle) not in self.response.body:
                report.add("body contains", needle, self.response.text)
        return self._queue(check)

    def body_equals(self, expected: Union[str, bytes]) -> "ResponseVerifier":
        def check(report: VerificationReport):
            if self.response.body != _as_bytes(expected):
                report.add("body", expected, self.response.text)
        return self._queue(check)

    def report(self) -> VerificationReport:
        """Run the queued checks without raising."""
        report = VerificationReport(self.subject, self.excerpt)
        for check in self._checks:
            check(report)
        return report

    def verify(self) -> CapturedResponse:
        self.report().check()
        return self.response


class LoginResponseVerifier(ResponseVerifier):
    """Response checks for a login request; `verify()` yields the session."""

    def __init__(self, response: CapturedResponse, username: str | None, excerpt: int = 200):
        super().__init__(response, subject=f"login {username}", excerpt=excerpt)
        self.username = username

    def verify(self) -> SessionContext:
        """Run the checks, then return the session.

        A failed login yields an empty context; any use of it as an
        authenticated actor raises Unauthenticated.
        """
        super().verify()
        if not (self.response.is_success or self.response.is_redirect):
            return SessionContext.empty(self.username)

        context = SessionContext.from_response(self.username, self.response)
        if not context.is_authenticated:
            raise MissingCredentialError(self.response.status)
        return context
