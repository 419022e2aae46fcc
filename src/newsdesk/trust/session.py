"""Authenticated actors.

A SessionContext holds the cookie a login answered with and the username it
was issued for. Contexts are immutable: logging in again yields a new one,
so several actors (or several sessions of one actor) can be used
interleaved.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from .assembler import AssembledRequest, Encoding, RequestShape, assemble, form_fields
from .data import LoginData
from .errors import AuthenticationError, MissingCredentialError, Unauthenticated

if TYPE_CHECKING:
    from .dispatcher import CapturedResponse, Dispatcher

logger = logging.getLogger(__name__)

LOGIN_SHAPE = RequestShape("POST", "/login", Encoding.URLENCODED, form_fields("username", "password"))


def cookie_pair(set_cookie: str) -> Optional[str]:
    """`name=value` of a Set-Cookie header, None for deletions."""
    pair = set_cookie.split(";", 1)[0].strip()
    name, sep, value = pair.partition("=")
    if not sep or not name.strip() or not value.strip().strip('"'):
        return None
    return f"{name.strip()}={value.strip()}"


@dataclass(frozen=True)
class SessionContext:
    username: Optional[str] = None
    credential: Optional[str] = None
    set_cookie: Tuple[str, ...] = ()

    @classmethod
    def empty(cls, username: str | None = None) -> "SessionContext":
        return cls(username=username)

    @property
    def is_authenticated(self) -> bool:
        return self.credential is not None

    def attach(self, request: AssembledRequest) -> AssembledRequest:
        """Return a copy of `request` carrying the session cookie."""
        if self.credential is None:
            raise Unauthenticated(f"No session for {self.username or 'anonymous'}; refusing to send {request.path}")
        return request.with_header("Cookie", self.credential)

    @classmethod
    def from_response(cls, username: str | None, response: CapturedResponse) -> "SessionContext":
        """Context from the Set-Cookie headers of `response` (may be empty)."""
        headers = tuple(response.header_all("Set-Cookie"))
        pairs = [pair for pair in (cookie_pair(header) for header in headers) if pair]
        if not pairs:
            return cls.empty(username)
        return cls(username=username, credential="; ".join(pairs), set_cookie=headers)

    @classmethod
    def from_login_response(cls, username: str | None, response: CapturedResponse) -> "SessionContext":
        """Like from_response, but a failed login raises.

        Raises:
            AuthenticationError: status is neither 2xx nor 3xx
            MissingCredentialError: success status without a session cookie
        """
        if not (response.is_success or response.is_redirect):
            logger.warning(f"Login for {username} answered {response.status}")
            raise AuthenticationError(response.status)

        context = cls.from_response(username, response)
        if not context.is_authenticated:
            raise MissingCredentialError(response.status)

        logger.debug(f"Session established for {username}")
        return context

    @classmethod
    async def authenticate(cls, dispatcher: Dispatcher, credentials: LoginData) -> "SessionContext":
        """Log in through the login form and return the new context."""
        response = await dispatcher.dispatch(assemble(credentials, LOGIN_SHAPE))
        return cls.from_login_response(credentials.username, response)
