"""In-process request dispatch.

The dispatcher performs exactly one request/response cycle against a router.
Application 4xx/5xx answers are returned as responses; only malformed
requests and router crashes raise.
"""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

import anyio
import httpx

from .assembler import AssembledRequest
from .config import DEFAULT_BASE_URL, TrustSettings
from .errors import CollaboratorError, DispatchError, TrustError
from .report import clip

logger = logging.getLogger(__name__)

# RFC 9110 token (methods, header names)
TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
FORBIDDEN_CHARS = ("\r", "\n", "\x00")


@dataclass(frozen=True)
class CapturedResponse:
    """A response with its body fully read into memory."""

    status: int
    headers: Tuple[Tuple[str, str], ...] = ()
    body: bytes = b""

    def header(self, name: str) -> Optional[str]:
        values = self.header_all(name)
        return values[0] if values else None

    def header_all(self, name: str) -> List[str]:
        return [value for key, value in self.headers if key.lower() == name.lower()]

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status < 400


class Router(ABC):
    """Anything that can answer an assembled request without a socket."""

    @abstractmethod
    async def handle(self, request: AssembledRequest) -> CapturedResponse:
        """Handle one request.

        Returns:
            The captured response, whatever its status.
        """
        pass


class WsgiRouter(Router):
    """Drive a WSGI application (the Flask app) in a worker thread.

    Each call uses a fresh httpx client: no redirects are followed and no
    cookie jar survives between requests, so session state only travels in
    the headers the caller attaches.
    """

    def __init__(self, app, base_url: str = DEFAULT_BASE_URL):
        self.app = app
        self.base_url = base_url

    async def handle(self, request: AssembledRequest) -> CapturedResponse:
        return await anyio.to_thread.run_sync(self._send, request)

    def _send(self, request: AssembledRequest) -> CapturedResponse:
        transport = httpx.WSGITransport(app=self.app)
        with httpx.Client(transport=transport, base_url=self.base_url, follow_redirects=False) as client:
            response = client.request(
                request.method,
                request.path,
                headers=list(request.headers),
                content=request.body,
            )
            return CapturedResponse(
                status=response.status_code,
                headers=tuple(response.headers.multi_items()),
                body=response.content,
            )


class Dispatcher:
    """Validate a request and hand it to the router exactly once."""

    def __init__(self, router: Router, settings: TrustSettings | None = None):
        self.router = router
        self.settings = settings or TrustSettings()

    async def dispatch(self, request: AssembledRequest) -> CapturedResponse:
        validate_request(request)
        logger.debug(f"Dispatching {request.method} {request.path} ({len(request.body)} bytes)")

        try:
            response = await self.router.handle(request)
        except TrustError:
            raise
        except Exception as exc:
            logger.error(f"Router failed on {request.method} {request.path}: {exc!r}")
            raise CollaboratorError(f"{request.method} {request.path}", exc) from exc

        logger.debug(f"{request.method} {request.path} -> {response.status}")
        if self.settings.log_bodies:
            logger.debug(f"Response body: {clip(response.text, self.settings.body_excerpt)!r}")
        return response


def validate_request(request: AssembledRequest):
    """Raise DispatchError for requests no server should be handed."""
    if not TOKEN.match(request.method or ""):
        raise DispatchError(f"Invalid method: {request.method!r}")

    if not request.path.startswith("/"):
        raise DispatchError(f"Path must be absolute: {request.path!r}")
    if any(char.isspace() or ord(char) < 0x20 or ord(char) == 0x7F for char in request.path):
        raise DispatchError(f"Path contains whitespace or control characters: {request.path!r}")

    for name, value in request.headers:
        if not TOKEN.match(name or ""):
            raise DispatchError(f"Invalid header name: {name!r}")
        if any(char in value for char in FORBIDDEN_CHARS):
            raise DispatchError(f"Invalid value for header {name}: {value!r}")
