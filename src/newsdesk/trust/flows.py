"""Domain flows: a builder plus the request shape and dispatcher to run it."""
from __future__ import annotations

import logging
from typing import Optional

from .assembler import AssembledRequest, Encoding, RequestShape, assemble, form_fields
from .data import (
    AccountUpdateFluent,
    AdminArticleFluent,
    AdminUserFluent,
    ArticleFluent,
    ChangePasswordFluent,
    LoginFluent,
)
from .dispatcher import CapturedResponse, Dispatcher
from .fluent import Fluent, S
from .response_verifier import LoginResponseVerifier, ResponseVerifier
from .session import LOGIN_SHAPE, SessionContext

logger = logging.getLogger(__name__)

ARTICLE_SHAPE = RequestShape(
    "POST",
    "/create",
    Encoding.MULTIPART,
    form_fields(
        "title", "author", "category", "short_text", "text", "related_articles",
        "image_desc", ("main", "is_main"), ("exclusive", "is_exclusive"), "image",
    ),
    required_files=("image",),
)
CHANGE_PASSWORD_SHAPE = RequestShape("POST", "/change-password", Encoding.URLENCODED, form_fields("new_password"))
ACCOUNT_UPDATE_SHAPE = RequestShape("POST", "/account/update-author", Encoding.URLENCODED, form_fields("author_name"))
ADMIN_CREATE_USER_SHAPE = RequestShape(
    "POST", "/admin_user/create", Encoding.URLENCODED, form_fields("username", "author_name", "password")
)
ADMIN_DELETE_USER_SHAPE = RequestShape("POST", "/admin_user/delete/{username}", Encoding.EMPTY)
ADMIN_DELETE_ARTICLE_SHAPE = RequestShape("POST", "/admin_article/delete/{article_file_name}", Encoding.EMPTY)


class Flow(Fluent[S]):
    """Run the snapshot of this builder as one request.

    With a session the request is sent as that actor; an empty session
    raises Unauthenticated before anything is dispatched.
    """

    shape: RequestShape

    def __init__(self, dispatcher: Dispatcher, session: Optional[SessionContext] = None):
        super().__init__()
        self._dispatcher = dispatcher
        self._session = session

    def request(self) -> AssembledRequest:
        request = assemble(self.snapshot(), self.shape)
        if self._session is not None:
            request = self._session.attach(request)
        return request

    async def send(self) -> CapturedResponse:
        return await self._dispatcher.dispatch(self.request())

    async def execute(self) -> ResponseVerifier:
        response = await self.send()
        return ResponseVerifier(
            response,
            subject=f"{self.shape.method} {self.shape.path}",
            excerpt=self._dispatcher.settings.body_excerpt,
        )


class LoginFlow(Flow, LoginFluent):
    shape = LOGIN_SHAPE

    async def execute(self) -> LoginResponseVerifier:
        response = await self.send()
        return LoginResponseVerifier(
            response, self.snapshot().username, excerpt=self._dispatcher.settings.body_excerpt
        )

    async def authenticate(self) -> SessionContext:
        """Log in; raise AuthenticationError unless a session was established."""
        return await SessionContext.authenticate(self._dispatcher, self.snapshot())


class CreateArticleFlow(Flow, ArticleFluent):
    shape = ARTICLE_SHAPE


class ChangePasswordFlow(Flow, ChangePasswordFluent):
    shape = CHANGE_PASSWORD_SHAPE


class AccountUpdateFlow(Flow, AccountUpdateFluent):
    shape = ACCOUNT_UPDATE_SHAPE


class AdminCreateUserFlow(Flow, AdminUserFluent):
    shape = ADMIN_CREATE_USER_SHAPE


class AdminDeleteUserFlow(Flow, AdminUserFluent):
    shape = ADMIN_DELETE_USER_SHAPE


class AdminDeleteArticleFlow(Flow, AdminArticleFluent):
    shape = ADMIN_DELETE_ARTICLE_SHAPE


class AdminController:
    """Admin-only flows, all sent as `session`."""

    def __init__(self, dispatcher: Dispatcher, session: SessionContext):
        self._dispatcher = dispatcher
        self._session = session

    def create_user(self) -> AdminCreateUserFlow:
        return AdminCreateUserFlow(self._dispatcher, self._session)

    def delete_user(self) -> AdminDeleteUserFlow:
        return AdminDeleteUserFlow(self._dispatcher, self._session)

    def delete_article(self) -> AdminDeleteArticleFlow:
        return AdminDeleteArticleFlow(self._dispatcher, self._session)


class WebFlow:
    """Plain GET requests, anonymous or as `session`."""

    def __init__(self, dispatcher: Dispatcher, session: Optional[SessionContext] = None):
        self._dispatcher = dispatcher
        self._session = session

    async def get_url(self, path: str) -> ResponseVerifier:
        request = AssembledRequest("GET", path)
        if self._session is not None:
            request = self._session.attach(request)
        response = await self._dispatcher.dispatch(request)
        return ResponseVerifier(response, subject=f"GET {path}", excerpt=self._dispatcher.settings.body_excerpt)
