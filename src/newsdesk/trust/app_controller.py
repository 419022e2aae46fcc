"""Composition root of the harness.

Usage:
    controller = AppController.for_app(app)
    await controller.db_user().setup_user().username("alice").password("secret").create()
    session = await controller.login().username("alice").password("secret").authenticate()
    verifier = await controller.account_update_author(session).author_name("Alice").execute()
    verifier.status(303).header_location("/account").verify()
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from .config import TrustSettings
from .contracts import ArticleRepository, UserRepository, bcrypt_hasher
from .dispatcher import Dispatcher, Router, WsgiRouter
from .flows import (
    AccountUpdateFlow,
    AdminController,
    ChangePasswordFlow,
    CreateArticleFlow,
    LoginFlow,
    WebFlow,
)
from .session import SessionContext
from .state_verifier import DbArticleController, DbUserController

logger = logging.getLogger(__name__)


class AppController:
    """One factory per flow; every call returns a fresh, independent flow.

    The controller itself holds no mutable state, so one instance can serve
    any number of flows in a test, concurrently or not.
    """

    def __init__(
        self,
        router: Router,
        users: UserRepository,
        articles: ArticleRepository,
        settings: Optional[TrustSettings] = None,
        password_hasher: Optional[Callable[[str], str]] = None,
    ):
        self.settings = settings or TrustSettings.from_env()
        self.dispatcher = Dispatcher(router, self.settings)
        self._users = users
        self._articles = articles
        self._hasher = password_hasher or bcrypt_hasher(self.settings.bcrypt_rounds)

    @classmethod
    def for_app(cls, app, settings: Optional[TrustSettings] = None) -> "AppController":
        """Wire the controller to a Flask app and its database."""
        from ..repositories import SqlArticleRepository, SqlUserRepository

        settings = settings or TrustSettings.from_env()
        logger.debug(f"Harness for {app.name} at {settings.base_url}")
        return cls(
            WsgiRouter(app, settings.base_url),
            SqlUserRepository(app),
            SqlArticleRepository(app),
            settings,
        )

    def login(self) -> LoginFlow:
        return LoginFlow(self.dispatcher)

    def create_article(self, session: SessionContext) -> CreateArticleFlow:
        return CreateArticleFlow(self.dispatcher, session)

    def change_password(self, session: SessionContext) -> ChangePasswordFlow:
        return ChangePasswordFlow(self.dispatcher, session)

    def account_update_author(self, session: SessionContext) -> AccountUpdateFlow:
        return AccountUpdateFlow(self.dispatcher, session)

    def admin(self, session: SessionContext) -> AdminController:
        return AdminController(self.dispatcher, session)

    def web(self, session: Optional[SessionContext] = None) -> WebFlow:
        return WebFlow(self.dispatcher, session)

    def db_user(self) -> DbUserController:
        return DbUserController(self._users, self._hasher, self.settings.body_excerpt)

    def db_article(self) -> DbArticleController:
        return DbArticleController(self._articles, self.settings.body_excerpt)
