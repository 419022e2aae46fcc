"""Checks and seeding of persisted records.

`must_see` compares the set fields of an expected snapshot against the
stored record, in the order they were set. `must_not_see` fails when the
record exists and reports every field of it.
"""
from __future__ import annotations

import logging
from dataclasses import fields
from typing import Any, Awaitable, Callable, Optional

from .contracts import Article, ArticleRepository, Role, User, UserRepository
from .data import ArticleRecordFluent, SetupUserFluent, UserFluent
from .errors import CollaboratorError, TrustError
from .fluent import Fluent, S
from .report import ABSENT, VerificationReport

logger = logging.getLogger(__name__)

Fetch = Callable[[str], Awaitable[Optional[Any]]]


async def call_collaborator(operation: str, func: Callable[..., Awaitable[Any]], *args) -> Any:
    """Await a repository call, wrapping its failures in CollaboratorError."""
    try:
        return await func(*args)
    except TrustError:
        raise
    except Exception as exc:
        logger.error(f"{operation} failed: {exc!r}")
        raise CollaboratorError(operation, exc) from exc


class RecordVerifier(Fluent[S]):
    """Expect a stored record matching the fields set on this builder."""

    subject = "record"

    def __init__(self, key: str, fetch: Fetch, excerpt: int = 200):
        super().__init__()
        self.key = key
        self._fetch = fetch
        self._excerpt = excerpt

    async def verify(self) -> Any:
        record = await call_collaborator(f"find {self.subject} {self.key}", self._fetch, self.key)
        expected = self.snapshot()

        report = VerificationReport(f"{self.subject} {self.key}", self._excerpt)
        if record is None:
            report.add("record", self.key, ABSENT)
        else:
            for name, value in expected.present().items():
                actual = getattr(record, name, ABSENT)
                if actual != value:
                    report.add(name, value, actual)
        report.check()
        return record


class AbsenceVerifier:
    """Expect no stored record under `key`."""

    def __init__(self, subject: str, key: str, fetch: Fetch, excerpt: int = 200):
        self.subject = subject
        self.key = key
        self._fetch = fetch
        self._excerpt = excerpt

    async def verify(self) -> None:
        record = await call_collaborator(f"find {self.subject} {self.key}", self._fetch, self.key)

        report = VerificationReport(f"{self.subject} {self.key} must not exist", self._excerpt)
        if record is not None:
            for item in fields(record):
                report.add(item.name, ABSENT, getattr(record, item.name))
        report.check()


class UserRecordVerifier(RecordVerifier, UserFluent):
    subject = "user"


class ArticleRecordVerifier(RecordVerifier, ArticleRecordFluent):
    subject = "article"


class UserSetup(SetupUserFluent):
    """Seed a user directly through the repository."""

    def __init__(self, users: UserRepository, hasher: Callable[[str], str], role: Role = Role.EDITOR):
        super().__init__()
        self._users = users
        self._hasher = hasher
        self.role(role)

    async def create(self) -> User:
        data = self.snapshot()
        if not data.username or data.password is None:
            raise ValueError("setup_user() needs username and password")

        user = User(
            username=data.username,
            author_name=data.author_name if data.author_name is not None else data.username,
            password_hash=self._hasher(data.password),
            needs_password_change=bool(data.needs_password_change),
            role=Role(data.role),
        )
        await call_collaborator(f"create user {user.username}", self._users.create, user)
        logger.info(f"Seeded {user.role.value} {user.username}")
        return user


class ArticleSetup(ArticleRecordFluent):
    """Seed an article directly through the repository."""

    def __init__(self, articles: ArticleRepository):
        super().__init__()
        self._articles = articles

    async def create(self) -> Article:
        data = self.snapshot()
        if not data.file_name or not data.title or not data.username:
            raise ValueError("setup_article() needs file_name, title and username")

        article = Article(
            file_name=data.file_name,
            title=data.title,
            author=data.author if data.author is not None else data.username,
            username=data.username,
            category=data.category or "",
            text=data.text or "",
            short_text=data.short_text or "",
            image_desc=data.image_desc or "",
            related_articles=data.related_articles or "",
            is_main=bool(data.is_main),
            is_exclusive=bool(data.is_exclusive),
        )
        await call_collaborator(f"create article {article.file_name}", self._articles.create, article)
        logger.info(f"Seeded article {article.file_name}")
        return article


class DbUserController:
    """Seed, inspect and delete users."""

    def __init__(self, users: UserRepository, hasher: Callable[[str], str], excerpt: int = 200):
        self._users = users
        self._hasher = hasher
        self._excerpt = excerpt

    def setup_user(self) -> UserSetup:
        return UserSetup(self._users, self._hasher)

    def setup_admin_user(self) -> UserSetup:
        return UserSetup(self._users, self._hasher, role=Role.ADMIN)

    def must_see(self, username: str) -> UserRecordVerifier:
        return UserRecordVerifier(username, self._users.find, self._excerpt)

    def must_not_see(self, username: str) -> AbsenceVerifier:
        return AbsenceVerifier("user", username, self._users.find, self._excerpt)

    async def find(self, username: str) -> Optional[User]:
        return await call_collaborator(f"find user {username}", self._users.find, username)

    async def delete(self, username: str) -> bool:
        return await call_collaborator(f"delete user {username}", self._users.delete, username)


class DbArticleController:
    """Seed, inspect and delete articles."""

    def __init__(self, articles: ArticleRepository, excerpt: int = 200):
        self._articles = articles
        self._excerpt = excerpt

    def setup_article(self) -> ArticleSetup:
        return ArticleSetup(self._articles)

    def must_see(self, file_name: str) -> ArticleRecordVerifier:
        return ArticleRecordVerifier(file_name, self._articles.find, self._excerpt)

    def must_not_see(self, file_name: str) -> AbsenceVerifier:
        return AbsenceVerifier("article", file_name, self._articles.find, self._excerpt)

    async def find(self, file_name: str) -> Optional[Article]:
        return await call_collaborator(f"find article {file_name}", self._articles.find, file_name)

    async def delete(self, file_name: str) -> bool:
        return await call_collaborator(f"delete article {file_name}", self._articles.delete, file_name)
