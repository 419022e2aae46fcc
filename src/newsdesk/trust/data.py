"""Snapshots and builders, one pair per domain."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .fluent import Fluent, Snapshot, setter
from .media import FileField, any_png


@dataclass(frozen=True)
class LoginData(Snapshot):
    username: Optional[str] = None
    password: Optional[str] = None


@dataclass(frozen=True)
class ArticleData(Snapshot):
    title: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    short_text: Optional[str] = None
    text: Optional[str] = None
    related_articles: Optional[str] = None
    image_desc: Optional[str] = None
    main: Optional[bool] = None
    exclusive: Optional[bool] = None
    image: Optional[FileField] = None


@dataclass(frozen=True)
class AccountUpdateData(Snapshot):
    author_name: Optional[str] = None


@dataclass(frozen=True)
class ChangePasswordData(Snapshot):
    new_password: Optional[str] = None


@dataclass(frozen=True)
class AdminUserData(Snapshot):
    username: Optional[str] = None
    author_name: Optional[str] = None
    password: Optional[str] = None


@dataclass(frozen=True)
class AdminArticleData(Snapshot):
    article_file_name: Optional[str] = None


@dataclass(frozen=True)
class UserData(Snapshot):
    """Expected fields of a stored user."""
    username: Optional[str] = None
    author_name: Optional[str] = None
    role: Optional[str] = None
    needs_password_change: Optional[bool] = None


@dataclass(frozen=True)
class SetupUserData(Snapshot):
    username: Optional[str] = None
    password: Optional[str] = None
    author_name: Optional[str] = None
    role: Optional[str] = None
    needs_password_change: Optional[bool] = None


@dataclass(frozen=True)
class ArticleRecordData(Snapshot):
    """Expected (or seeded) fields of a stored article."""
    file_name: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    username: Optional[str] = None
    category: Optional[str] = None
    text: Optional[str] = None
    short_text: Optional[str] = None
    image_desc: Optional[str] = None
    related_articles: Optional[str] = None
    is_main: Optional[bool] = None
    is_exclusive: Optional[bool] = None


class LoginFluent(Fluent[LoginData]):
    snapshot_type = LoginData

    username = setter("username")
    password = setter("password")


class ArticleFluent(Fluent[ArticleData]):
    snapshot_type = ArticleData

    title = setter("title")
    author = setter("author")
    category = setter("category")
    short_text = setter("short_text")
    text = setter("text")
    related_articles = setter("related_articles", "Comma separated article file names.")
    image_desc = setter("image_desc")
    main = setter("main", "Show on the front page (sent as a checkbox).")
    exclusive = setter("exclusive")
    image = setter("image", "Attach a FileField as the article image.")

    def image_any_png(self) -> "ArticleFluent":
        """Attach a generated 1x1 PNG."""
        return self.image(any_png())


class AccountUpdateFluent(Fluent[AccountUpdateData]):
    snapshot_type = AccountUpdateData

    author_name = setter("author_name")


class ChangePasswordFluent(Fluent[ChangePasswordData]):
    snapshot_type = ChangePasswordData

    new_password = setter("new_password")


class AdminUserFluent(Fluent[AdminUserData]):
    snapshot_type = AdminUserData

    username = setter("username")
    author_name = setter("author_name")
    password = setter("password")


class AdminArticleFluent(Fluent[AdminArticleData]):
    snapshot_type = AdminArticleData

    article_file_name = setter("article_file_name")


class UserFluent(Fluent[UserData]):
    snapshot_type = UserData

    username = setter("username")
    author_name = setter("author_name")
    role = setter("role")
    needs_password_change = setter("needs_password_change")


class SetupUserFluent(Fluent[SetupUserData]):
    snapshot_type = SetupUserData

    username = setter("username")
    password = setter("password")
    author_name = setter("author_name")
    role = setter("role")
    needs_password_change = setter("needs_password_change")


class ArticleRecordFluent(Fluent[ArticleRecordData]):
    snapshot_type = ArticleRecordData

    file_name = setter("file_name")
    title = setter("title")
    author = setter("author")
    username = setter("username")
    category = setter("category")
    text = setter("text")
    short_text = setter("short_text")
    image_desc = setter("image_desc")
    related_articles = setter("related_articles")
    is_main = setter("is_main")
    is_exclusive = setter("is_exclusive")
