"""
SQLAlchemy-backed repositories for the trust harness.

The harness awaits these; every call runs in a worker thread inside its own
app context, like a request would.
"""
import logging
from typing import Optional

import anyio
from flask import Flask

from .models import Account, Article, db
from .trust.contracts import Article as ArticleRecord
from .trust.contracts import ArticleRepository, Role, User, UserRepository

logger = logging.getLogger(__name__)


def _to_user(account: Account) -> User:
    return User(
        username=account.username,
        author_name=account.author_name,
        password_hash=account.password_hash,
        needs_password_change=bool(account.needs_password_change),
        role=Role(account.role),
    )


def _to_article(article: Article) -> ArticleRecord:
    return ArticleRecord(
        file_name=article.file_name,
        title=article.title,
        author=article.author,
        username=article.username,
        category=article.category,
        text=article.text,
        short_text=article.short_text,
        image_desc=article.image_desc,
        image_filename=article.image_filename,
        related_articles=article.related_articles,
        is_main=bool(article.is_main),
        is_exclusive=bool(article.is_exclusive),
    )


class SqlUserRepository(UserRepository):
    def __init__(self, app: Flask):
        self.app = app

    async def create(self, user: User) -> None:
        await anyio.to_thread.run_sync(self._create, user)

    async def find(self, username: str) -> Optional[User]:
        return await anyio.to_thread.run_sync(self._find, username)

    async def delete(self, username: str) -> bool:
        return await anyio.to_thread.run_sync(self._delete, username)

    def _create(self, user: User):
        with self.app.app_context():
            if Account.query.filter_by(username=user.username).first():
                raise ValueError(f"Username already registered: {user.username}")
            db.session.add(Account(
                username=user.username,
                author_name=user.author_name,
                password_hash=user.password_hash,
                needs_password_change=int(user.needs_password_change),
                role=Role(user.role).value,
            ))
            db.session.commit()
            logger.debug(f"Stored account {user.username}")

    def _find(self, username: str) -> Optional[User]:
        with self.app.app_context():
            account = Account.query.filter_by(username=username).first()
            return _to_user(account) if account else None

    def _delete(self, username: str) -> bool:
        with self.app.app_context():
            account = Account.query.filter_by(username=username).first()
            if account is None:
                return False
            db.session.delete(account)
            db.session.commit()
            logger.debug(f"Deleted account {username}")
            return True


class SqlArticleRepository(ArticleRepository):
    def __init__(self, app: Flask):
        self.app = app

    async def create(self, article: ArticleRecord) -> None:
        await anyio.to_thread.run_sync(self._create, article)

    async def find(self, file_name: str) -> Optional[ArticleRecord]:
        return await anyio.to_thread.run_sync(self._find, file_name)

    async def delete(self, file_name: str) -> bool:
        return await anyio.to_thread.run_sync(self._delete, file_name)

    def _create(self, record: ArticleRecord):
        with self.app.app_context():
            if Article.query.filter_by(file_name=record.file_name).first():
                raise ValueError(f"Article already exists: {record.file_name}")
            db.session.add(Article(
                file_name=record.file_name,
                title=record.title,
                author=record.author,
                username=record.username,
                category=record.category,
                text=record.text,
                short_text=record.short_text,
                image_desc=record.image_desc,
                image_filename=record.image_filename,
                related_articles=record.related_articles,
                is_main=int(record.is_main),
                is_exclusive=int(record.is_exclusive),
            ))
            db.session.commit()

    def _find(self, file_name: str) -> Optional[ArticleRecord]:
        with self.app.app_context():
            article = Article.query.filter_by(file_name=file_name).first()
            return _to_article(article) if article else None

    def _delete(self, file_name: str) -> bool:
        with self.app.app_context():
            article = Article.query.filter_by(file_name=file_name).first()
            if article is None:
                return False
            db.session.delete(article)
            db.session.commit()
            return True
