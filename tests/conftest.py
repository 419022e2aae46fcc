"""Shared fixtures: a Flask app on a temporary SQLite file and the harness."""
import os
import sys
from typing import Dict, Optional

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from newsdesk.app import create_app
from newsdesk.trust import (
    Article,
    ArticleRepository,
    AppController,
    CapturedResponse,
    Router,
    TrustSettings,
    User,
    UserRepository,
)


@pytest.fixture
def app(tmp_path, monkeypatch):
    """Create test Flask app with a throwaway database."""
    monkeypatch.setenv('SECRET_KEY', 'test_secret_key_for_testing_only')
    monkeypatch.setenv('NEWSDESK_DB_PATH', str(tmp_path / 'newsdesk.db'))
    monkeypatch.setenv('NEWSDESK_UPLOAD_FOLDER', str(tmp_path / 'u'))
    monkeypatch.setenv('NEWSDESK_CSRF_ENABLED', 'false')
    monkeypatch.setenv('BCRYPT_ROUNDS', '4')
    monkeypatch.setenv('DEFAULT_ADMIN_PASSWORD', '')

    app = create_app()
    app.config['TESTING'] = True
    return app


@pytest.fixture
def settings():
    return TrustSettings(bcrypt_rounds=4)


@pytest.fixture
def controller(app, settings):
    return AppController.for_app(app, settings)


class MemoryUserRepository(UserRepository):
    """Dict-backed users for harness unit tests."""

    def __init__(self):
        self.users: Dict[str, User] = {}

    async def create(self, user: User) -> None:
        if user.username in self.users:
            raise ValueError(f"Username already registered: {user.username}")
        self.users[user.username] = user

    async def find(self, username: str) -> Optional[User]:
        return self.users.get(username)

    async def delete(self, username: str) -> bool:
        return self.users.pop(username, None) is not None


class MemoryArticleRepository(ArticleRepository):
    def __init__(self):
        self.articles: Dict[str, Article] = {}

    async def create(self, article: Article) -> None:
        self.articles[article.file_name] = article

    async def find(self, file_name: str) -> Optional[Article]:
        return self.articles.get(file_name)

    async def delete(self, file_name: str) -> bool:
        return self.articles.pop(file_name, None) is not None


class StaticRouter(Router):
    """Answers every request with the same response and records requests."""

    def __init__(self, response: CapturedResponse):
        self.response = response
        self.requests = []

    async def handle(self, request):
        self.requests.append(request)
        return self.response


@pytest.fixture
def users():
    return MemoryUserRepository()


@pytest.fixture
def articles():
    return MemoryArticleRepository()
