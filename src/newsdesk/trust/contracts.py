"""
Collaborator contracts.

The harness reaches persisted state only through these repositories. Any
storage (SQLAlchemy, an in-memory dict in unit tests) can back them.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import bcrypt

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Closed set of account roles; compares equal to the plain string."""
    EDITOR = "editor"
    ADMIN = "admin"


@dataclass(frozen=True)
class User:
    username: str
    author_name: str
    password_hash: str
    needs_password_change: bool = False
    role: Role = Role.EDITOR


@dataclass(frozen=True)
class Article:
    file_name: str
    title: str
    author: str
    username: str
    category: str
    text: str
    short_text: str = ""
    image_desc: str = ""
    image_filename: Optional[str] = None
    related_articles: str = ""  # Comma separated file names
    is_main: bool = False
    is_exclusive: bool = False


class UserRepository(ABC):
    """Storage of newsroom accounts."""

    @abstractmethod
    async def create(self, user: User) -> None:
        """Store a new user.

        Raises:
            ValueError: If the username is taken
        """
        pass

    @abstractmethod
    async def find(self, username: str) -> Optional[User]:
        """Return the user or None if absent."""
        pass

    @abstractmethod
    async def delete(self, username: str) -> bool:
        """Delete the user.

        Returns:
            True if a user was deleted, False if none existed
        """
        pass


class ArticleRepository(ABC):
    """Storage of published articles, keyed by file name."""

    @abstractmethod
    async def create(self, article: Article) -> None:
        pass

    @abstractmethod
    async def find(self, file_name: str) -> Optional[Article]:
        pass

    @abstractmethod
    async def delete(self, file_name: str) -> bool:
        pass


def bcrypt_hasher(rounds: int) -> Callable[[str], str]:
    """Password hasher producing hashes the application can verify."""

    def hash_password(password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")

    return hash_password
