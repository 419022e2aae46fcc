"""
Database models for newsdesk.

- Account: editors and admins who log into the newsroom UI
- Article: published articles, addressed by their generated file name

Authentication: session cookie for the UI, bcrypt hashed password storage.
"""
import logging
import re
import unicodedata
from datetime import datetime

import bcrypt
from flask_sqlalchemy import SQLAlchemy

logger = logging.getLogger(__name__)

db = SQLAlchemy()

ROLE_EDITOR = "editor"
ROLE_ADMIN = "admin"
ROLES = frozenset({ROLE_EDITOR, ROLE_ADMIN})

# Login identifiers: ASCII letters, digits and underscores only
SIMPLE_INPUT_PATTERN = re.compile(r'^[A-Za-z0-9_]+$')
SIMPLE_INPUT_MAX_LENGTH = 64

# C0 control characters (tab/newline/CR allowed) and DEL
CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')


def validate_input_simple(value: str) -> tuple[bool, str | None]:
    """Validate a login identifier (username).

    Returns:
        (is_valid, error_message)
    """
    if not value:
        return False, "Value is required"
    if len(value) > SIMPLE_INPUT_MAX_LENGTH:
        return False, f"Value cannot exceed {SIMPLE_INPUT_MAX_LENGTH} characters"
    if not SIMPLE_INPUT_PATTERN.match(value):
        return False, "Incorrect character detected"
    return True, None


def validate_text(value: str, required: bool = False) -> tuple[bool, str | None]:
    """Validate free text (titles, article bodies, passwords).

    Non-ASCII UTF-8 is allowed, ASCII control characters are not.
    """
    if required and not value:
        return False, "Value is required"
    if CONTROL_CHARS.search(value):
        return False, "Control character detected"
    return True, None


def safe_article_file_name(title: str) -> str:
    """Derive the article file name stem from its title.

    'Příliš žluťoučký kůň' -> 'prilis-zlutoucky-kun'
    """
    decomposed = unicodedata.normalize('NFKD', title.lower())
    stem = []
    for char in decomposed:
        if unicodedata.combining(char):
            continue
        stem.append(char if ('a' <= char <= 'z' or '0' <= char <= '9') else '-')
    return ''.join(stem)


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds)).decode('utf-8')


class Account(db.Model):
    """A newsroom user (editor or admin)."""
    __tablename__ = 'accounts'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    author_name = db.Column(db.String(255), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    needs_password_change = db.Column(db.Integer, default=0)  # Force password change on next login
    role = db.Column(db.String(16), nullable=False, default=ROLE_EDITOR)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login_at = db.Column(db.DateTime)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def set_password(self, password: str, rounds: int = 12):
        """Hash and set password."""
        self.password_hash = hash_password(password, rounds)

    def verify_password(self, password: str) -> bool:
        """Verify password against hash."""
        try:
            return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))
        except (ValueError, TypeError):
            return False

    def __repr__(self):
        return f'<Account {self.username}>'


class Article(db.Model):
    """A published article."""
    __tablename__ = 'articles'

    id = db.Column(db.Integer, primary_key=True)
    file_name = db.Column(db.String(255), unique=True, nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    author = db.Column(db.String(255), nullable=False)
    username = db.Column(db.String(64), nullable=False, index=True)
    category = db.Column(db.String(64), nullable=False)
    text = db.Column(db.Text, nullable=False)
    short_text = db.Column(db.Text, nullable=False, default='')
    image_desc = db.Column(db.String(255), nullable=False, default='')
    image_filename = db.Column(db.String(255))
    # Comma separated file names
    related_articles = db.Column(db.Text, nullable=False, default='')
    is_main = db.Column(db.Integer, default=0)
    is_exclusive = db.Column(db.Integer, default=0)
    views = db.Column(db.Integer, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def related_list(self) -> list[str]:
        return [name for name in self.related_articles.split(',') if name]

    def __repr__(self):
        return f'<Article {self.file_name}>'
