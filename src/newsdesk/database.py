"""
Database initialization for newsdesk.

This module provides:
- Database initialization (SQLite through Flask-SQLAlchemy)
- Seeding of the default admin account
"""
import logging
import os

from .config_defaults import get_int, get_setting
from .models import Account, Article, ROLE_ADMIN, db

logger = logging.getLogger(__name__)

__all__ = ['Account', 'Article', 'db', 'get_db_path', 'init_db', 'seed_admin_account']


def get_db_path() -> str:
    """
    Get database file path.
    Priority: environment variable > .env defaults > current directory
    """
    db_path = get_setting('NEWSDESK_DB_PATH')
    if db_path:
        logger.info(f"Using database path from configuration: {db_path}")
        return db_path

    db_path = os.path.join(os.getcwd(), 'newsdesk.db')
    logger.info(f"Using default database path: {db_path}")
    return db_path


def init_db(app):
    """
    Initialize database with Flask app.

    Creates all tables and seeds the default admin account.
    """
    db_path = get_db_path()
    app.config['SQLALCHEMY_DATABASE_URI'] = f'sqlite:///{db_path}'
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    # Requests may be served from worker threads (in-process dispatch)
    app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {
        'connect_args': {'check_same_thread': False},
        'pool_pre_ping': True,
    }

    db.init_app(app)

    with app.app_context():
        db.create_all()
        logger.info("Database tables created/verified")
        seed_admin_account(app.config.get('BCRYPT_ROUNDS', 12))


def seed_admin_account(rounds: int = 12):
    """
    Seed default admin account if it doesn't exist.

    Reads credentials from environment or .env.defaults. Nothing is seeded
    when no admin password is configured.
    """
    admin_username = get_setting('DEFAULT_ADMIN_USERNAME', 'admin')
    admin_password = get_setting('DEFAULT_ADMIN_PASSWORD')
    if not admin_password:
        logger.debug("DEFAULT_ADMIN_PASSWORD not configured, skipping admin seed")
        return None

    existing = Account.query.filter_by(username=admin_username).first()
    if existing:
        return existing

    admin = Account(
        username=admin_username,
        author_name=admin_username,
        role=ROLE_ADMIN,
        needs_password_change=1,
    )
    admin.set_password(admin_password, get_int('BCRYPT_ROUNDS', rounds))
    db.session.add(admin)
    db.session.commit()

    logger.info(f"Seeded admin account: {admin_username}")
    return admin
