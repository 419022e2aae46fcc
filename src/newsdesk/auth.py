"""
Account authentication service for the newsroom UI.

Handles:
- Login with username + password
- Forced password change after first login
- Session handling and route guards
- Account management by admins
"""
import logging
from datetime import datetime
from functools import wraps
from typing import NamedTuple, Optional

from flask import abort, current_app, g, redirect, session, url_for

from .models import Account, ROLE_EDITOR, db, validate_input_simple, validate_text

logger = logging.getLogger(__name__)

# Session configuration
SESSION_KEY_USER_ID = 'account_id'
SESSION_KEY_USERNAME = 'account_username'

PASSWORD_MIN_LENGTH = 8


class LoginResult(NamedTuple):
    """Result of login attempt."""
    success: bool
    account: Optional[Account] = None
    error: Optional[str] = None
    malformed: bool = False  # Input rejected before any lookup


def _bcrypt_rounds() -> int:
    return current_app.config.get('BCRYPT_ROUNDS', 12)


def login(username: str, password: str) -> LoginResult:
    """Verify username and password; does NOT create the session."""
    is_valid, error = validate_input_simple(username)
    if not is_valid:
        return LoginResult(success=False, error=error, malformed=True)

    is_valid, error = validate_text(password, required=True)
    if not is_valid:
        return LoginResult(success=False, error=error, malformed=True)

    account = Account.query.filter_by(username=username).first()
    if not account or not account.verify_password(password):
        logger.warning(f"Failed login attempt for {username}: invalid credentials")
        return LoginResult(success=False, error="Invalid username or password")

    account.last_login_at = datetime.utcnow()
    db.session.commit()

    logger.info(f"User logged in successfully: {username}")
    return LoginResult(success=True, account=account)


def create_session(account: Account):
    """Create authenticated session for account."""
    session.clear()
    session[SESSION_KEY_USER_ID] = account.id
    session[SESSION_KEY_USERNAME] = account.username
    session.permanent = True


def logout():
    """Clear session and log out."""
    username = session.get(SESSION_KEY_USERNAME)
    session.clear()
    if username:
        logger.info(f"Logged out: {username}")


def get_current_account() -> Optional[Account]:
    """Get currently logged-in account from session."""
    account_id = session.get(SESSION_KEY_USER_ID)
    if not account_id:
        return None
    return db.session.get(Account, account_id)


def require_account_auth(f):
    """
    Decorator for routes requiring account authentication.

    Redirects to login if not authenticated.
    Sets g.account with current Account.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        account = get_current_account()
        if not account:
            return redirect(url_for('account.login'), code=303)

        g.account = account
        return f(*args, **kwargs)

    return decorated_function


def require_admin(f):
    """Decorator for admin-only routes; implies account authentication."""
    @wraps(f)
    @require_account_auth
    def decorated_function(*args, **kwargs):
        if not g.account.is_admin:
            logger.warning(f"Non-admin {g.account.username} denied admin route")
            abort(403)
        return f(*args, **kwargs)

    return decorated_function


def landing_endpoint(account: Account) -> str:
    """Where a freshly logged-in account is sent."""
    if account.needs_password_change:
        return 'account.change_password'
    if account.is_admin:
        return 'admin.users'
    return 'account.dashboard'


# ============================================================================
# Password Management
# ============================================================================

def change_password(account: Account, new_password: str) -> tuple[bool, str | None]:
    """
    Change account password and clear the forced-change flag.

    Returns:
        (success, error_message)
    """
    is_valid, error = validate_text(new_password, required=True)
    if not is_valid:
        return False, error

    if len(new_password) < PASSWORD_MIN_LENGTH:
        return False, f"Password must be at least {PASSWORD_MIN_LENGTH} characters"

    if account.verify_password(new_password):
        return False, "New password must be different"

    account.set_password(new_password, _bcrypt_rounds())
    account.needs_password_change = 0
    db.session.commit()

    logger.info(f"Password changed for {account.username}")
    return True, None


def update_author_name(account: Account, author_name: str) -> tuple[bool, str | None]:
    is_valid, error = validate_text(author_name.strip(), required=True)
    if not is_valid:
        return False, error

    account.author_name = author_name.strip()
    db.session.commit()

    logger.info(f"Author name updated for {account.username}")
    return True, None


# ============================================================================
# Admin account management
# ============================================================================

def create_account_by_admin(
    username: str,
    password: str,
    author_name: str | None,
    created_by: Account,
) -> tuple[Account | None, str | None]:
    """
    Create an editor account that must change its password on first login.

    Returns:
        (account, error_message)
    """
    is_valid, error = validate_input_simple(username)
    if not is_valid:
        return None, error

    if Account.query.filter_by(username=username).first():
        return None, "Username already registered"

    is_valid, error = validate_text(password, required=True)
    if not is_valid:
        return None, error

    author_name = (author_name or '').strip() or username
    is_valid, error = validate_text(author_name)
    if not is_valid:
        return None, error

    account = Account(
        username=username,
        author_name=author_name,
        role=ROLE_EDITOR,
        needs_password_change=1,
    )
    account.set_password(password, _bcrypt_rounds())

    db.session.add(account)
    db.session.commit()

    logger.info(f"Account created by admin: {username} (by {created_by.username})")
    return account, None


def delete_account(username: str, deleted_by: Account) -> tuple[bool, str | None]:
    """Delete an account."""
    account = Account.query.filter_by(username=username).first()
    if not account:
        return False, "Account not found"

    if account.id == deleted_by.id:
        return False, "Cannot delete your own account"

    db.session.delete(account)
    db.session.commit()

    logger.info(f"Account deleted: {username} by {deleted_by.username}")
    return True, None
