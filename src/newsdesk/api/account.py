"""
Account Portal Blueprint.

Routes:
- /login - Login page
- /logout - Logout
- /change-password - Forced / voluntary password change
- /account - Account page (author name + own articles)
- /account/update-author - Author name form target
"""
import logging

from flask import Blueprint, abort, flash, g, redirect, render_template, request, url_for

from ..auth import (
    change_password as change_account_password,
    create_session,
    get_current_account,
    landing_endpoint,
    login as login_account,
    logout,
    require_account_auth,
    update_author_name,
)
from ..models import Article

logger = logging.getLogger(__name__)

account_bp = Blueprint('account', __name__)


@account_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Login page: username + password."""
    if request.method == 'GET':
        account = get_current_account()
        if account:
            return redirect(url_for(landing_endpoint(account)), code=303)
        return render_template('login.html', error=False)

    username = request.form.get('username', '').strip()
    password = request.form.get('password', '')

    result = login_account(username, password)
    if result.malformed:
        logger.debug(f"Rejected malformed login input: {result.error}")
        abort(400)

    if not result.success:
        return render_template('login.html', error=True), 401

    create_session(result.account)
    return redirect(url_for(landing_endpoint(result.account)), code=303)


@account_bp.route('/logout')
def account_logout():
    """Logout and clear session."""
    logout()
    return redirect(url_for('account.login'), code=303)


@account_bp.route('/change-password', methods=['GET', 'POST'])
@require_account_auth
def change_password():
    """Dedicated change password page."""
    account = g.account

    if request.method == 'POST':
        new_password = request.form.get('new_password', '')
        success, error = change_account_password(account, new_password)
        if success:
            flash('Password changed successfully', 'success')
            return redirect(url_for('account.dashboard'), code=303)
        flash(error, 'error')
        return render_template('change_password.html', account=account), 400

    return render_template('change_password.html', account=account)


@account_bp.route('/account')
@require_account_auth
def dashboard():
    """Account page with the author's own articles."""
    account = g.account
    articles = (
        Article.query.filter_by(username=account.username)
        .order_by(Article.created_at.desc())
        .all()
    )
    return render_template('account.html', account=account, articles=articles)


@account_bp.route('/account/update-author', methods=['POST'])
@require_account_auth
def update_author():
    author_name = request.form.get('author_name', '')
    success, error = update_author_name(g.account, author_name)
    if not success:
        logger.debug(f"Author name rejected for {g.account.username}: {error}")
        abort(400)
    return redirect(url_for('account.dashboard'), code=303)
