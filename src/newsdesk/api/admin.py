"""
Admin Blueprint.

Routes:
- /admin_user - Account list
- /admin_user/create - Create editor account (must change password on login)
- /admin_user/delete/<username> - Delete account
- /admin_article - Article list
- /admin_article/delete/<file_name> - Delete article
"""
import logging

from flask import Blueprint, abort, g, redirect, render_template, request, url_for

from ..auth import create_account_by_admin, delete_account, require_admin
from ..models import Account, Article, db
from .articles import remove_article_image

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/admin_user')
@require_admin
def users():
    accounts = Account.query.order_by(Account.username).all()
    return render_template('admin_users.html', account=g.account, accounts=accounts)


@admin_bp.route('/admin_user/create', methods=['POST'])
@require_admin
def create_user():
    account, error = create_account_by_admin(
        username=request.form.get('username', '').strip(),
        password=request.form.get('password', ''),
        author_name=request.form.get('author_name'),
        created_by=g.account,
    )
    if account is None:
        logger.info(f"Admin create user rejected: {error}")
        abort(400, description=error)
    return redirect(url_for('admin.users'), code=303)


@admin_bp.route('/admin_user/delete/<string:username>', methods=['POST'])
@require_admin
def delete_user(username: str):
    success, error = delete_account(username, g.account)
    if not success:
        logger.info(f"Admin delete user rejected: {error}")
        abort(404 if error == "Account not found" else 400, description=error)
    return redirect(url_for('admin.users'), code=303)


@admin_bp.route('/admin_article')
@require_admin
def articles():
    all_articles = Article.query.order_by(Article.created_at.desc()).all()
    return render_template('admin_articles.html', account=g.account, articles=all_articles)


@admin_bp.route('/admin_article/delete/<string:file_name>', methods=['POST'])
@require_admin
def delete_article(file_name: str):
    article = Article.query.filter_by(file_name=file_name).first()
    if article is None:
        abort(404)

    remove_article_image(article)
    db.session.delete(article)
    db.session.commit()

    logger.info(f"Article deleted: {file_name} by {g.account.username}")
    return redirect(url_for('admin.articles'), code=303)
