"""
Article Blueprint.

Routes:
- /form - Article creation form
- /create - Multipart article creation (fields + image upload)
- /<file_name>.html - Rendered article page
"""
import logging
import os

from flask import Blueprint, abort, current_app, g, redirect, render_template, request, url_for
from werkzeug.utils import secure_filename

from ..auth import require_account_auth
from ..models import Article, db, safe_article_file_name, validate_text

logger = logging.getLogger(__name__)

articles_bp = Blueprint('articles', __name__)

CATEGORIES = ('republika', 'zahranici', 'technologie', 'veda', 'finance')

IMAGE_SIGNATURES = {
    b'\x89PNG\r\n\x1a\n': '.png',
    b'\xff\xd8\xff': '.jpg',
}

TEXT_FIELDS = ('title', 'author', 'category', 'text', 'short_text', 'related_articles', 'image_desc')
REQUIRED_FIELDS = ('title', 'category', 'text')


def image_extension(data: bytes) -> str | None:
    for signature, extension in IMAGE_SIGNATURES.items():
        if data.startswith(signature):
            return extension
    return None


def _checkbox(name: str) -> int:
    return 1 if request.form.get(name, 'off') == 'on' else 0


@articles_bp.route('/form')
@require_account_auth
def article_form():
    return render_template('article_form.html', account=g.account, categories=CATEGORIES)


@articles_bp.route('/create', methods=['POST'])
@require_account_auth
def create_article():
    """Create an article from a multipart form."""
    account = g.account
    values = {name: request.form.get(name, '') for name in TEXT_FIELDS}

    for name in TEXT_FIELDS:
        is_valid, error = validate_text(values[name], required=name in REQUIRED_FIELDS)
        if not is_valid:
            logger.info(f"Article rejected, field '{name}': {error}")
            abort(400, description=f"{name}: {error}")

    if values['category'] not in CATEGORIES:
        abort(400, description=f"Unknown category: {values['category']}")

    upload = request.files.get('image')
    if upload is None or not upload.filename:
        abort(400, description="image: Value is required")

    image_data = upload.read()
    extension = image_extension(image_data)
    if extension is None:
        abort(400, description="image: Unsupported image format")

    stem = safe_article_file_name(values['title'])
    file_name = f"{stem}.html"
    if Article.query.filter_by(file_name=file_name).first():
        abort(400, description=f"Article already exists: {file_name}")

    image_filename = secure_filename(f"{stem}_image{extension}")
    upload_folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(upload_folder, exist_ok=True)
    with open(os.path.join(upload_folder, image_filename), 'wb') as handle:
        handle.write(image_data)

    related = ','.join(
        name.strip() for name in values['related_articles'].split(',') if name.strip()
    )
    article = Article(
        file_name=file_name,
        title=values['title'],
        author=values['author'].strip() or account.author_name,
        username=account.username,
        category=values['category'],
        text=values['text'],
        short_text=values['short_text'],
        image_desc=values['image_desc'],
        image_filename=image_filename,
        related_articles=related,
        is_main=_checkbox('is_main'),
        is_exclusive=_checkbox('is_exclusive'),
    )
    db.session.add(article)
    db.session.commit()

    logger.info(f"Article created: {file_name} by {account.username}")
    return redirect(url_for('account.dashboard'), code=303)


@articles_bp.route('/<string:stem>.html')
def show_article(stem: str):
    article = Article.query.filter_by(file_name=f"{stem}.html").first()
    if article is None:
        abort(404)

    article.views = (article.views or 0) + 1
    db.session.commit()

    related = Article.query.filter(Article.file_name.in_(article.related_list())).all()
    paragraphs = [part for part in article.text.split('\n\n') if part.strip()]
    return render_template('article.html', article=article, paragraphs=paragraphs, related=related)


def remove_article_image(article: Article):
    """Remove the stored upload of an article, if any."""
    if not article.image_filename:
        return
    path = os.path.join(current_app.config['UPLOAD_FOLDER'], article.image_filename)
    if os.path.exists(path):
        os.remove(path)
