"""
Flask Application Factory.

This application factory uses:
- SQLite through Flask-SQLAlchemy (accounts, articles)
- Session-based authentication for the newsroom UI
- CSRF protection for browser forms (configurable)
"""
import logging
import os

from flask import Flask, jsonify, redirect, session, url_for
from flask_wtf.csrf import CSRFProtect

from .api import account_bp, admin_bp, articles_bp
from .auth import SESSION_KEY_USER_ID
from .config_defaults import get_bool, get_int, get_setting, require_default
from .database import init_db

logger = logging.getLogger(__name__)

csrf = CSRFProtect()


def create_app() -> Flask:
    """
    Create and configure the Flask application.

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)

    # =========================================================================
    # Security Configuration
    # =========================================================================

    app.config['SECRET_KEY'] = get_setting('SECRET_KEY') or require_default('SECRET_KEY')
    app.config['MAX_CONTENT_LENGTH'] = get_int('MAX_CONTENT_LENGTH', 10 * 1024 * 1024)
    app.config['BCRYPT_ROUNDS'] = get_int('BCRYPT_ROUNDS', 12)

    app.config['SESSION_COOKIE_SECURE'] = get_bool('FLASK_SESSION_COOKIE_SECURE', True)
    app.config['SESSION_COOKIE_HTTPONLY'] = get_bool('FLASK_SESSION_COOKIE_HTTPONLY', True)
    app.config['SESSION_COOKIE_SAMESITE'] = get_setting('FLASK_SESSION_COOKIE_SAMESITE', 'Strict')
    app.config['PERMANENT_SESSION_LIFETIME'] = get_int('FLASK_SESSION_LIFETIME', 3600)

    app.config['WTF_CSRF_ENABLED'] = get_bool('NEWSDESK_CSRF_ENABLED', True)

    app.config['UPLOAD_FOLDER'] = get_setting('NEWSDESK_UPLOAD_FOLDER') or os.path.join(
        app.instance_path, 'u'
    )

    # =========================================================================
    # Database Initialization
    # =========================================================================

    init_db(app)

    # =========================================================================
    # CSRF Protection
    # =========================================================================

    csrf.init_app(app)

    # =========================================================================
    # Register Blueprints
    # =========================================================================

    app.register_blueprint(account_bp)
    app.register_blueprint(articles_bp)
    app.register_blueprint(admin_bp)

    # =========================================================================
    # Error Handlers
    # =========================================================================

    @app.errorhandler(400)
    def bad_request(e):
        return f"Bad Request: {e.description}", 400

    @app.errorhandler(404)
    def not_found(e):
        return "Not Found", 404

    @app.errorhandler(500)
    def internal_error(e):
        logger.exception("Internal server error")
        return "Internal Server Error", 500

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.route('/health')
    def health():
        """Health check endpoint."""
        return jsonify({'status': 'ok'})

    @app.route('/ping')
    def ping():
        return jsonify({'message': 'app ping'})

    @app.route('/')
    def index():
        if session.get(SESSION_KEY_USER_ID):
            return redirect(url_for('account.dashboard'), code=303)
        return redirect(url_for('account.login'), code=303)

    logger.info("Flask application created successfully")

    return app
