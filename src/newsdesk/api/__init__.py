"""
Blueprints for the newsroom.

Provides:
- account_bp: login, password change, account page
- articles_bp: article creation and article pages
- admin_bp: account and article administration
"""
from .account import account_bp
from .admin import admin_bp
from .articles import articles_bp

__all__ = ['account_bp', 'admin_bp', 'articles_bp']
