"""Newsdesk: article publishing site with an in-process integration harness."""

__version__ = "1.0.0"
