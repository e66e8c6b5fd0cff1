"""
Web front-end for the calculator.

Provides a keypad page and a JSON API around one engine per app.
"""

from .server import create_app

__all__ = ["create_app"]
