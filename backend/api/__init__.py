"""
PLPG API package.

Provides the FastAPI application for the Personalized Learning Path Generator.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
