"""
idsync API package.

Provides the FastAPI application used by the mobile client for
server-side user creation and username availability.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
