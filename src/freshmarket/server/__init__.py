"""ASGI application factory and dependencies for the Freshmarket server."""

from freshmarket.server.app import app, create_app

__all__ = ["app", "create_app"]
