"""REST status and line-management API."""

from .server import APIServer, create_app

__all__ = ["APIServer", "create_app"]
