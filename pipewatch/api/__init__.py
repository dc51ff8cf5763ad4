"""REST API layer for Pipewatch.

Exposes:
    create_app -- FastAPI application factory.
    build_app  -- Alias for create_app (used by pipewatch.app bootstrap).
"""

from pipewatch.api.app import create_app

build_app = create_app

__all__ = ["build_app", "create_app"]
