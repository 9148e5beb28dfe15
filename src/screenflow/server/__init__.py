"""HTTP host for screen sessions."""

from screenflow.server.api import app, create_app

__all__ = ["app", "create_app"]
