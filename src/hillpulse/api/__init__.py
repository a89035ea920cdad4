"""HTTP surface: liveness and the /ingest webhook."""

from .app import create_app

__all__ = ["create_app"]
