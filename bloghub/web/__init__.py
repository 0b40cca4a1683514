"""Web interface for BlogHub."""

from bloghub.web.app import create_app

__all__ = ["create_app"]
