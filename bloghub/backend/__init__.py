"""Access to the hosted backend-as-a-service."""

from .client import BackendClient, Filter, build_query, parse_content_range

__all__ = ["BackendClient", "Filter", "build_query", "parse_content_range"]
