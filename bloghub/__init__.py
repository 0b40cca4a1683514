"""Core package for the BlogHub reader and admin console.

The site talks to a hosted backend-as-a-service for all persistence; the
only state kept on the local machine is the reader's bookmark list and
appearance preferences.
"""

__all__: list[str] = []
