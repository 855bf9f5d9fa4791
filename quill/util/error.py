"""Utility layer errors.

Raised while wiring the process together, before any post is touched.
"""


class UtilError(Exception):
    """Base utility error."""


class ConfigurationError(UtilError):
    """Settings are inconsistent (e.g. Logfire sending forced on without a token)."""


class DependencyInjectionError(UtilError):
    """A provider component has no implementation of the requested kind."""
