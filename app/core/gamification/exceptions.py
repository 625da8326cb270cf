"""Exceptions for the gamification engine."""


class CatalogError(ValueError):
    """Raised when a rule catalog definition is inconsistent.

    Only raised while building a catalog, never while evaluating one.
    """
