# prettystream/errors.py
"""
Exception types raised before any integration starts.

Both derive from ValueError so code written against plain ValueError
checks keeps working.
"""


class FieldConfigurationError(ValueError):
    """Vector field arrays are inconsistent (shapes, axes, monotonicity)."""


class ParameterError(ValueError):
    """A seeding, integration or style parameter is out of range."""
