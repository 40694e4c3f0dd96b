"""
Service-level exceptions.

This module contains exceptions that can be raised by the cycle engine.
Messy or sparse user data never raises; these are reserved for inputs that
indicate a programming error on the caller's side.
"""

class CycleEngineError(Exception):
    """Base exception for cycle engine errors."""
    pass

class ValidationError(CycleEngineError):
    """Raised when the caller passes an input of the wrong shape.

    Examples are a settings object that cannot be read as user settings,
    an inverted date range or an invalid configuration value.
    """
    pass
