"""
Custom exceptions for the experimental flag registry.
"""

from typing import Optional


class ExperimentalFlagsError(Exception):
    """Base class for all experimental flag errors."""
    pass


class FlagRegistrationError(ExperimentalFlagsError):
    """Raised when flag or alias declarations cannot be registered.

    This is a construction-time failure: a registry that raised this error
    is never handed back to the caller.
    """

    def __init__(
        self,
        message: str,
        *,
        name: Optional[str] = None,
        scope: Optional[str] = None,
        existing_scope: Optional[str] = None,
    ):
        super().__init__(message)
        self.name = name
        self.scope = scope
        self.existing_scope = existing_scope


class ExperimentsLoadError(ExperimentalFlagsError):
    """Raised when a flag-set type cannot be imported by path."""
    pass
