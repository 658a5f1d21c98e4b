"""Infrastructure layer decorators."""

from .error_handler import handle_substitution_errors

__all__ = [
    "handle_substitution_errors",
]
