"""Error handling decorators for standardized exception logging."""

import logging
from functools import wraps
from typing import Any, Callable

from ...domain.exceptions import SubstitutionError


def handle_substitution_errors(
    operation_name: str,
    logger: logging.Logger = None,
    reraise: bool = True,
    default_return: Any = None,
):
    """Decorator for standardized substitution error handling.

    SubstitutionError subclasses describe test configuration problems, so
    they are logged without a stack trace. Anything else is unexpected and
    logged with one.

    Args:
        operation_name: Human-readable operation name for logging
        logger: Logger to use (defaults to function's module logger)
        reraise: Whether to re-raise exception after logging
        default_return: Value to return on error if not re-raising

    Example:
        @handle_substitution_errors("Activate substitutions")
        def activate(self, test_object):
            ...
    """

    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            log = logger or logging.getLogger(func.__module__)
            try:
                return func(*args, **kwargs)
            except SubstitutionError as err:
                # Expected configuration error - log without stack trace
                log.error("%s failed: %s", operation_name, err)
                if reraise:
                    raise
                return default_return
            except Exception as err:
                log.error(
                    "%s unexpected error: %s",
                    operation_name,
                    err,
                    exc_info=True,
                )
                if reraise:
                    raise
                return default_return

        return wrapper

    return decorator
