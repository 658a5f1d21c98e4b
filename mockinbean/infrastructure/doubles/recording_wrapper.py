"""MagicMock that forwards every use of a wrapped object to it."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

# Protocol methods forwarded when the original's class defines them
FORWARDED_MAGICS = (
    "__len__",
    "__iter__",
    "__contains__",
    "__getitem__",
    "__setitem__",
    "__delitem__",
    "__bool__",
    "__int__",
    "__float__",
    "__index__",
    "__str__",
    "__enter__",
    "__exit__",
)


class RecordingWrapper(MagicMock):
    """Recording double that behaves like the object it wraps.

    ``wraps`` already forwards method calls. On top of that:
        - data attributes are read from the original, so the wrapper sees
          live values rather than child mocks
        - writes to the original's instance attributes go to the original
        - protocol methods in FORWARDED_MAGICS that the original's class
          implements are forwarded, and still recorded

    Create instances with RecordingWrapper.around(original).

    Example:
        >>> spy = RecordingWrapper.around(inventory)
        >>> len(spy) == len(inventory)
        True
        >>> spy.__len__.assert_called_once_with()
    """

    @classmethod
    def around(cls, original: Any) -> RecordingWrapper:
        """Create a wrapper specced on and delegating to original."""
        wrapper = cls(spec=original, wraps=original)
        wrapper._forward_magics()
        return wrapper

    def __getattr__(self, name: str) -> Any:
        original = self.__dict__.get("_mock_wraps")
        if original is not None and not _is_internal(name):
            try:
                value = getattr(original, name)
            except AttributeError:
                pass
            else:
                if not callable(value):
                    return value
        return super().__getattr__(name)

    def __setattr__(self, name: str, value: Any) -> None:
        original = self.__dict__.get("_mock_wraps")
        if (
            original is not None
            and not _is_internal(name)
            and name in getattr(original, "__dict__", {})
            and not callable(getattr(original, name))
        ):
            setattr(original, name, value)
            return
        super().__setattr__(name, value)

    def reset_mock(self, *args: Any, **kwargs: Any) -> None:
        """Reset recorded calls, keeping the forwarding of protocol methods."""
        super().reset_mock(*args, **kwargs)
        if self._mock_parent is None:
            self._forward_magics()

    def _forward_magics(self) -> None:
        original = self._mock_wraps
        if original is None:
            return
        for name in FORWARDED_MAGICS:
            implementation = getattr(type(original), name, None)
            if implementation is None or implementation is getattr(object, name, None):
                continue
            getattr(self, name).side_effect = getattr(original, name)


def _is_internal(name: str) -> bool:
    return (
        name.startswith("_mock_")
        or name.startswith("_spec_")
        or (name.startswith("__") and name.endswith("__"))
    )
