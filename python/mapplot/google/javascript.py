"""Serialization of Python values into JavaScript source text.

Only what the Google Maps page needs is supported: literals, arrays, object
literals and values that know their own JavaScript form (anything with a
``to_js()`` method, e.g. ``Location``, ``BoundingBox`` and ``Color``).
"""

from typing import Any, List, Optional, Sequence
import json
import math

import numpy as np


class RawIdent:
    """A JavaScript identifier (or expression) emitted verbatim."""

    def __init__(self, name: str):
        self.name = name

    def to_js(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"RawIdent({self.name!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, RawIdent) and other.name == self.name

    def __hash__(self) -> int:
        return hash(self.name)


def to_js(value: Any) -> str:
    """JavaScript source for ``value``.

    Args:
        value: bool, int, float, str, a list/tuple of such values, or an object
               with a ``to_js()`` method.

    Raises:
        TypeError: For None and for unsupported types.
        ValueError: For non-finite floats.
    """
    if value is None:
        raise TypeError("None has no JavaScript representation here; leave the entry out instead")

    # checked before tuple: Location is a NamedTuple with its own form
    if hasattr(value, "to_js"):
        return value.to_js()

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Cannot serialize non-finite number {value!r}")
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(to_js(item) for item in value) + "]"

    if isinstance(value, (np.generic, np.ndarray)):
        return to_js(value.tolist())

    raise TypeError(f"Cannot serialize {type(value).__name__} to JavaScript")


class JavaScriptObject:
    """Builder for a JavaScript object literal ``{ key: value, ... }``.

    Example:
        JavaScriptObject().entry("zoom", 4).entry_opt("title", None).finish()
        # -> '{ zoom: 4 }'
    """

    def __init__(self):
        self._entries: List[str] = []

    def entry(self, key: str, value: Any) -> "JavaScriptObject":
        """Add a required entry.

        Returns:
            Self for method chaining.
        """
        self._entries.append(f"{key}: {to_js(value)}")
        return self

    def entry_opt(self, key: str, value: Optional[Any]) -> "JavaScriptObject":
        """Add an entry unless ``value`` is None."""
        if value is not None:
            self.entry(key, value)
        return self

    def entries(self, items: Sequence) -> "JavaScriptObject":
        """Add optional ``(key, value)`` entries in order."""
        for key, value in items:
            self.entry_opt(key, value)
        return self

    def finish(self) -> str:
        if not self._entries:
            return "{}"
        return "{ " + ", ".join(self._entries) + " }"

    def __len__(self) -> int:
        return len(self._entries)

    def __str__(self) -> str:
        return self.finish()
