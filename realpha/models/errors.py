from __future__ import annotations
from pathlib import Path
from typing import Any


class ValidationError(ValueError):
    """Base class for every input rejection raised before pixel work starts."""


class _PairError(ValidationError):
    """
    A property of the black/white pair that cannot be processed.

    Carries the property name and the value found in each input so the
    caller can build its own diagnostics.
    """
    def __init__(self, property: str, black_value: Any, white_value: Any, message: str):
        super().__init__(message)
        self.property = property
        self.black_value = black_value
        self.white_value = white_value


class StructuralMismatch(_PairError):
    """The two inputs disagree on dimensions, channel count or bit depth."""

    def __init__(self, property: str, black_value: Any, white_value: Any):
        super().__init__(
            property, black_value, white_value,
            f"Both input images must have the same {property.replace('_', ' ')} "
            f"(black: {_fmt(black_value)}, white: {_fmt(white_value)})",
        )


class UnsupportedLayout(_PairError):
    """Both inputs agree, but on a channel count or bit depth we cannot handle."""

    def __init__(self, property: str, black_value: Any, white_value: Any):
        super().__init__(
            property, black_value, white_value,
            f"Unsupported {property.replace('_', ' ')}: "
            + (_fmt(black_value) if black_value == white_value
               else f"black: {_fmt(black_value)}, white: {_fmt(white_value)}"),
        )


class UnsupportedFormat(ValidationError):
    """A file that decodes to something other than a single grayscale/RGB frame."""

    def __init__(self, path: str | Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason


def _fmt(value: Any) -> str:
    if isinstance(value, tuple) and len(value) == 2:
        return f"{value[0]}×{value[1]}"
    return str(value)
