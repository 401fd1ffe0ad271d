from __future__ import annotations
from enum import Enum


class Blend(str, Enum):
    """
    Which composite the foreground color is recovered from.
    Alpha is computed the same way for every mode.
    """
    BLACK = "black"
    WHITE = "white"
    MIX = "mix"   # mean of the black and white estimates

    @classmethod
    def parse(cls, name: str) -> "Blend":
        try:
            return cls(name.strip().lower())
        except ValueError:
            choices = ", ".join(b.value for b in cls)
            raise ValueError(f"Unknown blend mode {name!r} (expected one of: {choices})") from None
