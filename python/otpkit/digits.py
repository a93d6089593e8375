"""Output width of one-time passwords."""

from dataclasses import dataclass
from typing import ClassVar, Union


@dataclass(frozen=True)
class Digits:
    """
    Number of decimal digits in a generated code.

    Six and eight are the common widths. Anything up to nine fits in the
    31-bit value produced by dynamic truncation.
    """

    width: int

    SIX: ClassVar["Digits"]
    EIGHT: ClassVar["Digits"]

    def __post_init__(self):
        if isinstance(self.width, bool) or not isinstance(self.width, int):
            raise TypeError(f"Digits width must be an int, got {type(self.width).__name__}")
        if not 1 <= self.width <= 9:
            raise ValueError(f"Digits width must be between 1 and 9, got {self.width}")

    def format(self, value: int) -> str:
        """Zero-pad `value` to exactly `width` characters."""
        return f"{value:0{self.width}d}"

    def length(self) -> int:
        """Number of characters in a formatted code."""
        return self.width

    @property
    def modulus(self) -> int:
        """Divisor that reduces the truncated value to `width` digits."""
        return 10 ** self.width

    def __int__(self) -> int:
        return self.width

    def __str__(self) -> str:
        return str(self.width)

    @classmethod
    def coerce(cls, value: Union["Digits", int]) -> "Digits":
        """Accept either a Digits instance or a plain int."""
        if isinstance(value, Digits):
            return value
        return cls(value)


Digits.SIX = Digits(6)
Digits.EIGHT = Digits(8)
