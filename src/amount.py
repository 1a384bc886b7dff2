import re
from dataclasses import dataclass

SCALE = 10_000
FRACTIONAL_DIGITS = 4

_AMOUNT_PATTERN = re.compile(r"(-)?([0-9]+)(?:\.([0-9]{1,4}))?")


class AmountParseError(ValueError):
    """Raised when text can't be represented as an Amount."""


class AmountOverflowError(ArithmeticError):
    """Raised when a result falls outside the representable range."""


@dataclass(frozen=True, order=True)
class Amount:
    """
    Signed fixed-point money value with four fractional digits.

    Stored as a count of 1/10000 units, limited to the range of a signed
    64-bit integer: -922,337,203,685,477.5808 to 922,337,203,685,477.5807.
    """

    units: int = 0

    MIN_UNITS = -(2**63)
    MAX_UNITS = 2**63 - 1

    def __post_init__(self):
        if not self.MIN_UNITS <= self.units <= self.MAX_UNITS:
            raise AmountOverflowError(f"{self.units} units is out of range")

    @classmethod
    def zero(cls) -> "Amount":
        return cls(0)

    @classmethod
    def max_value(cls) -> "Amount":
        return cls(cls.MAX_UNITS)

    @classmethod
    def from_units(cls, units: int) -> "Amount":
        return cls(units)

    @classmethod
    def parse(cls, text: str) -> "Amount":
        """
        Parse "123", "123.4" or "-0.0001" style text.

        Raises AmountParseError for anything else, including values with more
        than four fractional digits and values outside the representable range.
        """
        match = _AMOUNT_PATTERN.fullmatch(text.strip())
        if match is None:
            raise AmountParseError(f"invalid amount format: {text!r}")

        sign, integer, fraction = match.groups()
        units = int(integer) * SCALE + int((fraction or "").ljust(FRACTIONAL_DIGITS, "0"))
        if sign:
            units = -units

        try:
            return cls(units)
        except AmountOverflowError:
            raise AmountParseError(f"amount too large: {text!r}") from None

    def add(self, other: "Amount") -> "Amount":
        return Amount(self.units + other.units)

    def sub(self, other: "Amount") -> "Amount":
        return Amount(self.units - other.units)

    def is_negative(self) -> bool:
        return self.units < 0

    def __str__(self) -> str:
        # Always write all four fractional digits.
        sign = "-" if self.units < 0 else ""
        integer, fraction = divmod(abs(self.units), SCALE)
        return f"{sign}{integer}.{fraction:0{FRACTIONAL_DIGITS}d}"

    def __repr__(self) -> str:
        return f"Amount('{self}')"
