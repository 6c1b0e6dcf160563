"""Fixed exchange ratio math: basis points ↔ display units and swap outputs.

All balance-affecting arithmetic is done on Python integers. Display
amounts are Decimals built by shifting the decimal point, never by
float division. Swap outputs are floored (rounding favours the pool).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from fractions import Fraction
from typing import TYPE_CHECKING, Any

from loguru import logger

from config.settings import settings
from src.parsers.fixed_ratio.constants import MAX_DECIMALS, MIN_DECIMALS, U64_MAX
from src.parsers.fixed_ratio.exceptions import (
    DustRemainderError,
    InvalidAmountError,
    InvalidDecimalsError,
    InvalidRatioError,
    MissingTickerError,
)

if TYPE_CHECKING:
    from src.parsers.fixed_ratio.models import PoolState

# Commas are accepted only as thousands separators: "1,000.25"
_GROUPED_NUMBER = re.compile(r"\d{1,3}(,\d{3})+(\.\d*)?")
# Largest decimal exponent a u64 value can reach (U64_MAX ~ 1.8e19)
_U64_MAX_ADJUSTED = len(str(U64_MAX)) - 1

DisplayAmount = Decimal | int | float | str


def _check_decimals(decimals: Any) -> int:
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise InvalidDecimalsError(f"decimals must be an integer, got {decimals!r}")
    if not MIN_DECIMALS <= decimals <= MAX_DECIMALS:
        raise InvalidDecimalsError(
            f"decimals {decimals} out of range {MIN_DECIMALS}-{MAX_DECIMALS}"
        )
    return decimals


def _check_basis_points(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmountError(f"basis points must be an integer, got {value!r}")
    if value < 0:
        raise InvalidAmountError(f"basis points must be non-negative, got {value}")
    return value


def _check_ratio(name: str, ratio: Any) -> int:
    if isinstance(ratio, bool) or not isinstance(ratio, int):
        raise InvalidRatioError(f"{name} must be an integer, got {ratio!r}")
    if not 0 < ratio <= U64_MAX:
        raise InvalidRatioError(f"{name} must be a positive u64, got {ratio}")
    return ratio


def _to_decimal(amount: DisplayAmount) -> Decimal:
    if isinstance(amount, bool):
        raise InvalidAmountError(f"invalid display amount: {amount!r}")
    if isinstance(amount, Decimal):
        value = amount
    elif isinstance(amount, int):
        value = Decimal(amount)
    elif isinstance(amount, float):
        # Shortest repr, so 0.1 means one tenth rather than its binary expansion
        value = Decimal(repr(amount))
    elif isinstance(amount, str):
        text = amount.strip()
        if "," in text:
            if not _GROUPED_NUMBER.fullmatch(text):
                raise InvalidAmountError(f"invalid display amount: {amount!r}")
            text = text.replace(",", "")
        try:
            value = Decimal(text)
        except InvalidOperation as e:
            raise InvalidAmountError(f"invalid display amount: {amount!r}") from e
    else:
        raise InvalidAmountError(f"invalid display amount: {amount!r}")

    if not value.is_finite():
        raise InvalidAmountError(f"display amount must be finite, got {amount!r}")
    if value < 0:
        raise InvalidAmountError(f"display amount must be non-negative, got {amount!r}")
    return value


def display_to_basis_points(amount: DisplayAmount, decimals: int) -> int:
    """Convert a display amount to basis points.

    Multiplies by 10^decimals and rounds to the nearest integer, halves
    away from zero. ``display_to_basis_points(Decimal("1.5"), 6) == 1_500_000``.
    Results above the u64 range raise InvalidAmountError.
    """
    decimals = _check_decimals(decimals)
    value = _to_decimal(amount)
    if value.is_zero():
        return 0
    if value.adjusted() + decimals > _U64_MAX_ADJUSTED:
        raise InvalidAmountError(f"display amount {amount!r} exceeds the u64 range")

    # Moving the exponent on the digit tuple is exact at any precision
    sign, digits, exponent = value.as_tuple()
    shifted = Decimal((sign, digits, exponent + decimals))
    result = int(shifted.to_integral_value(rounding=ROUND_HALF_UP))
    if result > U64_MAX:
        raise InvalidAmountError(f"display amount {amount!r} exceeds the u64 range")
    return result


def basis_points_to_display(value: int, decimals: int) -> Decimal:
    """Convert basis points to a display amount by moving the decimal point.

    The result carries exactly ``decimals`` fractional digits:
    ``basis_points_to_display(1_500_000, 6) == Decimal("1.500000")``.
    """
    decimals = _check_decimals(decimals)
    value = _check_basis_points(value)
    digits = tuple(int(d) for d in str(value))
    return Decimal((0, digits, -decimals))


def has_remainder(input_basis_points: int, numerator_ratio: int, denominator_ratio: int) -> bool:
    """True when ``input * numerator`` does not divide evenly by ``denominator`` (dust)."""
    input_basis_points = _check_basis_points(input_basis_points)
    _check_ratio("numerator_ratio", numerator_ratio)
    _check_ratio("denominator_ratio", denominator_ratio)
    return (input_basis_points * numerator_ratio) % denominator_ratio != 0


def validate_one_to_many_ratio(
    display_a: DisplayAmount,
    display_b: DisplayAmount,
    decimal_a: int,
    decimal_b: int,
) -> bool:
    """Check whether a ratio qualifies for the ONE_TO_MANY_RATIO pool flag.

    Both sides must be whole numbers in display units, both positive,
    and one side exactly 1. Invalid amounts or decimals raise RatioError.
    """
    basis_points_a = display_to_basis_points(display_a, decimal_a)
    basis_points_b = display_to_basis_points(display_b, decimal_b)
    factor_a = 10**decimal_a
    factor_b = 10**decimal_b

    a_is_whole = basis_points_a % factor_a == 0
    b_is_whole = basis_points_b % factor_b == 0
    both_positive = basis_points_a > 0 and basis_points_b > 0
    one_equals_one = basis_points_a == factor_a or basis_points_b == factor_b
    return a_is_whole and b_is_whole and both_positive and one_equals_one


@dataclass(frozen=True)
class SwapQuote:
    """Result of one swap calculation, in both unit systems."""

    input_basis_points: int
    output_basis_points: int
    output_display: Decimal
    remainder: int  # truncated dust in (input * numerator) % denominator

    @property
    def has_dust(self) -> bool:
        return self.remainder != 0


@dataclass(frozen=True)
class RatioPair:
    """Fixed exchange ratio between token A and token B.

    ratio_a / ratio_b are the pool's ratio_a_numerator / ratio_b_denominator
    in basis points; decimal_a / decimal_b are the mint decimals (0-9).
    Derived display values and rates are computed once at construction.
    """

    ticker_a: str
    ratio_a: int
    decimal_a: int
    ticker_b: str
    ratio_b: int
    decimal_b: int

    display_a: Decimal = field(init=False, repr=False, compare=False)
    display_b: Decimal = field(init=False, repr=False, compare=False)
    rate_a_to_b: Fraction = field(init=False, repr=False, compare=False)
    rate_b_to_a: Fraction = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for name in ("ticker_a", "ticker_b"):
            ticker = getattr(self, name)
            if not isinstance(ticker, str) or not ticker.strip():
                raise MissingTickerError(f"{name} is required")
        _check_ratio("ratio_a", self.ratio_a)
        _check_ratio("ratio_b", self.ratio_b)
        _check_decimals(self.decimal_a)
        _check_decimals(self.decimal_b)

        object.__setattr__(self, "display_a", basis_points_to_display(self.ratio_a, self.decimal_a))
        object.__setattr__(self, "display_b", basis_points_to_display(self.ratio_b, self.decimal_b))
        rate_a_to_b = Fraction(
            self.ratio_b * 10**self.decimal_a,
            self.ratio_a * 10**self.decimal_b,
        )
        object.__setattr__(self, "rate_a_to_b", rate_a_to_b)
        object.__setattr__(self, "rate_b_to_a", 1 / rate_a_to_b)

    @classmethod
    def from_pool_state(
        cls,
        pool: PoolState,
        decimal_a: int,
        decimal_b: int,
        ticker_a: str | None = None,
        ticker_b: str | None = None,
    ) -> RatioPair:
        """Build a pair from a decoded pool. Decimals come from the mint accounts."""
        return cls(
            ticker_a=ticker_a if ticker_a is not None else settings.default_ticker_a,
            ratio_a=pool.ratio_a_numerator,
            decimal_a=decimal_a,
            ticker_b=ticker_b if ticker_b is not None else settings.default_ticker_b,
            ratio_b=pool.ratio_b_denominator,
            decimal_b=decimal_b,
        )

    # ── Canonical direction (presentation only) ───────────────────────

    @property
    def a_is_canonical(self) -> bool:
        """Token A is quoted first when 1 A buys at least 1 B (ties go to A)."""
        return self.rate_a_to_b >= 1

    @property
    def base_ticker(self) -> str:
        return self.ticker_a if self.a_is_canonical else self.ticker_b

    @property
    def quote_ticker(self) -> str:
        return self.ticker_b if self.a_is_canonical else self.ticker_a

    @property
    def canonical_rate(self) -> Fraction:
        """Rate in the canonical direction; always >= 1."""
        return self.rate_a_to_b if self.a_is_canonical else self.rate_b_to_a

    @property
    def normalized_ratio(self) -> Fraction:
        """X in the "1:X" ratio figure, read in the canonical direction."""
        return self.canonical_rate

    # ── Unit conversion ───────────────────────────────────────────────

    def a_display_to_basis_points(self, amount: DisplayAmount) -> int:
        return display_to_basis_points(amount, self.decimal_a)

    def b_display_to_basis_points(self, amount: DisplayAmount) -> int:
        return display_to_basis_points(amount, self.decimal_b)

    def a_basis_points_to_display(self, value: int) -> Decimal:
        return basis_points_to_display(value, self.decimal_a)

    def b_basis_points_to_display(self, value: int) -> Decimal:
        return basis_points_to_display(value, self.decimal_b)

    # ── Swap math ─────────────────────────────────────────────────────

    def calculate_b(self, a_basis_points: int) -> int:
        """Token B basis points received for ``a_basis_points`` of A (floored)."""
        return _check_basis_points(a_basis_points) * self.ratio_b // self.ratio_a

    def calculate_a(self, b_basis_points: int) -> int:
        """Token A basis points received for ``b_basis_points`` of B (floored)."""
        return _check_basis_points(b_basis_points) * self.ratio_a // self.ratio_b

    def quote_a_to_b(self, amount_a: DisplayAmount, *, exact: bool = False) -> SwapQuote:
        """Quote an A → B swap.

        With ``exact=True`` (pool requires exact exchange) any input that
        leaves a remainder raises DustRemainderError instead of being floored.
        """
        input_bp = self.a_display_to_basis_points(amount_a)
        remainder = (input_bp * self.ratio_b) % self.ratio_a
        if exact and remainder:
            logger.debug(
                f"[FRT] Dust on {self.ticker_a}->{self.ticker_b}: {input_bp} bp, remainder {remainder}"
            )
            raise DustRemainderError(input_bp, remainder)
        output_bp = self.calculate_b(input_bp)
        return SwapQuote(
            input_basis_points=input_bp,
            output_basis_points=output_bp,
            output_display=self.b_basis_points_to_display(output_bp),
            remainder=remainder,
        )

    def quote_b_to_a(self, amount_b: DisplayAmount, *, exact: bool = False) -> SwapQuote:
        """Quote a B → A swap. Mirror of quote_a_to_b."""
        input_bp = self.b_display_to_basis_points(amount_b)
        remainder = (input_bp * self.ratio_a) % self.ratio_b
        if exact and remainder:
            logger.debug(
                f"[FRT] Dust on {self.ticker_b}->{self.ticker_a}: {input_bp} bp, remainder {remainder}"
            )
            raise DustRemainderError(input_bp, remainder)
        output_bp = self.calculate_a(input_bp)
        return SwapQuote(
            input_basis_points=input_bp,
            output_basis_points=output_bp,
            output_display=self.a_basis_points_to_display(output_bp),
            remainder=remainder,
        )

    def swap_a_to_b(self, amount_a: DisplayAmount, *, exact: bool = False) -> Decimal:
        """Token B display amount received for ``amount_a`` display units of A."""
        return self.quote_a_to_b(amount_a, exact=exact).output_display

    def swap_b_to_a(self, amount_b: DisplayAmount, *, exact: bool = False) -> Decimal:
        """Token A display amount received for ``amount_b`` display units of B."""
        return self.quote_b_to_a(amount_b, exact=exact).output_display

    def debug_info(self) -> dict[str, str]:
        return {
            "tokens": f"{self.ticker_a}/{self.ticker_b}",
            "ratios_basis_points": f"{self.ratio_a}:{self.ratio_b}",
            "decimals": f"{self.decimal_a}:{self.decimal_b}",
            "ratios_display": f"{self.display_a}:{self.display_b}",
            "canonical": f"1 {self.base_ticker} = {self.canonical_rate} {self.quote_ticker}",
        }
