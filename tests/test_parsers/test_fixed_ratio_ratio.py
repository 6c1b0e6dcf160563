"""Test the fixed ratio engine: unit conversion, swaps, dust checks."""

import dataclasses
from decimal import Decimal
from fractions import Fraction

import pytest

from src.parsers.fixed_ratio.decoder import decode_pool_state
from src.parsers.fixed_ratio.exceptions import (
    DustRemainderError,
    InvalidAmountError,
    InvalidDecimalsError,
    InvalidRatioError,
    MissingTickerError,
    RatioError,
)
from src.parsers.fixed_ratio.ratio import (
    RatioPair,
    basis_points_to_display,
    display_to_basis_points,
    has_remainder,
    validate_one_to_many_ratio,
)


@pytest.fixture
def sol_usdt() -> RatioPair:
    """1 SOL (9 decimals) = 160 USDT (6 decimals)."""
    return RatioPair("SOL", 1_000_000_000, 9, "USDT", 160_000_000, 6)


# ── display_to_basis_points ────────────────────────────────────────────


class TestDisplayToBasisPoints:
    def test_decimal_input(self):
        assert display_to_basis_points(Decimal("1.5"), 6) == 1_500_000

    def test_float_uses_shortest_repr(self):
        assert display_to_basis_points(0.1, 9) == 100_000_000
        assert display_to_basis_points(1.005, 3) == 1005

    def test_int_and_string_input(self):
        assert display_to_basis_points(2, 9) == 2_000_000_000
        assert display_to_basis_points("1,000.25", 2) == 100_025

    def test_zero_decimals(self):
        assert display_to_basis_points(Decimal("42"), 0) == 42

    def test_half_rounds_away_from_zero(self):
        assert display_to_basis_points(Decimal("0.0000005"), 6) == 1
        assert display_to_basis_points(Decimal("0.0000015"), 6) == 2
        assert display_to_basis_points(Decimal("0.00000049"), 6) == 0

    def test_negative_rejected(self):
        with pytest.raises(InvalidAmountError):
            display_to_basis_points(Decimal("-1"), 6)

    @pytest.mark.parametrize("bad", ["abc", float("nan"), float("inf"), Decimal("NaN"), None, True])
    def test_non_numeric_rejected(self, bad):
        with pytest.raises(InvalidAmountError):
            display_to_basis_points(bad, 6)

    @pytest.mark.parametrize("decimals", [-1, 10, 1.5])
    def test_invalid_decimals(self, decimals):
        with pytest.raises(InvalidDecimalsError):
            display_to_basis_points(1, decimals)

    def test_large_amount_exact(self):
        assert display_to_basis_points(Decimal("18446744073.709551615"), 9) == 2**64 - 1

    @pytest.mark.parametrize("amount", ["1e1000000", Decimal("1E+999999999"), "1" * 130])
    def test_huge_amount_rejected(self, amount):
        with pytest.raises(InvalidAmountError):
            display_to_basis_points(amount, 0)

    def test_above_u64_rejected(self):
        with pytest.raises(InvalidAmountError):
            display_to_basis_points(Decimal("18446744073.709551616"), 9)
        with pytest.raises(InvalidAmountError):
            display_to_basis_points(2**64, 0)

    def test_long_fraction_not_rounded_early(self):
        just_below_half = "0.4" + "9" * 150
        assert display_to_basis_points(just_below_half, 0) == 0
        assert display_to_basis_points("0.5", 0) == 1

    def test_tiny_amount_rounds_to_zero(self):
        assert display_to_basis_points(Decimal("1E-999999"), 9) == 0
        assert display_to_basis_points(Decimal("0E+1000"), 9) == 0

    @pytest.mark.parametrize("bad", ["1,0,0", ",100", "1,00", "1000,000", "1,000,"])
    def test_malformed_thousands_separators(self, bad):
        with pytest.raises(InvalidAmountError):
            display_to_basis_points(bad, 0)

    def test_grouped_thousands(self):
        assert display_to_basis_points("12,345,678", 0) == 12_345_678


# ── basis_points_to_display ────────────────────────────────────────────


class TestBasisPointsToDisplay:
    def test_simple_shift(self):
        assert basis_points_to_display(1_500_000, 6) == Decimal("1.5")

    def test_keeps_exact_fraction_digits(self):
        assert str(basis_points_to_display(1_500_000, 6)) == "1.500000"

    def test_smaller_than_one_unit(self):
        assert basis_points_to_display(1, 9) == Decimal("0.000000001")

    def test_zero_decimals(self):
        assert basis_points_to_display(12345, 0) == Decimal(12345)

    def test_max_u64_is_exact(self):
        assert basis_points_to_display(2**64 - 1, 9) == Decimal("18446744073.709551615")

    def test_wider_than_u64_is_exact(self):
        value = (2**64 - 1) ** 2
        result = basis_points_to_display(value, 9)
        assert str(result).replace(".", "") == str(value)

    def test_negative_rejected(self):
        with pytest.raises(InvalidAmountError):
            basis_points_to_display(-1, 6)

    def test_non_integer_rejected(self):
        with pytest.raises(InvalidAmountError):
            basis_points_to_display(1.5, 6)

    @pytest.mark.parametrize("decimals", range(10))
    def test_round_trip(self, decimals):
        for text in ("0", "1", "123.456789123", "0.000000001", "98765.4321", "7.25"):
            amount = Decimal(text)
            if -amount.as_tuple().exponent > decimals:
                continue  # not representable at this precision
            assert basis_points_to_display(display_to_basis_points(amount, decimals), decimals) == amount


# ── RatioPair construction ─────────────────────────────────────────────


class TestRatioPairInit:
    @pytest.mark.parametrize("ratio", [0, -5, 1.5, True, 2**64])
    def test_invalid_ratio(self, ratio):
        with pytest.raises(InvalidRatioError):
            RatioPair("A", ratio, 6, "B", 1, 6)
        with pytest.raises(InvalidRatioError):
            RatioPair("A", 1, 6, "B", ratio, 6)

    @pytest.mark.parametrize("decimals", [-1, 10])
    def test_invalid_decimals(self, decimals):
        with pytest.raises(InvalidDecimalsError):
            RatioPair("A", 1, decimals, "B", 1, 6)
        with pytest.raises(InvalidDecimalsError):
            RatioPair("A", 1, 6, "B", 1, decimals)

    @pytest.mark.parametrize("ticker", ["", "   "])
    def test_missing_ticker(self, ticker):
        with pytest.raises(MissingTickerError):
            RatioPair(ticker, 1, 6, "B", 1, 6)
        with pytest.raises(MissingTickerError):
            RatioPair("A", 1, 6, ticker, 1, 6)

    def test_errors_share_base(self):
        with pytest.raises(RatioError):
            RatioPair("A", 0, 6, "B", 1, 6)
        with pytest.raises(ValueError):
            RatioPair("A", 0, 6, "B", 1, 6)

    def test_display_values_cached(self, sol_usdt):
        assert sol_usdt.display_a == Decimal("1")
        assert sol_usdt.display_b == Decimal("160")
        assert sol_usdt.rate_a_to_b == Fraction(160)
        assert sol_usdt.rate_b_to_a == Fraction(1, 160)

    def test_immutable(self, sol_usdt):
        with pytest.raises(dataclasses.FrozenInstanceError):
            sol_usdt.ratio_a = 5  # type: ignore[misc]

    def test_equality_ignores_derived_fields(self):
        assert RatioPair("A", 3, 0, "B", 10, 0) == RatioPair("A", 3, 0, "B", 10, 0)

    def test_from_pool_state(self, pool_state_bytes):
        pool = decode_pool_state(pool_state_bytes())
        pair = RatioPair.from_pool_state(pool, 9, 6, ticker_a="SOL", ticker_b="USDT")
        assert pair.ratio_a == 1_000_000_000
        assert pair.ratio_b == 160_000_000
        assert pair.ticker_a == "SOL"

    def test_from_pool_state_default_tickers(self, pool_state_bytes):
        pool = decode_pool_state(pool_state_bytes())
        pair = RatioPair.from_pool_state(pool, 9, 6)
        assert pair.ticker_a == "TokenA"
        assert pair.ticker_b == "TokenB"

    def test_from_pool_state_explicit_empty_ticker_rejected(self, pool_state_bytes):
        pool = decode_pool_state(pool_state_bytes())
        with pytest.raises(MissingTickerError):
            RatioPair.from_pool_state(pool, 9, 6, ticker_a="")
        with pytest.raises(MissingTickerError):
            RatioPair.from_pool_state(pool, 9, 6, ticker_b="")

    def test_from_pool_state_zero_ratio_rejected(self, pool_state_bytes):
        pool = decode_pool_state(pool_state_bytes(ratio_b=0))
        with pytest.raises(InvalidRatioError):
            RatioPair.from_pool_state(pool, 9, 6)


# ── Canonical direction ────────────────────────────────────────────────


class TestCanonicalDirection:
    def test_a_more_valuable(self):
        pair = RatioPair("A", 1_000_000_000, 9, "B", 100_000_000_000_000, 6)
        assert pair.display_a == Decimal(1)
        assert pair.display_b == Decimal(100_000_000)
        assert pair.rate_a_to_b == 100_000_000
        assert pair.a_is_canonical is True
        assert pair.base_ticker == "A"
        assert pair.quote_ticker == "B"
        assert pair.canonical_rate == 100_000_000

    def test_b_more_valuable(self):
        pair = RatioPair("USDT", 160_000_000, 6, "SOL", 1_000_000_000, 9)
        assert pair.a_is_canonical is False
        assert pair.base_ticker == "SOL"
        assert pair.canonical_rate == 160

    def test_tie_goes_to_a(self):
        pair = RatioPair("A", 1_000_000, 6, "B", 1_000_000_000, 9)
        assert pair.rate_a_to_b == 1
        assert pair.a_is_canonical is True

    def test_canonical_rate_at_least_one(self):
        pair = RatioPair("A", 3, 0, "B", 10, 0)
        assert pair.canonical_rate == Fraction(10, 3)
        reverse = RatioPair("A", 10, 0, "B", 3, 0)
        assert reverse.canonical_rate == Fraction(10, 3)
        assert reverse.base_ticker == "B"

    def test_normalized_ratio(self, sol_usdt):
        assert RatioPair("A", 3, 0, "B", 10, 0).normalized_ratio == Fraction(10, 3)
        assert RatioPair("A", 10, 0, "B", 3, 0).normalized_ratio == Fraction(10, 3)
        assert sol_usdt.normalized_ratio == 160


# ── Swaps ──────────────────────────────────────────────────────────────


class TestSwaps:
    def test_swap_a_to_b(self, sol_usdt):
        assert sol_usdt.swap_a_to_b(Decimal("2.5")) == Decimal("400")

    def test_swap_b_to_a(self, sol_usdt):
        assert sol_usdt.swap_b_to_a(Decimal("40")) == Decimal("0.25")

    def test_calculate_uses_floor(self):
        pair = RatioPair("A", 3, 0, "B", 10, 0)
        assert pair.calculate_b(1) == 3
        assert pair.calculate_b(2) == 6
        assert pair.calculate_a(10) == 3
        assert pair.calculate_a(11) == 3

    def test_output_never_rounds_up(self):
        pair = RatioPair("A", 3, 0, "B", 2, 0)
        # 5 * 2 / 3 = 3.33.. → 3; 4 * 2 / 3 = 2.66.. → 2
        assert pair.swap_a_to_b(5) == Decimal(3)
        assert pair.swap_a_to_b(4) == Decimal(2)

    def test_no_overflow_on_u64_extremes(self):
        max_u64 = 2**64 - 1
        pair = RatioPair("A", 1, 0, "B", max_u64, 0)
        assert pair.calculate_b(max_u64) == max_u64 * max_u64

    def test_quote_reports_basis_points(self, sol_usdt):
        quote = sol_usdt.quote_a_to_b(Decimal("0.5"))
        assert quote.input_basis_points == 500_000_000
        assert quote.output_basis_points == 80_000_000
        assert quote.output_display == Decimal("80")
        assert quote.has_dust is False

    def test_swap_inverse_within_one_basis_point(self):
        # B has the finer basis point, so A -> B -> A loses at most one unit of A
        pair = RatioPair("USDT", 160_000_000, 6, "SOL", 1_000_000_000, 9)
        for text in ("0.000001", "0.123456", "1", "2.5", "1234.987654", "999999.999999"):
            y = Decimal(text)
            back = pair.swap_b_to_a(pair.swap_a_to_b(y))
            diff = pair.a_display_to_basis_points(y) - pair.a_display_to_basis_points(back)
            assert 0 <= diff <= 1

    def test_negative_swap_rejected(self, sol_usdt):
        with pytest.raises(InvalidAmountError):
            sol_usdt.swap_a_to_b(Decimal("-1"))

    def test_calculate_rejects_negative(self, sol_usdt):
        with pytest.raises(InvalidAmountError):
            sol_usdt.calculate_b(-1)


class TestDust:
    def test_has_remainder(self):
        assert has_remainder(1, 10, 3) is True
        assert has_remainder(3, 10, 3) is False
        assert has_remainder(0, 10, 3) is False

    @pytest.mark.parametrize("numerator,denominator", [(10, 0), (0, 3), (-10, 3), (10, -3), (1.5, 3), (10, True)])
    def test_has_remainder_rejects_bad_ratios(self, numerator, denominator):
        with pytest.raises(InvalidRatioError):
            has_remainder(1, numerator, denominator)

    @pytest.mark.parametrize("amount", [-1, 1.0, "1", True])
    def test_has_remainder_rejects_bad_input(self, amount):
        with pytest.raises(InvalidAmountError):
            has_remainder(amount, 10, 3)

    def test_dust_rejected_in_exact_mode(self):
        pair = RatioPair("A", 3, 0, "B", 10, 0)
        with pytest.raises(DustRemainderError) as exc_info:
            pair.swap_a_to_b(1, exact=True)
        assert exc_info.value.input_basis_points == 1
        assert exc_info.value.remainder == 1

    def test_dust_floored_when_not_exact(self):
        pair = RatioPair("A", 3, 0, "B", 10, 0)
        quote = pair.quote_a_to_b(1)
        assert quote.output_basis_points == 3
        assert quote.remainder == 1
        assert quote.has_dust is True

    def test_exact_amount_passes(self):
        pair = RatioPair("A", 3, 0, "B", 10, 0)
        assert pair.swap_a_to_b(3, exact=True) == Decimal(10)

    def test_dust_b_to_a(self):
        pair = RatioPair("A", 3, 0, "B", 10, 0)
        with pytest.raises(DustRemainderError):
            pair.swap_b_to_a(1, exact=True)
        assert pair.swap_b_to_a(10, exact=True) == Decimal(3)


class TestOneToManyRatio:
    def test_valid_one_to_many(self):
        assert validate_one_to_many_ratio(1, 160, 9, 6) is True
        assert validate_one_to_many_ratio(Decimal("250"), 1, 6, 9) is True

    def test_first_side_not_one(self):
        assert validate_one_to_many_ratio(Decimal("1.5"), 240, 9, 6) is False

    def test_not_whole(self):
        assert validate_one_to_many_ratio(1, Decimal("160.5"), 9, 6) is False

    def test_zero_side(self):
        assert validate_one_to_many_ratio(1, 0, 9, 6) is False

    def test_negative_raises(self):
        with pytest.raises(InvalidAmountError):
            validate_one_to_many_ratio(1, -160, 9, 6)
