"""Format decoded accounts and ratio pairs into display strings.

Presentation only: amounts arrive already converted by RatioPair /
basis_points_to_display. Rounding here affects text, never balances.
"""

import html
from datetime import UTC, datetime
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, localcontext
from fractions import Fraction

from src.parsers.fixed_ratio.constants import PAUSE_REASONS
from src.parsers.fixed_ratio.models import PoolFlags, PoolState, SystemState, TreasuryState
from src.parsers.fixed_ratio.ratio import RatioPair, basis_points_to_display

SOL_DECIMALS = 9

_FLAG_LABELS = {
    "one_to_many_ratio": "One-to-many ratio",
    "liquidity_paused": "Liquidity paused",
    "swaps_paused": "Swaps paused",
    "withdrawal_protection": "Withdrawal protection",
    "single_lp_token_mode": "Single LP token mode",
    "swap_owner_only": "Swaps restricted to owner",
}


def _as_decimal(value: Decimal | Fraction | int) -> Decimal:
    if isinstance(value, Fraction):
        with localcontext() as ctx:
            ctx.prec = 60
            return Decimal(value.numerator) / Decimal(value.denominator)
    return Decimal(value)


def format_amount(value: Decimal | Fraction | int, max_decimals: int = 6) -> str:
    """Comma-separated amount, truncated to max_decimals, trailing zeros dropped."""
    with localcontext() as ctx:
        ctx.prec = 80
        dec = _as_decimal(value).quantize(Decimal(1).scaleb(-max_decimals), rounding=ROUND_DOWN)
    text = f"{dec:,f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


_ABBREVIATIONS = ((Decimal(10**9), "B"), (Decimal(10**6), "M"), (Decimal(10**3), "K"))


def _scaled(dec: Decimal, threshold: Decimal) -> Decimal:
    return (dec / threshold).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def format_large_number(value: Decimal | Fraction | int) -> str:
    """Abbreviate with K/M/B: 1_500_000 → '1.5M', 999_950 → '1.0M'."""
    dec = _as_decimal(value)
    for i, (threshold, suffix) in enumerate(_ABBREVIATIONS):
        if dec >= threshold:
            scaled = _scaled(dec, threshold)
            if scaled >= 1000 and i > 0:
                threshold, suffix = _ABBREVIATIONS[i - 1]
                scaled = _scaled(dec, threshold)
            return f"{scaled}{suffix}"
    return format_amount(dec, max_decimals=2)


def format_exchange_rate(pair: RatioPair) -> str:
    """Canonical quote, more valuable token first: '1 SOL = 160 USDT'."""
    return f"1 {pair.base_ticker} = {format_amount(pair.canonical_rate)} {pair.quote_ticker}"


def format_number_ratio(pair: RatioPair) -> str:
    """Ratio as '1:X' with X >= 1."""
    return f"1:{format_amount(pair.normalized_ratio)}"


def format_pair_name(pair: RatioPair) -> str:
    return f"{pair.base_ticker}/{pair.quote_ticker}"


def format_liquidity(pool: PoolState, pair: RatioPair) -> dict[str, str]:
    """Per-token liquidity in display units, abbreviated."""
    return {
        pair.ticker_a: format_large_number(pair.a_basis_points_to_display(pool.total_token_a_liquidity)),
        pair.ticker_b: format_large_number(pair.b_basis_points_to_display(pool.total_token_b_liquidity)),
    }


def format_flags(flags: PoolFlags) -> str:
    names = flags.active_names()
    if not names:
        return "None"
    return ", ".join(_FLAG_LABELS[name] for name in names)


def describe_pause_reason(code: int) -> str:
    return PAUSE_REASONS.get(code, f"Unknown reason code: {code}")


def format_sol(lamports: int) -> str:
    return f"{format_amount(basis_points_to_display(lamports, SOL_DECIMALS), max_decimals=4)} SOL"


def _format_timestamp(ts: int) -> str:
    if ts <= 0:
        return "never"
    try:
        return datetime.fromtimestamp(ts, UTC).strftime("%Y-%m-%d %H:%M UTC")
    except (OverflowError, OSError, ValueError):
        return str(ts)


def format_pool_summary(pool: PoolState, pair: RatioPair) -> str:
    """HTML summary of one pool."""
    liquidity = format_liquidity(pool, pair)
    lines = [
        f"<b>{html.escape(format_pair_name(pair))} Pool</b>",
        f"Rate: {html.escape(format_exchange_rate(pair))}",
        f"Ratio: {format_number_ratio(pair)}",
    ]
    for ticker, amount in liquidity.items():
        lines.append(f"Liquidity {html.escape(ticker)}: {amount}")
    lines.append(f"Flags: {format_flags(pool.flags)}")
    lines.append(
        f"Fees: liquidity {format_sol(pool.contract_liquidity_fee)}, "
        f"swap {format_sol(pool.swap_contract_fee)}"
    )
    lines.append(f"Owner: <code>{pool.owner}</code>")
    return "\n".join(lines)


def format_system_state(state: SystemState) -> str:
    """HTML summary of the program SystemState."""
    status = "⏸️ PAUSED" if state.is_paused else "✅ Active"
    lines = [f"<b>System:</b> {status}"]
    if state.is_paused:
        lines.append(f"Reason: {describe_pause_reason(state.pause_reason_code)}")
        lines.append(f"Since: {_format_timestamp(state.pause_timestamp)}")
    lines.append(f"Admin: <code>{state.admin_authority}</code>")
    if state.pending_admin_authority is not None:
        lines.append(f"Pending admin: <code>{state.pending_admin_authority}</code>")
    lines.append(f"Admin changed: {_format_timestamp(state.admin_change_timestamp)}")
    return "\n".join(lines)


def format_treasury_state(treasury: TreasuryState) -> str:
    """HTML summary of the main treasury."""
    return "\n".join(
        [
            "<b>Main Treasury</b>",
            f"Balance: {format_sol(treasury.total_balance)}",
            f"Withdrawn: {format_sol(treasury.total_withdrawn)}",
            f"Pools created: {treasury.pool_creation_count:,}",
            f"Swaps: {treasury.regular_swap_count:,}",
            f"Liquidity ops: {treasury.liquidity_operation_count:,}",
            f"Failed ops: {treasury.failed_operation_count:,}",
            f"Last update: {_format_timestamp(treasury.last_update_timestamp)}",
        ]
    )
