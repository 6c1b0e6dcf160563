"""Pool flags byte → PoolFlags."""

from src.parsers.fixed_ratio.constants import (
    FLAG_LIQUIDITY_PAUSED,
    FLAG_ONE_TO_MANY_RATIO,
    FLAG_SINGLE_LP_TOKEN_MODE,
    FLAG_SWAP_OWNER_ONLY,
    FLAG_SWAPS_PAUSED,
    FLAG_WITHDRAWAL_PROTECTION,
)
from src.parsers.fixed_ratio.models import PoolFlags


def interpret_flags(flags: int) -> PoolFlags:
    """Decode a flags byte. Total over 0-255; undefined bits are ignored."""
    flags &= 0xFF
    return PoolFlags(
        one_to_many_ratio=bool(flags & FLAG_ONE_TO_MANY_RATIO),
        liquidity_paused=bool(flags & FLAG_LIQUIDITY_PAUSED),
        swaps_paused=bool(flags & FLAG_SWAPS_PAUSED),
        withdrawal_protection=bool(flags & FLAG_WITHDRAWAL_PROTECTION),
        single_lp_token_mode=bool(flags & FLAG_SINGLE_LP_TOKEN_MODE),
        swap_owner_only=bool(flags & FLAG_SWAP_OWNER_ONLY),
    )
