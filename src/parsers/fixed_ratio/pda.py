"""Program-derived addresses of the Fixed Ratio Trading program.

Pool seeds: ["pool_state", token_a_mint, token_b_mint, ratio_a LE u64, ratio_b LE u64].
Token order is normalized byte-wise (same as Rust Pubkey::cmp), so the
pool for X/Y and Y/X is the same account.
"""

import struct

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from config.settings import settings
from src.parsers.fixed_ratio.constants import (
    LP_TOKEN_A_MINT_SEED,
    LP_TOKEN_B_MINT_SEED,
    MAIN_TREASURY_SEED,
    POOL_STATE_SEED,
    SYSTEM_STATE_SEED,
    TOKEN_A_VAULT_SEED,
    TOKEN_B_VAULT_SEED,
)


def _to_pubkey(value: str | Pubkey) -> Pubkey:
    return value if isinstance(value, Pubkey) else Pubkey.from_string(value)


def _program_id(program_id: str | Pubkey | None) -> Pubkey:
    return _to_pubkey(program_id or settings.fixed_ratio_program_id)


def normalize_token_order(mint_x: str | Pubkey, mint_y: str | Pubkey) -> tuple[Pubkey, Pubkey, bool]:
    """Return (token_a, token_b, swapped) with token_a the byte-wise smaller mint."""
    x = _to_pubkey(mint_x)
    y = _to_pubkey(mint_y)
    if bytes(x) < bytes(y):
        return x, y, False
    return y, x, True


def derive_pool_state_pda(
    token_a_mint: str | Pubkey,
    token_b_mint: str | Pubkey,
    ratio_a_numerator: int,
    ratio_b_denominator: int,
    program_id: str | Pubkey | None = None,
) -> tuple[Pubkey, int]:
    """Pool state PDA. Mints must already be in normalized order."""
    seeds = [
        POOL_STATE_SEED,
        bytes(_to_pubkey(token_a_mint)),
        bytes(_to_pubkey(token_b_mint)),
        struct.pack("<Q", ratio_a_numerator),
        struct.pack("<Q", ratio_b_denominator),
    ]
    return Pubkey.find_program_address(seeds, _program_id(program_id))


def _derive_pool_child(
    seed: bytes, pool_state: str | Pubkey, program_id: str | Pubkey | None
) -> tuple[Pubkey, int]:
    return Pubkey.find_program_address([seed, bytes(_to_pubkey(pool_state))], _program_id(program_id))


def derive_lp_token_a_mint_pda(pool_state: str | Pubkey, program_id: str | Pubkey | None = None) -> tuple[Pubkey, int]:
    return _derive_pool_child(LP_TOKEN_A_MINT_SEED, pool_state, program_id)


def derive_lp_token_b_mint_pda(pool_state: str | Pubkey, program_id: str | Pubkey | None = None) -> tuple[Pubkey, int]:
    return _derive_pool_child(LP_TOKEN_B_MINT_SEED, pool_state, program_id)


def derive_token_a_vault_pda(pool_state: str | Pubkey, program_id: str | Pubkey | None = None) -> tuple[Pubkey, int]:
    return _derive_pool_child(TOKEN_A_VAULT_SEED, pool_state, program_id)


def derive_token_b_vault_pda(pool_state: str | Pubkey, program_id: str | Pubkey | None = None) -> tuple[Pubkey, int]:
    return _derive_pool_child(TOKEN_B_VAULT_SEED, pool_state, program_id)


def derive_main_treasury_pda(program_id: str | Pubkey | None = None) -> tuple[Pubkey, int]:
    return Pubkey.find_program_address([MAIN_TREASURY_SEED], _program_id(program_id))


def derive_system_state_pda(program_id: str | Pubkey | None = None) -> tuple[Pubkey, int]:
    return Pubkey.find_program_address([SYSTEM_STATE_SEED], _program_id(program_id))
