"""Pydantic v2 models for decoded Fixed Ratio Trading accounts."""

from typing import Annotated

from pydantic import BaseModel, Field

from src.parsers.fixed_ratio.constants import I64_MAX, I64_MIN, U8_MAX, U64_MAX

U8 = Annotated[int, Field(ge=0, le=U8_MAX)]
U64 = Annotated[int, Field(ge=0, le=U64_MAX)]
I64 = Annotated[int, Field(ge=I64_MIN, le=I64_MAX)]


class PoolFlags(BaseModel):
    """Named view of the pool flags byte. Bits 6-7 are not exposed."""

    one_to_many_ratio: bool = False
    liquidity_paused: bool = False
    swaps_paused: bool = False
    withdrawal_protection: bool = False
    single_lp_token_mode: bool = False
    swap_owner_only: bool = False

    model_config = {"frozen": True}

    def active_names(self) -> list[str]:
        """Names of the set flags, in bit order."""
        return [name for name, value in self if value]

    def to_byte(self) -> int:
        byte = 0
        for bit, (_, value) in enumerate(self):
            if value:
                byte |= 1 << bit
        return byte


class PoolState(BaseModel):
    """Decoded on-chain PoolState account data (358 bytes)."""

    owner: str
    token_a_mint: str
    token_b_mint: str
    token_a_vault: str
    token_b_vault: str
    lp_token_a_mint: str
    lp_token_b_mint: str

    ratio_a_numerator: U64
    ratio_b_denominator: U64
    total_token_a_liquidity: U64
    total_token_b_liquidity: U64

    pool_authority_bump_seed: U8
    token_a_vault_bump_seed: U8
    token_b_vault_bump_seed: U8
    lp_token_a_mint_bump_seed: U8
    lp_token_b_mint_bump_seed: U8

    raw_flags: U8
    flags: PoolFlags

    # Configurable contract fees (lamports)
    contract_liquidity_fee: U64
    swap_contract_fee: U64

    # Token fee tracking (basis points)
    collected_fees_token_a: U64
    collected_fees_token_b: U64
    total_fees_withdrawn_token_a: U64
    total_fees_withdrawn_token_b: U64

    # SOL fee tracking (lamports)
    collected_liquidity_fees: U64
    collected_swap_contract_fees: U64
    total_sol_fees_collected: U64

    # Consolidation
    last_consolidation_timestamp: I64
    total_consolidations: U64
    total_fees_consolidated: U64

    model_config = {"frozen": True}


class TreasuryState(BaseModel):
    """Decoded MainTreasuryState account data (120 bytes)."""

    total_balance: U64
    rent_exempt_minimum: U64
    total_withdrawn: U64

    pool_creation_count: U64
    liquidity_operation_count: U64
    regular_swap_count: U64
    treasury_withdrawal_count: U64
    failed_operation_count: U64

    total_pool_creation_fees: U64
    total_liquidity_fees: U64
    total_regular_swap_fees: U64
    total_swap_contract_fees: U64

    last_update_timestamp: I64
    total_consolidations_performed: U64
    last_consolidation_timestamp: I64

    model_config = {"frozen": True}


class SystemState(BaseModel):
    """Decoded SystemState account data (51 or 83 bytes).

    pending_admin_authority has no default: the decoder always sets it
    from a validated option tag (None for tag 0, base58 pubkey for tag 1).
    """

    is_paused: bool
    pause_timestamp: I64
    pause_reason_code: U8
    admin_authority: str
    pending_admin_authority: str | None
    admin_change_timestamp: I64
    decoded_length: int  # bytes consumed by the decoder

    model_config = {"frozen": True}

    @property
    def has_pending_admin(self) -> bool:
        return self.pending_admin_authority is not None
