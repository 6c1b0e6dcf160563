"""Decode Fixed Ratio Trading on-chain account data.

Layouts are Borsh-serialized structs with no Anchor discriminator,
all integers little-endian:

  PoolState      358 bytes (7 pubkeys, ratios/liquidity, bumps, flags, fee tracking)
  TreasuryState  120 bytes (15 x 8-byte counters and timestamps)
  SystemState    51 bytes, or 83 when pending_admin_authority is Some

Every read is length-checked first; a short buffer raises TooShortError
with the offset of the field that could not be read.
"""

import base64
import binascii
import struct
from collections.abc import Sequence
from enum import Enum

from loguru import logger
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from src.parsers.fixed_ratio.constants import (
    OPTION_NONE,
    OPTION_SOME,
    POOL_STATE_SIZE,
    PUBKEY_SIZE,
    SYSTEM_STATE_MAX_SIZE,
    SYSTEM_STATE_MIN_SIZE,
    TREASURY_STATE_SIZE,
    U64_SIZE,
)
from src.parsers.fixed_ratio.exceptions import (
    DecodeError,
    InvalidEncodingError,
    InvalidOptionTagError,
    TooShortError,
)
from src.parsers.fixed_ratio.flags import interpret_flags
from src.parsers.fixed_ratio.models import PoolState, SystemState, TreasuryState

_U64 = struct.Struct("<Q")
_I64 = struct.Struct("<q")


class AccountKind(Enum):
    POOL_STATE = "pool_state"
    TREASURY_STATE = "treasury_state"
    SYSTEM_STATE = "system_state"
    UNKNOWN = "unknown"


class _AccountReader:
    """Forward-only cursor over an account buffer."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self.offset = 0

    def _take(self, size: int) -> bytes:
        available = len(self._data) - self.offset
        if available < size:
            raise TooShortError(self.offset, size, available)
        chunk = self._data[self.offset : self.offset + size]
        self.offset += size
        return chunk

    def u8(self) -> int:
        return self._take(1)[0]

    def boolean(self) -> bool:
        return self.u8() != 0

    def u64(self) -> int:
        return _U64.unpack(self._take(U64_SIZE))[0]

    def i64(self) -> int:
        return _I64.unpack(self._take(U64_SIZE))[0]

    def pubkey(self) -> str:
        return str(Pubkey.from_bytes(self._take(PUBKEY_SIZE)))

    def option_pubkey(self) -> str | None:
        tag_offset = self.offset
        tag = self.u8()
        if tag == OPTION_NONE:
            return None
        if tag == OPTION_SOME:
            return self.pubkey()
        raise InvalidOptionTagError(tag, tag_offset)


def decode_pool_state(data: bytes | bytearray | memoryview) -> PoolState:
    """Decode a PoolState account. Raises DecodeError on short data."""
    reader = _AccountReader(data)
    try:
        owner = reader.pubkey()
        token_a_mint = reader.pubkey()
        token_b_mint = reader.pubkey()
        token_a_vault = reader.pubkey()
        token_b_vault = reader.pubkey()
        lp_token_a_mint = reader.pubkey()
        lp_token_b_mint = reader.pubkey()

        ratio_a_numerator = reader.u64()
        ratio_b_denominator = reader.u64()
        total_token_a_liquidity = reader.u64()
        total_token_b_liquidity = reader.u64()

        pool_authority_bump_seed = reader.u8()
        token_a_vault_bump_seed = reader.u8()
        token_b_vault_bump_seed = reader.u8()
        lp_token_a_mint_bump_seed = reader.u8()
        lp_token_b_mint_bump_seed = reader.u8()

        raw_flags = reader.u8()

        contract_liquidity_fee = reader.u64()
        swap_contract_fee = reader.u64()

        collected_fees_token_a = reader.u64()
        collected_fees_token_b = reader.u64()
        total_fees_withdrawn_token_a = reader.u64()
        total_fees_withdrawn_token_b = reader.u64()

        collected_liquidity_fees = reader.u64()
        collected_swap_contract_fees = reader.u64()
        total_sol_fees_collected = reader.u64()

        last_consolidation_timestamp = reader.i64()
        total_consolidations = reader.u64()
        total_fees_consolidated = reader.u64()
    except DecodeError as e:
        logger.debug(f"[FRT] PoolState decode failed ({len(data)} bytes): {e}")
        raise

    return PoolState(
        owner=owner,
        token_a_mint=token_a_mint,
        token_b_mint=token_b_mint,
        token_a_vault=token_a_vault,
        token_b_vault=token_b_vault,
        lp_token_a_mint=lp_token_a_mint,
        lp_token_b_mint=lp_token_b_mint,
        ratio_a_numerator=ratio_a_numerator,
        ratio_b_denominator=ratio_b_denominator,
        total_token_a_liquidity=total_token_a_liquidity,
        total_token_b_liquidity=total_token_b_liquidity,
        pool_authority_bump_seed=pool_authority_bump_seed,
        token_a_vault_bump_seed=token_a_vault_bump_seed,
        token_b_vault_bump_seed=token_b_vault_bump_seed,
        lp_token_a_mint_bump_seed=lp_token_a_mint_bump_seed,
        lp_token_b_mint_bump_seed=lp_token_b_mint_bump_seed,
        raw_flags=raw_flags,
        flags=interpret_flags(raw_flags),
        contract_liquidity_fee=contract_liquidity_fee,
        swap_contract_fee=swap_contract_fee,
        collected_fees_token_a=collected_fees_token_a,
        collected_fees_token_b=collected_fees_token_b,
        total_fees_withdrawn_token_a=total_fees_withdrawn_token_a,
        total_fees_withdrawn_token_b=total_fees_withdrawn_token_b,
        collected_liquidity_fees=collected_liquidity_fees,
        collected_swap_contract_fees=collected_swap_contract_fees,
        total_sol_fees_collected=total_sol_fees_collected,
        last_consolidation_timestamp=last_consolidation_timestamp,
        total_consolidations=total_consolidations,
        total_fees_consolidated=total_fees_consolidated,
    )


def decode_treasury_state(data: bytes | bytearray | memoryview) -> TreasuryState:
    """Decode a MainTreasuryState account. Raises DecodeError on short data."""
    reader = _AccountReader(data)
    try:
        fields = {
            "total_balance": reader.u64(),
            "rent_exempt_minimum": reader.u64(),
            "total_withdrawn": reader.u64(),
            "pool_creation_count": reader.u64(),
            "liquidity_operation_count": reader.u64(),
            "regular_swap_count": reader.u64(),
            "treasury_withdrawal_count": reader.u64(),
            "failed_operation_count": reader.u64(),
            "total_pool_creation_fees": reader.u64(),
            "total_liquidity_fees": reader.u64(),
            "total_regular_swap_fees": reader.u64(),
            "total_swap_contract_fees": reader.u64(),
            "last_update_timestamp": reader.i64(),
            "total_consolidations_performed": reader.u64(),
            "last_consolidation_timestamp": reader.i64(),
        }
    except DecodeError as e:
        logger.debug(f"[FRT] TreasuryState decode failed ({len(data)} bytes): {e}")
        raise

    return TreasuryState(**fields)


def decode_system_state(data: bytes | bytearray | memoryview) -> SystemState:
    """Decode a SystemState account.

    pending_admin_authority is Option<Pubkey>: tag 0 → None, tag 1 → 32-byte
    key follows, anything else raises InvalidOptionTagError.
    """
    reader = _AccountReader(data)
    try:
        is_paused = reader.boolean()
        pause_timestamp = reader.i64()
        pause_reason_code = reader.u8()
        admin_authority = reader.pubkey()
        pending_admin_authority = reader.option_pubkey()
        admin_change_timestamp = reader.i64()
    except DecodeError as e:
        logger.debug(f"[FRT] SystemState decode failed ({len(data)} bytes): {e}")
        raise

    return SystemState(
        is_paused=is_paused,
        pause_timestamp=pause_timestamp,
        pause_reason_code=pause_reason_code,
        admin_authority=admin_authority,
        pending_admin_authority=pending_admin_authority,
        admin_change_timestamp=admin_change_timestamp,
        decoded_length=reader.offset,
    )


def account_bytes_from_b64(data_b64: str | Sequence[str]) -> bytes:
    """Decode RPC account data: a base64 string or a ``[data, "base64"]`` pair."""
    if not isinstance(data_b64, str):
        if len(data_b64) != 2 or data_b64[1] != "base64":
            raise InvalidEncodingError(f"unsupported account data encoding: {data_b64!r:.60}")
        data_b64 = data_b64[0]
    try:
        return base64.b64decode(data_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.debug(f"[FRT] Failed to base64-decode account data: {e}")
        raise InvalidEncodingError(f"invalid base64 account data: {e}") from e


def classify_account(data: bytes | bytearray | memoryview) -> AccountKind:
    """Guess the account type of a program account from its size."""
    size = len(data)
    if size >= POOL_STATE_SIZE:
        return AccountKind.POOL_STATE
    if size == TREASURY_STATE_SIZE:
        return AccountKind.TREASURY_STATE
    if size in (SYSTEM_STATE_MIN_SIZE, SYSTEM_STATE_MAX_SIZE):
        return AccountKind.SYSTEM_STATE
    return AccountKind.UNKNOWN
