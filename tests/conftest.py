"""Shared test fixtures: raw Fixed Ratio Trading account buffers."""

import struct
from collections.abc import Callable

import pytest


def pubkey_bytes(fill: int) -> bytes:
    return bytes([fill] * 32)


def build_pool_state(
    *,
    ratio_a: int = 1_000_000_000,
    ratio_b: int = 160_000_000,
    liquidity_a: int = 5_000_000_000_000,
    liquidity_b: int = 800_000_000_000,
    flags: int = 0,
    last_consolidation: int = 1_700_000_000,
) -> bytes:
    """Build a 358-byte PoolState buffer. Pubkeys are 0x01..0x07 repeated."""
    buf = b"".join(pubkey_bytes(i) for i in range(1, 8))
    buf += struct.pack("<4Q", ratio_a, ratio_b, liquidity_a, liquidity_b)
    buf += bytes([255, 254, 253, 252, 251, flags])
    buf += struct.pack("<2Q", 1_150_000_000, 27_150)  # contract fees
    buf += struct.pack("<4Q", 10, 20, 3, 4)  # token fee tracking
    buf += struct.pack("<3Q", 5_000, 6_000, 11_000)  # SOL fee tracking
    buf += struct.pack("<q", last_consolidation)
    buf += struct.pack("<2Q", 7, 8_000)
    return buf


def build_system_state(
    *,
    is_paused: bool = False,
    pause_timestamp: int = 0,
    reason: int = 0,
    pending_tag: int = 0,
    admin_change_timestamp: int = 1_700_000_500,
) -> bytes:
    buf = bytes([1 if is_paused else 0])
    buf += struct.pack("<q", pause_timestamp)
    buf += bytes([reason])
    buf += pubkey_bytes(9)
    buf += bytes([pending_tag])
    if pending_tag == 1:
        buf += pubkey_bytes(10)
    buf += struct.pack("<q", admin_change_timestamp)
    return buf


@pytest.fixture
def pool_state_bytes() -> Callable[..., bytes]:
    return build_pool_state


@pytest.fixture
def system_state_bytes() -> Callable[..., bytes]:
    return build_system_state


@pytest.fixture
def treasury_state_bytes() -> bytes:
    """120-byte MainTreasuryState: 12 u64, i64, u64, i64."""
    counters = struct.pack(
        "<12Q",
        2_500_000_000,  # total_balance
        1_000_000,  # rent_exempt_minimum
        500_000_000,  # total_withdrawn
        3,  # pool_creation_count
        40,  # liquidity_operation_count
        120,  # regular_swap_count
        2,  # treasury_withdrawal_count
        1,  # failed_operation_count
        3_450_000_000,  # total_pool_creation_fees
        52_000_000,  # total_liquidity_fees
        3_258_000,  # total_regular_swap_fees
        0,  # total_swap_contract_fees
    )
    return counters + struct.pack("<qQq", 1_700_000_100, 5, -1)
