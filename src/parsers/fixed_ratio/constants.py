"""Fixed Ratio Trading program constants and account layout sizes."""

PUBKEY_SIZE = 32
U8_SIZE = 1
U64_SIZE = 8

U8_MAX = 0xFF
U64_MAX = 0xFFFF_FFFF_FFFF_FFFF
I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1

# 7 pubkeys + 4 u64 + 5 bump seeds + flags + 2 fee u64 + 4 token-fee u64
# + 3 SOL-fee u64 + i64 timestamp + 2 consolidation u64
POOL_STATE_SIZE = 7 * PUBKEY_SIZE + 4 * U64_SIZE + 6 * U8_SIZE + 12 * U64_SIZE  # 358

# 12 u64 counters/totals, i64 last update, u64 consolidations, i64 last consolidation
TREASURY_STATE_SIZE = 15 * U64_SIZE  # 120

# is_paused + pause_timestamp + pause_reason_code + admin_authority + option tag
SYSTEM_STATE_PREFIX_SIZE = 1 + U64_SIZE + 1 + PUBKEY_SIZE + 1  # 43
SYSTEM_STATE_MIN_SIZE = SYSTEM_STATE_PREFIX_SIZE + U64_SIZE  # 51, no pending admin
SYSTEM_STATE_MAX_SIZE = SYSTEM_STATE_MIN_SIZE + PUBKEY_SIZE  # 83, pending admin present

OPTION_NONE = 0
OPTION_SOME = 1

# Pool flag bits (PoolState.flags byte)
FLAG_ONE_TO_MANY_RATIO = 1 << 0
FLAG_LIQUIDITY_PAUSED = 1 << 1
FLAG_SWAPS_PAUSED = 1 << 2
FLAG_WITHDRAWAL_PROTECTION = 1 << 3
FLAG_SINGLE_LP_TOKEN_MODE = 1 << 4
FLAG_SWAP_OWNER_ONLY = 1 << 5
DEFINED_FLAGS_MASK = 0b0011_1111

# Token decimals accepted by the ratio engine
MIN_DECIMALS = 0
MAX_DECIMALS = 9

# PDA seed prefixes
POOL_STATE_SEED = b"pool_state"
LP_TOKEN_A_MINT_SEED = b"lp_token_a_mint"
LP_TOKEN_B_MINT_SEED = b"lp_token_b_mint"
TOKEN_A_VAULT_SEED = b"token_a_vault"
TOKEN_B_VAULT_SEED = b"token_b_vault"
MAIN_TREASURY_SEED = b"main_treasury"
SYSTEM_STATE_SEED = b"system_state"

# SystemState.pause_reason_code → description
PAUSE_REASONS: dict[int, str] = {
    0: "No pause (system active)",
    1: "Emergency pause",
    2: "Maintenance pause",
    3: "Security incident",
    4: "Upgrade in progress",
    5: "Configuration change",
    6: "Manual operator pause",
    7: "Automated safety pause",
    8: "Network instability",
    9: "Resource exhaustion",
    10: "Unknown/Other",
}
