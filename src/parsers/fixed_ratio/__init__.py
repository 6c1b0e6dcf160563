from src.parsers.fixed_ratio.decoder import (
    AccountKind,
    account_bytes_from_b64,
    classify_account,
    decode_pool_state,
    decode_system_state,
    decode_treasury_state,
)
from src.parsers.fixed_ratio.exceptions import (
    DecodeError,
    DustRemainderError,
    FixedRatioError,
    InvalidAmountError,
    InvalidDecimalsError,
    InvalidEncodingError,
    InvalidOptionTagError,
    InvalidRatioError,
    MissingTickerError,
    RatioError,
    TooShortError,
)
from src.parsers.fixed_ratio.flags import interpret_flags
from src.parsers.fixed_ratio.models import PoolFlags, PoolState, SystemState, TreasuryState
from src.parsers.fixed_ratio.ratio import (
    RatioPair,
    SwapQuote,
    basis_points_to_display,
    display_to_basis_points,
    has_remainder,
    validate_one_to_many_ratio,
)

__all__ = [
    "AccountKind",
    "account_bytes_from_b64",
    "classify_account",
    "decode_pool_state",
    "decode_system_state",
    "decode_treasury_state",
    "interpret_flags",
    "PoolFlags",
    "PoolState",
    "SystemState",
    "TreasuryState",
    "RatioPair",
    "SwapQuote",
    "basis_points_to_display",
    "display_to_basis_points",
    "has_remainder",
    "validate_one_to_many_ratio",
    "FixedRatioError",
    "DecodeError",
    "TooShortError",
    "InvalidOptionTagError",
    "InvalidEncodingError",
    "RatioError",
    "InvalidRatioError",
    "InvalidDecimalsError",
    "MissingTickerError",
    "InvalidAmountError",
    "DustRemainderError",
]
