class FixedRatioError(ValueError):
    pass


class DecodeError(FixedRatioError):
    pass


class TooShortError(DecodeError):
    """Buffer ended before the field starting at ``offset`` could be read."""

    def __init__(self, offset: int, needed: int, available: int) -> None:
        self.offset = offset
        self.needed = needed
        self.available = available
        super().__init__(
            f"buffer too short at offset {offset}: need {needed} bytes, {available} left"
        )


class InvalidOptionTagError(DecodeError):
    def __init__(self, tag: int, offset: int) -> None:
        self.tag = tag
        self.offset = offset
        super().__init__(f"invalid option tag {tag} at offset {offset} (expected 0 or 1)")


class InvalidEncodingError(DecodeError):
    pass


class RatioError(FixedRatioError):
    pass


class InvalidRatioError(RatioError):
    pass


class InvalidDecimalsError(RatioError):
    pass


class MissingTickerError(RatioError):
    pass


class InvalidAmountError(RatioError):
    pass


class DustRemainderError(RatioError):
    """Swap input does not divide evenly under the pool ratio."""

    def __init__(self, input_basis_points: int, remainder: int) -> None:
        self.input_basis_points = input_basis_points
        self.remainder = remainder
        super().__init__(
            f"{input_basis_points} basis points leave a remainder of {remainder}; "
            "pool requires exact amounts"
        )
