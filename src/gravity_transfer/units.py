from __future__ import annotations

from decimal import (
    ROUND_CEILING,
    ROUND_DOWN,
    Decimal,
    DecimalException,
    Inexact,
    InvalidOperation,
    localcontext,
)

from .exceptions import InvalidInputError

# Enough significant digits for uint256 amounts at 18 decimals
DECIMAL_PRECISION = 100

# Cosmos sdk.Int and ERC20 amounts are both bounded by uint256
MAX_UINT256 = 2**256 - 1


def parse_decimal(value: object, what: str = "amount") -> Decimal:
    """Parse a human decimal value without going through float.

    Raises:
        InvalidInputError: If ``value`` is missing, not numeric, not finite or negative.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidInputError(f"{what} is required")
    if isinstance(value, bool):
        raise InvalidInputError(f"{what} must be numeric, got {value!r}")
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise InvalidInputError(f"{what} must be numeric, got {value!r}") from e
    if not parsed.is_finite():
        raise InvalidInputError(f"{what} must be finite, got {value!r}")
    if parsed < 0:
        raise InvalidInputError(f"{what} must not be negative, got {value!r}")
    return parsed


def _scale(amount: object, decimals: int, rounding: str) -> str:
    if decimals < 0:
        raise InvalidInputError(f"decimals must not be negative, got {decimals}")
    value = parse_decimal(amount)
    try:
        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            # Scaling must be exact; only the final integral rounding may drop digits
            ctx.traps[Inexact] = True
            scaled = (value * (Decimal(10) ** decimals)).to_integral_value(
                rounding=rounding
            )
    except DecimalException as e:
        raise InvalidInputError(
            f"amount {amount!r} has too many significant digits to scale exactly"
        ) from e

    if scaled > MAX_UINT256:
        raise InvalidInputError(
            f"amount {amount!r} at {decimals} decimals exceeds the uint256 range"
        )
    return str(int(scaled))


def scale_amount(amount: object, decimals: int) -> str:
    """Convert a human amount to an integer string of smallest units.

    Any fraction below the smallest unit is truncated, so a transfer never
    moves more than the user entered.

    Args:
        amount: Decimal string (or Decimal/int) in human units.
        decimals: Decimal precision of the token.

    Returns:
        ``amount * 10**decimals`` truncated toward zero, as a base-10 string.
    """
    return _scale(amount, decimals, ROUND_DOWN)


def scale_amount_ceil(amount: object, decimals: int) -> str:
    """Like :func:`scale_amount` but rounds any fraction up, for fees."""
    return _scale(amount, decimals, ROUND_CEILING)


def format_decimal(value: Decimal) -> str:
    """Render ``value`` in plain notation without trailing zeros."""
    if value == 0:
        return "0"
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return format(value.normalize(), "f")
