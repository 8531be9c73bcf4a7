"""Conversions between user-entered decimals and on-chain base units."""

from decimal import Decimal, InvalidOperation
from typing import Any, Union

from web3 import Web3

from decrowdfund.shared.constants import ContractConstants
from decrowdfund.shared.exceptions import ValidationException

Number = Union[int, str, Decimal]


def from_base_units(amount: Any) -> Decimal:
    """Convert wei (int, or a numeric string as some providers return) to ether.

    Uses Decimal arithmetic, so the result is exact to 18 places.
    """
    if amount is None or amount == "":
        return Decimal(0)
    # from_wei returns a bare int 0 for zero
    return Decimal(Web3.from_wei(int(amount), ContractConstants.AMOUNT_UNIT))


def parse_decimal(value: Any, field: str) -> Decimal:
    """Parse a user-entered decimal amount, rejecting junk and NaN/inf."""
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationException(f"{field} is required")
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        raise ValidationException(f"{field} must be a number, got {text!r}")
    if not parsed.is_finite():
        raise ValidationException(f"{field} must be a finite number")
    return parsed


def to_base_units(value: Any, field: str = "amount") -> int:
    """Convert a decimal ether amount entered by the user to wei."""
    parsed = parse_decimal(value, field)
    if parsed < 0:
        raise ValidationException(f"{field} cannot be negative")
    try:
        wei = Web3.to_wei(parsed, ContractConstants.AMOUNT_UNIT)
    except ValueError as e:
        raise ValidationException(f"{field} is out of range: {e}")
    # to_wei truncates below 1 wei
    if from_base_units(wei) != parsed:
        raise ValidationException(f"{field} has too many decimal places")
    return wei


def parse_int(value: Any, field: str) -> int:
    """Parse a whole number of seconds (duration, deadline extension)."""
    parsed = parse_decimal(value, field)
    if parsed < 0:
        raise ValidationException(f"{field} cannot be negative")
    if parsed != parsed.to_integral_value():
        raise ValidationException(f"{field} must be a whole number")
    return int(parsed)


def rating_from_scaled(avg_rating: Any) -> Decimal:
    """437 -> Decimal('4.37')."""
    scaled = int(avg_rating or 0)
    return (Decimal(scaled) / ContractConstants.RATING_SCALE).quantize(
        Decimal("0.01")
    )
