"""
Common validators for user input.

Each validator returns a tuple of (is_valid, parsed_value, error_message).
"""

import re
from decimal import Decimal, InvalidOperation

INVITE_CODE_PATTERN = re.compile(r"^[A-Z0-9]{4,20}$")


def validate_amount(
    value: str | Decimal | int | float | None,
    min_amount: Decimal | None = None,
    max_amount: Decimal | None = None,
) -> tuple[bool, Decimal | None, str | None]:
    """
    Validate a monetary amount.

    Amounts must be finite, strictly positive and have at most
    8 decimal places.

    Args:
        value: Amount as entered (string or number)
        min_amount: Minimum allowed amount (inclusive)
        max_amount: Maximum allowed amount (inclusive)

    Returns:
        Tuple of (is_valid, parsed_amount, error_message)

    Examples:
        >>> validate_amount("100.50")
        (True, Decimal('100.50'), None)
        >>> validate_amount("abc")
        (False, None, 'Invalid amount format')
        >>> validate_amount("0")
        (False, None, 'Amount must be greater than 0')
    """
    if value is None or isinstance(value, bool):
        return False, None, "Amount is empty"

    if isinstance(value, Decimal):
        amount = value
    else:
        raw = str(value).strip().replace(",", ".")
        if not raw:
            return False, None, "Amount is empty"
        try:
            amount = Decimal(raw)
        except InvalidOperation:
            return False, None, "Invalid amount format"

    if not amount.is_finite():
        return False, None, "Amount must be a finite number"

    if amount <= 0:
        return False, None, "Amount must be greater than 0"

    if min_amount is not None and amount < min_amount:
        return False, None, f"Minimum amount is ${min_amount}"

    if max_amount is not None and amount > max_amount:
        return False, None, f"Amount must be <= {max_amount}"

    # Check precision (8 decimal places max)
    if amount.as_tuple().exponent < -8:
        return False, None, "Amount has too many decimal places (maximum 8)"

    return True, amount, None


def validate_wallet_address(
    value: str | None,
) -> tuple[bool, str | None, str | None]:
    """
    Validate a payout/source wallet address.

    Any non-blank address is accepted; it is trimmed before storing.

    Examples:
        >>> validate_wallet_address("  TXyz123  ")
        (True, 'TXyz123', None)
        >>> validate_wallet_address("   ")
        (False, None, 'Wallet address is required')
    """
    if not value or not isinstance(value, str):
        return False, None, "Wallet address is required"

    address = value.strip()
    if not address:
        return False, None, "Wallet address is required"

    if len(address) > 255:
        return False, None, "Wallet address is too long"

    return True, address, None


def normalize_invite_code(value: str | None) -> str | None:
    """
    Normalize an invite code entered at signup.

    Returns:
        Upper-case code, or None when the input cannot be a valid code
    """
    if not value or not isinstance(value, str):
        return None

    code = value.strip().upper()
    if not INVITE_CODE_PATTERN.match(code):
        return None
    return code
