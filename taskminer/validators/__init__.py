"""
Validators package.

Provides common validation functions for user input.
"""

from taskminer.validators.common import (
    normalize_invite_code,
    validate_amount,
    validate_wallet_address,
)


__all__ = [
    "validate_amount",
    "validate_wallet_address",
    "normalize_invite_code",
]
