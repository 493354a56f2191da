"""
User services package.

- registration: profile creation and invite code redemption
- authorization: caller identity and fail-closed role checks
- vip_service: VIP eligibility and upgrade
- contract_service: contract countdown and time bonuses
"""

from taskminer.services.user.authorization import (
    AuthContext,
    has_role,
    require_admin,
)
from taskminer.services.user.contract_service import (
    BonusMilestone,
    ContractService,
    ContractStatus,
)
from taskminer.services.user.registration import (
    RegistrationService,
    generate_invite_code,
)
from taskminer.services.user.vip_service import VipService


__all__ = [
    "AuthContext",
    "has_role",
    "require_admin",
    "BonusMilestone",
    "ContractService",
    "ContractStatus",
    "RegistrationService",
    "generate_invite_code",
    "VipService",
]
