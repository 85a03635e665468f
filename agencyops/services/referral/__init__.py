"""
Referral services package.

Contains modular services for the affiliate program:
- tiers: Reward tier lookup by active client count
- promo_code_manager: Promo code lifecycle
- chain_manager: Referral registration and chain operations
- statistics: Affiliate dashboard statistics
- earnings_manager: Commission transactions and trial extension
"""

from agencyops.services.referral.chain_manager import (
    ReferralChainManager,
    ReferralInfo,
)
from agencyops.services.referral.earnings_manager import (
    ReferralEarningsManager,
    calculate_commission,
)
from agencyops.services.referral.promo_code_manager import (
    PromoCodeManager,
    normalize_promo_code,
)
from agencyops.services.referral.statistics import (
    AffiliateStatisticsManager,
    AffiliateStats,
    AffiliateTransaction,
)
from agencyops.services.referral.tiers import RewardTierResult, get_reward_tier


__all__ = [
    # Tiers
    "RewardTierResult",
    "get_reward_tier",
    # Managers
    "AffiliateStatisticsManager",
    "PromoCodeManager",
    "ReferralChainManager",
    "ReferralEarningsManager",
    # Results
    "AffiliateStats",
    "AffiliateTransaction",
    "ReferralInfo",
    # Helpers
    "calculate_commission",
    "normalize_promo_code",
]
