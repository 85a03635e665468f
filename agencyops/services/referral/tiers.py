"""
Reward tier lookup.

Maps the number of active referred clients to the commission percent
paid to the referrer.
"""

from dataclasses import dataclass

from agencyops.config.business_constants import REWARD_TIERS


@dataclass(frozen=True)
class RewardTierResult:
    """Tier matched for an active client count."""

    percent: int
    tier_index: int
    next_tier_percent: int | None = None
    clients_to_next_tier: int | None = None


def get_reward_tier(active_clients: int) -> RewardTierResult:
    """
    Get reward tier for a number of active clients.

    Bands are scanned in order and the first one whose upper bound is
    not below the count wins, so a boundary value belongs to the lower
    band. Counts past every bound fall into the last band.

    Args:
        active_clients: Number of paying referred organizations

    Returns:
        RewardTierResult with percent, tier index and progress to the
        next tier (None for the top tier)
    """
    index = len(REWARD_TIERS) - 1
    for i, tier in enumerate(REWARD_TIERS):
        if tier["max"] is None or tier["max"] >= active_clients:
            index = i
            break

    tier = REWARD_TIERS[index]
    if index + 1 < len(REWARD_TIERS):
        upcoming = REWARD_TIERS[index + 1]
        return RewardTierResult(
            percent=tier["percent"],
            tier_index=index,
            next_tier_percent=upcoming["percent"],
            clients_to_next_tier=max(upcoming["min"] - active_clients, 0),
        )

    return RewardTierResult(percent=tier["percent"], tier_index=index)
