#!/usr/bin/env python3
"""
Release referral commissions whose hold period is over.

Meant to run daily from cron.

Usage:
    python scripts/release_commissions.py
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger  # noqa: E402

from agencyops.config.database import get_session  # noqa: E402
from agencyops.config.logging import setup_logging  # noqa: E402
from agencyops.services.referral import ReferralEarningsManager  # noqa: E402


async def run() -> int:
    """Release matured commissions."""
    async with get_session() as session:
        return await ReferralEarningsManager(session).release_ready()


def main() -> None:
    setup_logging()
    released = asyncio.run(run())
    logger.info(f"Released {released} referral commissions")


if __name__ == "__main__":
    main()
