#!/usr/bin/env python3
"""
Run monthly payroll for an organization.

Calculates payroll for every member and snapshots it into DRAFT payroll
records. Frozen and paid records are left untouched.

Usage:
    python scripts/run_payroll.py <organization_id> <YYYY-MM> [--dry-run]
"""

import argparse
import asyncio
import sys
import uuid
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger  # noqa: E402

from agencyops.config.database import get_session  # noqa: E402
from agencyops.config.logging import setup_logging  # noqa: E402
from agencyops.repositories.user_repository import UserRepository  # noqa: E402
from agencyops.services.payroll import (  # noqa: E402
    PayrollAggregator,
    PayrollRecordService,
)


async def run(organization_id: uuid.UUID, month: str, dry_run: bool) -> None:
    """Calculate and store payroll for one organization and month."""
    async with get_session() as session:
        aggregator = PayrollAggregator(session)
        stats_by_user = await aggregator.calculate_month(organization_id, month)

        users = {
            user.id: user
            for user in await UserRepository(session).get_by_organization(
                organization_id
            )
        }
        record_service = PayrollRecordService(session)

        for user_id, stats in stats_by_user.items():
            logger.info(
                f"{users[user_id].name}: base={stats.base_salary} "
                f"kpi={stats.kpi_earned} bonuses={stats.bonuses_earned} "
                f"total={stats.total_earnings}"
            )
            if not dry_run:
                await record_service.sync_record(
                    organization_id, users[user_id], stats, month
                )

    logger.info(f"Payroll for {month} done: {len(stats_by_user)} users")


def main() -> None:
    parser = argparse.ArgumentParser(description="Run monthly payroll")
    parser.add_argument("organization_id", type=uuid.UUID)
    parser.add_argument("month", help="Month as YYYY-MM")
    parser.add_argument(
        "--dry-run", action="store_true", help="Calculate without storing records"
    )
    args = parser.parse_args()

    setup_logging()
    asyncio.run(run(args.organization_id, args.month, args.dry_run))


if __name__ == "__main__":
    main()
