"""
Unit tests for referral commissions.

Tests cover:
- Commission math per chain level
- Payment recording across the chain
- Hold period release
- Paying out ready commissions
- Promo trial extension
"""

import uuid
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from agencyops.services.referral.earnings_manager import (
    ReferralEarningsManager,
    calculate_commission,
)
from agencyops.utils.exceptions import NotFoundError, ValidationError


@pytest.fixture
def manager(mock_session):
    """Create ReferralEarningsManager with mocked repositories."""
    manager = ReferralEarningsManager(mock_session)
    manager.promo_repo = AsyncMock()
    manager.registration_repo = AsyncMock()
    manager.transaction_repo = AsyncMock()
    manager.organization_repo = AsyncMock()
    return manager


def make_edge(level, promo_code_id=None):
    """Chain edge pointing at the paying organization."""
    edge = MagicMock()
    edge.level = level
    edge.referrer_org_id = uuid.uuid4()
    edge.referrer_user_id = uuid.uuid4()
    edge.promo_code_id = promo_code_id
    return edge


class TestCalculateCommission:
    """Test commission math."""

    def test_level_1_full_tier_percent(self):
        percent, amount = calculate_commission(Decimal("1000"), 20, 1)

        assert percent == Decimal("20.00")
        assert amount == Decimal("200.00")

    def test_level_2_quarter_of_tier(self):
        percent, amount = calculate_commission(Decimal("1000"), 20, 2)

        assert percent == Decimal("5.00")
        assert amount == Decimal("50.00")

    def test_level_3_tenth_of_tier(self):
        percent, amount = calculate_commission(Decimal("1000"), 20, 3)

        assert percent == Decimal("2.00")
        assert amount == Decimal("20.00")

    def test_amount_rounded_half_up(self):
        """25% of 0.10 is 0.025 -> 0.03."""
        _, amount = calculate_commission(Decimal("0.10"), 25, 1)

        assert amount == Decimal("0.03")

    def test_unknown_level_pays_nothing(self):
        percent, amount = calculate_commission(Decimal("1000"), 20, 4)

        assert percent == Decimal("0.00")
        assert amount == Decimal("0.00")


class TestRecordPayment:
    """Test ReferralEarningsManager.record_payment."""

    @pytest.mark.asyncio
    async def test_non_positive_payment_ignored(self, manager):
        result = await manager.record_payment(uuid.uuid4(), Decimal("0"))

        assert result == []
        manager.registration_repo.get_for_referred.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_chain_no_transactions(self, manager, mock_session):
        manager.registration_repo.get_for_referred.return_value = []

        result = await manager.record_payment(uuid.uuid4(), Decimal("1000"))

        assert result == []
        manager.registration_repo.mark_active.assert_not_awaited()
        manager.transaction_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_one_transaction_per_edge(self, manager, mock_session):
        """Each level gets its share of the referrer's tier percent."""
        referred = uuid.uuid4()
        promo_code_id = uuid.uuid4()
        edges = [make_edge(1, promo_code_id), make_edge(2, promo_code_id)]
        manager.registration_repo.get_for_referred.return_value = edges
        manager.registration_repo.count_level_1.return_value = 3

        result = await manager.record_payment(referred, Decimal("1000"))

        assert len(result) == 2
        manager.registration_repo.mark_active.assert_awaited_once_with(referred)

        calls = manager.transaction_repo.create.await_args_list
        first, second = calls[0].kwargs, calls[1].kwargs
        assert first["referrer_user_id"] == edges[0].referrer_user_id
        assert first["commission_percent"] == Decimal("20.00")
        assert first["commission_amount"] == Decimal("200.00")
        assert first["status"] == "pending"
        assert second["level"] == 2
        assert second["commission_percent"] == Decimal("5.00")
        assert second["commission_amount"] == Decimal("50.00")

        manager.promo_repo.increment_payments.assert_awaited_once_with(
            promo_code_id
        )
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_registration_paid_once(self, manager):
        """Two identical level-1 edges yield one commission."""
        promo_code_id = uuid.uuid4()
        first = make_edge(1, promo_code_id)
        duplicate = make_edge(1, promo_code_id)
        duplicate.referrer_org_id = first.referrer_org_id
        duplicate.referrer_user_id = first.referrer_user_id
        manager.registration_repo.get_for_referred.return_value = [
            first,
            duplicate,
            make_edge(2),
        ]
        manager.registration_repo.count_level_1.return_value = 3

        result = await manager.record_payment(uuid.uuid4(), Decimal("1000"))

        assert len(result) == 2
        amounts = [
            call.kwargs["commission_amount"]
            for call in manager.transaction_repo.create.await_args_list
        ]
        assert amounts == [Decimal("200.00"), Decimal("50.00")]
        manager.promo_repo.increment_payments.assert_awaited_once_with(
            promo_code_id
        )

    @pytest.mark.asyncio
    async def test_tier_looked_up_per_referrer(self, manager):
        edge = make_edge(1)
        manager.registration_repo.get_for_referred.return_value = [edge]
        manager.registration_repo.count_level_1.return_value = 12

        await manager.record_payment(uuid.uuid4(), Decimal("100"))

        manager.registration_repo.count_level_1.assert_awaited_once_with(
            edge.referrer_org_id, active_only=True
        )
        kwargs = manager.transaction_repo.create.await_args.kwargs
        assert kwargs["commission_percent"] == Decimal("30.00")
        assert kwargs["commission_amount"] == Decimal("30.00")

    @pytest.mark.asyncio
    async def test_ready_at_after_hold_period(self, manager):
        now = datetime(2026, 3, 1, tzinfo=UTC)
        manager.registration_repo.get_for_referred.return_value = [make_edge(1)]
        manager.registration_repo.count_level_1.return_value = 1

        with patch(
            "agencyops.services.referral.earnings_manager.utc_now",
            return_value=now,
        ), patch(
            "agencyops.services.referral.earnings_manager.settings"
        ) as settings:
            settings.referral_hold_days = 14
            await manager.record_payment(uuid.uuid4(), Decimal("100"))

        kwargs = manager.transaction_repo.create.await_args.kwargs
        assert kwargs["ready_at"] == now + timedelta(days=14)

    @pytest.mark.asyncio
    async def test_failure_rolls_back(self, manager, mock_session):
        manager.registration_repo.get_for_referred.return_value = [make_edge(1)]
        manager.registration_repo.count_level_1.return_value = 1
        manager.transaction_repo.create.side_effect = RuntimeError("db down")

        with pytest.raises(RuntimeError):
            await manager.record_payment(uuid.uuid4(), Decimal("100"))

        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()


class TestReleaseAndPay:
    """Test hold release and payout."""

    @pytest.mark.asyncio
    async def test_release_ready(self, manager, mock_session):
        now = datetime(2026, 3, 15, tzinfo=UTC)
        manager.transaction_repo.release_matured.return_value = 4

        released = await manager.release_ready(now)

        assert released == 4
        manager.transaction_repo.release_matured.assert_awaited_once_with(now)
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_mark_paid_from_ready(self, manager, mock_session):
        transaction = MagicMock()
        transaction.status = "ready"
        transaction.commission_amount = Decimal("50.00")
        manager.transaction_repo.get_by_id.return_value = transaction
        manager.transaction_repo.update.return_value = transaction
        transaction_id = uuid.uuid4()

        await manager.mark_paid(transaction_id)

        kwargs = manager.transaction_repo.update.await_args.kwargs
        assert kwargs["status"] == "paid"
        assert kwargs["paid_at"] is not None
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_mark_paid_pending_rejected(self, manager, mock_session):
        transaction = MagicMock()
        transaction.status = "pending"
        manager.transaction_repo.get_by_id.return_value = transaction

        with pytest.raises(ValidationError):
            await manager.mark_paid(uuid.uuid4())

        manager.transaction_repo.update.assert_not_awaited()
        mock_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_mark_paid_unknown(self, manager):
        manager.transaction_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await manager.mark_paid(uuid.uuid4())


class TestExtendTrial:
    """Test trial extension for promo sign-ups."""

    @pytest.mark.asyncio
    async def test_extends_existing_trial(self, manager):
        trial_end = datetime(2026, 4, 1, tzinfo=UTC)
        organization = MagicMock()
        organization.trial_end_date = trial_end
        manager.organization_repo.get_by_id.return_value = organization

        with patch(
            "agencyops.services.referral.earnings_manager.settings"
        ) as settings:
            settings.promo_trial_extension_days = 14
            await manager.extend_trial_for_promo(uuid.uuid4())

        kwargs = manager.organization_repo.update.await_args.kwargs
        assert kwargs["trial_end_date"] == datetime(2026, 4, 15, tzinfo=UTC)
        assert kwargs["subscription_end_date"] == kwargs["trial_end_date"]
        assert kwargs["plan_name"] == "Professional"
        assert kwargs["subscription_status"] == "trial"

    @pytest.mark.asyncio
    async def test_missing_organization(self, manager):
        manager.organization_repo.get_by_id.return_value = None

        assert await manager.extend_trial_for_promo(uuid.uuid4()) is None
        manager.organization_repo.update.assert_not_awaited()
