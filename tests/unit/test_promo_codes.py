"""
Unit tests for promo code management.

Tests cover:
- Code normalization
- Creation with duplicate/empty codes
- Validation of active codes
- Organization scoped deactivation
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from agencyops.services.referral.promo_code_manager import (
    PromoCodeManager,
    normalize_promo_code,
)
from agencyops.utils.exceptions import ValidationError


@pytest.fixture
def manager(mock_session):
    """Create PromoCodeManager with mocked repository."""
    manager = PromoCodeManager(mock_session)
    manager.promo_repo = AsyncMock()
    return manager


class TestNormalizePromoCode:
    """Test code normalization."""

    def test_lowercase_and_strip(self):
        assert normalize_promo_code("  SUMMER ") == "summer"

    def test_inner_whitespace_removed(self):
        assert normalize_promo_code("Summer 2026\t") == "summer2026"

    def test_none_is_empty(self):
        assert normalize_promo_code(None) == ""


class TestCreatePromoCode:
    """Test promo code creation."""

    @pytest.mark.asyncio
    async def test_create_normalizes_code(self, manager, mock_session):
        """Stored code is normalized."""
        org_id, user_id = uuid.uuid4(), uuid.uuid4()
        manager.promo_repo.get_by_code.return_value = None

        await manager.create_promo_code(org_id, user_id, " Agency 42 ")

        manager.promo_repo.create.assert_awaited_once_with(
            organization_id=org_id, user_id=user_id, code="agency42"
        )
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_code_rejected(self, manager):
        """Existing code raises ValidationError."""
        manager.promo_repo.get_by_code.return_value = MagicMock()

        with pytest.raises(ValidationError, match="Промокод уже существует"):
            await manager.create_promo_code(uuid.uuid4(), uuid.uuid4(), "taken")

        manager.promo_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_code_rejected(self, manager):
        """Whitespace-only code raises ValidationError."""
        with pytest.raises(ValidationError):
            await manager.create_promo_code(uuid.uuid4(), uuid.uuid4(), "   ")


class TestValidateAndDeactivate:
    """Test validation and deactivation."""

    @pytest.mark.asyncio
    async def test_validate_active_code(self, manager):
        promo = MagicMock()
        manager.promo_repo.get_by_code.return_value = promo

        valid, found = await manager.validate_promo_code("CODE")

        assert valid is True
        assert found is promo
        manager.promo_repo.get_by_code.assert_awaited_once_with(
            "code", active_only=True
        )

    @pytest.mark.asyncio
    async def test_validate_unknown_code(self, manager):
        manager.promo_repo.get_by_code.return_value = None

        assert await manager.validate_promo_code("nope") == (False, None)

    @pytest.mark.asyncio
    async def test_deactivate_foreign_code_refused(self, manager):
        """Codes of another organization are not touched."""
        promo = MagicMock(organization_id=uuid.uuid4())
        manager.promo_repo.get_by_id.return_value = promo

        result = await manager.deactivate_promo_code(uuid.uuid4(), uuid.uuid4())

        assert result is False
        manager.promo_repo.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deactivate_own_code(self, manager):
        org_id, code_id = uuid.uuid4(), uuid.uuid4()
        manager.promo_repo.get_by_id.return_value = MagicMock(organization_id=org_id)

        result = await manager.deactivate_promo_code(org_id, code_id)

        assert result is True
        manager.promo_repo.update.assert_awaited_once_with(code_id, is_active=False)
