"""Unit tests for user profile reads and self-service updates."""

from unittest.mock import AsyncMock

import pytest

from src.db.models import User
from src.domains.fraud.errors import NotFoundError
from src.domains.portal import profiles
from src.domains.portal.models import UserUpdate


class TestUpdateUser:
    @pytest.mark.asyncio
    async def test_applies_only_set_fields(self, mock_db_session):
        user = User(id="agent-1", role="agent", first_name="Asha", district="Thane")
        mock_db_session.get = AsyncMock(return_value=user)

        update = UserUpdate.model_validate({"district": "Pune", "phoneNumber": "98200"})
        result = await profiles.update_user(mock_db_session, "agent-1", update)

        assert result is user
        assert user.district == "Pune"
        assert user.phone_number == "98200"
        assert user.first_name == "Asha"
        assert user.role == "agent"
        assert user.updated_at is not None
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_role_is_not_editable(self, mock_db_session):
        user = User(id="agent-1", role="agent")
        mock_db_session.get = AsyncMock(return_value=user)

        update = UserUpdate.model_validate({"role": "admin", "state": "MH"})
        await profiles.update_user(mock_db_session, "agent-1", update)

        assert user.role == "agent"
        assert user.state == "MH"

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, mock_db_session):
        with pytest.raises(ValueError):
            await profiles.update_user(mock_db_session, "agent-1", UserUpdate())
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_user(self, mock_db_session):
        with pytest.raises(NotFoundError):
            await profiles.update_user(mock_db_session, "ghost", UserUpdate(district="Pune"))


class TestGetUser:
    @pytest.mark.asyncio
    async def test_missing_user_raises(self, mock_db_session):
        with pytest.raises(NotFoundError):
            await profiles.get_user(mock_db_session, "ghost")
