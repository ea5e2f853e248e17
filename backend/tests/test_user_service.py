"""
Inkpress Backend - User Service Unit Tests
===========================================

What:  Tests for registration and credential checks.
How:   Mock DB sessions; bcrypt runs for real at the minimum cost factor.

What we test:
    ✅ Stored hash differs from the password and verifies against it
    ✅ Empty username/password rejected before touching the database
    ✅ Passwords with NUL bytes rejected (register) or treated as wrong (login)
    ✅ Taken usernames rejected (pre-check and unique index)
    ✅ Unknown user and wrong password report different messages
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from inkpress.exceptions import ValidationError
from inkpress.models.user import User
from inkpress.services.user_service import UserService


def _lookup_returns(session, user):
    result = MagicMock()
    result.scalar_one_or_none.return_value = user
    session.execute.return_value = result


class TestPasswordHashing:

    def test_hash_is_salted_and_verifies(self):
        service = UserService(bcrypt_rounds=4)
        first = service.hash_password("hunter2")
        second = service.hash_password("hunter2")

        assert first != "hunter2"
        assert first != second
        assert service.verify_password("hunter2", first)
        assert not service.verify_password("hunter3", first)


class TestRegister:

    def setup_method(self):
        self.service = UserService(bcrypt_rounds=4)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username,password", [("", "pw"), ("alice", ""), ("", "")])
    async def test_register_missing_fields(self, mock_db_session, username, password):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.register(mock_db_session, username, password)

        assert exc_info.value.message == "Username or password is missing"
        mock_db_session.execute.assert_not_awaited()
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_success(self, mock_db_session):
        _lookup_returns(mock_db_session, None)

        user = await self.service.register(mock_db_session, "alice", "pw")

        assert user.username == "alice"
        assert user.password_hash != "pw"
        assert self.service.verify_password("pw", user.password_hash)
        mock_db_session.add.assert_called_once_with(user)
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_register_username_taken(self, mock_db_session):
        _lookup_returns(mock_db_session, User(username="alice", password_hash="x"))

        with pytest.raises(ValidationError, match="Username is already taken"):
            await self.service.register(mock_db_session, "alice", "pw")
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_race_hits_unique_index(self, mock_db_session):
        _lookup_returns(mock_db_session, None)
        mock_db_session.flush.side_effect = IntegrityError("INSERT INTO users", {}, Exception("duplicate"))

        with pytest.raises(ValidationError, match="Username is already taken"):
            await self.service.register(mock_db_session, "alice", "pw")

    @pytest.mark.asyncio
    async def test_register_password_bcrypt_rejects(self, mock_db_session):
        _lookup_returns(mock_db_session, None)

        with pytest.raises(ValidationError) as exc_info:
            await self.service.register(mock_db_session, "alice", "x\x00y")

        assert exc_info.value.message == "Password contains unsupported characters"
        mock_db_session.add.assert_not_called()


class TestAuthenticate:

    def setup_method(self):
        self.service = UserService(bcrypt_rounds=4)

    @pytest.mark.asyncio
    async def test_unknown_user(self, mock_db_session):
        _lookup_returns(mock_db_session, None)

        with pytest.raises(ValidationError) as exc_info:
            await self.service.authenticate(mock_db_session, "nobody", "pw")
        assert exc_info.value.message == "User not found"

    @pytest.mark.asyncio
    async def test_wrong_password(self, mock_db_session):
        user = User(username="alice", password_hash=self.service.hash_password("right"))
        _lookup_returns(mock_db_session, user)

        with pytest.raises(ValidationError) as exc_info:
            await self.service.authenticate(mock_db_session, "alice", "wrong")
        assert exc_info.value.message == "Incorrect password"

    @pytest.mark.asyncio
    async def test_correct_password(self, mock_db_session):
        user = User(username="alice", password_hash=self.service.hash_password("right"))
        _lookup_returns(mock_db_session, user)

        assert await self.service.authenticate(mock_db_session, "alice", "right") is user

    @pytest.mark.asyncio
    async def test_password_bcrypt_rejects_is_incorrect(self, mock_db_session):
        user = User(username="alice", password_hash=self.service.hash_password("right"))
        _lookup_returns(mock_db_session, user)

        with pytest.raises(ValidationError) as exc_info:
            await self.service.authenticate(mock_db_session, "alice", "x\x00y")
        assert exc_info.value.message == "Incorrect password"
