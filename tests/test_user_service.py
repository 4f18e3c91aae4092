"""
Тесты для UserService на временной SQLite БД
"""
import pytest

from carpost_api.app.core.db import get_cursor
from carpost_api.app.core.security import verify_password
from carpost_api.app.schemas.user import ProfileUpdateRequest, RegisterRequest
from carpost_api.app.services.errors import EmailAlreadyRegisteredError, UserNotFoundError
from carpost_api.app.services.user_service import UserService
from conftest import count_rows


@pytest.fixture
def user_service(db_path):
    return UserService()


class TestUserService:
    @pytest.mark.asyncio
    async def test_add_user_hashes_password(self, user_service):
        user_id = await user_service.add_user(RegisterRequest(
            email="  New@Example.com ", password="password123", first_name=" Anna ",
        ))

        with get_cursor() as cursor:
            row = cursor.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        assert row["email"] == "new@example.com"
        assert row["first_name"] == "Anna"
        assert row["password"] != "password123"
        assert verify_password("password123", row["password"])
        assert count_rows("users") == 1

    @pytest.mark.asyncio
    async def test_duplicate_email(self, user_service, users):
        with pytest.raises(EmailAlreadyRegisteredError):
            await user_service.add_user(RegisterRequest(
                email="U@example.com", password="password123", first_name="Dup",
            ))
        assert count_rows("users") == 2

    @pytest.mark.asyncio
    async def test_email_exists(self, user_service, users):
        assert await user_service.email_exists("u@example.com")
        assert await user_service.email_exists(" U@Example.com")
        assert not await user_service.email_exists("nobody@example.com")
        assert not await user_service.email_exists("u@example.com", exclude_user_id=users["u"])
        assert await user_service.email_exists("u@example.com", exclude_user_id=users["v"])

    @pytest.mark.asyncio
    async def test_profile_for_edit(self, user_service, users):
        profile = await user_service.get_user_profile_for_edit(users["u"])
        assert profile.email == "u@example.com"
        assert profile.first_name == "Ivan"
        assert profile.last_name == "Ivanov"
        assert profile.phone == "+79991234567"

    @pytest.mark.asyncio
    async def test_profile_for_missing_user(self, user_service, db_path):
        with pytest.raises(UserNotFoundError):
            await user_service.get_user_profile_for_edit(999)
        with pytest.raises(UserNotFoundError):
            await user_service.get_user_profile(999)

    @pytest.mark.asyncio
    async def test_profile_without_cars(self, user_service, users):
        profile = await user_service.get_user_profile(users["v"])
        assert profile.id == users["v"]
        assert profile.cars == []
        assert profile.created_at

    @pytest.mark.asyncio
    async def test_partial_update_keeps_omitted_fields(self, user_service, users):
        await user_service.update_profile(ProfileUpdateRequest(phone="+70000000000"), users["u"])

        profile = await user_service.get_user_profile_for_edit(users["u"])
        assert profile.phone == "+70000000000"
        assert profile.first_name == "Ivan"
        assert profile.last_name == "Ivanov"
        assert profile.email == "u@example.com"

    @pytest.mark.asyncio
    async def test_null_fields_keep_values(self, user_service, users):
        await user_service.update_profile(ProfileUpdateRequest(last_name=None, first_name="Ivan II"), users["u"])

        profile = await user_service.get_user_profile_for_edit(users["u"])
        assert profile.first_name == "Ivan II"
        assert profile.last_name == "Ivanov"

    @pytest.mark.asyncio
    async def test_password_update_is_hashed(self, user_service, users):
        await user_service.update_profile(ProfileUpdateRequest(password="brand-new-pass"), users["u"])

        with get_cursor() as cursor:
            stored = cursor.execute("SELECT password FROM users WHERE id = ?", (users["u"],)).fetchone()["password"]
        assert verify_password("brand-new-pass", stored)

    @pytest.mark.asyncio
    async def test_update_to_taken_email(self, user_service, users):
        with pytest.raises(EmailAlreadyRegisteredError):
            await user_service.update_profile(ProfileUpdateRequest(email="v@example.com"), users["u"])

    @pytest.mark.asyncio
    async def test_update_missing_user(self, user_service, db_path):
        with pytest.raises(UserNotFoundError):
            await user_service.update_profile(ProfileUpdateRequest(first_name="Ghost"), 404)

    @pytest.mark.asyncio
    async def test_set_password_by_email(self, user_service, users):
        assert await user_service.set_password(" U@Example.com ", "reset-pass-1") is True
        assert await user_service.set_password("ghost@example.com", "reset-pass-1") is False

        with get_cursor() as cursor:
            stored = cursor.execute("SELECT password FROM users WHERE id = ?", (users["u"],)).fetchone()["password"]
        assert verify_password("reset-pass-1", stored)
