"""
Business logic for users: registration and the caller's own profile.

Passwords are hashed with ``core.security.hash_password`` before they
reach the database.  Payload validation happens in the endpoints;
the service only enforces what the database itself guarantees
(unique email, existing user).
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from carpost_api.app.core.db import get_cursor
from carpost_api.app.core.security import hash_password
from carpost_api.app.schemas.user import (
    ProfileEditRead,
    ProfileRead,
    ProfileUpdateRequest,
    RegisterRequest,
)
from carpost_api.app.services.car_service import CAR_PROFILE_SELECT, CursorFactory, row_to_car_profile
from carpost_api.app.services.errors import EmailAlreadyRegisteredError, UserNotFoundError


logger = logging.getLogger(__name__)


class UserService:
    """Сервис для работы с пользователями.

    Регистрация, просмотр и частичное редактирование собственного
    профиля.  Идентификатор пользователя приходит из токена.
    """

    def __init__(self, cursor_factory: CursorFactory = get_cursor) -> None:
        self._cursor = cursor_factory

    async def add_user(self, data: RegisterRequest) -> int:
        """Create a user and return the new id.

        Raises ``EmailAlreadyRegisteredError`` if the email is taken,
        including when a concurrent registration wins the race after
        ``email_exists`` was checked.
        """
        logger.info("Registering user %s", data.email)
        try:
            with self._cursor() as cursor:
                cursor.execute(
                    "INSERT INTO users (email, password, first_name, last_name, phone) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (
                        data.email,
                        hash_password(data.password),
                        data.first_name,
                        data.last_name,
                        data.phone,
                    ),
                )
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            raise EmailAlreadyRegisteredError(f"Email {data.email} is already registered") from exc
        return user_id

    async def email_exists(self, email: str, exclude_user_id: Optional[int] = None) -> bool:
        """Return whether ``email`` (case insensitive) belongs to an account.

        ``exclude_user_id`` lets a user keep their own email on update.
        """
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT id FROM users WHERE email = ? AND id != ?",
                (email.strip().lower(), exclude_user_id or 0),
            ).fetchone()
        return row is not None

    async def get_user_profile_for_edit(self, user_id: int) -> ProfileEditRead:
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT email, first_name, last_name, phone FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        if not row:
            raise UserNotFoundError(f"User {user_id} not found")
        return ProfileEditRead(**dict(row))

    async def get_user_profile(self, user_id: int) -> ProfileRead:
        """Return the read‑only profile together with the user's cars."""
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT id, email, first_name, last_name, phone, created_at FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
            if not row:
                raise UserNotFoundError(f"User {user_id} not found")
            car_rows = cursor.execute(
                CAR_PROFILE_SELECT + " WHERE c.user_id = ? ORDER BY c.id",
                (user_id,),
            ).fetchall()
        return ProfileRead(**dict(row), cars=[row_to_car_profile(r) for r in car_rows])

    async def update_profile(self, data: ProfileUpdateRequest, user_id: int) -> None:
        """Update only the fields present in ``data``.

        Omitted fields and fields sent as ``null`` keep their stored
        values.  A new password is hashed before it is written.
        """
        updates = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if "password" in updates:
            updates["password"] = hash_password(updates["password"])
        try:
            with self._cursor() as cursor:
                row = cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone()
                if not row:
                    raise UserNotFoundError(f"User {user_id} not found")
                if updates:
                    assignments = ", ".join(f"{key} = ?" for key in updates)
                    cursor.execute(
                        f"UPDATE users SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                        (*updates.values(), user_id),
                    )
        except sqlite3.IntegrityError as exc:
            raise EmailAlreadyRegisteredError(f"Email {updates.get('email')} is already registered") from exc
        logger.info("User %s updated profile fields %s", user_id, sorted(updates))

    async def set_password(self, email: str, password: str) -> bool:
        """Store a new password for the account with ``email``.

        Used by the ``reset_password.py`` ops tool.  Returns ``False``
        if no account has this email.
        """
        with self._cursor() as cursor:
            cursor.execute(
                "UPDATE users SET password = ?, updated_at = CURRENT_TIMESTAMP WHERE email = ?",
                (hash_password(password), email.strip().lower()),
            )
            updated = cursor.rowcount > 0
        if updated:
            logger.info("Password reset for %s", email)
        return updated
