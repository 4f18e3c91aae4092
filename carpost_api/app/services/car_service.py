"""
Business logic for cars in a user's profile.

Every operation that targets a single car is scoped to its owner: a
car that belongs to another user is reported exactly like a car that
does not exist, so foreign ids cannot be discovered.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Callable, ContextManager

from carpost_api.app.core.db import MAX_ROW_ID, get_cursor
from carpost_api.app.schemas.car import (
    BrandRead,
    CarProfileRead,
    CarStoreRequest,
    CarUpdateRequest,
    CreateCarRead,
    GenerationRead,
    ModelRead,
)
from carpost_api.app.services.errors import CarNotFoundError, GenerationNotFoundError, UserNotFoundError


logger = logging.getLogger(__name__)

CursorFactory = Callable[[], ContextManager[sqlite3.Cursor]]

# Joined view of a car with the names of its generation, model and brand.
CAR_PROFILE_SELECT = """
    SELECT c.id, c.name, c.plate, c.vin, c.generation_id,
           g.name AS generation, g.year_start, g.year_end,
           m.name AS model, b.name AS brand,
           c.created_at, c.updated_at
    FROM cars c
    JOIN car_generations g ON g.id = c.generation_id
    JOIN car_models m ON m.id = g.model_id
    JOIN car_brands b ON b.id = m.brand_id
"""


def row_to_car_profile(row: sqlite3.Row) -> CarProfileRead:
    return CarProfileRead(**dict(row))


def is_row_id(value: int) -> bool:
    """Whether ``value`` can be the id of a stored row."""
    return 0 < value <= MAX_ROW_ID


class CarService:
    """Сервис для работы с машинами пользователя.

    Справочники (марки, модели, поколения) только читаются; их
    наполнение выполняет ``CatalogService``.
    """

    def __init__(self, cursor_factory: CursorFactory = get_cursor) -> None:
        self._cursor = cursor_factory

    async def create_car(self) -> CreateCarRead:
        """Return every brand, model and generation for the new car form.

        No filtering or pagination: the lists are full table contents.
        """
        with self._cursor() as cursor:
            brands = cursor.execute("SELECT id, name FROM car_brands ORDER BY id").fetchall()
            models = cursor.execute(
                "SELECT id, name, brand_id FROM car_models ORDER BY id"
            ).fetchall()
            generations = cursor.execute(
                "SELECT id, name, model_id, year_start, year_end FROM car_generations ORDER BY id"
            ).fetchall()
        return CreateCarRead(
            brands=[BrandRead(**dict(row)) for row in brands],
            models=[ModelRead(**dict(row)) for row in models],
            generations=[GenerationRead(**dict(row)) for row in generations],
        )

    async def store_car(self, data: CarStoreRequest, user_id: int) -> int:
        """Persist a new car owned by ``user_id`` and return its id."""
        with self._cursor() as cursor:
            if not cursor.execute("SELECT 1 FROM users WHERE id = ?", (user_id,)).fetchone():
                raise UserNotFoundError(f"User {user_id} not found")
            self._ensure_generation(cursor, data.generation_id)
            cursor.execute(
                "INSERT INTO cars (user_id, generation_id, name, plate, vin) VALUES (?, ?, ?, ?, ?)",
                (user_id, data.generation_id, data.name, data.plate, data.vin),
            )
            car_id = cursor.lastrowid
        logger.info("User %s added car %s", user_id, car_id)
        return car_id

    async def car_find_by_id(self, car_id: int, user_id: int) -> CarProfileRead:
        """Return the caller's car ``car_id``.

        Raises ``CarNotFoundError`` if it is missing or owned by someone else.
        """
        if not is_row_id(car_id):
            raise CarNotFoundError(f"Car {car_id} not found")
        with self._cursor() as cursor:
            row = cursor.execute(
                CAR_PROFILE_SELECT + " WHERE c.id = ? AND c.user_id = ?",
                (car_id, user_id),
            ).fetchone()
        if not row:
            raise CarNotFoundError(f"Car {car_id} not found")
        return row_to_car_profile(row)

    async def update_car_for_profile(self, car_id: int, data: CarUpdateRequest, user_id: int) -> None:
        """Apply a partial update to the caller's car.

        Only fields present in the request are written.  Raises
        ``CarNotFoundError`` or ``GenerationNotFoundError``.
        """
        updates = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if not is_row_id(car_id):
            raise CarNotFoundError(f"Car {car_id} not found")
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT id FROM cars WHERE id = ? AND user_id = ?", (car_id, user_id)
            ).fetchone()
            if not row:
                raise CarNotFoundError(f"Car {car_id} not found")
            if "generation_id" in updates:
                self._ensure_generation(cursor, updates["generation_id"])
            if updates:
                assignments = ", ".join(f"{key} = ?" for key in updates)
                cursor.execute(
                    f"UPDATE cars SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (*updates.values(), car_id),
                )
        logger.info("User %s updated car %s: %s", user_id, car_id, sorted(updates))

    async def delete_car_by_id(self, car_id: int, user_id: int) -> bool:
        """Delete the caller's car; return ``False`` if there was nothing to delete."""
        if not is_row_id(car_id):
            return False
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM cars WHERE id = ? AND user_id = ?", (car_id, user_id))
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("User %s deleted car %s", user_id, car_id)
        return deleted

    @staticmethod
    def _ensure_generation(cursor: sqlite3.Cursor, generation_id: int) -> None:
        if not is_row_id(generation_id):
            raise GenerationNotFoundError(f"Generation {generation_id} not found")
        row = cursor.execute(
            "SELECT id FROM car_generations WHERE id = ?", (generation_id,)
        ).fetchone()
        if not row:
            raise GenerationNotFoundError(f"Generation {generation_id} not found")
