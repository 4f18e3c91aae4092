"""
Administration of the brand → model → generation catalog.

The catalog is reference data: it is seeded out of band with
``seed_catalog.py`` and only read by the HTTP API.  Removing a brand
removes its models and their generations.  A brand whose generations
are still used by cars is refused before anything is deleted.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, Iterable, Optional

from carpost_api.app.core.db import get_cursor
from carpost_api.app.services.car_service import CursorFactory


logger = logging.getLogger(__name__)


def _entry_name(entry: Any, kind: str) -> str:
    if not isinstance(entry, dict):
        raise ValueError(f"Catalog {kind} entry must be an object, got {entry!r}")
    name = entry.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"Catalog {kind} entry without a name: {entry!r}")
    return name.strip()


def _children(entry: Dict[str, Any], key: str) -> list:
    children = entry.get(key) or []
    if not isinstance(children, list):
        raise ValueError(f"Catalog entry {entry['name']!r}: {key} must be a list")
    return children


def _check_years(name: str, year_start: Any, year_end: Any) -> None:
    for year in (year_start, year_end):
        if year is not None and (isinstance(year, bool) or not isinstance(year, int)):
            raise ValueError(f"Generation {name}: year {year!r} is not an integer")
    if year_start is not None and year_end is not None and year_end < year_start:
        raise ValueError(f"Generation {name}: year_end {year_end} is before year_start {year_start}")


class CatalogService:
    """Create, seed and delete reference data."""

    def __init__(self, cursor_factory: CursorFactory = get_cursor) -> None:
        self._cursor = cursor_factory

    async def add_brand(self, name: str) -> int:
        with self._cursor() as cursor:
            cursor.execute("INSERT INTO car_brands (name) VALUES (?)", (name,))
            return cursor.lastrowid

    async def add_model(self, brand_id: int, name: str) -> int:
        """Add a model to an existing brand.  Raises ``ValueError`` otherwise."""
        with self._cursor() as cursor:
            if not cursor.execute("SELECT 1 FROM car_brands WHERE id = ?", (brand_id,)).fetchone():
                raise ValueError(f"Brand {brand_id} not found")
            cursor.execute(
                "INSERT INTO car_models (brand_id, name) VALUES (?, ?)", (brand_id, name)
            )
            return cursor.lastrowid

    async def add_generation(
        self,
        model_id: int,
        name: str,
        year_start: Optional[int] = None,
        year_end: Optional[int] = None,
    ) -> int:
        """Add a generation to an existing model.  Raises ``ValueError`` otherwise."""
        _check_years(name, year_start, year_end)
        with self._cursor() as cursor:
            if not cursor.execute("SELECT 1 FROM car_models WHERE id = ?", (model_id,)).fetchone():
                raise ValueError(f"Model {model_id} not found")
            cursor.execute(
                "INSERT INTO car_generations (model_id, name, year_start, year_end) VALUES (?, ?, ?, ?)",
                (model_id, name, year_start, year_end),
            )
            return cursor.lastrowid

    async def delete_brand(self, brand_id: int) -> bool:
        """Delete a brand with all of its models and generations.

        Returns ``False`` if the brand does not exist.  Raises
        ``ValueError`` and changes nothing while any car still uses one
        of the brand's generations.
        """
        with self._cursor() as cursor:
            if not cursor.execute("SELECT 1 FROM car_brands WHERE id = ?", (brand_id,)).fetchone():
                return False
            in_use = cursor.execute(
                """
                SELECT COUNT(*) AS count FROM cars c
                JOIN car_generations g ON g.id = c.generation_id
                JOIN car_models m ON m.id = g.model_id
                WHERE m.brand_id = ?
                """,
                (brand_id,),
            ).fetchone()["count"]
            if in_use:
                raise ValueError(f"Brand {brand_id} is used by {in_use} car(s)")
            cursor.execute(
                "DELETE FROM car_generations WHERE model_id IN (SELECT id FROM car_models WHERE brand_id = ?)",
                (brand_id,),
            )
            generations = cursor.rowcount
            cursor.execute("DELETE FROM car_models WHERE brand_id = ?", (brand_id,))
            models = cursor.rowcount
            cursor.execute("DELETE FROM car_brands WHERE id = ?", (brand_id,))
        logger.info(
            "Deleted brand %s with %s model(s) and %s generation(s)", brand_id, models, generations
        )
        return True

    async def load_catalog(self, entries: Iterable[Dict[str, Any]]) -> Dict[str, int]:
        """Insert brands, models and generations that are not present yet.

        ``entries`` is a list of brands, each with an optional list of
        ``models``, each with an optional list of ``generations``
        (``name``, ``year_start``, ``year_end``).  Existing rows are
        matched by name within their parent, and generation years are
        refreshed from the input, so the same file can be loaded
        repeatedly.  Returns the number of rows inserted per table.

        Raises ``ValueError`` for an entry without a name or with
        inconsistent years; nothing from the batch is kept then.
        """
        counts = {"brands": 0, "models": 0, "generations": 0}
        with self._cursor() as cursor:
            for brand in entries:
                brand_id = self._get_or_insert(
                    cursor, counts, "brands",
                    "SELECT id FROM car_brands WHERE name = ?",
                    "INSERT INTO car_brands (name) VALUES (?)",
                    (_entry_name(brand, "brand"),),
                )
                for model in _children(brand, "models"):
                    model_id = self._get_or_insert(
                        cursor, counts, "models",
                        "SELECT id FROM car_models WHERE brand_id = ? AND name = ?",
                        "INSERT INTO car_models (brand_id, name) VALUES (?, ?)",
                        (brand_id, _entry_name(model, "model")),
                    )
                    for generation in _children(model, "generations"):
                        generation_id = self._get_or_insert(
                            cursor, counts, "generations",
                            "SELECT id FROM car_generations WHERE model_id = ? AND name = ?",
                            "INSERT INTO car_generations (model_id, name) VALUES (?, ?)",
                            (model_id, _entry_name(generation, "generation")),
                        )
                        year_start, year_end = generation.get("year_start"), generation.get("year_end")
                        _check_years(generation["name"], year_start, year_end)
                        cursor.execute(
                            "UPDATE car_generations SET year_start = ?, year_end = ? WHERE id = ?",
                            (year_start, year_end, generation_id),
                        )
        logger.info("Catalog loaded: %s", counts)
        return counts

    @staticmethod
    def _get_or_insert(
        cursor: sqlite3.Cursor,
        counts: Dict[str, int],
        table: str,
        select_sql: str,
        insert_sql: str,
        params: tuple,
    ) -> int:
        row = cursor.execute(select_sql, params).fetchone()
        if row:
            return row["id"]
        cursor.execute(insert_sql, params)
        counts[table] += 1
        return cursor.lastrowid
