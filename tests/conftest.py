"""
Shared pytest fixtures.

Every test that touches the database gets its own SQLite file under
``tmp_path`` with all migrations applied.
"""
import asyncio
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from carpost_api.app.core.config import settings
from carpost_api.app.core.db import get_cursor, init_db
from carpost_api.app.core.security import create_access_token
from carpost_api.app.schemas.user import RegisterRequest
from carpost_api.app.services.catalog_service import CatalogService
from carpost_api.app.services.user_service import UserService


VALID_VIN = "JTDBR32E720123456"


def run_sync(coro):
    """Run a coroutine on a private loop, leaving the current loop alone."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Временная БД с применёнными миграциями."""
    path = tmp_path / "carpost_test.db"
    monkeypatch.setattr(settings, "database_url", str(path))
    init_db()
    return path


@pytest.fixture
def catalog(db_path) -> Dict[str, int]:
    """Toyota → Corolla → E210 plus a second brand with one generation."""
    service = CatalogService()

    async def seed() -> Dict[str, int]:
        toyota = await service.add_brand("Toyota")
        corolla = await service.add_model(toyota, "Corolla")
        e210 = await service.add_generation(corolla, "E210", 2018)
        e150 = await service.add_generation(corolla, "E150", 2006, 2013)
        lada = await service.add_brand("Lada")
        vesta = await service.add_model(lada, "Vesta")
        vesta_ng = await service.add_generation(vesta, "NG", 2023)
        return {
            "toyota": toyota, "corolla": corolla, "e210": e210, "e150": e150,
            "lada": lada, "vesta": vesta, "vesta_ng": vesta_ng,
        }

    return run_sync(seed())


@pytest.fixture
def users(db_path) -> Dict[str, int]:
    """Two registered users, ``u`` and ``v``."""
    service = UserService()

    async def register() -> Dict[str, int]:
        u = await service.add_user(RegisterRequest(
            email="u@example.com", password="password-u", first_name="Ivan",
            last_name="Ivanov", phone="+79991234567",
        ))
        v = await service.add_user(RegisterRequest(
            email="v@example.com", password="password-v", first_name="Petr",
        ))
        return {"u": u, "v": v}

    return run_sync(register())


@pytest.fixture
def client(db_path):
    from carpost_api.app.main import app

    with TestClient(app) as test_client:
        yield test_client


def auth_headers(user_id: int) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def count_rows(table: str) -> int:
    with get_cursor() as cursor:
        return cursor.execute(f"SELECT COUNT(*) AS count FROM {table}").fetchone()["count"]
