"""
Dependency providers shared by the endpoints.

Services are built per request from their default cursor factory.
Tests replace them through ``app.dependency_overrides``.
"""

import json
import logging
from typing import Any

from fastapi import Request

from carpost_api.app.services.car_service import CarService
from carpost_api.app.services.user_service import UserService


logger = logging.getLogger(__name__)


def get_user_service() -> UserService:
    return UserService()


def get_car_service() -> CarService:
    return CarService()


async def json_body(request: Request) -> Any:
    """Return the parsed JSON body, or ``None`` if it is empty or not JSON.

    Validators turn ``None`` into a regular 400 message, so a broken
    body is answered like any other invalid payload instead of with
    FastAPI's 422.
    """
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.debug("Request body is not valid JSON")
        return None
