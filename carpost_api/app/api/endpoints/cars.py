"""
Car endpoints under ``/api/profile/car``.

All of them act on the caller's cars only.  A car owned by someone
else is answered with the same 404 as a missing one.
"""

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from carpost_api.app.api.deps import get_car_service, json_body
from carpost_api.app.core.security import get_current_user_id
from carpost_api.app.core.validation import validate_car_store, validate_car_update
from carpost_api.app.schemas.car import CarProfileRead, CarStoreRequest, CarUpdateRequest, CreateCarRead
from carpost_api.app.services.car_service import CarService
from carpost_api.app.services.errors import CarNotFoundError, GenerationNotFoundError, UserNotFoundError
from .profile import USER_NOT_FOUND


router = APIRouter()

CAR_NOT_FOUND = "Машина не найдена."
GENERATION_NOT_FOUND = "Выбранное поколение не найдено"


def _car_not_found() -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=CAR_NOT_FOUND)


def _bad_request(errors: list) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=errors)


# Must be declared before ``/{car_id}``.
@router.get("/new", response_model=CreateCarRead)
async def new_car(
    user_id: int = Depends(get_current_user_id),
    cars: CarService = Depends(get_car_service),
):
    """Справочники для формы добавления машины: марки, модели, поколения."""
    return await cars.create_car()


@router.post("/store", response_model=str)
async def store_car(
    body: Any = Depends(json_body),
    user_id: int = Depends(get_current_user_id),
    cars: CarService = Depends(get_car_service),
):
    """Добавить машину в профиль пользователя."""
    errors = validate_car_store(body)
    if errors:
        return _bad_request(errors)
    try:
        await cars.store_car(CarStoreRequest(**body), user_id)
    except GenerationNotFoundError:
        return _bad_request([GENERATION_NOT_FOUND])
    except UserNotFoundError:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=USER_NOT_FOUND)
    return "Машина успешно добавлена"


@router.delete("/delete/{car_id}", response_model=str)
async def delete_car(
    car_id: int,
    user_id: int = Depends(get_current_user_id),
    cars: CarService = Depends(get_car_service),
):
    """Удалить машину пользователя."""
    if await cars.delete_car_by_id(car_id, user_id):
        return "Машина успешно удалена."
    return _car_not_found()


@router.get("/{car_id}", response_model=CarProfileRead)
async def get_car(
    car_id: int,
    user_id: int = Depends(get_current_user_id),
    cars: CarService = Depends(get_car_service),
):
    """Вернуть машину пользователя по ID."""
    try:
        return await cars.car_find_by_id(car_id, user_id)
    except CarNotFoundError:
        return _car_not_found()


@router.patch("/update/{car_id}", response_model=str)
async def update_car(
    car_id: int,
    body: Any = Depends(json_body),
    user_id: int = Depends(get_current_user_id),
    cars: CarService = Depends(get_car_service),
):
    """Частично обновить информацию о машине пользователя."""
    errors = validate_car_update(body)
    if errors:
        return _bad_request(errors)
    try:
        await cars.update_car_for_profile(car_id, CarUpdateRequest(**body), user_id)
    except CarNotFoundError:
        return _car_not_found()
    except GenerationNotFoundError:
        return _bad_request([GENERATION_NOT_FOUND])
    return "Информация по машине обновлена"
