"""
Profile endpoints: the caller's own account.

The user id always comes from the bearer token; there is no way to
address another user's profile.
"""

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from carpost_api.app.api.deps import get_user_service, json_body
from carpost_api.app.core.security import get_current_user_id
from carpost_api.app.core.validation import validate_profile_update
from carpost_api.app.schemas.user import ProfileEditRead, ProfileRead, ProfileUpdateRequest
from carpost_api.app.services.errors import EmailAlreadyRegisteredError, UserNotFoundError
from carpost_api.app.services.user_service import UserService
from .register import EMAIL_TAKEN


router = APIRouter()

USER_NOT_FOUND = "Пользователь не найден."


def _user_not_found() -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=USER_NOT_FOUND)


@router.get("/edit", response_model=ProfileEditRead)
async def edit_profile(
    user_id: int = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
):
    """Вернуть редактируемые поля профиля."""
    try:
        return await users.get_user_profile_for_edit(user_id)
    except UserNotFoundError:
        return _user_not_found()


@router.patch("/update", response_model=str)
async def update_profile(
    body: Any = Depends(json_body),
    user_id: int = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
):
    """Частично обновить профиль.

    Изменяются только переданные поля; остальные сохраняют прежние
    значения.
    """
    errors = validate_profile_update(body)
    if not errors and body.get("email") and await users.email_exists(body["email"], exclude_user_id=user_id):
        errors.append(EMAIL_TAKEN)
    if errors:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=errors)
    try:
        await users.update_profile(ProfileUpdateRequest(**body), user_id)
    except UserNotFoundError:
        return _user_not_found()
    except EmailAlreadyRegisteredError:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=[EMAIL_TAKEN])
    return "Вы успешно редактировали профиль"


@router.get("", response_model=ProfileRead)
async def get_profile(
    user_id: int = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
):
    """Вернуть профиль пользователя вместе с его машинами."""
    try:
        return await users.get_user_profile(user_id)
    except UserNotFoundError:
        return _user_not_found()
