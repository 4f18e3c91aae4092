"""
Registration endpoint.

Tokens are issued by the identity provider, so this API only creates
the account; there is no login route.
"""

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from carpost_api.app.api.deps import get_user_service, json_body
from carpost_api.app.core.validation import validate_register
from carpost_api.app.schemas.user import RegisterRequest
from carpost_api.app.services.errors import EmailAlreadyRegisteredError
from carpost_api.app.services.user_service import UserService


router = APIRouter()

EMAIL_TAKEN = "Пользователь с таким email уже зарегистрирован"


@router.post("/register", response_model=str)
async def register(
    body: Any = Depends(json_body),
    users: UserService = Depends(get_user_service),
):
    """Зарегистрировать нового пользователя.

    При ошибках валидации возвращает 400 и список сообщений, по одному
    на каждое нарушенное ограничение.
    """
    errors = validate_register(body)
    if not errors and await users.email_exists(body["email"]):
        errors.append(EMAIL_TAKEN)
    if errors:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=errors)
    try:
        await users.add_user(RegisterRequest(**body))
    except EmailAlreadyRegisteredError:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=[EMAIL_TAKEN])
    return "Пользователь успешно зарегистрирован"
