"""
Request body validation.

Each ``validate_*`` function takes the raw JSON body and returns the
list of human‑readable messages for every violated constraint, in
field order.  An empty list means the body can be turned into the
corresponding pydantic schema.  Endpoints return the list as is with
HTTP 400, so messages are written for end users.

Unknown fields are ignored.
"""

import re
from typing import Any, Dict, List, Optional

from .db import MAX_ROW_ID


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_RE = re.compile(r"^\+?\d{10,15}$")
# ISO 3779: 17 characters, letters I, O and Q are never used.
VIN_RE = re.compile(r"^[A-HJ-NPR-Z0-9]{17}$")

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 64
NAME_MAX_LENGTH = 50
CAR_NAME_MAX_LENGTH = 100
PLATE_MAX_LENGTH = 20

NOT_AN_OBJECT = "Тело запроса должно быть JSON-объектом"


def _present(body: Dict[str, Any], field: str) -> bool:
    return body.get(field) is not None


def _check_text(
    body: Dict[str, Any],
    field: str,
    errors: List[str],
    *,
    label: str,
    required: bool,
    min_length: int = 1,
    max_length: Optional[int] = None,
) -> Optional[str]:
    """Validate a string field and return its stripped value.

    Appends at most one message per field to ``errors``.
    """
    if not _present(body, field):
        if required:
            errors.append(f"Поле «{label}» обязательно")
        return None
    value = body[field]
    if not isinstance(value, str):
        errors.append(f"Поле «{label}» должно быть строкой")
        return None
    value = value.strip()
    if len(value) < min_length:
        if min_length == 1:
            errors.append(f"Поле «{label}» не может быть пустым")
        else:
            errors.append(f"Поле «{label}» должно содержать не менее {min_length} символов")
        return None
    if max_length is not None and len(value) > max_length:
        errors.append(f"Поле «{label}» должно содержать не более {max_length} символов")
        return None
    return value


def _check_email(body: Dict[str, Any], errors: List[str], required: bool) -> None:
    email = _check_text(body, "email", errors, label="Email", required=required, max_length=254)
    if email is not None and not EMAIL_RE.match(email):
        errors.append("Некорректный email")


def _check_password(body: Dict[str, Any], errors: List[str], required: bool) -> None:
    password = body.get("password")
    if password is None and not required:
        return
    if password is None:
        errors.append("Поле «Пароль» обязательно")
        return
    if not isinstance(password, str):
        errors.append("Поле «Пароль» должно быть строкой")
        return
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        errors.append(
            f"Пароль должен содержать от {PASSWORD_MIN_LENGTH} до {PASSWORD_MAX_LENGTH} символов"
        )
    if body.get("password_confirmation") != password:
        errors.append("Пароли не совпадают")


def _check_phone(body: Dict[str, Any], errors: List[str]) -> None:
    phone = _check_text(body, "phone", errors, label="Телефон", required=False)
    if phone is not None and not PHONE_RE.match(phone):
        errors.append("Телефон должен содержать от 10 до 15 цифр и может начинаться с «+»")


def _check_car_fields(body: Dict[str, Any], errors: List[str], required: bool) -> None:
    _check_text(
        body, "name", errors, label="Название", required=required, max_length=CAR_NAME_MAX_LENGTH
    )
    _check_text(
        body, "plate", errors, label="Госномер", required=required, max_length=PLATE_MAX_LENGTH
    )
    vin = _check_text(body, "vin", errors, label="VIN", required=required)
    if vin is not None and not VIN_RE.match(vin.upper()):
        errors.append("VIN должен состоять из 17 латинских букв и цифр (кроме I, O, Q)")

    generation_id = body.get("generation_id")
    if generation_id is None:
        if required:
            errors.append("Поле «Поколение» обязательно")
    elif (
        isinstance(generation_id, bool)
        or not isinstance(generation_id, int)
        or not 0 < generation_id <= MAX_ROW_ID
    ):
        errors.append("Поле «Поколение» должно быть положительным целым числом")


def validate_register(body: Any) -> List[str]:
    """Validate a registration request."""
    if not isinstance(body, dict):
        return [NOT_AN_OBJECT]
    errors: List[str] = []
    _check_email(body, errors, required=True)
    _check_password(body, errors, required=True)
    _check_text(body, "first_name", errors, label="Имя", required=True, max_length=NAME_MAX_LENGTH)
    _check_text(body, "last_name", errors, label="Фамилия", required=False, max_length=NAME_MAX_LENGTH)
    _check_phone(body, errors)
    return errors


def validate_profile_update(body: Any) -> List[str]:
    """Validate a partial profile update; every field is optional."""
    if not isinstance(body, dict):
        return [NOT_AN_OBJECT]
    errors: List[str] = []
    _check_email(body, errors, required=False)
    _check_password(body, errors, required=False)
    _check_text(body, "first_name", errors, label="Имя", required=False, max_length=NAME_MAX_LENGTH)
    _check_text(body, "last_name", errors, label="Фамилия", required=False, max_length=NAME_MAX_LENGTH)
    _check_phone(body, errors)
    return errors


def validate_car_store(body: Any) -> List[str]:
    """Validate a new car for the caller's profile."""
    if not isinstance(body, dict):
        return [NOT_AN_OBJECT]
    errors: List[str] = []
    _check_car_fields(body, errors, required=True)
    return errors


def validate_car_update(body: Any) -> List[str]:
    """Validate a partial car update; at least one field must be given."""
    if not isinstance(body, dict):
        return [NOT_AN_OBJECT]
    errors: List[str] = []
    if not any(_present(body, field) for field in ("name", "plate", "vin", "generation_id")):
        errors.append("Не указано ни одного поля для обновления")
        return errors
    _check_car_fields(body, errors, required=False)
    return errors
