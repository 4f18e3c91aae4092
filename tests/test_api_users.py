"""
Тесты эндпоинтов регистрации и профиля
"""
from carpost_api.app.core.db import get_cursor
from carpost_api.app.core.security import create_access_token, verify_password
from conftest import auth_headers, count_rows


REGISTRATION = {
    "email": "new@example.com",
    "password": "strongpassword",
    "password_confirmation": "strongpassword",
    "first_name": "Anna",
}


class TestRegister:
    def test_valid_registration_creates_one_user(self, client):
        response = client.post("/api/register", json=REGISTRATION)

        assert response.status_code == 200
        assert response.json() == "Пользователь успешно зарегистрирован"
        assert count_rows("users") == 1

    def test_invalid_registration_lists_every_error(self, client):
        response = client.post("/api/register", json={
            "email": "bad",
            "password": "short",
            "password_confirmation": "other",
        })

        assert response.status_code == 400
        errors = response.json()
        assert isinstance(errors, list)
        assert len(errors) == 4
        assert count_rows("users") == 0

    def test_duplicate_email(self, client, users):
        response = client.post("/api/register", json=dict(REGISTRATION, email="U@Example.com"))

        assert response.status_code == 400
        assert response.json() == ["Пользователь с таким email уже зарегистрирован"]
        assert count_rows("users") == 2

    def test_body_is_not_json(self, client):
        response = client.post(
            "/api/register", content=b"not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == ["Тело запроса должно быть JSON-объектом"]

    def test_missing_body(self, client):
        response = client.post("/api/register")
        assert response.status_code == 400


class TestAuthentication:
    def test_missing_token(self, client):
        response = client.get("/api/profile")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_expired_token(self, client, users):
        token = create_access_token(users["u"], expires_delta=-1)
        response = client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/api/profile/edit", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_token_for_deleted_user(self, client, db_path):
        response = client.get("/api/profile", headers=auth_headers(999))

        assert response.status_code == 404
        assert response.json() == "Пользователь не найден."

    def test_subject_beyond_sqlite_integer(self, client, db_path):
        response = client.get("/api/profile", headers=auth_headers(10**20))
        assert response.status_code == 401


class TestProfile:
    def test_get_profile(self, client, users):
        response = client.get("/api/profile", headers=auth_headers(users["u"]))

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == users["u"]
        assert body["email"] == "u@example.com"
        assert body["cars"] == []
        assert "password" not in body

    def test_edit_profile(self, client, users):
        response = client.get("/api/profile/edit", headers=auth_headers(users["v"]))

        assert response.status_code == 200
        assert response.json() == {
            "email": "v@example.com",
            "first_name": "Petr",
            "last_name": None,
            "phone": None,
        }

    def test_partial_update_keeps_other_fields(self, client, users):
        headers = auth_headers(users["u"])
        response = client.patch("/api/profile/update", json={"last_name": "Petrov"}, headers=headers)

        assert response.status_code == 200
        assert response.json() == "Вы успешно редактировали профиль"
        profile = client.get("/api/profile/edit", headers=headers).json()
        assert profile["last_name"] == "Petrov"
        assert profile["first_name"] == "Ivan"
        assert profile["phone"] == "+79991234567"

    def test_update_password(self, client, users):
        response = client.patch(
            "/api/profile/update",
            json={"password": "another-password", "password_confirmation": "another-password"},
            headers=auth_headers(users["u"]),
        )

        assert response.status_code == 200
        with get_cursor() as cursor:
            stored = cursor.execute("SELECT password FROM users WHERE id = ?", (users["u"],)).fetchone()
        assert verify_password("another-password", stored["password"])

    def test_update_validation_errors(self, client, users):
        response = client.patch(
            "/api/profile/update",
            json={"email": "broken", "phone": "abc"},
            headers=auth_headers(users["u"]),
        )

        assert response.status_code == 400
        assert len(response.json()) == 2

    def test_update_to_someone_elses_email(self, client, users):
        response = client.patch(
            "/api/profile/update", json={"email": "v@example.com"}, headers=auth_headers(users["u"])
        )
        assert response.status_code == 400

    def test_keep_own_email(self, client, users):
        response = client.patch(
            "/api/profile/update", json={"email": "u@example.com"}, headers=auth_headers(users["u"])
        )
        assert response.status_code == 200
