"""Carpost API client.

A thin wrapper around the Carpost HTTP API built on ``requests``.
Every method maps to one endpoint and returns a tuple
``(data, error)``:

* on success ``data`` is the decoded JSON body (a confirmation string
  or a payload dictionary) and ``error`` is ``None``;
* on failure ``data`` is ``None`` and ``error`` is a dictionary with
  ``status_code`` and ``message``.  For validation failures
  ``message`` is the list of messages returned by the server.

Authenticated calls need a bearer token from the identity provider
(or ``create_token.py`` in development)::

    api = CarpostAPI(base_url="http://localhost:8000", token=token)
    profile, error = api.get_profile()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class CarpostAPI:
    """Client for the Carpost API."""

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the client.

        Args:
            base_url: Server root, e.g. ``https://example.com``.  The
                ``/api`` prefix is added by the client.
            token: Optional bearer token sent with every request.
            session: Optional requests session; one is created if omitted.
            timeout: Per request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helper
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, *, json_body: Any | None = None) -> Result:
        """Perform a request against ``/api`` + ``path``."""
        url = f"{self.base_url}/api{path}"
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message: Any = ""
            if exc.response is not None:
                try:
                    body = exc.response.json()
                except ValueError:
                    body = exc.response.text
                # 400 carries a list of messages, 404 a plain string and
                # framework errors (401) a {"detail": ...} object.
                message = body.get("detail", body) if isinstance(body, dict) else body
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def register(self, payload: Dict[str, Any]) -> Result:
        """Register a user.  ``payload`` needs email, password,
        password_confirmation and first_name."""
        return self._request("POST", "/register", json_body=payload)

    def get_profile(self) -> Result:
        return self._request("GET", "/profile")

    def get_profile_for_edit(self) -> Result:
        return self._request("GET", "/profile/edit")

    def update_profile(self, changes: Dict[str, Any]) -> Result:
        """Send only the fields that should change."""
        return self._request("PATCH", "/profile/update", json_body=changes)

    # ------------------------------------------------------------------
    # Cars
    # ------------------------------------------------------------------
    def new_car(self) -> Result:
        """Fetch brands, models and generations for the new car form."""
        return self._request("GET", "/profile/car/new")

    def store_car(self, payload: Dict[str, Any]) -> Result:
        return self._request("POST", "/profile/car/store", json_body=payload)

    def get_car(self, car_id: int) -> Result:
        return self._request("GET", f"/profile/car/{car_id}")

    def update_car(self, car_id: int, changes: Dict[str, Any]) -> Result:
        return self._request("PATCH", f"/profile/car/update/{car_id}", json_body=changes)

    def delete_car(self, car_id: int) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """Delete a car.

        Returns:
            A tuple ``(deleted, error)``; a missing car gives
            ``(False, {"status_code": 404, ...})``.
        """
        _, error = self._request("DELETE", f"/profile/car/delete/{car_id}")
        return error is None, error
