"""
Application package for the Carpost API.

The code is split by layer: ``core`` holds configuration, the database
and security helpers, ``services`` the business logic working against
SQLite, ``schemas`` the pydantic payloads and ``api`` the FastAPI
routers.  Routers delegate to services and never touch SQL directly.
"""

from .main import app  # noqa: F401
