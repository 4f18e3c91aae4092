"""
Configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables, with defaults suitable for local development.
Override them via the environment in any real deployment; the
``SECRET_KEY`` default in particular must never reach production.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Carpost API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Tokens are issued by an external identity provider sharing this
    # secret.  ``create_token.py`` uses it to mint development tokens.
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by ``core.db``.
    database_url: str = os.getenv("DATABASE_URL", "carpost.db")

    def __post_init__(self) -> None:
        if self.algorithm not in {"HS256", "HS384", "HS512"}:
            raise ValueError(f"Unsupported ALGORITHM {self.algorithm!r}, expected HS256, HS384 or HS512")


# Environment variables must be set before this module is imported;
# tests override attributes on this instance instead.
settings = Settings()
