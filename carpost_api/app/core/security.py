"""
Security helpers: bearer token verification and password hashing.

Access tokens are JSON Web Tokens signed with HMAC
(``settings.algorithm``: HS256, HS384 or HS512) and encoded as
``header.payload.signature`` (base64url, no padding).  They are issued
by an external identity provider that shares ``settings.secret_key``
with this service; the ``sub`` claim carries
the numeric user id and ``exp`` the expiry as a UNIX timestamp.

Passwords are stored as PBKDF2‑HMAC‑SHA256 digests in the form
``salthex$hashhex``.
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import time
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .db import MAX_ROW_ID


logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 100_000

HMAC_ALGORITHMS = {
    "HS256": hashlib.sha256,
    "HS384": hashlib.sha384,
    "HS512": hashlib.sha512,
}


class AuthError(Exception):
    """Raised when a bearer token cannot be trusted."""


def _b64_url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str, algorithm: str = "HS256") -> bytes:
    return hmac.new(secret.encode("utf-8"), message, HMAC_ALGORITHMS[algorithm]).digest()


def create_access_token(user_id: int, expires_delta: Optional[int] = None) -> str:
    """Create a signed token whose subject is ``user_id``.

    Only development tooling and tests mint tokens; in production they
    come from the identity provider.

    Parameters
    ----------
    user_id : int
        Identifier stored in the ``sub`` claim (as a string).
    expires_delta : Optional[int]
        Lifetime in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.  Negative values
        produce an already expired token.
    """
    lifetime = settings.access_token_expire_minutes * 60 if expires_delta is None else expires_delta
    payload = {"sub": str(user_id), "exp": int(time.time()) + lifetime}
    header = {"alg": settings.algorithm, "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key, settings.algorithm))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify a token and return its claims.

    Raises
    ------
    AuthError
        If the token is malformed, is not signed with
        ``settings.algorithm``, carries a bad signature or has expired.
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise AuthError("Malformed token")
    header_b64, payload_b64, signature_b64 = parts
    try:
        header = json.loads(_b64_url_decode(header_b64).decode("utf-8"))
        actual_sig = _b64_url_decode(signature_b64)
    except (ValueError, UnicodeDecodeError) as exc:
        raise AuthError("Malformed token") from exc
    if not isinstance(header, dict) or header.get("alg") != settings.algorithm:
        raise AuthError("Unsupported token algorithm")

    expected_sig = _sign(
        f"{header_b64}.{payload_b64}".encode("utf-8"), settings.secret_key, settings.algorithm
    )
    if not hmac.compare_digest(expected_sig, actual_sig):
        raise AuthError("Invalid token signature")

    try:
        claims = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError) as exc:
        raise AuthError("Malformed token") from exc
    if not isinstance(claims, dict):
        raise AuthError("Malformed token")
    exp = claims.get("exp")
    if not isinstance(exp, (int, float)) or int(exp) < int(time.time()):
        raise AuthError("Token expired")
    return claims


def verify_and_extract_subject(token: str) -> int:
    """Verify ``token`` and return the user id from its ``sub`` claim.

    The subject is trusted as the authenticated user for every
    ownership‑scoped operation.  Raises ``AuthError`` when the token is
    invalid or the subject is not a positive integer that fits an
    SQLite row id.
    """
    claims = decode_access_token(token)
    subject = claims.get("sub")
    try:
        user_id = int(str(subject))
    except ValueError as exc:
        raise AuthError("Invalid token subject") from exc
    if not 0 < user_id <= MAX_ROW_ID:
        raise AuthError("Invalid token subject")
    return user_id


security = HTTPBearer(auto_error=False)


def get_current_user_id(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> int:
    """Dependency returning the caller's user id.

    Raises HTTP 401 when the Authorization header is missing or the
    token fails verification.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return verify_and_extract_subject(credentials.credentials)
    except AuthError as exc:
        logger.debug("Rejected bearer token: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def hash_password(password: str) -> str:
    """Hash a password with PBKDF2‑HMAC‑SHA256 and a random 16‑byte salt."""
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check ``plain_password`` against a stored ``salthex$hashhex`` string."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
