# app/core/security.py
"""
Security module for authentication.
Handles password hashing and the signed, expiring access tokens (JWT) that
carry the caller's identity between requests.
"""
import os
import re
import hmac
import math
import base64
import binascii
import logging
import secrets
import datetime as dt
import jwt  # PyJWT
from passlib.context import CryptContext
from dotenv import load_dotenv
from pathlib import Path

logger = logging.getLogger("uvicorn.error")

# Load environment variables from project root
ENV_PATH = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(dotenv_path=ENV_PATH)

# Argon2 is a modern, salted, memory-hard password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)

# JWT configuration
JWT_ALG = "HS256"  # HMAC SHA-256
MIN_SECRET_BYTES = 32  # 256 bits
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))  # 24h
JWT_SECRET = os.getenv("JWT_SECRET", "")
if not JWT_SECRET and os.getenv("ENV", "dev") == "dev":
    JWT_SECRET = secrets.token_urlsafe(48)
    logger.warning("[security] JWT_SECRET not set -> using a random per-process secret (dev only).")


class TokenError(Exception):
    """Base class for access token failures. `kind` is for logging only."""
    kind = "invalid"


class MalformedTokenError(TokenError):
    """Token is missing or structurally unreadable."""
    kind = "malformed"


class InvalidTokenSignatureError(TokenError):
    """Signature does not match the payload (tampered or signed with another key)."""
    kind = "invalid"


class ExpiredTokenError(TokenError):
    """Signature is valid but the token is past its expiry."""
    kind = "expired"


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Returns:
        True if password matches, False otherwise (including unreadable hashes)
    """
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


# Computed once so that sign-in for an unknown username costs the same as a wrong password
DUMMY_PASSWORD_HASH = hash_password("tasks-api-timing-dummy")


def check_signing_key() -> None:
    """
    Fail fast at startup when the signing secret is missing or too short.

    Raises:
        RuntimeError: If JWT_SECRET is shorter than MIN_SECRET_BYTES bytes
    """
    if len(JWT_SECRET.encode("utf-8")) < MIN_SECRET_BYTES:
        raise RuntimeError(
            f"JWT_SECRET must be at least {MIN_SECRET_BYTES} bytes; "
            "set a long random value in the environment or .env"
        )


def create_access_token(
    subject: str,
    issued_at: dt.datetime | None = None,
    ttl: dt.timedelta | None = None,
) -> str:
    """
    Create a signed access token for the given subject (username).

    Args:
        subject: Identity the token speaks for
        issued_at: Issue time (defaults to now, UTC)
        ttl: Lifetime (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        Encoded JWT string: header.payload.signature

    Token payload includes:
        - sub: Subject (username)
        - iat: Issued at timestamp
        - exp: Expiration timestamp
    """
    now = issued_at or dt.datetime.now(dt.timezone.utc)
    lifetime = ttl if ttl is not None else dt.timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": subject,
        "iat": now,
        # Whole seconds, rounded up: the token never expires before issued_at + ttl
        "exp": math.ceil((now + lifetime).timestamp()),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)


_B64URL_SEGMENT = re.compile(r"^[A-Za-z0-9_-]*$")


def _check_signature_encoding(token: str) -> None:
    """
    Reject signature segments that are not the canonical base64url text of their bytes.

    Several spellings of the last character decode to the same bytes; without
    this check an edited signature could still verify.
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise MalformedTokenError("token must have three segments")
    segment = parts[2]
    if not _B64URL_SEGMENT.match(segment):
        raise MalformedTokenError("signature segment is not base64url")
    try:
        raw = base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
    except (binascii.Error, ValueError) as exc:
        raise MalformedTokenError("signature segment is not base64url") from exc
    canonical = base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")
    if not hmac.compare_digest(canonical, segment):
        raise InvalidTokenSignatureError("signature segment is not canonical")


def decode_access_token(token: str | None) -> dict:
    """
    Verify an access token and return its claims.

    The signature is checked (constant-time comparison) before the expiry,
    so a tampered token is always reported as invalid, never as expired.

    Raises:
        MalformedTokenError: Empty input, wrong segment count, unreadable
            segments, missing claims or an unexpected algorithm
        InvalidTokenSignatureError: Signature mismatch, including a
            non-canonical spelling of a matching signature
        ExpiredTokenError: Token is past its `exp`
    """
    if not token:
        raise MalformedTokenError("empty token")
    _check_signature_encoding(token)
    try:
        return jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[JWT_ALG],
            options={"require": ["sub", "iat", "exp"]},
        )
    except jwt.InvalidSignatureError as exc:
        raise InvalidTokenSignatureError(str(exc)) from exc
    except jwt.ExpiredSignatureError as exc:
        raise ExpiredTokenError(str(exc)) from exc
    except jwt.InvalidTokenError as exc:
        raise MalformedTokenError(str(exc)) from exc


def extract_subject(token: str | None) -> str:
    """Verify the token and return its subject. Same errors as decode_access_token."""
    return decode_access_token(token)["sub"]
