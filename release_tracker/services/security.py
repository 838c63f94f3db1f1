"""
Security Service

Handles password hashing and session token operations.

Security Features:
==================
1. Password hashing with bcrypt (passlib), tunable work factor
2. Signed JWT session tokens carrying the user id and email
3. One "invalid" outcome for expired, tampered and malformed tokens

Usage:
    from release_tracker.services.security import hash_password, verify_password

    hashed = hash_password("secret1")
    is_valid = verify_password("secret1", hashed)
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from release_tracker.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
# bcrypt__rounds sets the work factor for newly created hashes; existing
# hashes carry their own factor and still verify.
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Example:
        >>> hashed = hash_password("secret1")
        >>> hashed.startswith("$2b$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Re-derives the hash with the stored salt and compares in constant time.
    """
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------------------------------------------------------
# JWT Token Configuration
# -------------------------------------------------------------------------

ALGORITHM = "HS256"
TOKEN_TYPE = "access"


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a valid session token."""

    user_id: int
    email: str


def create_access_token(
    user_id: int,
    email: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed session token for a user.

    Tokens are valid for ACCESS_TOKEN_EXPIRE_DAYS (30 by default).

    Example:
        >>> token = create_access_token(1, "a@b.com")
        >>> token.count(".") == 2  # JWT format: header.payload.signature
        True
    """
    if expires_delta is None:
        expires_delta = timedelta(days=settings.access_token_expire_days)

    to_encode = {
        "sub": str(user_id),
        "email": email,
        "type": TOKEN_TYPE,
        "exp": datetime.now(UTC) + expires_delta,
    }

    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> TokenClaims | None:
    """
    Decode and validate a session token.

    Signature, expiry, token type and claim shape are all checked. Callers
    cannot tell which check failed.

    Returns:
        TokenClaims if valid, None otherwise
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None

    if payload.get("type") != TOKEN_TYPE:
        logger.warning("Token type mismatch")
        return None

    try:
        return TokenClaims(user_id=int(payload["sub"]), email=str(payload["email"]))
    except (KeyError, TypeError, ValueError):
        logger.warning("Token payload missing required claims")
        return None
