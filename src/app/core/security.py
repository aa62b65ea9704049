"""Security utilities for password hashing and secret token generation."""

import hashlib
import hmac
import secrets

from passlib.context import CryptContext

# Password hashing with Argon2
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

# Byte lengths of generated secrets (hex-encoded, so string length is double)
CSRF_TOKEN_BYTES = 32
SESSION_ID_BYTES = 32
REMEMBER_TOKEN_BYTES = 64


def hash_password(password: str) -> str:
    """
    Hash a password using Argon2.

    Args:
        password: Plain text password

    Returns:
        Hashed password string
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Password to verify
        hashed_password: Stored password hash

    Returns:
        True if password matches, False otherwise (including unreadable hashes)
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def generate_csrf_token() -> str:
    """Generate a 256-bit hex-encoded CSRF token."""
    return secrets.token_hex(CSRF_TOKEN_BYTES)


def generate_session_id() -> str:
    """Generate an opaque, URL-safe session identifier."""
    return secrets.token_urlsafe(SESSION_ID_BYTES)


def generate_remember_token() -> str:
    """Generate a long-lived remember-me token (512 bits, hex)."""
    return secrets.token_hex(REMEMBER_TOKEN_BYTES)


def hash_token(token: str) -> str:
    """
    Digest a bearer token for storage.

    Remember tokens are stored only as their SHA-256 digest; lookups hash the
    presented token and match on the digest.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def tokens_match(presented: str | None, expected: str | None) -> bool:
    """Constant-time equality for secrets; missing values never match."""
    if not presented or not expected:
        return False
    return hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))
