"""
Security utilities for JWT authentication and password hashing.

Access tokens are stateless: verification needs only the signing secret and
the clock, so a token stays valid until it expires. There is no server-side
revocation list; logging out only clears the cookie carrier.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
import hashlib
import secrets
import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel
from fintrack.core.config import settings


class InvalidToken(Exception):
    """Raised when a token has a bad signature, a malformed payload or has expired."""


class TokenPayload(BaseModel):
    """Verified claims of an access token."""
    user_id: int
    email: Optional[str] = None
    exp: Optional[int] = None


def _pre_hash_password(password: str) -> bytes:
    """
    Pre-hash password with SHA256 to support passwords longer than 72 bytes.
    Returns bytes (32 bytes) which is well under bcrypt's 72-byte limit.
    """
    return hashlib.sha256(password.encode('utf-8')).digest()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    if not hashed_password:
        return False
    pre_hashed = _pre_hash_password(plain_password)
    return bcrypt.checkpw(pre_hashed, hashed_password.encode('utf-8'))


def get_password_hash(password: str) -> str:
    """
    Hash a password.
    Pre-hashes with SHA256 first to support longer passwords.
    """
    pre_hashed = _pre_hash_password(password)
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(pre_hashed, salt)
    return hashed.decode('utf-8')


def create_access_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed access token bound to the user's id and email."""
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    to_encode = {
        "sub": str(user.id),
        "email": user.email,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> TokenPayload:
    """Verify a token's signature and expiry and return its claims."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise InvalidToken(str(e)) from e

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise InvalidToken("Token subject is missing or malformed")

    return TokenPayload(user_id=user_id, email=payload.get("email"), exp=payload.get("exp"))


def hash_reset_token(raw_token: str) -> str:
    """Digest stored in place of a raw password-reset token."""
    return hashlib.sha256(raw_token.encode('utf-8')).hexdigest()


def generate_reset_token() -> Tuple[str, str]:
    """Return a fresh (raw_token, digest) pair."""
    raw_token = secrets.token_hex(20)
    return raw_token, hash_reset_token(raw_token)
