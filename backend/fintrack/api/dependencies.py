"""
Authentication and authorization dependencies.

`get_current_user` runs before every protected route: it reads the token
from the cookie or the Bearer header, verifies it and loads the user. Each
failure is a 401 with its own message; which step failed is only logged.
"""
import logging
from typing import Callable, Optional
from fastapi import Depends, Request
from sqlalchemy.orm import Session, defer
from fintrack.core.config import settings
from fintrack.core.exceptions import Forbidden, InvalidOrExpiredToken, Unauthenticated, UnknownPrincipal
from fintrack.core.security import InvalidToken, decode_access_token
from fintrack.db.session import get_db
from fintrack.models.user import User, UserRole

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_token(request: Request) -> Optional[str]:
    """Return the token from the cookie, else from the Authorization header."""
    token = request.cookies.get(settings.TOKEN_COOKIE_NAME)
    if token:
        return token

    authorization = request.headers.get("Authorization")
    if authorization and authorization.startswith(BEARER_PREFIX):
        token = authorization[len(BEARER_PREFIX):].strip()
        if token:
            return token
    return None


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Resolve the authenticated user or raise."""
    token = extract_token(request)
    if not token:
        raise Unauthenticated()

    try:
        claims = decode_access_token(token)
    except InvalidToken as e:
        logger.warning("Rejected token: %s", e)
        raise InvalidOrExpiredToken()

    user = db.query(User).options(
        defer(User.hashed_password)
    ).filter(User.id == claims.user_id).first()
    if not user:
        logger.warning("Token subject %s no longer exists", claims.user_id)
        raise UnknownPrincipal()

    request.state.user = user
    return user


def authorize(*roles: UserRole) -> Callable[..., User]:
    """Build a dependency that admits only users whose role is in `roles`."""
    allowed = set(roles)

    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.warning("User %s with role %s denied", current_user.id, current_user.role.value)
            raise Forbidden()
        return current_user

    return role_checker
