import logging
from datetime import datetime, timedelta, UTC
from typing import Callable, Iterable, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlmodel import Session

from feedback_portal.configs import settings
from feedback_portal.configs.database import get_db
from feedback_portal.exceptions import ForbiddenError, UnauthenticatedError
from feedback_portal.models import User, UserRole

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)

# auto_error is off so that a missing header goes through resolve_identity like any other bad token
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password):
    return pwd_context.hash(password)

def _encode(user: User, secret: str, expires_delta: timedelta) -> str:
    to_encode = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "exp": datetime.now(UTC) + expires_delta,
    }
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)

def create_access_token(user: User, expires_delta: timedelta | None = None) -> str:
    return _encode(user, settings.JWT_ACCESS_SECRET,
                   expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

def create_refresh_token(user: User) -> str:
    return _encode(user, settings.JWT_REFRESH_SECRET, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))

def _user_from_token(token: Optional[str], secret: str, db: Session) -> User:
    if not token:
        raise UnauthenticatedError("Not authorized, no token")
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise UnauthenticatedError("Not authorized, token failed")
    user = db.get(User, user_id)
    if user is None:
        raise UnauthenticatedError("Not authorized, user not found")
    return user

def resolve_identity(token: Optional[str], db: Session) -> User:
    """Turn an access token into the stored user it was issued for.

    Absent, malformed, tampered and expired tokens all fail the same way, as
    does a token whose user no longer exists.
    """
    return _user_from_token(token, settings.JWT_ACCESS_SECRET, db)

def require_role(user: User, allowed_roles: Iterable[UserRole]) -> None:
    allowed = set(allowed_roles)
    if user.role not in allowed:
        logger.warning(f"User {user.id} with role '{user.role.value}' denied, needs one of "
                       f"{sorted(role.value for role in allowed)}")
        raise ForbiddenError(f"Forbidden, user role '{user.role.value}' is not authorized to access this resource")

def refresh_access_token(refresh_token: str, db: Session) -> str:
    user = _user_from_token(refresh_token, settings.JWT_REFRESH_SECRET, db)
    return create_access_token(user)

def get_current_user(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    return resolve_identity(token, db)

def require_roles(*roles: UserRole) -> Callable[..., User]:
    """Dependency factory: resolve the caller, then check their role."""
    def dependency(current_user: User = Depends(get_current_user)) -> User:
        require_role(current_user, roles)
        return current_user
    return dependency

require_principal = require_roles(UserRole.principal)
require_student = require_roles(UserRole.student)
