"""Authentication service for JWT and password handling."""

import logging
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sprintsync.config import Settings, get_settings
from sprintsync.models.user import User
from sprintsync.services.access import Caller
from sprintsync.services.errors import BadRequestError, ConflictError, UnauthorizedError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@lru_cache
def _hashing_context(rounds: int) -> CryptContext:
    """Hashing context pinned to a bcrypt cost factor."""
    return pwd_context.copy(bcrypt__rounds=rounds)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # malformed hash or oversized secret
        return False


def get_password_hash(password: str, rounds: int | None = None) -> str:
    """Hash a password."""
    return _hashing_context(rounds or get_settings().bcrypt_rounds).hash(password)


def create_access_token(user: User, settings: Settings | None = None) -> str:
    """Create a JWT access token carrying the user's id, name and admin flag."""
    settings = settings or get_settings()
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": str(user.id),
        "username": user.username,
        "is_admin": bool(user.is_admin),
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings | None = None) -> dict[str, Any] | None:
    """Decode and validate a JWT token. Returns None when invalid or expired."""
    settings = settings or get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def caller_from_token(token: str | None, settings: Settings | None = None) -> Caller:
    """Build the caller identity from a bearer token without a store lookup."""
    if not token:
        raise UnauthorizedError("Access token required")

    payload = decode_access_token(token, settings)
    if payload is None:
        raise UnauthorizedError("Invalid or expired token")

    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise UnauthorizedError("Invalid or expired token") from None

    return Caller(
        user_id=user_id,
        username=payload.get("username", ""),
        is_admin=bool(payload.get("is_admin", False)),
    )


def get_user_by_username(db: Session, username: str) -> User | None:
    """Get a user by username."""
    return db.query(User).filter(User.username == username).first()


class AuthService:
    """Registration, login and token verification."""

    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()

    def register(
        self,
        username: str | None,
        password: str | None,
        is_admin: bool = False,
        skills: str | None = None,
    ) -> tuple[str, User]:
        """Create a user and return ``(token, user)``."""
        if not username or not username.strip() or not password:
            raise BadRequestError("Username and password are required")

        if get_user_by_username(self.db, username):
            raise ConflictError("Username already exists")

        user = User(
            username=username,
            password_hash=get_password_hash(password, self.settings.bcrypt_rounds),
            is_admin=is_admin,
            skills=skills,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name
            self.db.rollback()
            raise ConflictError("Username already exists") from None
        self.db.refresh(user)

        logger.info(f"Registered user {user.id} ({user.username}, admin={user.is_admin})")
        return create_access_token(user, self.settings), user

    def login(self, username: str | None, password: str | None) -> tuple[str, User]:
        """Authenticate by username and password and return ``(token, user)``."""
        if not username or not password:
            raise BadRequestError("Username and password are required")

        user = get_user_by_username(self.db, username)
        if not user or not verify_password(password, user.password_hash):
            logger.info(f"Failed login attempt for '{username}'")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        return create_access_token(user, self.settings), user

    def verify(self, token: str | None) -> User:
        """Validate a token and return the current user record from the store."""
        caller = caller_from_token(token, self.settings)
        user = self.db.get(User, caller.user_id)
        if user is None:
            raise UnauthorizedError("User not found")
        return user
