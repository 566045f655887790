# luxejewel/services/auth_service.py
import secrets
from datetime import datetime, timedelta, timezone

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from luxejewel.data.models.user import UserModel
from luxejewel.domain.errors import AuthError, ConflictError
from luxejewel.domain.schemas import LoginIn, RegisterIn
from luxejewel.repos.user_repo import UserRepo
from luxejewel.utils.settings import AUTH_TOKEN_TTL_SECONDS
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def _as_utc(value: datetime) -> datetime:
    #sqlite drops tzinfo
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class AuthService:
    """Email/password accounts with opaque bearer tokens."""

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def register(self, payload: RegisterIn, role: str = "customer") -> UserModel:
        if self.repo.get_by_email(payload.email):
            raise ConflictError("Email already registered")

        user = UserModel(
            email=payload.email.lower(),
            password_hash=hash_password(payload.password),
            full_name=payload.full_name,
            role=role,
        )
        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            self.repo.db.rollback()
            raise ConflictError("Email already registered")

        logger.info(f"Registered user {created.id} ({role})")
        return created

    def login(self, payload: LoginIn) -> dict:
        user = self.repo.get_by_email(payload.email)
        if not user or not verify_password(payload.password, user.password_hash):
            raise AuthError("Invalid email or password")

        token = secrets.token_urlsafe(32)
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=AUTH_TOKEN_TTL_SECONDS)
        self.repo.create_session(token, user.id, expires_at)

        logger.info(f"User {user.id} logged in")
        return {
            "access_token": token,
            "token_type": "bearer",
            "expires_at": expires_at,
            "user": user,
        }

    def authenticate(self, token: str | None) -> UserModel:
        if not token:
            raise AuthError("Not authenticated")

        session = self.repo.get_session(token)
        if not session:
            raise AuthError("Invalid token")

        if _as_utc(session.expires_at) < datetime.now(timezone.utc):
            self.repo.delete_session(session)
            raise AuthError("Token expired")

        return session.user

    def logout(self, token: str) -> None:
        session = self.repo.get_session(token)
        if session:
            self.repo.delete_session(session)
