# luxejewel/api/deps.py
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from luxejewel.data.database import get_db
from luxejewel.data.models.user import UserModel
from luxejewel.domain.errors import AuthError
from luxejewel.services.auth_service import AuthService


def bearer_token(authorization: str | None = Header(None)) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def get_current_user(
    token: str | None = Depends(bearer_token),
    db: Session = Depends(get_db),
) -> UserModel:
    try:
        return AuthService(db).authenticate(token)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e), headers={"WWW-Authenticate": "Bearer"})


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if user.role != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
