# luxejewel/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from luxejewel.api.deps import bearer_token, get_current_user
from luxejewel.data.database import get_db
from luxejewel.data.models.user import UserModel
from luxejewel.domain.errors import AuthError, ConflictError
from luxejewel.domain.schemas import LoginIn, MessageOut, RegisterIn, TokenOut, UserRead
from luxejewel.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=UserRead, status_code=201)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    service = AuthService(db)
    try:
        return service.register(payload)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    service = AuthService(db)
    try:
        return service.login(payload)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.post("/logout", response_model=MessageOut)
def logout(token: str | None = Depends(bearer_token), db: Session = Depends(get_db)):
    if token:
        AuthService(db).logout(token)
    return {"message": "Logged out"}


@router.get("/me", response_model=UserRead)
def me(user: UserModel = Depends(get_current_user)):
    return user
