from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from luxejewel.data.models.user import UserModel, AuthSessionModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(func.lower(UserModel.email) == email.lower())
        ).scalar_one_or_none()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def count_customers(self) -> int:
        return self.db.execute(
            select(func.count(UserModel.id)).where(UserModel.role == "customer")
        ).scalar_one()

    def create_session(self, token: str, user_id: int, expires_at: datetime) -> AuthSessionModel:
        session = AuthSessionModel(token=token, user_id=user_id, expires_at=expires_at)
        self.db.add(session)
        self.db.commit()
        return session

    def get_session(self, token: str) -> AuthSessionModel | None:
        return self.db.get(AuthSessionModel, token)

    def delete_session(self, session: AuthSessionModel) -> None:
        self.db.delete(session)
        self.db.commit()
