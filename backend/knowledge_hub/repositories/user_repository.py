from typing import Optional
from sqlalchemy.orm import Session
from ..models.user import User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model"""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        return self.db.query(User).filter(User.email == email).first()

    def email_taken_by_other(self, email: str, user_id: int) -> bool:
        """Check whether another user already uses this email"""
        return self.db.query(User.id).filter(
            User.email == email,
            User.id != user_id
        ).first() is not None
