from typing import Any, Dict
from sqlalchemy.orm import Session
from ..repositories import UserRepository, DocumentRepository
from ..core.security import verify_password, get_password_hash
from ..core.events import event_bus, DocumentDeletedEvent
from ..models import User
from ..schemas import ProfileUpdate, PasswordChange, MIN_PASSWORD_LENGTH
from ..exceptions import ValidationError
from ..utils import get_current_timestamp, format_datetime
import logging

logger = logging.getLogger(__name__)

EXPORT_FORMAT_VERSION = "1.0"


class UserService:
    """Profile and account operations for the signed-in user"""

    def __init__(self, db: Session):
        self.user_repo = UserRepository(db)
        self.document_repo = DocumentRepository(db)
        self.db = db

    def update_profile(self, user: User, profile: ProfileUpdate) -> User:
        """Change name and email; the email must not belong to another user"""
        logger.info(f"Updating profile for user {user.id}")
        try:
            if self.user_repo.email_taken_by_other(profile.email, user.id):
                logger.warning(f"Profile update failed: email taken - {profile.email}")
                raise ValidationError("Email is already taken by another user")
            self.user_repo.update_instance(user, name=profile.name, email=profile.email)
            self.user_repo.commit()
            self.db.refresh(user)
            return user
        except Exception as e:
            logger.error(f"Error updating profile: {e}")
            self.user_repo.rollback()
            raise

    def change_password(self, user: User, change: PasswordChange) -> None:
        if len(change.new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters long")
        if not verify_password(change.current_password, user.hashed_password):
            logger.warning(f"Password change failed: wrong current password for user {user.id}")
            raise ValidationError("Current password is incorrect")

        self.user_repo.update_instance(user, hashed_password=get_password_hash(change.new_password))
        self.user_repo.commit()
        logger.info(f"Password changed for user {user.id}")

    def delete_account(self, user: User, password: str) -> None:
        """Delete the user with their documents, sessions and stored files"""
        if not verify_password(password, user.hashed_password):
            logger.warning(f"Account deletion failed: wrong password for user {user.id}")
            raise ValidationError("Password is incorrect")

        user_id = user.id
        deleted_documents = [
            DocumentDeletedEvent(
                document_id=document.id,
                user_id=user_id,
                title=document.title,
                file_path=document.file_path
            )
            for document in self.document_repo.get_by_user_id(user_id)
        ]

        try:
            self.user_repo.delete_instance(user)
            self.user_repo.commit()
        except Exception as e:
            logger.error(f"Error deleting account {user_id}: {e}")
            self.user_repo.rollback()
            raise

        logger.info(f"Account deleted: user {user_id} ({len(deleted_documents)} documents)")
        for event in deleted_documents:
            event_bus.publish(event)

    def export_data(self, user: User) -> Dict[str, Any]:
        """JSON-serialisable export of the user's account data"""
        return {
            "export_date": format_datetime(get_current_timestamp()),
            "user_data": {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "created_at": format_datetime(user.created_at),
                "updated_at": format_datetime(user.updated_at),
            },
            "export_info": {
                "reason": "User requested data download",
                "format": "JSON",
                "version": EXPORT_FORMAT_VERSION,
            },
        }
