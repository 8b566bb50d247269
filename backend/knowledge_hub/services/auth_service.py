from sqlalchemy.orm import Session
from ..repositories import UserRepository
from ..core.security import (
    get_password_hash,
    authenticate_user,
    create_access_token,
)
from ..schemas import UserRegister, UserLogin, Token
from ..exceptions import ValidationError, AuthenticationError
from ..utils import get_current_timestamp
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations"""

    def __init__(self, db: Session):
        self.user_repo = UserRepository(db)
        self.db = db

    def register(self, user_data: UserRegister) -> Token:
        """Register a credentials user and return a JWT"""
        logger.info(f"Attempting to register user: {user_data.email}")

        try:
            if self.user_repo.get_by_email(user_data.email):
                logger.warning(f"Registration failed: email already exists - {user_data.email}")
                raise ValidationError("User with this email already exists")

            new_user = self.user_repo.create(
                name=user_data.name,
                email=user_data.email,
                hashed_password=get_password_hash(user_data.password),
                provider="credentials"
            )
            self.user_repo.commit()
            logger.info(f"User registered successfully: {new_user.email}")

            return Token(access_token=create_access_token(new_user.id), token_type="bearer")
        except Exception as e:
            logger.error(f"Error registering user: {e}")
            self.user_repo.rollback()
            raise

    def login(self, user_data: UserLogin) -> Token:
        """Check credentials, record the login and return a JWT"""
        logger.info(f"Attempting login for: {user_data.email}")

        user = authenticate_user(self.db, user_data.email, user_data.password)
        if not user:
            raise AuthenticationError("Invalid email or password")

        self.user_repo.update_instance(user, last_login_at=get_current_timestamp())
        self.user_repo.commit()
        logger.info(f"User logged in successfully: {user.email}")

        return Token(access_token=create_access_token(user.id), token_type="bearer")
