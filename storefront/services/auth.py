from enum import Enum
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.models.user import User
from storefront.repos.user_repo import UserRepo
from storefront.core.security import TokenService, get_password_hash, verify_password
from storefront.core.logging import get_logger

logger = get_logger(__name__)


class RegistrationError(str, Enum):
    DUPLICATE_USERNAME = "Username already exists"
    DUPLICATE_EMAIL = "Email already exists"
    SYSTEM_ERROR = "Registration failed, please try again later"

    @property
    def message(self) -> str:
        return self.value


class AuthService:
    def __init__(self, session: Session, token_service: Optional[TokenService] = None):
        self.session = session
        self.repo = UserRepo(session)
        self.token_service = token_service

    def find_by_username(self, username: str) -> Optional[User]:
        return self.repo.get_by_username(username)

    def register(self, username: str, email: str, password: str) -> tuple[Optional[User], Optional[RegistrationError]]:
        """
        Create a user after checking that username and email are free.

        Returns ``(user, None)`` on success or ``(None, error)``; duplicates are
        reported separately for username and email, anything that goes wrong
        while saving is reported as SYSTEM_ERROR.
        """
        logger.info(f"Registering user: username={username}")

        if self.repo.get_by_username(username):
            logger.warning(f"Registration rejected, username taken: username={username}")
            return None, RegistrationError.DUPLICATE_USERNAME

        if self.repo.get_by_email(email):
            logger.warning(f"Registration rejected, email taken: email={email}")
            return None, RegistrationError.DUPLICATE_EMAIL

        try:
            user = self.repo.create(User(
                username=username,
                email=email,
                password_hash=get_password_hash(password),
            ))
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Registration failed on save: username={username}, error={e}", exc_info=True)
            return None, RegistrationError.SYSTEM_ERROR

        logger.info(f"User registered: user_id={user.id}, username={username}")
        return user, None

    def verify_password(self, username: str, password: str) -> bool:
        """False for an unknown user as well as a wrong password."""
        user = self.repo.get_by_username(username)
        if not user:
            verify_password(password, None)
            logger.warning(f"Password check failed, no such user: username={username}")
            return False

        is_valid = verify_password(password, user.password_hash)
        if is_valid:
            logger.info(f"Password check passed: username={username}")
        else:
            logger.warning(f"Password check failed: username={username}")
        return is_valid

    def login(self, username: str, password: str) -> Optional[tuple[User, str]]:
        if not self.verify_password(username, password):
            return None
        user = self.repo.get_by_username(username)
        token = self.token_service.issue(user.username, user.id)
        logger.info(f"User logged in: username={username}, user_id={user.id}")
        return user, token
