import logging
from typing import Dict
from app.core.errors import (
    ConflictError,
    DuplicateRecordError,
    HashingError,
    InternalError,
    NotFoundError,
    StoreError,
    TokenSigningError,
    UnauthorizedError,
)
from app.core.security import PasswordHasher, TokenService
from app.storage.user_store import UserStore

logger = logging.getLogger(__name__)

EMAIL_TAKEN_MESSAGE = "User with this email already exists"


class AuthService:
    """Signup and login over the credential store"""

    def __init__(self, users: UserStore, hasher: PasswordHasher, tokens: TokenService):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    def signup(self, full_name: str, email: str, password: str) -> Dict[str, str]:
        """
        Register a user and issue a token.

        Input is expected to be validated already; duplicate emails raise
        ConflictError, any store or hashing failure raises InternalError.
        """
        try:
            # Explicit check gives a clear 409 before paying for a bcrypt hash
            if self.users.find_by_email(email) is not None:
                raise ConflictError(EMAIL_TAKEN_MESSAGE)

            # Hash before storing - plaintext passwords are never persisted
            hashed_password = self.hasher.hash(password)
            user = self.users.insert_user(
                email=email,
                hashed_password=hashed_password,
                full_name=full_name
            )
            token = self.tokens.issue(user.id)
        except DuplicateRecordError:
            # Another signup for the same email won the race past the lookup
            raise ConflictError(EMAIL_TAKEN_MESSAGE)
        except (StoreError, HashingError, TokenSigningError) as e:
            logger.error(f"Signup failed: {str(e)}")
            raise InternalError()

        logger.info(f"Registered user {user.id}")
        return {"token": token, "message": "Registration Successful"}

    def login(self, email: str, password: str) -> Dict[str, str]:
        """Check credentials: unknown email is 404, wrong password is 401"""
        try:
            # Existence is checked before the password so the two failures
            # keep their distinct status codes
            user = self.users.find_by_email(email)
            if user is None:
                raise NotFoundError("No account is registered with this email")

            if not self.hasher.verify(password, user.hashed_password):
                raise UnauthorizedError("Incorrect password")

            # Every login gets a fresh token; older ones stay valid until they expire
            token = self.tokens.issue(user.id)
        except (StoreError, HashingError, TokenSigningError) as e:
            logger.error(f"Login failed: {str(e)}")
            raise InternalError()

        return {"token": token, "message": "Login Successful"}
