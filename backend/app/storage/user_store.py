import logging
from typing import List, Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.errors import DuplicateRecordError, StoreError
from app.models.user import User

logger = logging.getLogger(__name__)


class UserStore:
    """Credential store: persistence of user records"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            logger.error(f"User lookup by email failed: {str(e)}")
            raise StoreError("Could not look up user") from e

    def find_by_id(self, user_id: int) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.id == user_id).first()
        except SQLAlchemyError as e:
            logger.error(f"User lookup for id {user_id} failed: {str(e)}")
            raise StoreError("Could not look up user") from e

    def insert_user(self, email: str, hashed_password: str, full_name: str) -> User:
        """Persist a new user; a taken email raises DuplicateRecordError"""
        user = User(email=email, hashed_password=hashed_password, full_name=full_name)
        try:
            self.db.add(user)
            self.db.commit()
            # Refresh to load auto-generated fields (id, timestamps)
            self.db.refresh(user)
        except IntegrityError as e:
            # Unique constraint on email caught a concurrent signup
            self.db.rollback()
            raise DuplicateRecordError("Email already registered") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Inserting user failed: {str(e)}")
            raise StoreError("Could not create user") from e
        return user

    def update_reminder(self, user: User, reminder: bool, push_subscription: Optional[dict]) -> User:
        try:
            user.reminder = reminder
            if push_subscription is not None:
                user.push_subscription = push_subscription
            self.db.commit()
            self.db.refresh(user)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Updating reminder for user {user.id} failed: {str(e)}")
            raise StoreError("Could not update reminder settings") from e
        return user

    def list_reminder_subscribers(self) -> List[User]:
        """Users who opted in to the reminder and have a push subscription"""
        try:
            return (
                self.db.query(User)
                .filter(User.reminder.is_(True), User.push_subscription.isnot(None))
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Listing reminder subscribers failed: {str(e)}")
            raise StoreError("Could not list reminder subscribers") from e
