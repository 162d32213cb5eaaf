from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON
from sqlalchemy.sql import func
from app.core.database import Base


class User(Base):
    """
    Diary owner.

    Stores the login credentials and the reminder preferences used by the
    daily push notification. Passwords are stored as bcrypt hashes only.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Email is unique and indexed for fast lookups during login
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    full_name = Column(String, nullable=False)
    # Opt-in flag for the daily reminder
    reminder = Column(Boolean, default=False, nullable=False)
    # Browser PushSubscription (endpoint + keys) as sent by the frontend
    push_subscription = Column(JSON(none_as_null=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
