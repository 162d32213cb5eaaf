from typing import Any, Dict, Optional
from app.core.errors import InternalError, NotFoundError, StoreError, ValidationFailedError
from app.models.user import User
from app.storage.entry_store import EntryStore
from app.storage.user_store import UserStore


class ProfileService:
    """Profile summary and reminder preferences of the authenticated user"""

    def __init__(self, users: UserStore, entries: EntryStore):
        self.users = users
        self.entries = entries

    def _load_user(self, user_id: int) -> User:
        try:
            user = self.users.find_by_id(user_id)
        except StoreError:
            raise InternalError()
        # A valid token can outlive its user
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_profile(self, user_id: int) -> Dict[str, Any]:
        user = self._load_user(user_id)
        try:
            entry_count = self.entries.count_by_owner(user_id)
        except StoreError:
            raise InternalError()
        return {
            "id": user.id,
            "email": user.email,
            "full_name": user.full_name,
            "reminder": user.reminder,
            "entry_count": entry_count,
            "created_at": user.created_at,
        }

    def update_reminder(self, user_id: int, reminder: bool, push_subscription: Optional[dict] = None) -> User:
        """
        Turn the daily reminder on or off.

        Enabling requires a push subscription, either sent now or stored
        from an earlier call.
        """
        user = self._load_user(user_id)
        if reminder and push_subscription is None and user.push_subscription is None:
            raise ValidationFailedError([{
                "field": "push_subscription",
                "message": "A push subscription is required to enable reminders",
            }])
        try:
            return self.users.update_reminder(user, reminder, push_subscription)
        except StoreError:
            raise InternalError()
