"""
Daily diary reminder delivered as a web push notification.

Delivery is fire-and-forget: a failed push is logged and skipped, and
nothing in the request handling path depends on this module.
"""

import json
import logging
from typing import Callable, Optional
from pywebpush import WebPushException, webpush
from app.core.config import Settings
from app.core.errors import StoreError
from app.storage.user_store import UserStore

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(
        self,
        vapid_private_key: str,
        vapid_claim_email: str,
        sender: Optional[Callable[..., object]] = None
    ):
        self.vapid_private_key = vapid_private_key
        self.vapid_claim_email = vapid_claim_email
        self.sender = sender or webpush

    @classmethod
    def from_settings(cls, settings: Settings) -> "NotificationService":
        return cls(
            vapid_private_key=settings.VAPID_PRIVATE_KEY,
            vapid_claim_email=settings.VAPID_CLAIM_EMAIL,
        )

    @staticmethod
    def build_payload(full_name: str) -> str:
        return json.dumps({"title": f"Hi {full_name}"})

    def send_reminders(self, users: UserStore) -> int:
        """Push a reminder to every subscribed user; returns how many were delivered"""
        try:
            subscribers = users.list_reminder_subscribers()
        except StoreError as e:
            logger.error(f"Could not load reminder subscribers: {str(e)}")
            return 0

        if not subscribers:
            logger.info("No User Subscribed Yet")
            return 0

        delivered = 0
        for user in subscribers:
            try:
                self.sender(
                    subscription_info=user.push_subscription,
                    data=self.build_payload(user.full_name),
                    vapid_private_key=self.vapid_private_key,
                    # webpush adds 'aud' and 'exp' to the claims dict in place
                    vapid_claims={"sub": self.vapid_claim_email},
                )
                delivered += 1
            except WebPushException as e:
                logger.warning(f"Push to user {user.id} rejected: {str(e)}")
            except Exception as e:
                logger.error(f"Push to user {user.id} failed: {str(e)}")

        logger.info(f"Sent {delivered} of {len(subscribers)} reminders")
        return delivered
