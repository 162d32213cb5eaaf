from datetime import datetime
from typing import Dict, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_serializer
from app.api.dependencies import CurrentUser, get_current_user, get_profile_service
from app.core.config import settings
from app.core.errors import NotFoundError
from app.services.profile_service import ProfileService

router = APIRouter(prefix="/users", tags=["users"])


class PushSubscription(BaseModel):
    """Browser PushSubscription as produced by PushSubscription.toJSON()"""
    endpoint: str
    keys: Dict[str, str]
    expirationTime: Optional[float] = None


class ReminderSettings(BaseModel):
    reminder: bool
    push_subscription: Optional[PushSubscription] = None


class ProfileResponse(BaseModel):
    id: int
    email: str
    full_name: str
    reminder: bool
    entry_count: int
    created_at: Optional[datetime]

    @field_serializer('created_at')
    def serialize_created_at(self, value: Optional[datetime], _info):
        return value.isoformat() if value else None


class ReminderResponse(BaseModel):
    reminder: bool
    has_subscription: bool


@router.get("/push-key")
async def get_push_key():
    """VAPID public key the browser needs to create a push subscription"""
    # Public by nature; the matching private key never leaves the server
    if not settings.VAPID_PUBLIC_KEY:
        raise NotFoundError("Push notifications are not configured")
    return {"vapid_public_key": settings.VAPID_PUBLIC_KEY}


@router.get("/me")
def get_profile(
    current_user: CurrentUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service)
):
    """Profile of the current user with their entry count"""
    profile = profiles.get_profile(current_user.id)
    return {"user": ProfileResponse(**profile)}


@router.put("/me/reminder")
def update_reminder(
    payload: ReminderSettings,
    current_user: CurrentUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service)
):
    """Turn the daily push reminder on or off"""
    subscription = payload.push_subscription.model_dump(exclude_none=True) if payload.push_subscription else None
    user = profiles.update_reminder(current_user.id, payload.reminder, subscription)
    return {
        "result": ReminderResponse(
            reminder=user.reminder,
            has_subscription=user.push_subscription is not None
        )
    }
