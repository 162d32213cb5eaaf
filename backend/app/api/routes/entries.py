from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Path, status
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from app.api.dependencies import CurrentUser, get_current_user, get_entry_service
from app.services.entry_service import EntryService

router = APIRouter(prefix="/entries", tags=["entries"])


def _not_blank(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("Must not be empty")
    return value


class EntryCreate(BaseModel):
    title: str = Field(max_length=255)
    body: str

    @field_validator("title", "body")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _not_blank(value)


class EntryUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    body: Optional[str] = None

    @field_validator("title", "body")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _not_blank(value)

    @model_validator(mode="after")
    def has_changes(self) -> "EntryUpdate":
        if self.title is None and self.body is None:
            raise ValueError("Provide a title or a body to update")
        return self


class EntryResponse(BaseModel):
    id: int
    user_id: int
    title: str
    body: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)

    @field_serializer('created_at')
    def serialize_created_at(self, value: Optional[datetime], _info):
        return value.isoformat() if value else None

    @field_serializer('updated_at')
    def serialize_updated_at(self, value: Optional[datetime], _info):
        return value.isoformat() if value else None


class EntryListResponse(BaseModel):
    entries: List[EntryResponse]


class EntryResult(BaseModel):
    result: EntryResponse


class EntryDetail(BaseModel):
    entry: EntryResponse


@router.get("", response_model=EntryListResponse)
def list_entries(
    current_user: CurrentUser = Depends(get_current_user),
    entries: EntryService = Depends(get_entry_service)
):
    """List all diary entries of the current user, newest first"""
    owned = entries.list_entries(current_user.id)
    return {"entries": [EntryResponse.model_validate(entry) for entry in owned]}


@router.post("", response_model=EntryResult, status_code=status.HTTP_201_CREATED)
def create_entry(
    payload: EntryCreate,
    current_user: CurrentUser = Depends(get_current_user),
    entries: EntryService = Depends(get_entry_service)
):
    """Create a new diary entry"""
    entry = entries.create_entry(current_user.id, title=payload.title, body=payload.body)
    return {"result": EntryResponse.model_validate(entry)}


@router.get("/{entry_id}", response_model=EntryDetail)
def get_entry(
    entry_id: int = Path(gt=0),
    current_user: CurrentUser = Depends(get_current_user),
    entries: EntryService = Depends(get_entry_service)
):
    """Get a specific diary entry"""
    return {"entry": EntryResponse.model_validate(entries.get_entry(current_user.id, entry_id))}


@router.put("/{entry_id}", response_model=EntryResult)
def update_entry(
    payload: EntryUpdate,
    entry_id: int = Path(gt=0),
    current_user: CurrentUser = Depends(get_current_user),
    entries: EntryService = Depends(get_entry_service)
):
    """Modify the title and/or body of a diary entry"""
    entry = entries.update_entry(
        current_user.id,
        entry_id,
        title=payload.title,
        body=payload.body
    )
    return {"result": EntryResponse.model_validate(entry)}


@router.delete("/{entry_id}")
def delete_entry(
    entry_id: int = Path(gt=0),
    current_user: CurrentUser = Depends(get_current_user),
    entries: EntryService = Depends(get_entry_service)
):
    """Delete a diary entry"""
    entries.delete_entry(current_user.id, entry_id)
    return {"message": "Diary entry deleted successfully"}
