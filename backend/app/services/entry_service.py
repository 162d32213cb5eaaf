import logging
from typing import List, Optional
from app.core.errors import InternalError, NotFoundError, StoreError
from app.models.entry import DiaryEntry
from app.storage.entry_store import EntryStore

logger = logging.getLogger(__name__)

ENTRY_NOT_FOUND_MESSAGE = "Diary entry not found"


class EntryService:
    """
    Ownership-scoped CRUD over diary entries.

    An entry owned by someone else is reported exactly like a missing one,
    so callers cannot probe for the existence of other users' entries.
    """

    def __init__(self, entries: EntryStore):
        self.entries = entries

    def list_entries(self, user_id: int) -> List[DiaryEntry]:
        try:
            entries = self.entries.list_by_owner(user_id)
        except StoreError:
            raise InternalError()
        # Zero entries is reported as 404, not an empty list
        if not entries:
            raise NotFoundError("You have no diary entries yet")
        return entries

    def create_entry(self, user_id: int, title: str, body: str) -> DiaryEntry:
        try:
            entry = self.entries.insert_entry(user_id=user_id, title=title, body=body)
        except StoreError:
            raise InternalError()
        logger.info(f"User {user_id} created entry {entry.id}")
        return entry

    def get_entry(self, user_id: int, entry_id: int) -> DiaryEntry:
        try:
            entry = self.entries.find_by_id_and_owner(entry_id, user_id)
        except StoreError:
            raise InternalError()
        if entry is None:
            raise NotFoundError(ENTRY_NOT_FOUND_MESSAGE)
        return entry

    def update_entry(
        self,
        user_id: int,
        entry_id: int,
        title: Optional[str] = None,
        body: Optional[str] = None
    ) -> DiaryEntry:
        entry = self.get_entry(user_id, entry_id)
        try:
            return self.entries.update_entry(entry, title=title, body=body)
        except StoreError:
            raise InternalError()

    def delete_entry(self, user_id: int, entry_id: int) -> None:
        entry = self.get_entry(user_id, entry_id)
        try:
            self.entries.delete_entry(entry)
        except StoreError:
            raise InternalError()
        logger.info(f"User {user_id} deleted entry {entry_id}")
