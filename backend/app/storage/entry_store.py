import logging
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.errors import StoreError
from app.models.entry import DiaryEntry

logger = logging.getLogger(__name__)


class EntryStore:
    """Entry store: diary entries, always scoped by owner"""

    def __init__(self, db: Session):
        self.db = db

    def list_by_owner(self, user_id: int) -> List[DiaryEntry]:
        try:
            return (
                self.db.query(DiaryEntry)
                .filter(DiaryEntry.user_id == user_id)
                .order_by(DiaryEntry.created_at.desc(), DiaryEntry.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Listing entries for user {user_id} failed: {str(e)}")
            raise StoreError("Could not list entries") from e

    def count_by_owner(self, user_id: int) -> int:
        try:
            return self.db.query(DiaryEntry).filter(DiaryEntry.user_id == user_id).count()
        except SQLAlchemyError as e:
            logger.error(f"Counting entries for user {user_id} failed: {str(e)}")
            raise StoreError("Could not count entries") from e

    def insert_entry(self, user_id: int, title: str, body: str) -> DiaryEntry:
        entry = DiaryEntry(user_id=user_id, title=title, body=body)
        try:
            self.db.add(entry)
            self.db.commit()
            self.db.refresh(entry)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Inserting entry for user {user_id} failed: {str(e)}")
            raise StoreError("Could not create entry") from e
        return entry

    def find_by_id_and_owner(self, entry_id: int, user_id: int) -> Optional[DiaryEntry]:
        try:
            return self.db.query(DiaryEntry).filter(
                DiaryEntry.id == entry_id,
                DiaryEntry.user_id == user_id
            ).first()
        except SQLAlchemyError as e:
            logger.error(f"Loading entry {entry_id} failed: {str(e)}")
            raise StoreError("Could not load entry") from e

    def update_entry(self, entry: DiaryEntry, title: Optional[str] = None, body: Optional[str] = None) -> DiaryEntry:
        try:
            if title is not None:
                entry.title = title
            if body is not None:
                entry.body = body
            self.db.commit()
            self.db.refresh(entry)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Updating entry {entry.id} failed: {str(e)}")
            raise StoreError("Could not update entry") from e
        return entry

    def delete_entry(self, entry: DiaryEntry) -> None:
        try:
            self.db.delete(entry)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Deleting entry {entry.id} failed: {str(e)}")
            raise StoreError("Could not delete entry") from e
