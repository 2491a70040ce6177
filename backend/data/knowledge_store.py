"""Knowledge base helpers: create, update and list entries for operators.

Every write is recorded as a knowledge_updated analytics event.
"""
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from .models import AnalyticsEvent, EventType, KnowledgeBase


class KnowledgeEntryNotFound(LookupError):
    """Raised when a knowledge entry id is unknown."""


class KnowledgeStore:
    def __init__(self, db: Session):
        self.db = db

    def _record_update(self, entry: KnowledgeBase, action: str):
        self.db.add(AnalyticsEvent(
            event_type=EventType.knowledge_updated,
            category=entry.category.value,
            event_metadata={"entry_id": entry.id, "action": action},
        ))

    def get(self, entry_id: str) -> KnowledgeBase:
        entry = self.db.get(KnowledgeBase, entry_id)
        if entry is None:
            raise KnowledgeEntryNotFound(entry_id)
        return entry

    def create_entry(self, fields: Dict[str, Any], updated_by: Optional[str] = None) -> KnowledgeBase:
        entry = KnowledgeBase(**fields, updated_by=updated_by)
        self.db.add(entry)
        try:
            self.db.flush()
            self._record_update(entry, "created")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(entry)
        return entry

    def update_entry(self, entry_id: str, fields: Dict[str, Any], updated_by: Optional[str] = None) -> KnowledgeBase:
        entry = self.get(entry_id)
        for name, value in fields.items():
            setattr(entry, name, value)
        entry.updated_by = updated_by
        try:
            self._record_update(entry, "updated")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(entry)
        return entry

    def list_by_category(self) -> "OrderedDict[str, List[KnowledgeBase]]":
        """Return all entries grouped by category, ordered by category then title."""
        entries = (
            self.db.query(KnowledgeBase)
            .order_by(KnowledgeBase.category, KnowledgeBase.title)
            .all()
        )
        grouped: "OrderedDict[str, List[KnowledgeBase]]" = OrderedDict()
        for entry in entries:
            grouped.setdefault(entry.category.value, []).append(entry)
        return grouped
