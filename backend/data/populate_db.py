import json
import os
from datetime import date
from .database import SessionLocal, create_tables
from .models import KnowledgeBase, KnowledgeCategory
from ..utils.logger import get_logger

logger = get_logger()

KNOWLEDGE_JSON_PATH = os.path.join(os.path.dirname(__file__), "raw", "knowledge_base.json")

def _parse_date(value):
    return date.fromisoformat(value) if value else None

def load_seed_entries(path=KNOWLEDGE_JSON_PATH):
    """Read seed knowledge entries from JSON."""
    with open(path, mode="r", encoding="utf-8") as f:
        rows = json.load(f)
    return [
        KnowledgeBase(
            category=KnowledgeCategory(row["category"]),
            title=row["title"],
            content=row["content"],
            keywords=row.get("keywords", []),
            is_active=row.get("is_active", True),
            is_seasonal=row.get("is_seasonal", False),
            effective_date=_parse_date(row.get("effective_date")),
            expiry_date=_parse_date(row.get("expiry_date")),
        )
        for row in rows
    ]

def populate_knowledge_base(session_factory=SessionLocal, path=KNOWLEDGE_JSON_PATH):
    """Seed the knowledge_base table when it is empty. Returns the number of rows added."""
    db = session_factory()
    try:
        if db.query(KnowledgeBase).count() > 0:
            logger.info("Knowledge base is not empty. Skipping population.")
            return 0

        entries = load_seed_entries(path)
        db.add_all(entries)
        db.commit()
        logger.info("Successfully populated the knowledge base with %d entries.", len(entries))
        return len(entries)
    except Exception:
        db.rollback()
        logger.exception("Error populating knowledge base")
        raise
    finally:
        db.close()

if __name__ == "__main__":
    # Ensure tables are created
    create_tables()
    populate_knowledge_base()
