"""Shared helpers for tests that need an isolated database."""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.data.database import Base, create_tables
from backend.data.models import KnowledgeBase, KnowledgeCategory


def make_session_factory():
    """Return a sessionmaker bound to a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine), engine


def drop_all(engine):
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


def add_entry(db, **overrides):
    fields = {
        "category": KnowledgeCategory.general,
        "title": "Untitled",
        "content": "",
        "keywords": [],
        "is_active": True,
    }
    fields.update(overrides)
    entry = KnowledgeBase(**fields)
    db.add(entry)
    db.commit()
    return entry


class StubGenerator:
    """Deterministic stand-in for the text generation provider."""

    def __init__(self, reply="Stub answer.", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate(self, system_prompt, user_prompt, model, max_tokens):
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "model": model,
            "max_tokens": max_tokens,
        })
        if self.error is not None:
            raise self.error
        return self.reply
