#!/usr/bin/env python3
"""
Retrieval module for the childcare chatbot.

This module looks up knowledge base entries that mention any keyword of the
parent's question, either as a tagged keyword or inside the title/content.
"""

from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session

from .config import Config
from ..data.models import KnowledgeBase
from ..nlu.keywords import extract_keywords
from ..utils.logger import get_logger

logger = get_logger()

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE metacharacters so the term only matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class KnowledgeRetriever:
    """Keyword retriever over the knowledge_base table."""

    def __init__(self, db: Session, default_limit: Optional[int] = None):
        """
        Initialize the retriever.

        Args:
            db: Open SQLAlchemy session (read-only use)
            default_limit: Result cap used when retrieve() gets no limit
        """
        self.db = db
        self.default_limit = Config.MAX_CONTEXT_DOCS if default_limit is None else default_limit

    def _keyword_clause(self, keyword: str):
        escaped = escape_like(keyword)
        # keywords is a JSON list, so a quoted element marks list membership
        return or_(
            cast(KnowledgeBase.keywords, String).like(f'%"{escaped}"%', escape=LIKE_ESCAPE),
            KnowledgeBase.title.ilike(f"%{escaped}%", escape=LIKE_ESCAPE),
            KnowledgeBase.content.ilike(f"%{escaped}%", escape=LIKE_ESCAPE),
        )

    def find_active_entries(
        self,
        keywords: Sequence[str],
        limit: Optional[int] = None,
        today: Optional[date] = None,
    ) -> List[KnowledgeBase]:
        """
        Return active, date-valid entries matching any of the keywords.

        Args:
            keywords: Terms to look for; an empty sequence matches nothing
            limit: Maximum number of entries returned
            today: Reference date for the validity window (defaults to today)

        Returns:
            Entries in the store's natural order, at most `limit` of them
        """
        terms = list(dict.fromkeys(k for k in keywords if k))
        if not terms:
            return []

        today = today or date.today()
        if limit is None:
            limit = self.default_limit
        if limit <= 0:
            return []

        query = (
            self.db.query(KnowledgeBase)
            .filter(KnowledgeBase.is_active.is_(True))
            .filter(or_(KnowledgeBase.effective_date.is_(None), KnowledgeBase.effective_date <= today))
            .filter(or_(KnowledgeBase.expiry_date.is_(None), KnowledgeBase.expiry_date >= today))
            .filter(or_(*[self._keyword_clause(term) for term in terms]))
            .limit(limit)
        )
        return query.all()

    def retrieve(self, question: str, limit: Optional[int] = None) -> List[KnowledgeBase]:
        """
        Retrieve knowledge relevant to a parent's question.

        Args:
            question: Raw question text
            limit: Maximum number of entries returned (default MAX_CONTEXT_DOCS)

        Returns:
            Matching knowledge base entries
        """
        keywords = extract_keywords(question)
        logger.debug("[WORKFLOW] Extracted keywords %s from %r", keywords, question)
        if not keywords:
            return []

        entries = self.find_active_entries(keywords, limit=limit)
        logger.info("[WORKFLOW] Retrieved %d knowledge entries", len(entries))
        return entries
