"""Keyword extraction for knowledge base lookups.

Exact tokens only: no stemming, no fuzzy matching.
"""
import re
from typing import List

STOP_WORDS = frozenset([
    "what", "when", "where", "who", "how", "is", "are", "the", "a", "an",
    "do", "does", "can", "could", "would", "your", "you", "we", "us", "our",
    "have", "has", "had", "be", "been", "being", "will", "shall", "should",
    "may", "might", "must",
])

MIN_TOKEN_LENGTH = 3

_NON_WORD = re.compile(r"[^a-z0-9\s]")


def extract_keywords(question: str) -> List[str]:
    """Return the significant lowercase tokens of a question, in order.

    Punctuation is deleted rather than replaced, so "drop-off" becomes "dropoff".
    """
    if not question:
        return []
    cleaned = _NON_WORD.sub("", question.lower())
    return [
        token for token in cleaned.split()
        if len(token) >= MIN_TOKEN_LENGTH and token not in STOP_WORDS
    ]
