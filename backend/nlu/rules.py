"""Rule-based escalation check for sensitive parent questions."""
from typing import Iterable, List, Optional

from ..app.config import Config


def _contains_any(q: str, vocab: List[str]) -> Optional[str]:
    ql = q.lower()
    for phrase in vocab:
        if phrase and phrase in ql:
            return phrase
    return None


class EscalationPolicy:
    """Sends questions on sensitive topics straight to staff.

    A question escalates when any configured phrase appears anywhere in it,
    compared case-insensitively. Substring matching is intentional: "visit"
    also catches "visiting" and "visitation".
    """

    def __init__(self, sensitive_keywords: Iterable[str]):
        self.sensitive_keywords = [k.lower() for k in sensitive_keywords]

    @classmethod
    def from_config(cls) -> "EscalationPolicy":
        return cls(Config.SENSITIVE_KEYWORDS)

    def matched_phrase(self, question: str) -> Optional[str]:
        """Return the first configured phrase found in the question, if any."""
        return _contains_any(question or "", self.sensitive_keywords)

    def should_escalate(self, question: str) -> bool:
        return self.matched_phrase(question) is not None
