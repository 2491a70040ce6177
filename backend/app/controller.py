"""Controller / Orchestrator for a single chat turn.

Retrieves knowledge for the parent's question, asks the composer for an
answer, then persists both messages and the analytics events together.
"""
import uuid
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from .composer import REASON_SENSITIVE_TOPIC, ResponseComposer
from .retrieval import KnowledgeRetriever
from ..data.models import (
    AnalyticsEvent,
    Conversation,
    ConversationStatus,
    EventType,
    Message,
    MessageRole,
    _now,
)
from ..utils.logger import get_logger

logger = get_logger()


class ConversationNotFound(LookupError):
    """Raised when a session id does not belong to any conversation."""


class ChatController:
    def __init__(self, composer: ResponseComposer, retrieval_limit: Optional[int] = None):
        self.composer = composer
        self.retrieval_limit = retrieval_limit

    def _find_conversation(self, db: Session, session_id: str) -> Conversation:
        conversation = db.query(Conversation).filter(Conversation.session_id == session_id).first()
        if conversation is None:
            raise ConversationNotFound(session_id)
        return conversation

    def _start_conversation(self, db: Session, parent_name: Optional[str]) -> Conversation:
        conversation = Conversation(
            session_id=str(uuid.uuid4()),
            parent_name=parent_name,
            status=ConversationStatus.active,
        )
        db.add(conversation)
        db.flush()
        logger.info("[WORKFLOW] Started conversation %s", conversation.session_id)
        return conversation

    def _record_event(self, db: Session, conversation: Conversation, event_type: EventType, category: str, metadata: Dict[str, Any]):
        db.add(AnalyticsEvent(
            conversation_id=conversation.id,
            event_type=event_type,
            category=category,
            event_metadata=metadata,
        ))

    def handle_message(self, db: Session, message: str, session_id: Optional[str] = None, parent_name: Optional[str] = None) -> Dict[str, Any]:
        """Run one chat turn and commit it as a single unit.

        Retrieval and generation only read, so no write lock is held while
        the provider call blocks. All rows are written after the answer exists.
        """
        logger.info("[WORKFLOW] 1. Controller received message for session %s", session_id or "<new>")
        try:
            conversation = self._find_conversation(db, session_id) if session_id else None
            asked_at = _now()

            logger.info("[WORKFLOW] 2. Retrieving knowledge...")
            knowledge = KnowledgeRetriever(db).retrieve(message, limit=self.retrieval_limit)

            logger.info("[WORKFLOW] 3. Composing response from %d entries...", len(knowledge))
            answer = self.composer.generate_response(message, knowledge)

            if conversation is None:
                conversation = self._start_conversation(db, parent_name)

            parent_message = Message(
                conversation_id=conversation.id,
                role=MessageRole.parent,
                content=message,
                created_at=asked_at,
            )
            assistant_message = Message(
                conversation_id=conversation.id,
                role=MessageRole.assistant,
                content=answer.content,
                confidence_score=answer.confidence,
                source_references=[str(item.id) for item in knowledge],
            )
            db.add_all([parent_message, assistant_message])
            db.flush()
            self._record_event(db, conversation, EventType.question_asked, "interaction", {"message_id": parent_message.id})

            if answer.escalated:
                reason = answer.escalation_reason or REASON_SENSITIVE_TOPIC
                conversation.status = ConversationStatus.escalated
                conversation.escalation_reason = reason
                self._record_event(db, conversation, EventType.escalated, "escalation", {
                    "message_id": assistant_message.id,
                    "reason": reason,
                })
                logger.info("[WORKFLOW] 4. Conversation %s escalated (%s)", conversation.session_id, reason)
            else:
                self._record_event(db, conversation, EventType.answer_given, "interaction", {
                    "message_id": assistant_message.id,
                    "confidence_score": answer.confidence,
                })
                logger.info("[WORKFLOW] 4. Answer given with confidence %.2f", answer.confidence)

            db.commit()
        except Exception:
            db.rollback()
            raise

        return {
            "session_id": conversation.session_id,
            "message": {
                "id": assistant_message.id,
                "role": assistant_message.role,
                "content": assistant_message.content,
                "confidence_score": assistant_message.confidence_score,
                "should_escalate": answer.escalated,
                "created_at": assistant_message.created_at,
            },
        }

    def get_conversation(self, db: Session, session_id: str) -> Dict[str, Any]:
        conversation = self._find_conversation(db, session_id)
        messages = (
            db.query(Message)
            .filter(Message.conversation_id == conversation.id)
            .order_by(Message.created_at)
            .all()
        )
        return {
            "session_id": conversation.session_id,
            "status": conversation.status,
            "messages": messages,
        }
