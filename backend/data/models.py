from sqlalchemy import Column, String, Text, Float, Boolean, Date, DateTime, ForeignKey, Enum, JSON
from sqlalchemy.orm import relationship, validates
from datetime import datetime, timezone
from .database import Base
import enum
import uuid


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid.uuid4())


class KnowledgeCategory(str, enum.Enum):
    hours = "hours"
    tuition = "tuition"
    enrollment = "enrollment"
    health = "health"
    meals = "meals"
    schedule = "schedule"
    pickup = "pickup"
    safety = "safety"
    classrooms = "classrooms"
    policies = "policies"
    general = "general"

class ConversationStatus(str, enum.Enum):
    active = "active"
    resolved = "resolved"
    escalated = "escalated"

class MessageRole(str, enum.Enum):
    parent = "parent"
    assistant = "assistant"
    operator = "operator"

class EventType(str, enum.Enum):
    question_asked = "question_asked"
    answer_given = "answer_given"
    escalated = "escalated"
    feedback_given = "feedback_given"
    knowledge_updated = "knowledge_updated"

class KnowledgeBase(Base):
    __tablename__ = "knowledge_base"

    id = Column(String(36), primary_key=True, default=_uuid)
    category = Column(Enum(KnowledgeCategory), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    keywords = Column(JSON, nullable=True, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    is_seasonal = Column(Boolean, nullable=False, default=False)
    effective_date = Column(Date, nullable=True)
    expiry_date = Column(Date, nullable=True)
    updated_by = Column(String(255), nullable=True)  # operator reference, owned by the auth layer
    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)

    def __repr__(self):
        return f"<KnowledgeBase {self.category.value if self.category else None}: {self.title!r}>"

    @validates("keywords")
    def _lowercase_keywords(self, key, keywords):
        # questions are matched in lowercase, so tags are stored that way
        if keywords is None:
            return keywords
        return [keyword.strip().lower() for keyword in keywords]

class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(String(36), primary_key=True, default=_uuid)
    session_id = Column(String(64), unique=True, index=True, nullable=False)
    parent_name = Column(String(255), nullable=True)
    status = Column(Enum(ConversationStatus), nullable=False, default=ConversationStatus.active, index=True)
    escalation_reason = Column(Text, nullable=True)
    resolved_by = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)

    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )
    analytics_events = relationship("AnalyticsEvent", back_populates="conversation", cascade="all, delete-orphan")

class Message(Base):
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=_uuid)
    conversation_id = Column(String(36), ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Enum(MessageRole), nullable=False, index=True)
    content = Column(Text, nullable=False)
    confidence_score = Column(Float, nullable=True)
    source_references = Column(JSON, nullable=True)
    flagged = Column(Boolean, nullable=False, default=False, index=True)
    flag_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)

    conversation = relationship("Conversation", back_populates="messages")

class AnalyticsEvent(Base):
    __tablename__ = "analytics_events"

    id = Column(String(36), primary_key=True, default=_uuid)
    conversation_id = Column(String(36), ForeignKey("conversations.id", ondelete="CASCADE"), nullable=True)
    event_type = Column(Enum(EventType), nullable=False, index=True)
    category = Column(String(64), nullable=True, index=True)
    # "metadata" is reserved on declarative classes
    event_metadata = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now, index=True)

    conversation = relationship("Conversation", back_populates="analytics_events")
