"""Pydantic models for API I/O and the answer contract.

GeneratedAnswer is what the response composer hands back to the controller;
the rest describe the HTTP surface.
"""
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Any, Dict, List, Optional

from ..data.models import ConversationStatus, KnowledgeCategory, MessageRole

class GeneratedAnswer(BaseModel):
    content: str
    confidence: float = Field(ge=0.0, le=1.0)
    escalated: bool = False
    escalation_reason: Optional[str] = None
    source_references: List[str] = Field(default_factory=list)

class SendMessageRequest(BaseModel):
    message: str = Field(min_length=1, max_length=1000)
    session_id: Optional[str] = None
    parent_name: Optional[str] = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def _parent_name_required_for_new_conversation(self):
        if not self.session_id and not self.parent_name:
            raise ValueError("parent_name is required when session_id is not provided")
        return self

class ChatMessage(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    role: MessageRole
    content: str
    confidence_score: Optional[float] = None
    source_references: Optional[List[str]] = None
    created_at: Optional[datetime] = None

class AssistantReply(BaseModel):
    id: str
    role: MessageRole
    content: str
    confidence_score: Optional[float] = None
    should_escalate: bool = False
    created_at: Optional[datetime] = None

class SendMessageResponse(BaseModel):
    session_id: str
    message: AssistantReply

class ConversationResponse(BaseModel):
    session_id: str
    status: ConversationStatus
    messages: List[ChatMessage] = Field(default_factory=list)

class KnowledgeEntryRequest(BaseModel):
    category: KnowledgeCategory
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    keywords: List[str] = Field(default_factory=list)
    is_active: bool = True
    is_seasonal: bool = False
    effective_date: Optional[date] = None
    expiry_date: Optional[date] = None

    @model_validator(mode="after")
    def _validity_window(self):
        if self.effective_date and self.expiry_date and self.expiry_date < self.effective_date:
            raise ValueError("expiry_date must not be before effective_date")
        return self

class KnowledgeEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    category: KnowledgeCategory
    title: str
    content: str
    keywords: Optional[List[str]] = None
    is_active: bool
    is_seasonal: bool
    effective_date: Optional[date] = None
    expiry_date: Optional[date] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None

class KnowledgeEntryResponse(BaseModel):
    message: str
    entry: KnowledgeEntry

class KnowledgeListResponse(BaseModel):
    knowledge_by_category: Dict[str, List[KnowledgeEntry]]

class HealthResponse(BaseModel):
    status: str
    details: Dict[str, Any] = Field(default_factory=dict)
