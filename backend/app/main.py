#!/usr/bin/env python3
"""
Main FastAPI application for the childcare chatbot.
"""

from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from functools import lru_cache
from sqlalchemy.orm import Session
from typing import Optional

from .config import Config
from .composer import ResponseComposer, ResponsePolicy
from .controller import ChatController, ConversationNotFound
from .generate import GenerationClient
from ..data.database import create_tables, get_db
from ..data.knowledge_store import KnowledgeEntryNotFound, KnowledgeStore
from ..nlu.rules import EscalationPolicy
from ..schemas.io_models import (
    ChatMessage,
    ConversationResponse,
    HealthResponse,
    KnowledgeEntry,
    KnowledgeEntryRequest,
    KnowledgeEntryResponse,
    KnowledgeListResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from ..utils.logger import get_logger

logger = get_logger()

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()
    yield

# Initialize FastAPI app
app = FastAPI(
    title="Childcare Center Chat API",
    description="Knowledge-grounded parent support chat with staff escalation",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify your frontend domain
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@lru_cache(maxsize=1)
def get_composer() -> ResponseComposer:
    """Build the shared response composer from configuration."""
    return ResponseComposer(
        generator=GenerationClient(),
        policy=ResponsePolicy.from_config(),
        escalation_policy=EscalationPolicy.from_config(),
    )

def get_chat_controller(composer: ResponseComposer = Depends(get_composer)) -> ChatController:
    return ChatController(composer, retrieval_limit=Config.MAX_CONTEXT_DOCS)

def get_operator_id() -> Optional[str]:
    """Operator reference stamped on knowledge edits; authentication lives outside this service."""
    return None

@app.post("/api/chat", response_model=SendMessageResponse)
def send_message(
    request: SendMessageRequest,
    db: Session = Depends(get_db),
    controller: ChatController = Depends(get_chat_controller),
):
    """
    Answer a parent's message, starting a conversation when no session id is given.
    """
    try:
        return controller.handle_message(
            db,
            request.message,
            session_id=request.session_id,
            parent_name=request.parent_name,
        )
    except ConversationNotFound:
        raise HTTPException(status_code=404, detail="Conversation not found")

@app.get("/api/chat/{session_id}", response_model=ConversationResponse)
def get_conversation(
    session_id: str,
    db: Session = Depends(get_db),
    controller: ChatController = Depends(get_chat_controller),
):
    try:
        transcript = controller.get_conversation(db, session_id)
    except ConversationNotFound:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return ConversationResponse(
        session_id=transcript["session_id"],
        status=transcript["status"],
        messages=[ChatMessage.model_validate(m) for m in transcript["messages"]],
    )

@app.get("/operator/knowledge-base", response_model=KnowledgeListResponse)
def list_knowledge(db: Session = Depends(get_db)):
    grouped = KnowledgeStore(db).list_by_category()
    return KnowledgeListResponse(knowledge_by_category={
        category: [KnowledgeEntry.model_validate(entry) for entry in entries]
        for category, entries in grouped.items()
    })

@app.post("/operator/knowledge-base", response_model=KnowledgeEntryResponse)
def create_knowledge_entry(
    request: KnowledgeEntryRequest,
    db: Session = Depends(get_db),
    operator_id: Optional[str] = Depends(get_operator_id),
):
    entry = KnowledgeStore(db).create_entry(request.model_dump(), updated_by=operator_id)
    logger.info("Knowledge entry %s created in %s", entry.id, entry.category.value)
    return KnowledgeEntryResponse(
        message="Knowledge base entry created successfully",
        entry=KnowledgeEntry.model_validate(entry),
    )

@app.put("/operator/knowledge-base/{entry_id}", response_model=KnowledgeEntryResponse)
def update_knowledge_entry(
    entry_id: str,
    request: KnowledgeEntryRequest,
    db: Session = Depends(get_db),
    operator_id: Optional[str] = Depends(get_operator_id),
):
    try:
        entry = KnowledgeStore(db).update_entry(entry_id, request.model_dump(), updated_by=operator_id)
    except KnowledgeEntryNotFound:
        raise HTTPException(status_code=404, detail="Knowledge base entry not found")
    logger.info("Knowledge entry %s updated", entry.id)
    return KnowledgeEntryResponse(
        message="Knowledge base entry updated successfully",
        entry=KnowledgeEntry.model_validate(entry),
    )

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", details={
        "model": Config.ANTHROPIC_MODEL,
        "generation_configured": bool(Config.ANTHROPIC_API_KEY),
    })

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
