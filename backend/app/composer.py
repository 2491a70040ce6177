#!/usr/bin/env python3
"""
Response composition for the childcare chatbot.

Turns a parent question plus retrieved knowledge into a GeneratedAnswer:
sensitive topics go straight to staff, everything else is answered by the
LLM from the knowledge context and scored by how much knowledge backed it.
"""

from typing import Sequence

from pydantic import BaseModel, Field

from .config import Config
from .prompt_builder import PromptBuilder
from ..nlu.rules import EscalationPolicy
from ..schemas.io_models import GeneratedAnswer
from ..utils.logger import get_logger

logger = get_logger()

ESCALATION_MESSAGE = (
    "This question requires personal attention from our staff. "
    "An operator will assist you shortly."
)
ERROR_MESSAGE = (
    "I apologize, but I encountered an error. "
    "Please try again or speak with an operator."
)

REASON_SENSITIVE_TOPIC = "sensitive_topic"
REASON_ERROR = "error"


class ResponsePolicy(BaseModel):
    """Model parameters and confidence tiers used when answering."""

    model: str
    max_tokens: int = Field(gt=0)
    no_knowledge_confidence: float = Field(default=0.3, ge=0.0, le=1.0)
    single_knowledge_confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    multiple_knowledge_confidence: float = Field(default=0.9, ge=0.0, le=1.0)

    @classmethod
    def from_config(cls) -> "ResponsePolicy":
        return cls(
            model=Config.ANTHROPIC_MODEL,
            max_tokens=Config.ANTHROPIC_MAX_TOKENS,
            no_knowledge_confidence=Config.CONFIDENCE_NO_KNOWLEDGE,
            single_knowledge_confidence=Config.CONFIDENCE_SINGLE_KNOWLEDGE,
            multiple_knowledge_confidence=Config.CONFIDENCE_MULTIPLE_KNOWLEDGE,
        )


class ResponseComposer:
    """Builds the assistant's answer for one parent question."""

    def __init__(self, generator, policy: ResponsePolicy, escalation_policy: EscalationPolicy, prompt_builder: PromptBuilder = None):
        """
        Initialize the composer.

        Args:
            generator: Object exposing generate(system_prompt, user_prompt, model, max_tokens) -> str
            policy: Model parameters and confidence tiers
            escalation_policy: Sensitive-topic check run before any generation
            prompt_builder: Prompt templates (defaults to the front desk prompts)
        """
        self.generator = generator
        self.policy = policy
        self.escalation_policy = escalation_policy
        self.prompt_builder = prompt_builder or PromptBuilder()

    def calculate_confidence(self, knowledge: Sequence) -> float:
        """Score an answer by how many knowledge entries grounded it."""
        count = len(knowledge)
        if count == 0:
            return self.policy.no_knowledge_confidence
        if count >= 2:
            return self.policy.multiple_knowledge_confidence
        return self.policy.single_knowledge_confidence

    def generate_response(self, question: str, knowledge: Sequence) -> GeneratedAnswer:
        """
        Answer a parent question from the given knowledge.

        Never raises for provider failures: those come back as an escalated
        answer with zero confidence.
        """
        if self.escalation_policy.should_escalate(question):
            logger.info("[WORKFLOW] Escalating sensitive question to staff")
            return GeneratedAnswer(
                content=ESCALATION_MESSAGE,
                confidence=1.0,
                escalated=True,
                escalation_reason=REASON_SENSITIVE_TOPIC,
                source_references=[],
            )

        context = self.prompt_builder.build_context(knowledge)
        user_prompt = self.prompt_builder.build_user_prompt(question, context)

        try:
            content = self.generator.generate(
                self.prompt_builder.system_prompt,
                user_prompt,
                self.policy.model,
                self.policy.max_tokens,
            )
        except Exception:
            logger.exception(
                "AI chat response generation failed (question=%r, knowledge_count=%d)",
                question,
                len(knowledge),
            )
            return GeneratedAnswer(
                content=ERROR_MESSAGE,
                confidence=0.0,
                escalated=True,
                escalation_reason=REASON_ERROR,
                source_references=[],
            )

        return GeneratedAnswer(
            content=content or "",
            confidence=self.calculate_confidence(knowledge),
            escalated=False,
            source_references=[str(item.id) for item in knowledge],
        )
