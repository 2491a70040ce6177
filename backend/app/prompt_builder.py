#!/usr/bin/env python3
"""
Prompt builder module for the childcare chatbot.

This module constructs prompts for the LLM from retrieved knowledge entries.
"""

from typing import Sequence

SYSTEM_PROMPT = """You are a helpful childcare center front desk assistant. Your role is to answer parent questions professionally and accurately based on the provided knowledge base.

Guidelines:
- Only answer based on the provided context
- Be friendly, professional, and concise
- If you don't have enough information, acknowledge it politely
- Never make up information
- Keep responses brief and to the point"""

USER_PROMPT_TEMPLATE = """Context from knowledge base:
{context}

Parent question: {question}

Please provide a helpful response based on the context above."""


class PromptBuilder:
    """Builds prompts for the LLM with knowledge base context."""

    def __init__(self, system_prompt: str = SYSTEM_PROMPT):
        """Initialize the prompt builder."""
        self.system_prompt = system_prompt

    def build_context(self, knowledge: Sequence) -> str:
        """Join entries as Title/Content blocks separated by a blank line, in the order given."""
        return "\n\n".join(
            f"Title: {item.title}\nContent: {item.content}" for item in knowledge
        )

    def build_user_prompt(self, question: str, context: str) -> str:
        return USER_PROMPT_TEMPLATE.format(context=context, question=question)
