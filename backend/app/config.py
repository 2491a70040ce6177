#!/usr/bin/env python3
"""
Configuration management for the childcare chat backend.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_SENSITIVE_KEYWORDS = [
    "specific child", "billing dispute", "complaint", "custody",
    "abuse", "neglect", "staff issue", "tour scheduling",
    "schedule a tour", "visit", "door code", "security code",
]


def _split_keywords(raw):
    return [k.strip() for k in raw.split(",") if k.strip()]


class Config:
    """Configuration class for the application."""

    # Anthropic API Configuration
    ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
    ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-3-5-sonnet-20241022")
    ANTHROPIC_MAX_TOKENS = int(os.getenv("ANTHROPIC_MAX_TOKENS", 1024))
    ANTHROPIC_API_URL = os.getenv("ANTHROPIC_API_URL", "https://api.anthropic.com/v1/messages")
    ANTHROPIC_VERSION = "2023-06-01"
    ANTHROPIC_TIMEOUT = float(os.getenv("ANTHROPIC_TIMEOUT", 30))

    # Database Configuration
    DATABASE_URL = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(os.path.dirname(__file__), "..", "data", "childcare.db"),
    )

    # Retrieval Configuration
    MAX_CONTEXT_DOCS = int(os.getenv("MAX_CONTEXT_DOCS", 5))

    # Escalation Configuration
    SENSITIVE_KEYWORDS = (
        _split_keywords(os.getenv("SENSITIVE_KEYWORDS"))
        if os.getenv("SENSITIVE_KEYWORDS")
        else list(DEFAULT_SENSITIVE_KEYWORDS)
    )

    # Confidence scores by number of knowledge entries used
    CONFIDENCE_NO_KNOWLEDGE = float(os.getenv("CONFIDENCE_NO_KNOWLEDGE", 0.3))
    CONFIDENCE_SINGLE_KNOWLEDGE = float(os.getenv("CONFIDENCE_SINGLE_KNOWLEDGE", 0.7))
    CONFIDENCE_MULTIPLE_KNOWLEDGE = float(os.getenv("CONFIDENCE_MULTIPLE_KNOWLEDGE", 0.9))

    @classmethod
    def debug_print(cls):
        print(f"[CONFIG] ANTHROPIC_MODEL={cls.ANTHROPIC_MODEL} max_tokens={cls.ANTHROPIC_MAX_TOKENS} set={bool(cls.ANTHROPIC_API_KEY)}")
        print(f"[CONFIG] DATABASE_URL={cls.DATABASE_URL}")
        print(f"[CONFIG] SENSITIVE_KEYWORDS={len(cls.SENSITIVE_KEYWORDS)} phrases")
        print(
            f"[CONFIG] CONFIDENCE none={cls.CONFIDENCE_NO_KNOWLEDGE} "
            f"single={cls.CONFIDENCE_SINGLE_KNOWLEDGE} multiple={cls.CONFIDENCE_MULTIPLE_KNOWLEDGE}"
        )

    @classmethod
    def validate(cls):
        """Validate that all required configuration is present."""
        problems = []

        # A missing ANTHROPIC_API_KEY is allowed: generation then fails per call
        # and the chat falls back to the operator hand-off message.
        if not cls.SENSITIVE_KEYWORDS:
            problems.append("SENSITIVE_KEYWORDS is empty")

        thresholds = {
            "CONFIDENCE_NO_KNOWLEDGE": cls.CONFIDENCE_NO_KNOWLEDGE,
            "CONFIDENCE_SINGLE_KNOWLEDGE": cls.CONFIDENCE_SINGLE_KNOWLEDGE,
            "CONFIDENCE_MULTIPLE_KNOWLEDGE": cls.CONFIDENCE_MULTIPLE_KNOWLEDGE,
        }
        for name, value in thresholds.items():
            if not 0.0 <= value <= 1.0:
                problems.append(f"{name} must be between 0 and 1 (got {value})")

        if not (cls.CONFIDENCE_NO_KNOWLEDGE <= cls.CONFIDENCE_SINGLE_KNOWLEDGE <= cls.CONFIDENCE_MULTIPLE_KNOWLEDGE):
            problems.append("confidence thresholds must not decrease as knowledge grows")

        if cls.ANTHROPIC_MAX_TOKENS <= 0:
            problems.append("ANTHROPIC_MAX_TOKENS must be positive")
        if cls.MAX_CONTEXT_DOCS <= 0:
            problems.append("MAX_CONTEXT_DOCS must be positive")

        if problems:
            raise ValueError(f"Invalid configuration: {'; '.join(problems)}")

        return True

# Validate configuration on import
Config.validate()
