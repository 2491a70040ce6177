#!/usr/bin/env python3
"""
Generation module for the childcare chatbot.

This module handles answer generation using the Anthropic Messages API.
"""

import requests
from typing import Optional
from .config import Config
from ..utils.logger import get_logger

logger = get_logger()


class GenerationError(Exception):
    """Raised when the text generation provider cannot produce an answer."""


class GenerationClient:
    """Client for generating answers using the Anthropic Messages API."""

    def __init__(self, api_key: Optional[str] = None, api_url: Optional[str] = None, timeout: Optional[float] = None):
        """Initialize the generation client."""
        self.api_key = Config.ANTHROPIC_API_KEY if api_key is None else api_key
        self.api_url = Config.ANTHROPIC_API_URL if api_url is None else api_url
        self.timeout = Config.ANTHROPIC_TIMEOUT if timeout is None else timeout

        if not self.api_key:
            logger.warning("ANTHROPIC_API_KEY is not set; every generation call will fail over to an operator")

    def generate(self, system_prompt: str, user_prompt: str, model: str, max_tokens: int) -> str:
        """
        Generate an answer for a single user turn.

        Args:
            system_prompt: Standing instructions for the assistant
            user_prompt: User turn including the grounding context
            model: Model identifier
            max_tokens: Cap on generated tokens

        Returns:
            Text of the first content block, or "" when the provider returns none

        Raises:
            GenerationError: On missing credentials, transport errors,
                non-2xx responses or malformed bodies
        """
        if not self.api_key:
            raise GenerationError("Anthropic API key is required")

        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": Config.ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        payload = {
            "model": model,
            "max_tokens": max_tokens,
            "system": system_prompt,
            "messages": [
                {"role": "user", "content": user_prompt}
            ],
        }

        logger.debug("Sending request to Anthropic API, model=%s prompt length=%d", model, len(user_prompt))
        try:
            response = requests.post(self.api_url, headers=headers, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            body = getattr(getattr(e, "response", None), "text", None)
            if body:
                logger.debug("Anthropic error response body: %s", body)
            raise GenerationError(f"Error generating answer: {e}") from e
        except ValueError as e:
            raise GenerationError(f"Error parsing generation response: {e}") from e

        try:
            content = data.get("content") or []
            if not content:
                return ""
            return content[0].get("text") or ""
        except (AttributeError, TypeError) as e:
            raise GenerationError(f"Error parsing generation response: {e}") from e
