"""
Generation backend client for ATS analysis.

Talks to an OpenAI-compatible chat completions endpoint (Groq by default)
with fixed decoding parameters, and maps SDK failures onto the analysis
error types so callers can tell a bad key from a broken backend.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Optional

import openai
from django.conf import settings
from openai import OpenAI

from .exceptions import AuthError, InputError, ServiceUnavailable

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama-3.3-70b-versatile"
DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
TEMPERATURE = 0.2
MAX_TOKENS = 1024
FALLBACK_RESULT = "<p>Analysis failed to generate.</p>"


class AnalysisClient:
    """
    Client for one analysis attempt with a given credential.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        """
        Args:
            api_key: Credential for the generation backend.
            model: Model identifier; defaults to the ANALYSIS_MODEL setting.
            base_url: Endpoint root; defaults to the ANALYSIS_BASE_URL setting.

        Raises:
            AuthError: If no credential is available
        """
        self.api_key = (api_key or "").strip()
        if not self.api_key:
            raise AuthError("No API key configured for the analysis backend.")

        self.model = model or os.environ.get("ANALYSIS_MODEL") or getattr(
            settings,
            "ANALYSIS_MODEL",
            DEFAULT_MODEL,
        )
        self.base_url = base_url or os.environ.get("ANALYSIS_BASE_URL") or getattr(
            settings,
            "ANALYSIS_BASE_URL",
            DEFAULT_BASE_URL,
        )
        self.client = OpenAI(api_key=self.api_key, base_url=self.base_url)

    def analyze(self, system_instruction: str, user_message: str) -> str:
        """
        Run one completion and return the generated text.

        Returns:
            The first completion's content, or FALLBACK_RESULT when the backend
            produced nothing usable.

        Raises:
            InputError: If either prompt part is blank
            AuthError: If the backend rejects the credential
            ServiceUnavailable: For any other backend or transport failure
        """
        if not (system_instruction or "").strip() or not (user_message or "").strip():
            raise InputError("Both a system instruction and a user message are required.")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_instruction},
                    {"role": "user", "content": user_message},
                ],
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            logger.warning("Analysis backend rejected the API key: %s", exc)
            raise AuthError("The API key is invalid or expired.") from exc
        except openai.OpenAIError as exc:
            logger.error("Analysis backend request failed: %s", exc)
            raise ServiceUnavailable("The AI model is not available right now.") from exc

        content = self._extract_content(response)
        if not content:
            logger.warning("Analysis backend returned no content for model %s", self.model)
            return FALLBACK_RESULT
        return content

    @staticmethod
    def _extract_content(response: Any) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str):
            return ""
        return content.strip()
