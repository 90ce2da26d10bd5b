"""
LLM client wrapper for resume assessments.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import google.generativeai as genai

LOGGER = logging.getLogger(__name__)

# Try to import safety settings, but make them optional
try:
    from google.generativeai.types import HarmBlockThreshold, HarmCategory
    SAFETY_SETTINGS_AVAILABLE = True
except (ImportError, AttributeError):
    SAFETY_SETTINGS_AVAILABLE = False
    HarmCategory = None
    HarmBlockThreshold = None


class CompletionError(Exception):
    """Raised when the completion model cannot produce a reply."""


class CompletionClient(Protocol):
    """Anything that turns a prompt into a text reply."""

    def complete(self, prompt: str) -> str:
        ...


class GeminiClient:
    """Wrapper around the Google Gemini API for resume assessments."""

    def __init__(
        self,
        api_key: str,
        model_name: str,
        temperature: float = 0.2,
        max_output_tokens: int = 4096,
        timeout: float = 60.0,
    ) -> None:
        """
        Initialize the Gemini client.

        Args:
            api_key: Google Gemini API key.
            model_name: Name of the Gemini model to use.
            temperature: Sampling temperature for assessments.
            max_output_tokens: Upper bound on reply length.
            timeout: Request timeout in seconds.
        """
        genai.configure(api_key=api_key)
        self._model_name = model_name
        self._model = genai.GenerativeModel(model_name)
        self._timeout = timeout
        self._generation_config = {
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
            "candidate_count": 1,
        }
        self._safety_settings = self._build_safety_settings()
        LOGGER.info("Gemini client initialized with model %s", self._model_name)

    @property
    def model_name(self) -> str:
        return self._model_name

    def _build_safety_settings(self) -> Optional[dict]:
        """Build safety settings if available, otherwise return None."""
        if not SAFETY_SETTINGS_AVAILABLE:
            LOGGER.debug("Safety settings not available in this version of google-generativeai")
            return None

        settings = {}
        for category_name in (
            "HARM_CATEGORY_HARASSMENT",
            "HARM_CATEGORY_HATE_SPEECH",
            "HARM_CATEGORY_SEXUALLY_EXPLICIT",
            "HARM_CATEGORY_DANGEROUS_CONTENT",
        ):
            if hasattr(HarmCategory, category_name) and hasattr(HarmBlockThreshold, "BLOCK_NONE"):
                settings[getattr(HarmCategory, category_name)] = HarmBlockThreshold.BLOCK_NONE
        return settings or None

    @staticmethod
    def _response_text(response) -> str:
        try:
            return (response.text or "").strip()
        except ValueError:
            # .text raises when the reply has no text part (e.g. blocked)
            candidates = getattr(response, "candidates", None) or []
            for candidate in candidates:
                parts = getattr(getattr(candidate, "content", None), "parts", None) or []
                text = "".join(getattr(part, "text", "") for part in parts).strip()
                if text:
                    return text
            return ""

    def complete(self, prompt: str) -> str:
        """
        Send a prompt and return the raw text reply.

        Args:
            prompt: Full instruction text.

        Returns:
            Reply text, unparsed (possibly empty).

        Raises:
            CompletionError: If the request fails.
        """
        kwargs = {
            "generation_config": self._generation_config,
            "request_options": {"timeout": self._timeout},
        }
        if self._safety_settings:
            kwargs["safety_settings"] = self._safety_settings

        try:
            response = self._model.generate_content(prompt, **kwargs)
        except Exception as exc:
            LOGGER.error("Gemini request failed: %s", exc)
            raise CompletionError(f"Gemini request failed: {exc}") from exc

        text = self._response_text(response)
        if not text:
            LOGGER.warning("Empty response from Gemini")

        LOGGER.debug("Raw LLM response (first 200 chars): %s", text[:200])
        return text
