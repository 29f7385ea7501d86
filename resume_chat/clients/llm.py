"""Client for an OpenAI-compatible chat completions endpoint."""
from __future__ import annotations

import logging
from typing import Any

import requests
from requests import Response

from resume_chat.config import Settings

LOGGER = logging.getLogger(__name__)


class LLMError(RuntimeError):
    """Base class for inference API failures."""


class UpstreamUnavailableError(LLMError):
    """Raised when the inference API cannot be reached or answers with an error."""


class UpstreamEmptyResponseError(LLMError):
    """Raised when the inference API answers without any content."""


class MisconfiguredCredentialsError(LLMError):
    """Raised when the API key is missing or rejected."""


class LLMClient:
    """Sends one prompt per call and returns the model's answer. No retries."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._session = requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    def answer(self, prompt: str) -> str:
        """Return the model's answer to ``prompt``."""

        api_key = self._settings.llm_api_key
        if not api_key:
            LOGGER.error("LLM_API_KEY is not set")
            raise MisconfiguredCredentialsError("Server misconfiguration: API key missing")

        body = {
            "model": self._settings.llm_model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self._settings.llm_temperature,
            "max_tokens": self._settings.llm_max_tokens,
        }
        try:
            response = self._session.post(
                self._settings.llm_api_url,
                json=body,
                headers={"Authorization": f"Bearer {api_key}"},
                timeout=self._settings.llm_timeout_seconds,
            )
        except requests.RequestException as exc:
            LOGGER.error("llm request failed", extra={"detail": str(exc)})
            raise UpstreamUnavailableError(f"Inference API unreachable: {exc}") from exc

        self._raise_for_status(response)

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamEmptyResponseError("No answer from model") from exc

        answer = _first_message_content(payload)
        if not answer:
            LOGGER.warning("llm returned no content", extra={"status": response.status_code})
            raise UpstreamEmptyResponseError("No answer from model")
        return answer

    def _raise_for_status(self, response: Response) -> None:
        """Raise descriptive errors for inference API responses."""

        if response.ok:
            return
        status = response.status_code
        detail = response.text
        LOGGER.error("llm request failed", extra={"status": status, "detail": detail[:200]})
        if status in (401, 403):
            raise MisconfiguredCredentialsError(
                f"Inference API rejected credentials ({status}): verify LLM_API_KEY."
            )
        raise UpstreamUnavailableError(f"Inference API error ({status}). Response: {detail[:200]}")


def _first_message_content(payload: Any) -> str:
    if not isinstance(payload, dict):
        return ""
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content.strip() if isinstance(content, str) else ""
