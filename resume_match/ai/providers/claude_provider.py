from __future__ import annotations

import logging
from typing import Any

import httpx

from resume_match.ai.config import AIConfig
from resume_match.ai.types import ProviderName
from resume_match.core.errors import ProviderRequestError, ResponseFormatError

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


class ClaudeProvider:
    name = ProviderName.CLAUDE

    def __init__(self, *, api_key: str, config: AIConfig):
        self.model = config.model
        self._api_key = api_key
        self._base_url = (config.base_url or "").rstrip("/")
        self._timeout_s = config.timeout_s
        self._temperature = config.temperature
        self._max_tokens = config.max_tokens

    def complete(self, *, system_prompt: str, user_prompt: str) -> str:
        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        body: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_prompt}],
        }
        try:
            with httpx.Client(timeout=self._timeout_s) as client:
                response = client.post(f"{self._base_url}/messages", headers=headers, json=body)
        except httpx.HTTPError as exc:
            raise ProviderRequestError(f"Claude request failed: {exc}") from exc

        if response.status_code >= 400:
            logger.warning("claude_api_error status=%s body=%s", response.status_code, response.text[:300])
            raise ProviderRequestError(
                f"Claude API request failed: {response.status_code}", status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ResponseFormatError("Claude returned a non-JSON body") from exc

        blocks = data.get("content") if isinstance(data, dict) else None
        text = ""
        if isinstance(blocks, list) and blocks and isinstance(blocks[0], dict):
            text = blocks[0].get("text") or ""
        if not text:
            raise ResponseFormatError("No content received from Claude API")
        return str(text)
