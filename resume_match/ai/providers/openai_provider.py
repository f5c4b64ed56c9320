from __future__ import annotations

from typing import Any

import openai
from openai import OpenAI

from resume_match.ai.config import AIConfig
from resume_match.ai.types import ProviderName
from resume_match.core.errors import ProviderRequestError, ResponseFormatError


class OpenAIProvider:
    name = ProviderName.OPENAI

    def __init__(self, *, api_key: str, config: AIConfig):
        self.model = config.model
        self._temperature = config.temperature
        self._max_tokens = config.max_tokens
        self._api_key = api_key
        self._base_url = config.base_url
        self._timeout_s = config.timeout_s

    def _build_client(self) -> OpenAI:
        # one attempt per request; the orchestrator falls back instead of retrying
        return OpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=self._timeout_s,
            max_retries=0,
            default_headers=self._default_headers(),
        )

    def _default_headers(self) -> dict[str, str] | None:
        return None

    def complete(self, *, system_prompt: str, user_prompt: str) -> str:
        create_kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }
        label = self.name.value
        try:
            with self._build_client() as client:
                response = client.chat.completions.create(**create_kwargs)
        except openai.APIStatusError as exc:
            raise ProviderRequestError(
                f"{label} request failed: {exc.status_code}", status_code=exc.status_code
            ) from exc
        except (openai.APITimeoutError, openai.APIConnectionError) as exc:
            raise ProviderRequestError(f"{label} request failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else ""
        if not content:
            raise ResponseFormatError(f"No content received from {label}")
        return str(content)
