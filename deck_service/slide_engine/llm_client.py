from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from openai import OpenAI, OpenAIError

from deck_service.config import API_KEY_VARS, LLMConfig, mask_key
from deck_service.errors import UpstreamError

logger = logging.getLogger(__name__)

ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


class LLMClient:
    """One-shot text completion against the configured model provider.

    ``complete`` returns the first text block of the reply, or ``None`` when
    the reply carried no text at all. Transport and provider failures are
    raised as :class:`UpstreamError`; nothing is retried.
    """

    def __init__(self, config: LLMConfig) -> None:
        self.config = config
        self._openai_client: Any | None = None

    def _require_api_key(self) -> str:
        if not self.config.api_key:
            names = " or ".join(API_KEY_VARS.get(self.config.provider, ("API key",)))
            raise UpstreamError(f"{names} is not set for provider '{self.config.provider}'")
        return self.config.api_key

    def complete(self, system: str, user: str, max_tokens: int) -> Optional[str]:
        provider = self.config.provider
        logger.info("Calling LLM provider=%s model=%s max_tokens=%d", provider, self.config.model, max_tokens)

        if provider == "anthropic":
            return self._call_anthropic(system, user, max_tokens)
        if provider == "openai":
            return self._call_openai(system, user, max_tokens)
        if provider == "gemini":
            return self._call_gemini(system, user, max_tokens)
        raise UpstreamError(f"LLM provider '{provider}' is not supported.")

    def _call_anthropic(self, system: str, user: str, max_tokens: int) -> Optional[str]:
        api_key = self._require_api_key()
        headers = {
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        body: Dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": max_tokens,
            "system": system,
            "messages": [{"role": "user", "content": user}],
        }
        try:
            r = requests.post(ANTHROPIC_URL, headers=headers, json=body, timeout=self.config.timeout)
        except requests.RequestException as exc:
            raise UpstreamError(f"Model API request failed: {exc}") from exc

        if not r.ok:
            logger.error("Anthropic call rejected (key %s): HTTP %s", mask_key(api_key), r.status_code)
            raise UpstreamError(f"Model API error ({r.status_code}): {r.text[:200]}")

        try:
            data = r.json()
        except ValueError as exc:
            raise UpstreamError(f"Model API returned a non-JSON body: {exc}") from exc

        if not isinstance(data, dict):
            raise UpstreamError("Model API returned an unexpected body")

        for block in data.get("content") or []:
            if isinstance(block, dict) and block.get("type") == "text":
                return block.get("text") or ""
        return None

    def _call_openai(self, system: str, user: str, max_tokens: int) -> Optional[str]:
        if self._openai_client is None:
            self._openai_client = OpenAI(api_key=self._require_api_key(), timeout=self.config.timeout)
        try:
            completion = self._openai_client.chat.completions.create(
                model=self.config.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                max_tokens=max_tokens,
            )
        except OpenAIError as exc:
            raise UpstreamError(f"OpenAI generation failed: {exc}") from exc

        if not completion.choices:
            return None
        return completion.choices[0].message.content or None

    def _call_gemini(self, system: str, user: str, max_tokens: int) -> Optional[str]:
        import google.generativeai as genai

        api_key = self._require_api_key()
        try:
            # REST transport avoids gRPC DNS failures in restricted networks
            genai.configure(api_key=api_key, transport="rest")
            model = genai.GenerativeModel(self.config.model, system_instruction=system)
            response = model.generate_content(
                user,
                generation_config={"max_output_tokens": max_tokens},
                request_options={"timeout": self.config.timeout},
            )
        except Exception as exc:
            raise UpstreamError(f"Gemini generation failed: {exc}") from exc

        for candidate in response.candidates or []:
            for part in candidate.content.parts:
                text = getattr(part, "text", None)
                if text:
                    return text
        return None
