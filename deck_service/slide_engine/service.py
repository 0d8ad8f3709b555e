from __future__ import annotations

import json
import logging
import re
from contextlib import nullcontext
from typing import Any, Dict, Optional

from deck_service.config import Settings, get_settings
from deck_service.errors import BadRequest, MalformedUpstreamResponse, UpstreamError
from manager.telemetry import PerformanceMonitor
from validators.deck_validator import validate_deck

from .llm_client import LLMClient
from .prompts import get_deck_prompt

logger = logging.getLogger(__name__)

# Greedy: first "{" through last "}" of the reply, newlines included.
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant {name}")


def extract_json_object(text: str) -> Dict[str, Any]:
    """Parse the first ``{...}`` span of a free-text model reply."""
    match = _JSON_OBJECT.search(text or "")
    if not match:
        logger.debug("No JSON object in model reply: %s", (text or "")[:500])
        raise UpstreamError("Invalid JSON response from AI")

    try:
        # NaN/Infinity would parse here but could not be sent back as JSON
        return json.loads(match.group(0), parse_constant=_reject_constant)
    except ValueError as exc:
        logger.debug("Failed to decode model JSON snippet: %s", match.group(0)[:500])
        raise UpstreamError(f"Invalid JSON response from AI: {exc}") from exc


class DeckGeneratorService:
    """Turn a topic into a deck with exactly one model call."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[LLMClient] = None,
        performance: Optional[PerformanceMonitor] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.client = client or LLMClient(self.settings.llm)
        self.performance = performance

    def generate_deck(self, topic: Optional[str]) -> Dict[str, Any]:
        if not topic:
            raise BadRequest("Topic is required")

        prompt = get_deck_prompt()
        max_tokens = self.settings.llm.max_tokens or prompt.max_tokens
        timer = self.performance.track("deck_generator.model_call") if self.performance else nullcontext()
        with timer:
            text = self.client.complete(prompt.system_prompt(), prompt.user_prompt(topic=topic), max_tokens)

        if text is None:
            raise UpstreamError("No text response from AI")

        deck = extract_json_object(text)
        self._check_shape(deck)
        return deck

    def _check_shape(self, deck: Dict[str, Any]) -> None:
        ok, issues = validate_deck(deck)
        if ok:
            return
        if self.settings.strict_validation:
            raise MalformedUpstreamResponse("Malformed deck from AI: " + " ".join(issues))
        # Best-effort: the viewer renders whatever came back
        logger.warning("Deck failed shape checks (%d issues): %s", len(issues), "; ".join(issues))
