from typing import Any, List, Optional, Tuple

import pytest

from deck_service.config import LLMConfig, Settings


class FakeLLMClient:
    """Stands in for LLMClient; records every call and replays a canned reply."""

    def __init__(self, reply: Any = None) -> None:
        self.reply = reply
        self.calls: List[Tuple[str, str, int]] = []

    def complete(self, system: str, user: str, max_tokens: int) -> Optional[str]:
        self.calls.append((system, user, max_tokens))
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


@pytest.fixture
def settings():
    return Settings(llm=LLMConfig(provider="anthropic", api_key="dummy-key"))


@pytest.fixture
def strict_settings():
    return Settings(llm=LLMConfig(provider="anthropic", api_key="dummy-key"), strict_validation=True)


@pytest.fixture
def fake_client():
    return FakeLLMClient()
