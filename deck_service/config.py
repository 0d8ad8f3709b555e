from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_MODELS = {
    "anthropic": "claude-sonnet-4-20250514",
    "openai": "gpt-4o-mini",
    "gemini": "gemini-2.0-flash",
}

API_KEY_VARS = {
    "anthropic": ("ANTHROPIC_API_KEY",),
    "openai": ("OPENAI_API_KEY",),
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}

_DOTENV_LOADED = False


def load_environment() -> None:
    """Load a project-level .env once; real environment variables win."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    load_dotenv(override=False)
    repo_env = Path(__file__).resolve().parents[1] / ".env"
    if repo_env.exists():
        load_dotenv(dotenv_path=repo_env, override=False)
        logger.info("Loaded environment variables from %s", repo_env)
    _DOTENV_LOADED = True


def env_flag(name: str, default: str = "false") -> bool:
    toggle = os.getenv(name, default).strip().lower()
    return toggle not in {"0", "false", "off", "no"}


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return None


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, raw)
        return None


def _provider_api_key(provider: str) -> Optional[str]:
    for var in API_KEY_VARS.get(provider, ()):
        value = os.getenv(var)
        if value:
            return value
    return None


def mask_key(api_key: Optional[str]) -> str:
    if isinstance(api_key, str) and len(api_key) > 8:
        return f"{api_key[:4]}...{api_key[-4:]}"
    return "***"


@dataclass
class LLMConfig:
    provider: str = "anthropic"
    model: Optional[str] = None
    api_key: Optional[str] = None
    # None means "use the bound declared by the prompt definition"
    max_tokens: Optional[int] = None
    timeout: float = 120.0

    def __post_init__(self) -> None:
        self.provider = (self.provider or "anthropic").strip().lower()
        if not self.model:
            self.model = DEFAULT_MODELS.get(self.provider, "")

    @classmethod
    def from_env(cls) -> "LLMConfig":
        provider = os.getenv("DECK_PROVIDER", "anthropic").strip().lower()
        timeout = _env_float("DECK_REQUEST_TIMEOUT")
        return cls(
            provider=provider,
            model=os.getenv("DECK_MODEL") or None,
            api_key=_provider_api_key(provider),
            max_tokens=_env_int("DECK_MAX_TOKENS"),
            timeout=timeout if timeout else 120.0,
        )


@dataclass
class Settings:
    llm: LLMConfig = field(default_factory=LLMConfig)
    strict_validation: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_environment()
        return cls(
            llm=LLMConfig.from_env(),
            strict_validation=env_flag("DECK_STRICT_VALIDATION"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def setup_logging(level: str | None = None) -> None:
    """Configure root logging for the service."""
    logging.basicConfig(
        level=(level or get_settings().log_level),
        format="[%(levelname)s] %(name)s: %(message)s",
    )
