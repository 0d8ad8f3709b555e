from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, FrozenSet, List

import yaml
from jinja2 import Template

PROMPTS_PATH = Path(__file__).resolve().parent / "prompts.yaml"
DECK_PROMPT_ID = "pitch_deck"

EXPECTED_SLIDE_COUNT = 7

# Classes the system prompt allows in generated markup; deck.css styles exactly these.
SLIDE_CLASS_VOCABULARY: FrozenSet[str] = frozenset(
    {
        "slide-content",
        "slide-center",
        "slide-subtitle",
        "label",
        "stat-grid",
        "stat-item",
        "stat-number",
        "stat-label",
        "sources",
    }
)


@dataclass
class PromptMessage:
    role: str
    template: Template


@dataclass
class PromptDefinition:
    description: str
    messages: List[PromptMessage]
    max_tokens: int

    def system_prompt(self, **context: str) -> str:
        return "\n\n".join(m.template.render(**context) for m in self.messages if m.role == "system")

    def user_prompt(self, **context: str) -> str:
        return "\n\n".join(m.template.render(**context) for m in self.messages if m.role == "user")


@lru_cache(maxsize=1)
def load_prompt_definitions(path: Path = PROMPTS_PATH) -> Dict[str, PromptDefinition]:
    """Read prompt templates from YAML and compile them with Jinja2."""
    if not path.exists():
        raise FileNotFoundError(f"Prompt definition file not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        raw_prompts = yaml.safe_load(handle)

    definitions: Dict[str, PromptDefinition] = {}
    for key, value in raw_prompts.items():
        try:
            description = value["description"]
            messages = value["messages"]
        except KeyError as exc:
            raise ValueError(f"Prompt '{key}' is missing required field: {exc}") from exc

        definitions[key] = PromptDefinition(
            description=description,
            messages=[
                PromptMessage(
                    role=message["role"],
                    template=Template(message["template"], trim_blocks=True, lstrip_blocks=True),
                )
                for message in messages
            ],
            max_tokens=int(value.get("max_tokens", 4096)),
        )

    return definitions


def get_deck_prompt() -> PromptDefinition:
    return load_prompt_definitions()[DECK_PROMPT_ID]


def get_system_prompt() -> str:
    return get_deck_prompt().system_prompt()


def get_user_prompt(topic: str) -> str:
    return get_deck_prompt().user_prompt(topic=topic)
