from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class Slide(BaseModel):
    id: int
    type: str
    html: str


class Deck(BaseModel):
    title: str
    slides: List[Slide]
    sources: List[str] = Field(default_factory=list)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump()

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Deck":
        return cls.model_validate(data)


class GenerateRequest(BaseModel):
    topic: Optional[str] = Field(None, description="Free-text subject of the deck.")

    # Non-string topics are treated the same as a missing one
    @field_validator("topic", mode="before")
    @classmethod
    def _coerce_topic(cls, v: Any) -> Optional[str]:
        if v is None or not isinstance(v, str):
            return None
        return v

    @classmethod
    def from_body(cls, body: Any) -> "GenerateRequest":
        if not isinstance(body, dict):
            return cls()
        return cls.model_validate({"topic": body.get("topic")})
