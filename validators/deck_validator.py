from __future__ import annotations

import re
from typing import Any, Dict, List, Tuple

from deck_service.slide_engine.prompts import EXPECTED_SLIDE_COUNT, SLIDE_CLASS_VOCABULARY

_CLASS_ATTR = re.compile(r"""class\s*=\s*(?:"([^"]*)"|'([^']*)')""", re.IGNORECASE)


def markup_classes(html: str) -> List[str]:
    """Return every CSS class name referenced by ``class=`` attributes in *html*."""
    classes: List[str] = []
    for double, single in _CLASS_ATTR.findall(html or ""):
        classes.extend((double or single).split())
    return classes


def validate_deck(deck: Dict[str, Any]) -> Tuple[bool, List[str]]:
    issues: List[str] = []

    if not isinstance(deck, dict):
        return (False, ["Deck must be a JSON object."])

    title = deck.get("title")
    if not isinstance(title, str) or not title.strip():
        issues.append("Deck is missing a title.")

    slides = deck.get("slides")
    if not isinstance(slides, list) or not slides:
        issues.append("Deck must contain at least one slide.")
        slides = []
    elif len(slides) != EXPECTED_SLIDE_COUNT:
        issues.append(f"Deck should contain {EXPECTED_SLIDE_COUNT} slides, got {len(slides)}.")

    for i, slide in enumerate(slides):
        if not isinstance(slide, dict):
            issues.append(f"Slide {i} is not an object.")
            continue
        if not isinstance(slide.get("id"), int) or isinstance(slide.get("id"), bool):
            issues.append(f"Slide {i} has no integer id.")
        if not isinstance(slide.get("type"), str):
            issues.append(f"Slide {i} has no type label.")
        html = slide.get("html")
        if not isinstance(html, str):
            issues.append(f"Slide {i} has no html markup.")
            continue
        unknown = sorted(set(markup_classes(html)) - SLIDE_CLASS_VOCABULARY)
        if unknown:
            issues.append(f"Slide {i} uses unknown classes: {', '.join(unknown)}.")

    sources = deck.get("sources")
    if not isinstance(sources, list) or not all(isinstance(s, str) for s in sources):
        issues.append("Deck sources must be a list of strings.")

    return (len(issues) == 0, issues)
