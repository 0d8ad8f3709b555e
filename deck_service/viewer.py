"""State model of the deck viewer page.

On the server this model only decides the initial state when ``/deck`` is
rendered (a missing topic never reaches the browser as a fetch) and supplies
the key bindings and export notices the page reads from its JSON config.
Navigation, fullscreen and loading in the browser run in ``static/deck.js``,
a separate JavaScript port of the transitions below; the Python methods are
the reference those transitions are checked against, not the running code.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

LOADING = "loading"
READY = "ready"
ERROR = "error"

NO_TOPIC_MESSAGE = "No topic provided"
FETCH_FAILED_MESSAGE = "Failed to generate deck"
FALLBACK_ERROR_MESSAGE = "Something went wrong"
EMPTY_DECK_MESSAGE = "Deck has no slides"

NEXT_KEYS = ("ArrowRight", " ")
PREV_KEYS = ("ArrowLeft",)
FULLSCREEN_KEYS = ("f", "F")
EXIT_FULLSCREEN_KEY = "Escape"

EXPORT_NOTICES = {
    "png": "PNG export coming soon!",
    "pptx": "PPTX export coming soon!",
}

# (status_code, parsed JSON body)
Fetcher = Callable[[str], Tuple[int, Any]]


def key_bindings() -> Dict[str, List[str]]:
    return {
        "next": list(NEXT_KEYS),
        "prev": list(PREV_KEYS),
        "fullscreen": list(FULLSCREEN_KEYS),
        "exitFullscreen": [EXIT_FULLSCREEN_KEY],
    }


class DeckViewer:
    def __init__(self, topic: Optional[str] = None) -> None:
        self.topic = topic or ""
        self.status = LOADING
        self.deck: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None
        self.current_slide = 1
        self.is_fullscreen = False

    @classmethod
    def open(cls, topic: Optional[str]) -> "DeckViewer":
        viewer = cls(topic)
        if not viewer.topic:
            viewer.fail(NO_TOPIC_MESSAGE)
        return viewer

    @property
    def needs_fetch(self) -> bool:
        return self.status == LOADING and bool(self.topic)

    @property
    def slide_count(self) -> int:
        if self.deck is None:
            return 0
        return len(self.deck["slides"])

    def load(self, fetch: Fetcher) -> None:
        """Request the deck once and settle into ``ready`` or ``error``."""
        if not self.needs_fetch:
            return
        try:
            status_code, body = fetch(self.topic)
        except Exception as exc:
            logger.warning("Deck request for %r failed: %s", self.topic, exc)
            self.fail(str(exc) or FALLBACK_ERROR_MESSAGE)
            return
        if not 200 <= status_code < 300:
            self.fail(FETCH_FAILED_MESSAGE)
            return
        self.receive(body)

    def receive(self, deck: Any) -> None:
        slides = deck.get("slides") if isinstance(deck, dict) else None
        if not isinstance(slides, list) or not slides:
            self.fail(EMPTY_DECK_MESSAGE)
            return
        self.deck = deck
        self.error = None
        self.status = READY
        self.current_slide = 1

    def fail(self, message: str) -> None:
        self.status = ERROR
        self.error = message

    def next_slide(self) -> None:
        if self.deck is not None:
            self.current_slide = min(self.current_slide + 1, self.slide_count)

    def prev_slide(self) -> None:
        self.current_slide = max(self.current_slide - 1, 1)

    def handle_key(self, key: str) -> bool:
        """Apply a key press; returns True when the browser default must be suppressed."""
        if self.status != READY:
            return False
        if key in NEXT_KEYS:
            self.next_slide()
            return True
        if key in PREV_KEYS:
            self.prev_slide()
            return True
        if key in FULLSCREEN_KEYS:
            self.toggle_fullscreen()
            return True
        if key == EXIT_FULLSCREEN_KEY and self.is_fullscreen:
            self.toggle_fullscreen()
            return True
        return False

    def click_area(self) -> None:
        self.next_slide()

    def click_nav(self, direction: str) -> bool:
        """Prev/next button press; returns True because the click must not reach the slide area."""
        if direction == "prev":
            self.prev_slide()
        elif direction == "next":
            self.next_slide()
        else:
            raise ValueError(f"Unknown navigation direction: {direction!r}")
        return True

    def toggle_fullscreen(self) -> str:
        """Flip the styling flag; returns the document action to perform ("request" or "exit")."""
        action = "exit" if self.is_fullscreen else "request"
        self.is_fullscreen = not self.is_fullscreen
        return action

    def sync_fullscreen(self, active: bool) -> None:
        # fullscreenchange is the source of truth once the browser reports it
        self.is_fullscreen = bool(active)

    @staticmethod
    def export_notice(kind: str) -> str:
        try:
            return EXPORT_NOTICES[kind.lower()]
        except KeyError:
            raise ValueError(f"Unknown export format: {kind!r}") from None

    def to_context(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "topic": self.topic,
            "error": self.error,
            "deck": self.deck,
            "current_slide": self.current_slide,
            "slide_count": self.slide_count,
            "is_fullscreen": self.is_fullscreen,
        }
