import pytest

from deck_service.viewer import (
    ERROR,
    FETCH_FAILED_MESSAGE,
    LOADING,
    NO_TOPIC_MESSAGE,
    READY,
    DeckViewer,
)


def _deck(n):
    return {
        "title": "University Overview",
        "slides": [{"id": i, "type": "content", "html": f"<div>{i}</div>"} for i in range(1, n + 1)],
        "sources": [],
    }


def _ready_viewer(n=3):
    viewer = DeckViewer.open("University Overview")
    viewer.load(lambda topic: (200, _deck(n)))
    return viewer


@pytest.mark.parametrize("topic", [None, ""])
def test_missing_topic_errors_without_fetch(topic):
    calls = []
    viewer = DeckViewer.open(topic)
    viewer.load(lambda t: calls.append(t) or (200, _deck(1)))

    assert viewer.status == ERROR
    assert viewer.error == NO_TOPIC_MESSAGE
    assert calls == []


def test_load_success_resets_to_first_slide():
    requested = []
    viewer = DeckViewer.open("Coffee Shop Business")
    assert viewer.status == LOADING
    viewer.current_slide = 5

    viewer.load(lambda topic: requested.append(topic) or (200, _deck(7)))

    assert requested == ["Coffee Shop Business"]
    assert viewer.status == READY
    assert viewer.current_slide == 1
    assert viewer.slide_count == 7


def test_non_2xx_response_is_error():
    viewer = DeckViewer.open("AI Startup")
    viewer.load(lambda topic: (500, {"error": "Invalid JSON response from AI"}))
    assert viewer.status == ERROR
    assert viewer.error == FETCH_FAILED_MESSAGE


def test_network_failure_is_error():
    def offline(topic):
        raise ConnectionError("Failed to fetch")

    viewer = DeckViewer.open("AI Startup")
    viewer.load(offline)
    assert viewer.status == ERROR
    assert viewer.error == "Failed to fetch"


def test_network_failure_without_message_uses_fallback():
    def offline(topic):
        raise ConnectionError()

    viewer = DeckViewer.open("AI Startup")
    viewer.load(offline)
    assert viewer.error == "Something went wrong"


def test_deck_without_slides_is_error():
    viewer = DeckViewer.open("AI Startup")
    viewer.load(lambda topic: (200, {"title": "Empty", "slides": [], "sources": []}))
    assert viewer.status == ERROR


def test_next_clamps_at_last_slide():
    viewer = _ready_viewer(3)
    for _ in range(10):
        viewer.handle_key("ArrowRight")
    assert viewer.current_slide == 3
    viewer.handle_key(" ")
    assert viewer.current_slide == 3


def test_prev_clamps_at_first_slide():
    viewer = _ready_viewer(3)
    viewer.handle_key("ArrowRight")
    for _ in range(5):
        viewer.handle_key("ArrowLeft")
    assert viewer.current_slide == 1


def test_handled_keys_suppress_default():
    viewer = _ready_viewer(3)
    assert viewer.handle_key("ArrowRight") is True
    assert viewer.handle_key("ArrowLeft") is True
    assert viewer.handle_key("f") is True
    assert viewer.handle_key("Escape") is True
    assert viewer.handle_key("Escape") is False
    assert viewer.handle_key("q") is False


def test_keys_ignored_until_ready():
    viewer = DeckViewer.open("AI Startup")
    assert viewer.handle_key("ArrowRight") is False
    assert viewer.handle_key("F") is False
    assert viewer.is_fullscreen is False


def test_escape_only_exits_fullscreen():
    viewer = _ready_viewer(2)
    viewer.handle_key("Escape")
    assert viewer.is_fullscreen is False
    viewer.handle_key("F")
    assert viewer.is_fullscreen is True
    viewer.handle_key("Escape")
    assert viewer.is_fullscreen is False


def test_toggle_fullscreen_twice_restores_flag():
    viewer = _ready_viewer(2)
    assert viewer.toggle_fullscreen() == "request"
    assert viewer.toggle_fullscreen() == "exit"
    assert viewer.is_fullscreen is False


def test_fullscreen_change_reconciles_flag():
    viewer = _ready_viewer(2)
    viewer.toggle_fullscreen()
    # the browser refused the request
    viewer.sync_fullscreen(False)
    assert viewer.is_fullscreen is False


def test_area_click_advances_and_nav_buttons_move_one():
    viewer = _ready_viewer(4)
    viewer.click_area()
    assert viewer.current_slide == 2
    assert viewer.click_nav("next") is True
    assert viewer.current_slide == 3
    viewer.click_nav("prev")
    assert viewer.current_slide == 2
    with pytest.raises(ValueError):
        viewer.click_nav("sideways")


def test_export_actions_only_surface_notice():
    assert DeckViewer.export_notice("PNG") == "PNG export coming soon!"
    assert DeckViewer.export_notice("pptx") == "PPTX export coming soon!"
    with pytest.raises(ValueError):
        DeckViewer.export_notice("pdf")
