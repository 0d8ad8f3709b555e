import pytest
from pydantic import ValidationError

from schemas.deck import Deck, GenerateRequest, Slide


def test_deck_json_roundtrip():
    deck = Deck(
        title="Sustainable Energy",
        slides=[Slide(id=1, type="title", html="<div class='slide-content'>Hi</div>")],
        sources=["EPA 2023"],
    )
    assert Deck.from_json(deck.to_json()) == deck


def test_deck_sources_default_to_empty():
    deck = Deck.from_json({"title": "T", "slides": [{"id": 1, "type": "title", "html": ""}]})
    assert deck.sources == []


def test_deck_rejects_slide_without_html():
    with pytest.raises(ValidationError):
        Deck.from_json({"title": "T", "slides": [{"id": 1, "type": "title"}], "sources": []})


@pytest.mark.parametrize("body", [None, [], "Sustainable Energy", {"topic": 42}, {"other": "x"}])
def test_generate_request_without_usable_topic(body):
    assert GenerateRequest.from_body(body).topic is None


def test_generate_request_keeps_topic_verbatim():
    assert GenerateRequest.from_body({"topic": " AI Startup "}).topic == " AI Startup "
