"""Failure taxonomy of the deck generator.

Every error carries the HTTP status the API answers with; the message is
returned to the caller as ``{"error": message}``.
"""
from __future__ import annotations


class DeckError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequest(DeckError):
    """The request cannot be served as sent (missing topic)."""

    status_code = 400


class UpstreamError(DeckError):
    """The model was unreachable, returned no text, or returned unparsable text."""

    status_code = 500


class MalformedUpstreamResponse(UpstreamError):
    """The model returned JSON that does not have the deck shape."""
