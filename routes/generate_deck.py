from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from deck_service.config import get_settings
from deck_service.errors import BadRequest, DeckError
from deck_service.slide_engine.service import DeckGeneratorService
from schemas.deck import GenerateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def get_generator(request: Request) -> DeckGeneratorService:
    """Dependency: a fresh generator per request, sharing only the app's timing monitor."""
    return DeckGeneratorService(
        settings=get_settings(),
        performance=getattr(request.app.state, "performance", None),
    )


async def _read_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        # Unparsable or empty bodies carry no topic
        return None


@router.post("/api/generate", tags=["deck"])
async def generate_deck(
    request: Request,
    generator: DeckGeneratorService = Depends(get_generator),
) -> JSONResponse:
    payload = GenerateRequest.from_body(await _read_body(request))

    try:
        deck = await run_in_threadpool(generator.generate_deck, payload.topic)
    except BadRequest as exc:
        logger.info("Rejected generation request: %s", exc.message)
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)
    except DeckError as exc:
        logger.error("Generation error: %s", exc.message, exc_info=True)
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)
    except Exception as exc:
        logger.exception("Unexpected generation failure for topic %r", payload.topic)
        return JSONResponse({"error": str(exc) or "Failed to generate deck"}, status_code=500)

    logger.info("Generated deck %r with %s slides", deck.get("title"), _slide_total(deck))
    return JSONResponse(deck)


def _slide_total(deck: Any) -> Any:
    slides = deck.get("slides") if isinstance(deck, dict) else None
    return len(slides) if isinstance(slides, list) else "?"
