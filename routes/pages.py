from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from deck_service.viewer import EXPORT_NOTICES, DeckViewer, key_bindings

router = APIRouter()
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "deck_service" / "templates"))

EXAMPLE_TOPICS = ["Sustainable Energy", "AI Startup", "Coffee Shop Business", "University Overview"]


@router.get("/", response_class=HTMLResponse, tags=["web"])
async def index(request: Request):
    return templates.TemplateResponse(request, "index.html", {"examples": EXAMPLE_TOPICS})


@router.get("/deck", response_class=HTMLResponse, tags=["web"])
async def deck_page(request: Request, topic: Optional[str] = None):
    """Render the viewer shell; a missing topic is an error page with no fetch."""
    viewer = DeckViewer.open(topic)
    return templates.TemplateResponse(
        request,
        "deck.html",
        {
            "viewer": viewer.to_context(),
            "viewer_config": {
                "topic": viewer.topic,
                "fetchOnLoad": viewer.needs_fetch,
                "endpoint": "/api/generate",
                "keys": key_bindings(),
                "notices": EXPORT_NOTICES,
            },
        },
    )
