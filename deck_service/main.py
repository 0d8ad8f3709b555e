from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from deck_service.config import get_settings, mask_key, setup_logging
from manager.telemetry import PerformanceMonitor
from routes.generate_deck import router as generate_router
from routes.pages import router as pages_router

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"

setup_logging()

app = FastAPI(
    title="Deck",
    description="Generates short pitch decks from a topic with an LLM and presents them as a browser slideshow.",
    version="0.1.0",
)
app.state.performance = PerformanceMonitor()
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
app.include_router(generate_router)
app.include_router(pages_router)


@app.on_event("startup")
async def on_startup() -> None:
    llm = get_settings().llm
    if llm.api_key:
        logger.info("Deck generator using %s/%s (key %s)", llm.provider, llm.model, mask_key(llm.api_key))
    else:
        logger.warning("No API key configured for provider %s; generation requests will fail.", llm.provider)


@app.get("/health", tags=["system"])
def health_check() -> Dict[str, Any]:
    return {"status": "ok", "timings": app.state.performance.summary()}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
