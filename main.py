from typing import Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import logging
from settings.config import settings
from settings.logging_config import configure_logging
from routes.card_text_route import router as card_text_router

logger = logging.getLogger(__name__)


def get_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting CardVault OCR API")
    app = FastAPI(title="CardVault OCR API")

    # CORS: permissive in development, configured origins otherwise
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_dev else settings.cors_origins,
        allow_credentials=not settings.is_dev,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(card_text_router)
    logger.info("Routers initialized successfully")

    # Health
    @app.get("/health")
    async def health_check() -> Dict[str, str]:
        return {"status": "ok"}

    logger.info("API started")
    return app


# ASGI app instance
app = get_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
