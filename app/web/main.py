from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError as PydanticValidationError

from app.infrastructure.config import get_settings
from app.infrastructure.exceptions import ConfigurationError
from app.infrastructure.logging import configure_logging_from_settings, get_logger
from app.web.routes import api, pages

STATIC_DIR = Path(__file__).resolve().parent / "static"

logger = get_logger(__name__)


def create_application() -> FastAPI:
    settings = get_settings()
    try:
        app_config = settings.app
    except PydanticValidationError as exc:
        raise ConfigurationError(f"Invalid application settings: {exc}", "app") from exc

    configure_logging_from_settings(settings.logging)

    app = FastAPI(
        title=app_config.title,
        version=app_config.version,
        debug=app_config.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=False,
        allow_methods=settings.security.cors_methods,
        allow_headers=["*"],
    )

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR), check_dir=False), name="static")

    app.include_router(api.router)
    app.include_router(pages.router)

    logger.info("Application created", extra={"operation": "startup"})
    return app


app = create_application()
