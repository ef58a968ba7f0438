"""
FastAPI application for the property wizard.

Production deployment configuration via environment variables.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from utils.config import Config
from web.wizard_routes import router as wizard_router


logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or Config.load()

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Property Wizard",
        description="Guided property onboarding with step validation and sensitive field handling",
        version="1.0.0",
        debug=config.debug,
    )

    # Healthchecks first; no dependencies, no IO
    @app.get("/", include_in_schema=False)
    def root():
        return {"status": "ok"}

    @app.get("/health", include_in_schema=False)
    def health():
        return {"status": "healthy"}

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE"],
            allow_headers=["*"],
        )

    app.include_router(wizard_router)

    logger.info("Property wizard configured (debug=%s)", config.debug)
    return app


# Create app instance for uvicorn
app = create_app()
