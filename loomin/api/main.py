"""
Loomin API.

Serves the simulation pipeline to the editor front end.

    POST /api/extract   {notes} -> {extraction, simulation}
    GET  /v1/health     service and cache status

The pipeline (LLM client, cache store connection) is built once in the
application lifespan and shared by every request.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from loomin import __version__
from loomin.api.routes.extract import processing_failed
from loomin.api.routes.extract import router as extract_router
from loomin.api.routes.health import router as health_router
from loomin.core.config import Config
from loomin.core.config_loaders import load_config
from loomin.core.logging import configure_logging, get_logger
from loomin.simulation.pipeline import SimulationPipeline, build_pipeline

logger = get_logger(__name__)


def create_app(
    config: Optional[Config] = None,
    pipeline: Optional[SimulationPipeline] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Configuration (loaded from config.yaml when omitted)
        pipeline: Prebuilt pipeline (built from config at startup when omitted)

    Returns:
        The application
    """
    app_config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(
            level=app_config.logging.level, log_file=app_config.log_path
        )
        app.state.config = app_config
        app.state.pipeline = pipeline or build_pipeline(app_config)
        logger.info(
            "Loomin API started",
            provider=app_config.llm.default_provider,
            cache_backend=app_config.storage.backend,
        )
        try:
            yield
        finally:
            app.state.pipeline.cache.store.close()

    app = FastAPI(title="Loomin API", version=__version__, lifespan=lifespan)

    cors_origins = app_config.api.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials="*" not in cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning("Rejected request body", path=request.url.path)
        return processing_failed(400)

    app.include_router(extract_router)
    app.include_router(health_router)
    return app


app = create_app()


def run_server(host: str = "0.0.0.0", port: int = 8000, reload: bool = False) -> None:
    """Run the API server."""
    if not host or len(host.strip()) == 0:
        raise ValueError("Invalid host: must be non-empty")
    if not (1 <= port <= 65535):
        raise ValueError(f"Invalid port: {port} (must be 1-65535)")
    uvicorn.run("loomin.api.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    run_server()
