"""
FastAPI application exposing the geo-link resolver.
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Callable, Dict, Optional
from uuid import uuid4

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST

from geolink import __version__
from geolink.config import Config, settings
from geolink.container import DependencyContainer
from geolink.observability.metrics import METRICS, export_prometheus
from geolink.resolver import GeoLinkResolver, ResolutionError

logger = structlog.get_logger(__name__)

router = APIRouter()


def get_container(request: Request) -> DependencyContainer:
    return request.app.state.container


def get_resolver(request: Request) -> GeoLinkResolver:
    """Resolver owned by the application's dependency container."""
    return get_container(request).get_resolver()


async def _read_url(request: Request) -> Optional[str]:
    """Pull ``url`` out of the JSON body; anything unusable counts as missing."""
    try:
        payload = await request.json()
    except ValueError:
        return None
    url = payload.get("url") if isinstance(payload, dict) else None
    return url if isinstance(url, str) else None


@router.post("/api/maps/expand-url")
async def expand_url(request: Request, resolver: GeoLinkResolver = Depends(get_resolver)) -> JSONResponse:
    """Expand a Google Maps link and extract its coordinates and address."""
    url = await _read_url(request)
    logger.info("Expand URL request", url=url)

    try:
        result = await resolver.resolve(url)
    except ResolutionError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": e.message},
        )
    except Exception:
        METRICS["resolutions_total"].labels(outcome="error").inc()
        logger.exception("Expand URL error", url=url)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": "Failed to process URL"},
        )

    return JSONResponse(content={"success": True, "data": result.to_dict()})


@router.get("/health")
async def health_check(request: Request) -> Dict[str, Any]:
    """Health check endpoint for Kubernetes/Docker."""
    container: Optional[DependencyContainer] = getattr(request.app.state, "container", None)
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": __version__,
        "components": {
            "geocoding": container.get_health_status()["geocoding"] if container else "not_configured",
        },
    }


@router.get("/metrics")
async def get_prometheus_metrics() -> Response:
    """Endpoint for Prometheus to scrape."""
    return Response(export_prometheus(), media_type=CONTENT_TYPE_LATEST)


def create_app(config: Optional[Config] = None, *, api_key: Optional[str] = None) -> FastAPI:
    """Build the application; the container is created when the app starts."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        container = DependencyContainer(config, api_key=api_key)
        async with container.lifecycle():
            app.state.container = container
            logger.info("GeoLink API started", version=__version__)
            yield
        logger.info("GeoLink API stopped")

    app = FastAPI(title="GeoLink", version=__version__, lifespan=lifespan)

    cors_origins = (config or settings).monitoring.web_ui.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next: Callable) -> Any:
        """Tag each request with an ID, bind it to the log context and time it."""
        start_time = time.time()
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(router)
    return app


app = create_app()


def run_web_server(host: str = "127.0.0.1", port: int = 8000, config: Optional[Config] = None) -> None:
    """Function to run the FastAPI server."""
    import uvicorn

    logger.info("Starting GeoLink API", host=host, port=port)
    uvicorn.run(create_app(config) if config is not None else app, host=host, port=port)
