"""FastAPI backend for Buddy AI."""

import logging
from typing import Any, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .config import DEFAULT_PROVIDERS, PROVIDER_SPECS, Settings, configure_logging, load_settings
from .orchestrator import Orchestrator
from .providers import ProviderRegistry

logger = logging.getLogger(__name__)


class PipelineOptions(BaseModel):
    """Provider choices for pipeline mode."""
    retriever: Optional[str] = None
    summarizer: Optional[str] = None


class BuddyRequest(BaseModel):
    """Request to answer a query with one or more providers."""
    query: Any = None
    enabledProviders: Any = None
    history: Any = None
    mode: Optional[str] = None
    pipeline: Optional[PipelineOptions] = None
    summarizer: Optional[str] = None


def _provider_names(value: Any) -> Optional[List[str]]:
    """Provider names from a JSON list; anything else means the defaults."""
    if not isinstance(value, list):
        return None
    return [str(name) for name in value if name is not None]


def _key_preview(key: Optional[str]) -> Optional[str]:
    return f"{key[:8]}..." if key else None


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[ProviderRegistry] = None
) -> FastAPI:
    """Wire settings, providers and the orchestrator into an app."""
    settings = settings or load_settings()
    configure_logging(settings.log_level)
    registry = registry or ProviderRegistry.from_settings(settings)
    orchestrator = Orchestrator(settings, registry)

    app = FastAPI(title="Buddy AI API")
    app.state.settings = settings
    app.state.orchestrator = orchestrator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(status_code=400, content={"error": f"Invalid request: {message}"})

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "Buddy AI API"}

    @app.get("/api/health")
    async def health_check():
        """
        Doctor endpoint - reports which provider credentials are configured.
        """
        providers = {
            spec.name: {
                "configured": bool(settings.api_key(spec.name)),
                "key_env": spec.api_key_env,
                "key_preview": _key_preview(settings.api_key(spec.name)),
                "model": spec.model,
            }
            for spec in PROVIDER_SPECS
        }
        all_ready = all(p["configured"] for p in providers.values())

        return {
            "status": "healthy" if all_ready else "degraded",
            "providers": providers,
            "default_summarizer": settings.default_summarizer,
            "all_ready": all_ready
        }

    @app.get("/api/providers")
    async def list_providers():
        """List the providers a request may enable."""
        return {
            "providers": [{"name": spec.name, "model": spec.model} for spec in PROVIDER_SPECS],
            "default_providers": DEFAULT_PROVIDERS,
            "default_summarizer": settings.default_summarizer,
        }

    @app.post("/api/buddy")
    async def buddy(request: BuddyRequest):
        """
        Answer a query in parallel or pipeline mode.
        Returns one entry per provider plus the combined answer.
        """
        query = str(request.query) if request.query else ""
        if not query.strip():
            return JSONResponse(status_code=400, content={"error": "Missing 'query'"})

        try:
            result = await orchestrator.run(
                request.mode,
                _provider_names(request.enabledProviders),
                query,
                request.history,
                pipeline=request.pipeline.model_dump() if request.pipeline else None,
                summarizer=request.summarizer,
            )
        except Exception as e:
            logger.exception("Unhandled error while answering query")
            return JSONResponse(status_code=500, content={"error": str(e) or "Unknown error"})

        return result

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
