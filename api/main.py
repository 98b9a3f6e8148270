"""
FastAPI application entrypoint.
"""
import logging
from fastapi import FastAPI
from api.routes import router, settings

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.DEBUG))
app = FastAPI(title="Audience Video Analysis API", version="1.0.0")
app.include_router(router)

@app.get("/health")
def health() -> dict:
    """
    Health check endpoint.

    Returns:
        dict: Status plus the configured detector backend and concurrency.
    """
    return {
        "status": "ok",
        "detector": settings.DETECTOR_BACKEND,
        "concurrency": settings.DETECTOR_CONCURRENCY,
    }
