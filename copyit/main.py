"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes
- Middleware (logging, CORS)
- Startup/shutdown of process-wide resources (database, Redis)

Run locally with:
    uvicorn copyit.main:app --reload
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from copyit.api import endpoints
from copyit.core.resources import initialize_resources, shutdown_resources
from copyit.db.session import check_database
from copyit.middleware.logging import add_logging_middleware, configure_logging

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="copyit",
    description="Paste text, get a short path, fetch it once from a terminal",
    version="1.0.0",
    docs_url="/docs",  # Swagger UI documentation
    redoc_url="/redoc",  # ReDoc documentation
)

add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 instead of FastAPI's 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request body"},
    )


# Health endpoints defined before router to match before catch-all route
@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint with service information.

    Returns:
        Simple JSON response indicating service is running
    """
    return {
        "message": "copyit snippet service",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns:
        Health status of the service, 503 when the database is unreachable
    """
    try:
        await check_database()
    except Exception as e:
        logger.warning(f"Health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": "unreachable"},
        )
    return {"status": "healthy", "database": "ok"}


app.include_router(endpoints.router, tags=["Snippets"])


@app.on_event("startup")
async def startup_event():
    """Initialize process-wide resources on startup."""
    await initialize_resources()


@app.on_event("shutdown")
async def shutdown_event():
    """Release process-wide resources on shutdown."""
    await shutdown_resources()
