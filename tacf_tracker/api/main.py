"""
FastAPI Application

Main entry point for the TACF tracker web API.
"""

from contextlib import asynccontextmanager
from typing import Dict

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from tacf_tracker.api.models.responses import ErrorResponse
from tacf_tracker.api.routes import lists, mentions, people, tacf, tfm
from tacf_tracker.config import get_settings
from tacf_tracker.database import init_database
from tacf_tracker.errors import MentionError, UnknownCombination
from tacf_tracker.logger import setup_logger
from tacf_tracker.scoring import IncompleteProfile

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logger(level=settings.log_level, log_file=settings.log_file)
    init_database(settings.database_url)
    yield


# Initialize FastAPI app
app = FastAPI(
    title="TACF Tracker API",
    description="Physical-fitness test (TACF) mentions and training logs (TFM)",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS configuration - allow the dashboard to access the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
error_responses = {
    400: {"model": ErrorResponse, "description": "Invalid score, date range, incomplete person or unknown reference"},
    404: {"model": ErrorResponse, "description": "Person or record not found"},
}
app.include_router(mentions.router, prefix="/api", tags=["Mentions"], responses={400: error_responses[400]})
app.include_router(people.router, prefix="/api", tags=["People"], responses=error_responses)
app.include_router(tacf.router, prefix="/api", tags=["TACF"], responses=error_responses)
app.include_router(tfm.router, prefix="/api", tags=["TFM"], responses=error_responses)
app.include_router(lists.router, prefix="/api", tags=["Lists"], responses=error_responses)


@app.get("/")
async def root() -> Dict[str, str]:
    """Root endpoint - API information."""
    return {
        "name": "TACF Tracker API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "tacf-tracker-api"}


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent error format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "message": str(exc.detail)},
    )


@app.exception_handler(MentionError)
async def mention_error_handler(request: Request, exc: MentionError):
    """
    Engine validation failures are client errors, except an incomplete
    mention table which is a server bug.
    """
    if isinstance(exc, UnknownCombination):
        logger.error(f"Mention table is missing a row: {exc}")
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        logger.warning(f"Rejected {request.method} {request.url.path}: {exc}")
        status_code = status.HTTP_400_BAD_REQUEST
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "message": str(exc)},
    )


@app.exception_handler(IncompleteProfile)
async def incomplete_profile_handler(request: Request, exc: IncompleteProfile):
    """Mentions cannot be computed without birth date and sex."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "IncompleteProfile", "message": str(exc)},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "message": str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tacf_tracker.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
