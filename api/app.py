"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from api.errors import APIError, api_error_handler, engine_error_handler, generic_error_handler
from api.routes import health, roots, verify
from core.schemas.errors import ReviewProofException


logging.basicConfig(
    level=getattr(logging, os.getenv("REVIEWPROOF_LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Reviewproof API",
        description="""
HTTP API for review dataset integrity.

## Endpoints

- **GET /health** - Health check
- **POST /verify/proof** - Verify an inclusion proof against a trusted root
- **POST /roots/compare** - Compare two roots
- **GET /roots** - List the latest stored root per dataset
- **GET /roots/{label}** - Stored root for one dataset
- **POST /roots/{label}/check** - Compare a candidate root with the stored one

Roots are read from the configured root log (`REVIEWPROOF_ROOT_LOG`).
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(ReviewProofException, engine_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(verify.router)
    app.include_router(roots.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
