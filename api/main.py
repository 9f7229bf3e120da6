"""
Vehicle Lead Engine API - Main Application.

FastAPI application with CORS enabled for the operator dashboard.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from services.config import configure_logging

configure_logging()

# Create FastAPI application
app = FastAPI(
    title="Vehicle Lead Engine API",
    description="Ownership-chain analysis and duplicate-lead detection for vehicle sales leads",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# TODO: Restrict origins to the dashboard host once it has a fixed domain
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "vehicle-lead-engine-api"
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information.
    """
    return {
        "message": "Vehicle Lead Engine API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import duplicates, ownership

app.include_router(ownership.router, prefix="/api/v1", tags=["Ownership"])
app.include_router(duplicates.router, prefix="/api/v1", tags=["Duplicates"])
