"""Health check routes for the FastAPI application."""

from fastapi import APIRouter
from src.config.environment import ENVIRONMENT
from src.config.settings import APP_VERSION

router = APIRouter(tags=["health"])

@router.get("/")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "environment": ENVIRONMENT,
        "version": APP_VERSION
    }
