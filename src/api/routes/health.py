"""Health check endpoint."""

from fastapi import APIRouter

from src.store.client import data_clients

router = APIRouter()


@router.get("/health")
async def health_check():
    """Check API health status."""
    return {
        "status": "healthy",
        "service": "demo-api",
        "database_configured": data_clients.is_configured(),
    }
