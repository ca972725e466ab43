"""
Health routes — GET /api/health.
"""

from fastapi import APIRouter, Request

from src.shared.logging import setup_logging

logger = setup_logging("gateway.routes.health", level="INFO")

router = APIRouter()

SERVICE_NAME = "Graph Visualization Gateway"
SERVICE_VERSION = "1.0.0"


# ─── GET /api/health (simple health check) ──────────────────


@router.get("/health")
async def simple_health(request: Request) -> dict:
    """Simple health check endpoint.

    Returns a basic health status plus the number of graphs held in
    memory.  Exempt from API key checks so load balancers and uptime
    monitors can reach it.
    """
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "graphs": len(request.app.state.store),
    }
