"""
FastAPI Gateway — HTTP API layer.

External interface for the graph visualization service.  Translates
REST requests into Graph Store and Filter Engine operations and
serializes the results.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.gateway.auth import ApiKeyMiddleware
from src.gateway.config import GatewaySettings
from src.gateway.routes import graphs, health
from src.gateway.routes.health import SERVICE_NAME, SERVICE_VERSION
from src.graph_store.store import GraphStore
from src.shared.logging import setup_logging
from src.shared.observability import RequestLoggingMiddleware

logger = setup_logging("gateway.app", level="INFO")


def create_app(settings: GatewaySettings | None = None) -> FastAPI:
    """Build the gateway app.  Each app owns one in-memory Graph Store."""
    settings = settings or GatewaySettings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the graph store on startup, drop it on shutdown."""
        logger.info("Starting Graph Visualization Gateway")
        app.state.settings = settings
        app.state.store = GraphStore(settings)

        if settings.api_key_set:
            logger.info(f"API key authentication enabled ({len(settings.api_key_set)} key(s))")
        else:
            logger.info("No API keys configured - authentication disabled")

        logger.info(f"Viewer links use base URL {settings.public_base_url}")

        yield

        logger.info("Shutting down Graph Visualization Gateway")
        app.state.store = None

    app = FastAPI(
        title="Graph Visualization Service",
        description="Submit typed entity/relationship graphs, query and filter them",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(ApiKeyMiddleware, api_keys=settings.api_key_set)

    # Configure CORS (wraps ApiKeyMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    # Register routers
    app.include_router(graphs.router, prefix="/api", tags=["Graphs"])
    app.include_router(health.router, prefix="/api", tags=["Health"])

    # Root endpoint
    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with basic info."""
        return {
            "name": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "status": "operational",
            "endpoints": {
                "create": "POST /api/graph",
                "get": "GET /api/graph/{id}",
                "list": "GET /api/graphs",
                "update": "PUT /api/graph/{id}",
                "delete": "DELETE /api/graph/{id}",
                "query": "POST /api/graph/{id}/query",
                "filter": "POST /api/graph/{id}/filter",
                "visualizations": "GET /api/visualizations",
                "health": "GET /api/health",
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = GatewaySettings()
    uvicorn.run(
        "src.gateway.app:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
