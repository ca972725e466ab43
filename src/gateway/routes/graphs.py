"""
Graph routes — create, read, list, update, delete, query and filter stored graphs.

  POST   /api/graph                 create a graph, returns its viewer URL
  GET    /api/graph/{graph_id}      full stored record
  GET    /api/graphs                summaries of all graphs
  PUT    /api/graph/{graph_id}      patch graph and/or display metadata
  DELETE /api/graph/{graph_id}      remove a graph
  POST   /api/graph/{graph_id}/query   single-shot query
  POST   /api/graph/{graph_id}/filter  apply a saved filter state
  GET    /api/visualizations        available visualization types
"""

from typing import Any, NoReturn

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from src.graph_store.store import GraphStore
from src.shared.exceptions import (
    FilterEngineError,
    GraphNotFoundError,
    GraphVizError,
    InvalidGraphError,
    InvalidVisualizationTypeError,
)
from src.shared.logging import setup_logging
from src.shared.models.graph import Graph, GraphRecord
from src.shared.models.visualization import VISUALIZATION_TYPES

logger = setup_logging("gateway.routes.graphs", level="INFO")

router = APIRouter()


def _get_store(request: Request) -> GraphStore:
    return request.app.state.store


def _raise_http(exc: GraphVizError) -> NoReturn:
    """Translate a domain error into the matching HTTP error."""
    if isinstance(exc, GraphNotFoundError):
        raise HTTPException(status_code=404, detail="Graph not found") from exc
    if isinstance(exc, InvalidGraphError):
        raise HTTPException(status_code=400, detail="Invalid graph format") from exc
    if isinstance(exc, (InvalidVisualizationTypeError, FilterEngineError)):
        raise HTTPException(status_code=400, detail=exc.message) from exc
    logger.exception(f"Unexpected graph error: {exc}")
    raise HTTPException(status_code=500, detail=f"Internal server error: {exc}") from exc


# ─── Request/Response Models ────────────────────────────────


class CreateGraphRequest(BaseModel):
    """Request model for POST /api/graph."""

    graph: Any = Field(None, description="Graph with entities and relationships arrays")
    visualizationType: str = Field(
        "force-directed", description="Renderer to open the graph with"
    )
    title: str = Field("Graph Visualization", description="Display title")


class UpdateGraphRequest(BaseModel):
    """Request model for PUT /api/graph/{graph_id}.  Omitted fields are kept."""

    graph: Any = Field(None, description="Replacement graph")
    visualizationType: str | None = Field(None, description="New renderer")
    title: str | None = Field(None, description="New display title")


class GraphWriteResponse(BaseModel):
    """Response model for create and update."""

    success: bool = True
    graphId: str
    url: str
    metadata: dict[str, Any]


class QueryRequest(BaseModel):
    """Request model for POST /api/graph/{graph_id}/query.

    Only the first supplied criterion is used, in field order.
    """

    entityId: str | None = Field(None, description="Entity plus its incident edges")
    entityType: str | None = Field(None, description="All entities of a type")
    relationshipType: str | None = Field(None, description="All relationships of a type")
    nodeIds: list[str] | None = Field(None, description="Subgraph induced by these ids")


class FilterRequest(BaseModel):
    """Request model for POST /api/graph/{graph_id}/filter (a saved filter state)."""

    entityTypes: list[str] = Field(default_factory=list)
    relationshipTypes: list[str] = Field(default_factory=list)
    searchText: str = ""
    properties: dict[str, Any] = Field(default_factory=dict)
    focusNode: str | None = None
    focusDepth: int = Field(1, ge=0)


# ─── POST /api/graph ────────────────────────────────────────


@router.post("/graph", response_model=GraphWriteResponse)
async def create_graph(body: CreateGraphRequest, request: Request) -> GraphWriteResponse:
    """Store a graph and return the URL it can be viewed at."""
    store = _get_store(request)
    try:
        graph_id, record = store.create(body.graph, body.visualizationType, body.title)
    except GraphVizError as e:
        _raise_http(e)

    return GraphWriteResponse(
        graphId=graph_id,
        url=store.view_url(graph_id, record.visualizationType),
        metadata=record.metadata.model_dump(),
    )


# ─── GET /api/graph/{graph_id} ──────────────────────────────


@router.get("/graph/{graph_id}", response_model=GraphRecord)
async def get_graph(graph_id: str, request: Request) -> GraphRecord:
    """Return the stored record: graph, visualization type, title, timestamp, metadata."""
    try:
        return _get_store(request).get(graph_id)
    except GraphVizError as e:
        _raise_http(e)


# ─── GET /api/graphs ────────────────────────────────────────


@router.get("/graphs")
async def list_graphs(request: Request) -> dict:
    """List all stored graphs in creation order."""
    graphs = _get_store(request).list_graphs()
    return {"success": True, "count": len(graphs), "graphs": graphs}


# ─── PUT /api/graph/{graph_id} ──────────────────────────────


@router.put("/graph/{graph_id}", response_model=GraphWriteResponse)
async def update_graph(
    graph_id: str, body: UpdateGraphRequest, request: Request
) -> GraphWriteResponse:
    """Patch a stored graph.  Graph and display metadata update independently."""
    store = _get_store(request)
    try:
        record = store.update(graph_id, body.graph, body.visualizationType, body.title)
    except GraphVizError as e:
        _raise_http(e)

    return GraphWriteResponse(
        graphId=graph_id,
        url=store.view_url(graph_id, record.visualizationType),
        metadata=record.metadata.model_dump(),
    )


# ─── DELETE /api/graph/{graph_id} ───────────────────────────


@router.delete("/graph/{graph_id}")
async def delete_graph(graph_id: str, request: Request) -> dict:
    try:
        _get_store(request).delete(graph_id)
    except GraphVizError as e:
        _raise_http(e)
    return {"success": True, "message": "Graph deleted successfully"}


# ─── POST /api/graph/{graph_id}/query ───────────────────────


@router.post("/graph/{graph_id}/query")
async def query_graph(graph_id: str, body: QueryRequest, request: Request) -> dict:
    """Query by entity id, entity type, relationship type or node ids.

    With no criterion the full graph is returned.
    """
    try:
        result: Graph = _get_store(request).query(
            graph_id,
            entity_id=body.entityId,
            entity_type=body.entityType,
            relationship_type=body.relationshipType,
            node_ids=body.nodeIds,
        )
    except GraphVizError as e:
        _raise_http(e)

    return {"success": True, "graphId": graph_id, "result": result.model_dump()}


# ─── POST /api/graph/{graph_id}/filter ──────────────────────


@router.post("/graph/{graph_id}/filter")
async def filter_graph(graph_id: str, body: FilterRequest, request: Request) -> dict:
    """Apply a filter state (as saved by the viewer) and return the filtered graph with stats."""
    try:
        filtered = _get_store(request).apply_filters(graph_id, body.model_dump())
    except GraphVizError as e:
        _raise_http(e)

    return {
        "success": True,
        "graphId": graph_id,
        "result": filtered["result"].model_dump(),
        "stats": filtered["stats"],
        "filters": filtered["filters"],
    }


# ─── GET /api/visualizations ────────────────────────────────


@router.get("/visualizations")
async def list_visualization_types() -> dict:
    return {"visualizations": VISUALIZATION_TYPES}
