"""
Graph Visualizations — MCP Server

Exposes the in-memory Graph Store as tools so an assistant can submit a
graph, get back a viewer URL, and query or filter it later.  Each tool's
docstring is read by the calling LLM to decide when and how to use it.
Every tool returns a JSON string.  Unknown ids and malformed graphs raise
``GraphVizError`` subclasses, which the client sees as tool errors.

MCP Tools:
  - create_graph_visualization
  - get_graph
  - update_graph
  - query_graph
  - filter_graph
  - list_graphs
  - delete_graph
  - list_visualization_types

Run as:  python -m src.mcp_server.server        (stdio or SSE per MCP_TRANSPORT)
"""

import json
from typing import Any, Literal

from mcp.server.fastmcp import FastMCP

from src.graph_store.store import GraphStore
from src.mcp_server.config import MCPServerSettings
from src.shared.logging import setup_logging
from src.shared.models.visualization import VISUALIZATION_TYPES

logger = setup_logging("mcp_server.server", level="INFO")

VisualizationName = Literal["force-directed", "chord", "heatmap", "tree", "swimlane", "sankey"]

mcp = FastMCP("GraphVisualizations")

# ─── Shared resources (lazy init) ─────────────────────────

_settings: MCPServerSettings | None = None
_store: GraphStore | None = None


def _get_settings() -> MCPServerSettings:
    """Lazy-initialise settings from environment variables."""
    global _settings
    if _settings is None:
        _settings = MCPServerSettings()
    return _settings


def _get_store() -> GraphStore:
    """Lazy-initialise the graph store on first tool call."""
    global _store
    if _store is None:
        _store = GraphStore(_get_settings())
    return _store


def _dumps(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, default=str)


def _as_depth(value: Any) -> int | None:
    """Integer form of a focusDepth value; ``None`` if it has none (the engine rejects it later)."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# ─── Tool 1 ──────────────────────────────────────────────


@mcp.tool()
def create_graph_visualization(
    graph: dict[str, Any],
    visualization_type: VisualizationName = "force-directed",
    title: str = "Graph Visualization",
) -> str:
    """Create a graph visualization from a semantic model graph.  Returns a URL to view it.

    Args:
        graph: ``{"entities": [...], "relationships": [...]}``.  Entities
              carry id, type, name and optional properties; relationships
              carry source, target, type and optional properties.
        visualization_type: One of:
              "force-directed" (network), "chord" (circular),
              "heatmap" (matrix), "tree" (hierarchical),
              "swimlane" (process flows), "sankey" (flow volume).
        title: Optional title for the visualization.
    """
    store = _get_store()
    graph_id, record = store.create(graph, visualization_type, title)
    return _dumps({
        "success": True,
        "graphId": graph_id,
        "url": store.view_url(graph_id, record.visualizationType),
        "visualizationType": record.visualizationType,
        "title": record.title,
        "metadata": record.metadata.model_dump(),
    })


# ─── Tool 2 ──────────────────────────────────────────────


@mcp.tool()
def get_graph(graph_id: str) -> str:
    """Retrieve a graph by its ID, including all entities and relationships.

    Args:
        graph_id: The ID returned by create_graph_visualization (e.g. "graph_1").
    """
    record = _get_store().get(graph_id)
    return _dumps({"success": True, "graphId": graph_id, **record.model_dump()})


# ─── Tool 3 ──────────────────────────────────────────────


@mcp.tool()
def update_graph(
    graph_id: str,
    graph: dict[str, Any] | None = None,
    visualization_type: VisualizationName | None = None,
    title: str | None = None,
) -> str:
    """Update an existing graph visualization with new data or properties.

    Any argument left out keeps its current value.

    Args:
        graph_id: The ID of the graph to update.
        graph: Replacement graph with entities and relationships arrays.
        visualization_type: New visualization type (same options as
              create_graph_visualization).
        title: New title.
    """
    store = _get_store()
    record = store.update(graph_id, graph, visualization_type, title)
    return _dumps({
        "success": True,
        "graphId": graph_id,
        "url": store.view_url(graph_id, record.visualizationType),
        "message": "Graph updated successfully",
        "metadata": record.metadata.model_dump(),
    })


# ─── Tool 4 ──────────────────────────────────────────────


@mcp.tool()
def query_graph(
    graph_id: str,
    entity_id: str | None = None,
    entity_type: str | None = None,
    relationship_type: str | None = None,
    node_ids: list[str] | None = None,
) -> str:
    """Query a graph for specific entities or relationships.

    Supply ONE criterion.  If several are given only the first in this
    order is used: entity_id, entity_type, relationship_type, node_ids.
    With none the whole graph is returned.

    Args:
        graph_id: The ID of the graph to query.
        entity_id: One entity plus every relationship it takes part in.
        entity_type: All entities of this type.
        relationship_type: All relationships of this type.
        node_ids: Subgraph of these entities and the relationships
              between them.
    """
    result = _get_store().query(
        graph_id,
        entity_id=entity_id,
        entity_type=entity_type,
        relationship_type=relationship_type,
        node_ids=node_ids,
    )
    return _dumps({
        "success": True,
        "graphId": graph_id,
        "query": {
            "entityId": entity_id,
            "entityType": entity_type,
            "relationshipType": relationship_type,
            "nodeIds": node_ids,
        },
        "result": result.model_dump(),
        "resultStats": {
            "entitiesFound": len(result.entities),
            "relationshipsFound": len(result.relationships),
        },
    })


# ─── Tool 5 ──────────────────────────────────────────────


@mcp.tool()
def filter_graph(graph_id: str, filters: dict[str, Any] | None = None) -> str:
    """Apply combined filters to a graph, as the interactive viewer does.

    Unlike query_graph, every criterion applies at once and relationships
    are always restricted to the surviving entities.

    Args:
        graph_id: The ID of the graph to filter.
        filters: Filter state object, all keys optional:
              entityTypes (list of types to keep), relationshipTypes,
              searchText (case-insensitive match on name, type, properties),
              properties ({key: value-substring}),
              focusNode (entity id) and focusDepth (hops, default 1).
    """
    max_depth = _get_settings().max_focus_depth
    filters = dict(filters or {})
    depth = _as_depth(filters.get("focusDepth"))
    if depth is not None and depth > max_depth:
        logger.info(f"Capping focusDepth {filters['focusDepth']!r} to {max_depth}")
        filters["focusDepth"] = max_depth

    filtered = _get_store().apply_filters(graph_id, filters)
    return _dumps({
        "success": True,
        "graphId": graph_id,
        "filters": filtered["filters"],
        "result": filtered["result"].model_dump(),
        "stats": filtered["stats"],
    })


# ─── Tool 6 ──────────────────────────────────────────────


@mcp.tool()
def list_graphs() -> str:
    """List all stored graphs with their metadata."""
    graphs = _get_store().list_graphs()
    return _dumps({"success": True, "count": len(graphs), "graphs": graphs})


# ─── Tool 7 ──────────────────────────────────────────────


@mcp.tool()
def delete_graph(graph_id: str) -> str:
    """Delete a graph by its ID."""
    _get_store().delete(graph_id)
    return _dumps({"success": True, "message": f"Graph {graph_id} deleted successfully"})


# ─── Tool 8 ──────────────────────────────────────────────


@mcp.tool()
def list_visualization_types() -> str:
    """List all available visualization types and what each is best for."""
    return _dumps({"visualizations": VISUALIZATION_TYPES})


# ─── Entry point ──────────────────────────────────────────

if __name__ == "__main__":
    settings = _get_settings()

    if settings.transport == "sse":
        import uvicorn

        logger.info(
            f"Starting Graph Visualizations MCP server (SSE transport on "
            f"{settings.host}:{settings.port})"
        )
        uvicorn.run(mcp.sse_app(), host=settings.host, port=settings.port, log_level="info")
    else:
        logger.info("Starting Graph Visualizations MCP server (stdio transport)")
        mcp.run()
