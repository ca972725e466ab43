"""
Graph Store — in-memory registry of submitted graphs.

Maps generated ids (``graph_1``, ``graph_2``, …) to ``GraphRecord``s.
Records are volatile and the dict is unlocked: concurrent writers to the
same id race and the last write wins.  Each public method corresponds to
one REST endpoint / MCP tool and raises a ``GraphStoreError`` subclass
that the transport turns into a user-visible error.
"""

import logging
import time
from typing import Any, Mapping, Sequence

from pydantic import ValidationError

from src.graph_engine.filter_engine import FilterEngine
from src.graph_engine.query import query_graph
from src.shared.config import BaseServiceSettings
from src.shared.exceptions import (
    GraphNotFoundError,
    InvalidGraphError,
    InvalidVisualizationTypeError,
)
from src.shared.models.graph import Graph, GraphMetadata, GraphRecord
from src.shared.models.visualization import (
    DEFAULT_VISUALIZATION,
    VISUALIZATION_TYPES,
    is_known_visualization,
)

logger = logging.getLogger("graph_store.store")

DEFAULT_TITLE = "Graph Visualization"


def validate_graph_payload(payload: Any) -> Graph:
    """Turn a raw graph payload into a ``Graph``.

    Only the presence of the ``entities`` and ``relationships`` arrays is
    checked; entity and relationship fields are taken as given.

    Raises:
        InvalidGraphError: If either array is missing or malformed.
    """
    if isinstance(payload, Graph):
        return payload
    if not isinstance(payload, Mapping):
        raise InvalidGraphError("Invalid graph format")
    if not isinstance(payload.get("entities"), list):
        raise InvalidGraphError("Graph must contain an entities array")
    if not isinstance(payload.get("relationships"), list):
        raise InvalidGraphError("Graph must contain a relationships array")
    try:
        return Graph.model_validate(payload)
    except ValidationError as exc:
        raise InvalidGraphError(f"Invalid graph format: {exc.error_count()} error(s)") from exc


def _check_visualization(visualization_type: str) -> str:
    if not is_known_visualization(visualization_type):
        valid = [v["type"] for v in VISUALIZATION_TYPES]
        raise InvalidVisualizationTypeError(
            f"Unknown visualization type: {visualization_type}. Valid: {valid}"
        )
    return visualization_type


def _now_ms() -> int:
    return int(time.time() * 1000)


class GraphStore:
    """In-memory graph registry shared by one process's transport handlers."""

    def __init__(self, settings: BaseServiceSettings | None = None):
        self._settings = settings or BaseServiceSettings()
        self._graphs: dict[str, GraphRecord] = {}
        self._counter = 0

    def __len__(self) -> int:
        return len(self._graphs)

    def __contains__(self, graph_id: str) -> bool:
        return graph_id in self._graphs

    # ─── CRUD ─────────────────────────────────────────────

    def create(
        self,
        graph: Any,
        visualization_type: str | None = None,
        title: str | None = None,
    ) -> tuple[str, GraphRecord]:
        """Store a new graph and return its generated id and record."""
        parsed = validate_graph_payload(graph)
        vis = _check_visualization(visualization_type or DEFAULT_VISUALIZATION)

        self._counter += 1
        graph_id = f"graph_{self._counter}"
        record = GraphRecord(
            graph=parsed,
            visualizationType=vis,
            title=title or DEFAULT_TITLE,
            timestamp=_now_ms(),
            metadata=GraphMetadata.from_graph(parsed),
        )
        self._graphs[graph_id] = record

        logger.info(
            "Created %s (%s): %d entities, %d relationships",
            graph_id, vis, record.metadata.entityCount, record.metadata.relationshipCount,
        )
        return graph_id, record

    def get(self, graph_id: str) -> GraphRecord:
        record = self._graphs.get(graph_id)
        if record is None:
            raise GraphNotFoundError(graph_id)
        return record

    def list_graphs(self) -> list[dict[str, Any]]:
        """Summaries of all stored graphs, in creation order."""
        return [
            {
                "graphId": graph_id,
                "title": record.title,
                "visualizationType": record.visualizationType,
                "timestamp": record.timestamp,
                "metadata": record.metadata.model_dump(),
            }
            for graph_id, record in self._graphs.items()
        ]

    def update(
        self,
        graph_id: str,
        graph: Any = None,
        visualization_type: str | None = None,
        title: str | None = None,
    ) -> GraphRecord:
        """Patch a stored graph; omitted fields keep their previous value."""
        existing = self.get(graph_id)
        parsed = validate_graph_payload(graph) if graph is not None else None
        vis = (
            _check_visualization(visualization_type)
            if visualization_type
            else existing.visualizationType
        )

        record = GraphRecord(
            graph=parsed or existing.graph,
            visualizationType=vis,
            title=title or existing.title,
            timestamp=_now_ms(),
            metadata=GraphMetadata.from_graph(parsed) if parsed else existing.metadata,
        )
        self._graphs[graph_id] = record

        logger.info(
            "Updated %s (graph=%s, visualizationType=%s, title=%s)",
            graph_id, parsed is not None, bool(visualization_type), bool(title),
        )
        return record

    def delete(self, graph_id: str) -> None:
        if graph_id not in self._graphs:
            raise GraphNotFoundError(graph_id)
        del self._graphs[graph_id]
        logger.info("Deleted %s", graph_id)

    # ─── Derived views ────────────────────────────────────

    def view_url(self, graph_id: str, visualization_type: str | None = None) -> str:
        """Viewer link for a stored graph."""
        vis = visualization_type or self.get(graph_id).visualizationType
        return f"{self._settings.public_base_url}/view?id={graph_id}&type={vis}"

    def query(
        self,
        graph_id: str,
        entity_id: str | None = None,
        entity_type: str | None = None,
        relationship_type: str | None = None,
        node_ids: Sequence[str] | None = None,
    ) -> Graph:
        """Single-shot query against a stored graph."""
        record = self.get(graph_id)
        return query_graph(
            record.graph,
            entity_id=entity_id,
            entity_type=entity_type,
            relationship_type=relationship_type,
            node_ids=node_ids,
        )

    def apply_filters(
        self, graph_id: str, filters: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Apply a saved filter state to a stored graph.

        A fresh engine is built per call; nothing is shared between requests.
        """
        engine = FilterEngine(self.get(graph_id).graph)
        engine.load_state(filters)
        return {
            "result": engine.apply_filters(),
            "stats": engine.get_stats(),
            "filters": engine.save_state(),
        }
