"""
Single-shot graph queries used by the REST and MCP transports.

Unlike ``FilterEngine`` this holds no state: one stored graph plus one
criterion in, one ``{entities, relationships}`` result out.  Only the
first supplied criterion is evaluated, in the priority order
``entity_id > entity_type > relationship_type > node_ids``; with none
supplied the full graph is returned.

The ``entity_type`` and ``relationship_type`` branches return the other
half of the graph unfiltered, so an ``entity_type`` result can hold
relationships whose endpoints are not among its entities.  This is
looser than the filter engine and external callers rely on it.
"""

import logging
from typing import Sequence

from src.shared.models.graph import Graph

logger = logging.getLogger("graph_engine.query")


def query_graph(
    graph: Graph,
    entity_id: str | None = None,
    entity_type: str | None = None,
    relationship_type: str | None = None,
    node_ids: Sequence[str] | None = None,
) -> Graph:
    """Run one query against ``graph``.

    Args:
        graph: The stored graph.
        entity_id: Return that entity plus every relationship it is the
            source or target of.  No match yields an empty result.
        entity_type: Return all entities of that type and every relationship.
        relationship_type: Return all relationships of that type and every entity.
        node_ids: Return the listed entities and the relationships with
            both endpoints in the list.  An empty list is a valid query
            with an empty result.

    Returns:
        A new ``Graph`` holding the matching entities and relationships.
    """
    if entity_id:
        entity = next((e for e in graph.entities if e.id == entity_id), None)
        if entity is None:
            logger.debug("query_graph: entity %s not found", entity_id)
            return Graph(entities=[], relationships=[])
        return Graph(
            entities=[entity],
            relationships=[
                r for r in graph.relationships
                if r.source == entity_id or r.target == entity_id
            ],
        )

    if entity_type:
        return Graph(
            entities=[e for e in graph.entities if e.type == entity_type],
            relationships=list(graph.relationships),
        )

    if relationship_type:
        return Graph(
            entities=list(graph.entities),
            relationships=[r for r in graph.relationships if r.type == relationship_type],
        )

    if node_ids is not None:
        wanted = set(node_ids)
        return Graph(
            entities=[e for e in graph.entities if e.id in wanted],
            relationships=[
                r for r in graph.relationships
                if r.source in wanted and r.target in wanted
            ],
        )

    return Graph(entities=list(graph.entities), relationships=list(graph.relationships))
