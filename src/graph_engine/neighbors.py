"""
Neighbor expansion for focus mode.

Breadth-first search over the undirected adjacency implied by the
relationships, bounded by a hop count.  A visited set guards against
cycles, so the walk always terminates.
"""

import logging
from collections import defaultdict, deque
from typing import Iterable

from src.shared.models.graph import Relationship

logger = logging.getLogger("graph_engine.neighbors")


def build_adjacency(relationships: Iterable[Relationship]) -> dict[str, set[str]]:
    """Map each endpoint id to the ids it shares an edge with, in either direction."""
    adjacency: dict[str, set[str]] = defaultdict(set)
    for rel in relationships:
        adjacency[rel.source].add(rel.target)
        adjacency[rel.target].add(rel.source)
    return adjacency


def get_neighbors(
    relationships: Iterable[Relationship],
    node_id: str,
    depth: int,
) -> set[str]:
    """Return every id within ``depth`` hops of ``node_id``, including itself.

    Edge direction is ignored.  Ids referenced only by dangling
    relationships may appear in the result; callers joining against
    entities simply won't match them.

    Args:
        relationships: Edges of the graph to walk.
        node_id: Start node.
        depth: Maximum number of hops; ``0`` (or less) yields ``{node_id}``.
    """
    visited: set[str] = {node_id}
    if depth <= 0:
        return visited

    adjacency = build_adjacency(relationships)
    frontier: deque[tuple[str, int]] = deque([(node_id, 0)])

    while frontier:
        current, hops = frontier.popleft()
        if hops >= depth:
            continue
        for neighbor in adjacency.get(current, ()):
            if neighbor in visited:
                continue
            visited.add(neighbor)
            frontier.append((neighbor, hops + 1))

    logger.debug(
        "Neighborhood of %s at depth %d: %d node(s)", node_id, depth, len(visited)
    )
    return visited
