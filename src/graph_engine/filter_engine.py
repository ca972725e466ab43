"""
Filter Engine — live filter state over one active graph.

Holds the canonical graph, the current ``FilterCriteria`` and a list of
change listeners.  Every mutator updates the criteria and then calls
``notify_change``, which derives the filtered graph once and hands that
same snapshot to each listener in registration order.

Filtering order (``apply_filters``):
  1. entity types
  2. free-text search over name, type and serialized properties
  3. property substring filters, in registration order
  4. focus-node neighborhood
  5. relationships whose endpoints both survived
  6. relationship types

A listener that raises propagates out of the mutator that triggered the
notification; listeners registered after it are not called for that change.

The engine never raises for "no graph set": queries return ``None`` or
empty results instead.
"""

import json
import logging
import math
from typing import Any, Callable, Iterable, Mapping

from src.graph_engine.criteria import DEFAULT_FOCUS_DEPTH, FilterCriteria
from src.graph_engine.neighbors import get_neighbors
from src.shared.models.graph import Entity, Graph

logger = logging.getLogger("graph_engine.filter_engine")

ChangeListener = Callable[[Graph | None], None]


def _js_numbers(value: Any) -> Any:
    """Integral floats as ints and non-finite floats as None, recursively."""
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value) if value.is_integer() else value
    if isinstance(value, dict):
        return {k: _js_numbers(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_js_numbers(v) for v in value]
    return value


def _serialize_properties(properties: dict[str, Any]) -> str:
    """Compact, insertion-ordered JSON used as the searchable form of properties.

    Numbers print as a browser's ``JSON.stringify`` prints them (``1.0`` -> ``1``).
    """
    return json.dumps(
        _js_numbers(properties), separators=(",", ":"), ensure_ascii=False, default=str
    )


def stringify_value(value: Any) -> str:
    """Textual form of a property value for substring matching."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(stringify_value(v) for v in value)
    if isinstance(value, dict):
        return _serialize_properties(value)
    return str(value)


def _search_haystack(entity: Entity) -> str:
    return " ".join(
        [entity.name, entity.type, _serialize_properties(entity.properties)]
    ).lower()


def _type_counts(types: Iterable[str]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for t in types:
        counts[t] = counts.get(t, 0) + 1
    return counts


class FilterEngine:
    """Filter/query engine for a single active graph.

    Construct one per session (or per request) and pass it explicitly to
    whatever renders or serves its output.
    """

    def __init__(self, graph: Graph | None = None) -> None:
        self._graph: Graph | None = graph
        self._criteria = FilterCriteria()
        self._listeners: list[ChangeListener] = []

    # ─── Graph & subscription ─────────────────────────────

    @property
    def graph(self) -> Graph | None:
        return self._graph

    @property
    def criteria(self) -> FilterCriteria:
        """The active criteria.  Mutate through the setter methods only."""
        return self._criteria

    def set_graph(self, graph: Graph | None) -> None:
        """Replace the held graph.  Criteria are kept and listeners are not notified."""
        self._graph = graph
        if graph is not None:
            logger.debug(
                "Graph set: %d entities, %d relationships",
                len(graph.entities), len(graph.relationships),
            )

    def on_change(self, callback: ChangeListener) -> None:
        """Register a listener called with the filtered graph after each change."""
        self._listeners.append(callback)

    def notify_change(self) -> Graph | None:
        """Derive the filtered graph once and pass it to every listener."""
        filtered = self.apply_filters()
        for callback in self._listeners:
            callback(filtered)
        return filtered

    # ─── Mutators ─────────────────────────────────────────

    def set_entity_type_filter(self, types: Iterable[str]) -> None:
        self._criteria.entity_types = set(types)
        self.notify_change()

    def toggle_entity_type(self, entity_type: str) -> None:
        self._toggle(self._criteria.entity_types, entity_type)
        self.notify_change()

    def set_relationship_type_filter(self, types: Iterable[str]) -> None:
        self._criteria.relationship_types = set(types)
        self.notify_change()

    def toggle_relationship_type(self, relationship_type: str) -> None:
        self._toggle(self._criteria.relationship_types, relationship_type)
        self.notify_change()

    def set_search(self, text: str | None) -> None:
        self._criteria.search_text = (text or "").lower()
        self.notify_change()

    def set_property_filter(self, key: str, value: Any) -> None:
        """Filter on ``key``; an empty or ``None`` value removes the filter."""
        if value is None or value == "":
            self._criteria.properties.pop(key, None)
        else:
            self._criteria.properties[key] = value
        self.notify_change()

    def set_focus_node(self, node_id: str, depth: int = DEFAULT_FOCUS_DEPTH) -> None:
        self._criteria.focus_node = node_id
        self._criteria.focus_depth = depth
        self.notify_change()

    def clear_focus(self) -> None:
        self._criteria.focus_node = None
        self.notify_change()

    def clear_all(self) -> None:
        self._criteria = FilterCriteria()
        self.notify_change()

    @staticmethod
    def _toggle(members: set[str], value: str) -> None:
        if value in members:
            members.discard(value)
        else:
            members.add(value)

    # ─── Queries ──────────────────────────────────────────

    def get_neighbors(self, node_id: str, depth: int) -> set[str]:
        """Ids within ``depth`` undirected hops of ``node_id``, including it."""
        if self._graph is None:
            return {node_id}
        return get_neighbors(self._graph.relationships, node_id, depth)

    def apply_filters(self) -> Graph | None:
        """Return the graph filtered by the current criteria, or ``None`` without a graph.

        The returned lists are new; the entity and relationship objects in
        them are the engine's own.
        """
        if self._graph is None:
            return None

        criteria = self._criteria
        entities = list(self._graph.entities)
        relationships = list(self._graph.relationships)

        if criteria.entity_types:
            entities = [e for e in entities if e.type in criteria.entity_types]

        if criteria.search_text:
            needle = criteria.search_text.lower()
            entities = [e for e in entities if needle in _search_haystack(e)]

        for key, value in criteria.properties.items():
            wanted = stringify_value(value).lower()
            entities = [
                e for e in entities
                if key in e.properties
                and wanted in stringify_value(e.properties[key]).lower()
            ]

        if criteria.focus_node:
            focus = self.get_neighbors(criteria.focus_node, criteria.focus_depth)
            entities = [e for e in entities if e.id in focus]

        visible_ids = {e.id for e in entities}
        relationships = [
            r for r in relationships
            if r.source in visible_ids and r.target in visible_ids
        ]

        if criteria.relationship_types:
            relationships = [
                r for r in relationships if r.type in criteria.relationship_types
            ]

        logger.debug(
            "Filters applied: %d/%d entities, %d/%d relationships",
            len(entities), len(self._graph.entities),
            len(relationships), len(self._graph.relationships),
        )
        return Graph(entities=entities, relationships=relationships)

    def get_entity_type_counts(self) -> dict[str, int]:
        if self._graph is None:
            return {}
        return _type_counts(e.type for e in self._graph.entities)

    def get_relationship_type_counts(self) -> dict[str, int]:
        if self._graph is None:
            return {}
        return _type_counts(r.type for r in self._graph.relationships)

    def get_stats(self) -> dict[str, Any] | None:
        """Original vs. filtered counts plus per-type tallies of the unfiltered graph."""
        if self._graph is None:
            return None

        filtered = self.apply_filters()
        return {
            "original": {
                "entities": len(self._graph.entities),
                "relationships": len(self._graph.relationships),
            },
            "filtered": {
                "entities": len(filtered.entities),
                "relationships": len(filtered.relationships),
            },
            "entityTypes": self.get_entity_type_counts(),
            "relationshipTypes": self.get_relationship_type_counts(),
        }

    # ─── Persistence of criteria ──────────────────────────

    def save_state(self) -> dict[str, Any]:
        return self._criteria.to_snapshot()

    def load_state(self, state: Mapping[str, Any] | None) -> None:
        """Replace all criteria from a snapshot, then notify listeners."""
        self._criteria = FilterCriteria.from_snapshot(state)
        logger.debug("Filter state loaded: %s", self._criteria)
        self.notify_change()
