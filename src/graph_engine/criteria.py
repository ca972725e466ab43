"""
Filter Criteria — the engine's mutable filter state.

Sets of allowed types, free-text search, per-property substring filters
and an optional focus node.  ``to_snapshot`` / ``from_snapshot`` convert
to and from plain data (sets become sorted lists) so a user's selection
can be kept in a URL, a saved view or a JSON request body.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from src.shared.exceptions import FilterEngineError

DEFAULT_FOCUS_DEPTH = 1


@dataclass
class FilterCriteria:
    """Active constraints applied to derive a filtered view."""

    entity_types: set[str] = field(default_factory=set)
    relationship_types: set[str] = field(default_factory=set)
    search_text: str = ""
    properties: dict[str, Any] = field(default_factory=dict)
    focus_node: str | None = None
    focus_depth: int = DEFAULT_FOCUS_DEPTH

    def is_empty(self) -> bool:
        """True when no criterion restricts the graph."""
        return not (
            self.entity_types
            or self.relationship_types
            or self.search_text
            or self.properties
            or self.focus_node
        )

    def copy(self) -> "FilterCriteria":
        return FilterCriteria(
            entity_types=set(self.entity_types),
            relationship_types=set(self.relationship_types),
            search_text=self.search_text,
            properties=dict(self.properties),
            focus_node=self.focus_node,
            focus_depth=self.focus_depth,
        )

    def to_snapshot(self) -> dict[str, Any]:
        """Serialize to plain data with camelCase keys."""
        return {
            "entityTypes": sorted(self.entity_types),
            "relationshipTypes": sorted(self.relationship_types),
            "searchText": self.search_text,
            "properties": dict(self.properties),
            "focusNode": self.focus_node,
            "focusDepth": self.focus_depth,
        }

    @classmethod
    def from_snapshot(cls, snapshot: Mapping[str, Any] | None) -> "FilterCriteria":
        """Rebuild criteria from a snapshot; missing or empty keys take defaults.

        Raises:
            FilterEngineError: If the snapshot is not a mapping.
        """
        if snapshot is None:
            return cls()
        if not isinstance(snapshot, Mapping):
            raise FilterEngineError(
                f"Filter state must be an object, got {type(snapshot).__name__}"
            )

        try:
            focus_depth = int(snapshot.get("focusDepth") or DEFAULT_FOCUS_DEPTH)
        except (TypeError, ValueError):
            raise FilterEngineError(
                f"focusDepth must be an integer, got {snapshot.get('focusDepth')!r}"
            )

        return cls(
            entity_types=set(snapshot.get("entityTypes") or []),
            relationship_types=set(snapshot.get("relationshipTypes") or []),
            search_text=snapshot.get("searchText") or "",
            properties=dict(snapshot.get("properties") or {}),
            focus_node=snapshot.get("focusNode") or None,
            focus_depth=focus_depth,
        )
