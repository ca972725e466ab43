"""
Filter Panel view model.

Plain-data description of the filter controls a front end draws: type
checkboxes with counts, the search box, focus-depth slider and the
showing-N-of-M summary.  The panel subscribes to its engine and keeps
``state`` current after every change.
"""

from typing import Any

from src.graph_engine.filter_engine import FilterEngine
from src.shared.models.graph import Graph

MIN_FOCUS_DEPTH = 1
MAX_FOCUS_DEPTH = 3

# preset name -> (entity types, relationship types)
PRESETS: dict[str, tuple[list[str], list[str]]] = {
    "processes": (["Process", "Team"], ["PERFORMS_PROCESS"]),
    "teams": (["Company", "Team"], ["HAS_TEAM"]),
    "pain-solutions": (["PainPoint", "Opportunity"], ["ADDRESSES"]),
    "all": ([], []),
}


def _type_rows(counts: dict[str, int], selected: set[str]) -> list[dict[str, Any]]:
    return [
        {
            "type": type_name,
            "count": count,
            "checked": not selected or type_name in selected,
        }
        for type_name, count in sorted(counts.items())
    ]


class FilterPanel:
    """Renders the engine's criteria and stats as control state."""

    def __init__(self, engine: FilterEngine) -> None:
        self._engine = engine
        self.state: dict[str, Any] | None = self.render()
        engine.on_change(self._on_change)

    def _on_change(self, _filtered: Graph | None) -> None:
        self.state = self.render()

    def render(self) -> dict[str, Any] | None:
        stats = self._engine.get_stats()
        if stats is None:
            return None

        criteria = self._engine.criteria
        return {
            "searchText": criteria.search_text,
            "entityTypes": _type_rows(stats["entityTypes"], criteria.entity_types),
            "relationshipTypes": _type_rows(
                stats["relationshipTypes"], criteria.relationship_types
            ),
            "focus": {
                "node": criteria.focus_node,
                "depth": criteria.focus_depth,
                "minDepth": MIN_FOCUS_DEPTH,
                "maxDepth": MAX_FOCUS_DEPTH,
            },
            "stats": {
                "original": stats["original"],
                "filtered": stats["filtered"],
            },
            "presets": list(PRESETS),
        }

    def apply_preset(self, name: str) -> None:
        """Reset all filters, then apply the named quick view."""
        if name not in PRESETS:
            raise ValueError(f"Unknown preset: {name}. Valid: {sorted(PRESETS)}")

        self._engine.clear_all()
        entity_types, relationship_types = PRESETS[name]
        if entity_types:
            self._engine.set_entity_type_filter(entity_types)
        if relationship_types:
            self._engine.set_relationship_type_filter(relationship_types)

    def set_focus_depth(self, depth: int) -> None:
        """Move the depth slider; re-focuses only when a node is focused."""
        depth = max(MIN_FOCUS_DEPTH, min(MAX_FOCUS_DEPTH, int(depth)))
        focus_node = self._engine.criteria.focus_node
        if focus_node:
            self._engine.set_focus_node(focus_node, depth)
