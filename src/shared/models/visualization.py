"""Visualization types understood by the front-end renderers."""

from enum import Enum


class VisualizationType(str, Enum):
    FORCE_DIRECTED = "force-directed"
    CHORD = "chord"
    HEATMAP = "heatmap"
    TREE = "tree"
    SWIMLANE = "swimlane"
    SANKEY = "sankey"


DEFAULT_VISUALIZATION = VisualizationType.FORCE_DIRECTED.value

VISUALIZATION_TYPES: list[dict[str, str]] = [
    {
        "type": "force-directed",
        "name": "Force-Directed Graph",
        "description": "Interactive network graph with physics simulation. "
        "Best for exploring relationships and network structure.",
        "bestFor": "General purpose, relationship exploration, network analysis",
    },
    {
        "type": "chord",
        "name": "Chord Diagram",
        "description": "Circular layout showing relationships between entities as "
        "connecting arcs. Best for visualizing flow and connections.",
        "bestFor": "Relationship density, flow patterns, interconnections",
    },
    {
        "type": "heatmap",
        "name": "Relationship Heat Map",
        "description": "Matrix visualization showing relationship intensity between "
        "entity types. Best for pattern recognition.",
        "bestFor": "Pattern recognition, relationship density by type, overview analysis",
    },
    {
        "type": "tree",
        "name": "Hierarchical Tree",
        "description": "Tree layout showing hierarchical relationships. "
        "Best for organizational structures.",
        "bestFor": "Hierarchies, organizational structures, parent-child relationships",
    },
    {
        "type": "swimlane",
        "name": "Swimlane Diagram",
        "description": "Process flow visualization with horizontal lanes for different "
        "teams/roles. Shows cross-functional workflows and handoffs.",
        "bestFor": "Process flows across teams, role-based workflows, "
        "responsibility boundaries, cross-team processes",
    },
    {
        "type": "sankey",
        "name": "Sankey Flow Diagram",
        "description": "Flow visualization where connection width represents "
        "volume/importance. Excellent for identifying bottlenecks.",
        "bestFor": "Process chains, resource flows, value streams, "
        "bottleneck identification, flow volume analysis",
    },
]


def is_known_visualization(value: str) -> bool:
    return value in {v.value for v in VisualizationType}
