"""Graph Filter/Query Engine — filtered views, focus-mode neighborhoods and single-shot queries."""

from src.graph_engine.criteria import FilterCriteria
from src.graph_engine.filter_engine import FilterEngine
from src.graph_engine.neighbors import get_neighbors
from src.graph_engine.panel import FilterPanel
from src.graph_engine.query import query_graph

__all__ = [
    "FilterCriteria",
    "FilterEngine",
    "FilterPanel",
    "get_neighbors",
    "query_graph",
]
