"""Graph Store — volatile in-memory registry of submitted graphs."""

from src.graph_store.store import GraphStore, validate_graph_payload

__all__ = [
    "GraphStore",
    "validate_graph_payload",
]
