"""
Custom exception hierarchy for the graph visualization services.

All domain errors inherit from GraphVizError so they can be caught
uniformly at the gateway or MCP tool boundary.
"""


class GraphVizError(Exception):
    """Base exception for all graph visualization errors."""

    def __init__(self, message: str, component: str = "unknown"):
        self.component = component
        self.message = message
        super().__init__(f"[{component}] {message}")


class GraphStoreError(GraphVizError):
    """Errors raised by the in-memory Graph Store."""

    def __init__(self, message: str):
        super().__init__(message, component="graph_store")


class GraphNotFoundError(GraphStoreError):
    """No graph is stored under the requested id."""

    def __init__(self, graph_id: str):
        self.graph_id = graph_id
        super().__init__(f"Graph not found: {graph_id}")


class InvalidGraphError(GraphStoreError):
    """Submitted graph lacks its entities or relationships array."""
    pass


class InvalidVisualizationTypeError(GraphStoreError):
    """Requested visualization type is not one of the known renderers."""
    pass


class FilterEngineError(GraphVizError):
    """Errors raised by the Filter/Query Engine."""

    def __init__(self, message: str):
        super().__init__(message, component="graph_engine")
