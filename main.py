"""
Entry point — demonstrates the filter engine on a small sample graph.

Builds a team/process graph, then walks through type filtering, search
and focus mode, printing the filtered view after each change.

Usage:
    python main.py

For the HTTP gateway:
    python -m src.gateway.app
For the MCP server (stdio transport):
    python -m src.mcp_server.server
"""

from src.graph_engine import FilterEngine, FilterPanel
from src.shared.models.graph import Graph

SAMPLE_GRAPH = {
    "entities": [
        {"id": "acme", "type": "Company", "name": "Acme Corp", "properties": {}},
        {"id": "dev", "type": "Team", "name": "Dev Team", "properties": {"size": 8}},
        {"id": "build", "type": "Process", "name": "Build", "properties": {"tool": "CI"}},
        {"id": "deploy", "type": "Process", "name": "Deploy", "properties": {"tool": "CD"}},
        {"id": "flaky", "type": "PainPoint", "name": "Flaky tests", "properties": {}},
    ],
    "relationships": [
        {"source": "acme", "target": "dev", "type": "HAS_TEAM"},
        {"source": "dev", "target": "build", "type": "PERFORMS_PROCESS"},
        {"source": "build", "target": "deploy", "type": "NEXT"},
        {"source": "flaky", "target": "build", "type": "AFFECTS"},
    ],
}


def _print_view(label: str, graph: Graph | None) -> None:
    if graph is None:
        print(f"{label}: no graph")
        return
    ids = [e.id for e in graph.entities]
    edges = [f"{r.source}->{r.target}:{r.type}" for r in graph.relationships]
    print(f"{label}: entities={ids} relationships={edges}")


def main() -> None:
    engine = FilterEngine()
    engine.set_graph(Graph.model_validate(SAMPLE_GRAPH))
    panel = FilterPanel(engine)

    engine.on_change(lambda filtered: _print_view("changed", filtered))

    engine.set_entity_type_filter(["Process"])
    engine.set_search("deploy")
    engine.clear_all()
    engine.set_focus_node("dev", 1)
    panel.set_focus_depth(2)

    state = panel.state or {}
    print("Showing", state.get("stats", {}).get("filtered"), "of", state.get("stats", {}).get("original"))


if __name__ == "__main__":
    main()
