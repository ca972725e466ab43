"""
Unit tests for the Graph Visualizations MCP server tools.

Tool functions are called directly; each test gets a fresh in-memory
store by resetting the server's lazily created globals.
"""

import json

import pytest

from src.mcp_server import server
from src.mcp_server.config import MCPServerSettings
from src.mcp_server.server import (
    create_graph_visualization,
    delete_graph,
    filter_graph,
    get_graph,
    list_graphs,
    list_visualization_types,
    query_graph,
    update_graph,
)
from src.shared.exceptions import FilterEngineError, GraphNotFoundError, InvalidGraphError

SAMPLE_GRAPH = {
    "entities": [
        {"id": "A", "type": "Team", "name": "Dev Team"},
        {"id": "B", "type": "Process", "name": "Build"},
        {"id": "C", "type": "Process", "name": "Deploy"},
        {"id": "D", "type": "Process", "name": "Verify"},
    ],
    "relationships": [
        {"source": "A", "target": "B", "type": "PERFORMS"},
        {"source": "B", "target": "C", "type": "NEXT"},
        {"source": "C", "target": "D", "type": "NEXT"},
    ],
}


@pytest.fixture(autouse=True)
def fresh_store(monkeypatch):
    """Give every test its own store and a fixed viewer URL."""
    monkeypatch.setattr(
        server, "_settings", MCPServerSettings(base_url="http://viz.test", max_focus_depth=2)
    )
    monkeypatch.setattr(server, "_store", None)
    yield


def _create(**kwargs) -> str:
    return json.loads(create_graph_visualization(SAMPLE_GRAPH, **kwargs))["graphId"]


class TestGraphLifecycle:
    """create / get / update / list / delete."""

    def test_create(self):
        body = json.loads(create_graph_visualization(SAMPLE_GRAPH, "swimlane", "Flow"))

        assert body["success"] is True
        assert body["graphId"] == "graph_1"
        assert body["url"] == "http://viz.test/view?id=graph_1&type=swimlane"
        assert body["title"] == "Flow"
        assert body["metadata"]["relationshipTypes"] == ["PERFORMS", "NEXT"]

    def test_create_requires_arrays(self):
        with pytest.raises(InvalidGraphError, match="entities array"):
            create_graph_visualization({"relationships": []})

    def test_get(self):
        graph_id = _create(title="Org")
        body = json.loads(get_graph(graph_id))

        assert body["graphId"] == graph_id
        assert body["title"] == "Org"
        assert len(body["graph"]["entities"]) == 4

    def test_get_missing(self):
        with pytest.raises(GraphNotFoundError, match="Graph not found: graph_7"):
            get_graph("graph_7")

    def test_update_visualization_only(self):
        graph_id = _create()
        body = json.loads(update_graph(graph_id, visualization_type="sankey"))

        assert body["message"] == "Graph updated successfully"
        assert body["url"].endswith("type=sankey")
        assert body["metadata"]["entityCount"] == 4

    def test_list_and_delete(self):
        first = _create()
        _create()

        json.loads(delete_graph(first))
        body = json.loads(list_graphs())

        assert body["count"] == 1
        assert body["graphs"][0]["graphId"] == "graph_2"

    def test_delete_missing(self):
        with pytest.raises(GraphNotFoundError):
            delete_graph("graph_1")


class TestQueryTools:
    """query_graph and filter_graph."""

    def test_query_echoes_criteria_and_stats(self):
        graph_id = _create()
        body = json.loads(query_graph(graph_id, relationship_type="NEXT"))

        assert body["query"]["relationshipType"] == "NEXT"
        assert body["resultStats"] == {"entitiesFound": 4, "relationshipsFound": 2}

    def test_query_missing_entity_is_empty(self):
        graph_id = _create()
        body = json.loads(query_graph(graph_id, entity_id="Z"))

        assert body["resultStats"] == {"entitiesFound": 0, "relationshipsFound": 0}

    def test_filter_combines_criteria(self):
        graph_id = _create()
        body = json.loads(filter_graph(graph_id, {"entityTypes": ["Process"], "searchText": "y"}))

        assert [e["id"] for e in body["result"]["entities"]] == ["C", "D"]
        assert [r["source"] for r in body["result"]["relationships"]] == ["C"]

    def test_filter_focus_depth_capped(self):
        graph_id = _create()
        body = json.loads(filter_graph(graph_id, {"focusNode": "A", "focusDepth": 10}))

        assert body["filters"]["focusDepth"] == 2
        assert [e["id"] for e in body["result"]["entities"]] == ["A", "B", "C"]

    @pytest.mark.parametrize("depth", ["50", 7.0])
    def test_filter_focus_depth_capped_for_numeric_strings_and_floats(self, depth):
        graph_id = _create()
        body = json.loads(filter_graph(graph_id, {"focusNode": "A", "focusDepth": depth}))

        assert body["filters"]["focusDepth"] == 2
        assert [e["id"] for e in body["result"]["entities"]] == ["A", "B", "C"]

    def test_filter_rejects_non_numeric_focus_depth(self):
        graph_id = _create()

        with pytest.raises(FilterEngineError):
            filter_graph(graph_id, {"focusNode": "A", "focusDepth": "deep"})

    def test_filter_without_filters(self):
        graph_id = _create()
        body = json.loads(filter_graph(graph_id))

        assert body["stats"]["filtered"] == {"entities": 4, "relationships": 3}


def test_list_visualization_types():
    body = json.loads(list_visualization_types())

    assert len(body["visualizations"]) == 6
    assert {"type", "name", "description", "bestFor"} <= set(body["visualizations"][0])
