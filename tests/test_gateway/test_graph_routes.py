"""
Tests for the FastAPI gateway routes.

Each test gets a fresh app (and so a fresh in-memory store) through
FastAPI's TestClient; the lifespan runs inside the ``with`` block.
"""

import pytest
from fastapi.testclient import TestClient

from src.gateway.app import create_app
from src.gateway.config import GatewaySettings

SAMPLE_GRAPH = {
    "entities": [
        {"id": "A", "type": "Team", "name": "Dev Team", "properties": {"region": "EMEA"}},
        {"id": "B", "type": "Process", "name": "Build", "properties": {}},
        {"id": "C", "type": "Process", "name": "Deploy", "properties": {}},
    ],
    "relationships": [
        {"source": "A", "target": "B", "type": "PERFORMS", "properties": {}},
        {"source": "B", "target": "C", "type": "NEXT", "properties": {}},
    ],
}


@pytest.fixture
def client():
    app = create_app(GatewaySettings(base_url="http://viz.test"))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def secured_client():
    app = create_app(GatewaySettings(api_keys="k1, k2"))
    with TestClient(app) as c:
        yield c


def _create(client, **extra) -> str:
    response = client.post("/api/graph", json={"graph": SAMPLE_GRAPH, **extra})
    assert response.status_code == 200
    return response.json()["graphId"]


# ─── CRUD ────────────────────────────────────────────────────


class TestGraphCrud:
    """Create, read, list, update and delete."""

    def test_create(self, client):
        response = client.post(
            "/api/graph",
            json={"graph": SAMPLE_GRAPH, "visualizationType": "chord", "title": "Org"},
        )
        body = response.json()

        assert response.status_code == 200
        assert body["success"] is True
        assert body["graphId"] == "graph_1"
        assert body["url"] == "http://viz.test/view?id=graph_1&type=chord"
        assert body["metadata"]["entityTypes"] == ["Team", "Process"]

    @pytest.mark.parametrize(
        "payload",
        [{}, {"graph": {"entities": []}}, {"graph": {"relationships": []}}],
    )
    def test_create_invalid_graph(self, client, payload):
        response = client.post("/api/graph", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid graph format"

    def test_create_accepts_numeric_ids_and_null_fields(self, client):
        graph = {
            "entities": [
                {"id": 1, "type": "Team", "name": None, "properties": None},
                {"id": 2, "type": "Process", "name": "Build"},
            ],
            "relationships": [{"source": 1, "target": 2, "type": "PERFORMS"}],
        }
        response = client.post("/api/graph", json={"graph": graph})
        assert response.status_code == 200

        stored = client.get(f"/api/graph/{response.json()['graphId']}").json()["graph"]
        assert stored["entities"][0]["id"] == "1"
        assert stored["entities"][0]["name"] == ""
        assert stored["entities"][0]["properties"] == {}
        assert stored["relationships"][0]["source"] == "1"

    def test_create_unknown_visualization(self, client):
        response = client.post(
            "/api/graph", json={"graph": SAMPLE_GRAPH, "visualizationType": "pie"}
        )

        assert response.status_code == 400
        assert "Unknown visualization type" in response.json()["detail"]

    def test_get(self, client):
        graph_id = _create(client)
        body = client.get(f"/api/graph/{graph_id}").json()

        assert body["graph"] == SAMPLE_GRAPH
        assert body["title"] == "Graph Visualization"
        assert body["visualizationType"] == "force-directed"
        assert body["metadata"]["entityCount"] == 3

    def test_get_missing(self, client):
        response = client.get("/api/graph/graph_42")

        assert response.status_code == 404
        assert response.json()["detail"] == "Graph not found"

    def test_list(self, client):
        _create(client, title="One")
        _create(client, title="Two")
        body = client.get("/api/graphs").json()

        assert body["count"] == 2
        assert [g["title"] for g in body["graphs"]] == ["One", "Two"]

    def test_update_partial(self, client):
        graph_id = _create(client, visualizationType="tree", title="Before")

        response = client.put(f"/api/graph/{graph_id}", json={"title": "After"})
        record = client.get(f"/api/graph/{graph_id}").json()

        assert response.status_code == 200
        assert response.json()["url"].endswith("type=tree")
        assert record["title"] == "After"
        assert record["graph"] == SAMPLE_GRAPH

    def test_update_graph_recomputes_metadata(self, client):
        graph_id = _create(client)
        new_graph = {"entities": [{"id": "X", "type": "Tool", "name": "Jenkins"}], "relationships": []}

        body = client.put(f"/api/graph/{graph_id}", json={"graph": new_graph}).json()

        assert body["metadata"]["entityCount"] == 1
        assert body["metadata"]["entityTypes"] == ["Tool"]

    def test_update_invalid_graph(self, client):
        graph_id = _create(client)
        response = client.put(f"/api/graph/{graph_id}", json={"graph": {"entities": []}})

        assert response.status_code == 400

    def test_update_missing(self, client):
        assert client.put("/api/graph/graph_9", json={"title": "x"}).status_code == 404

    def test_delete(self, client):
        graph_id = _create(client)

        response = client.delete(f"/api/graph/{graph_id}")

        assert response.json() == {"success": True, "message": "Graph deleted successfully"}
        assert client.get(f"/api/graph/{graph_id}").status_code == 404
        assert client.delete(f"/api/graph/{graph_id}").status_code == 404


# ─── Query & filter ──────────────────────────────────────────


class TestQueryAndFilter:
    """Single-shot queries and saved-filter application."""

    def test_query_entity_id(self, client):
        graph_id = _create(client)
        body = client.post(f"/api/graph/{graph_id}/query", json={"entityId": "B"}).json()

        assert body["graphId"] == graph_id
        assert [e["id"] for e in body["result"]["entities"]] == ["B"]
        assert len(body["result"]["relationships"]) == 2

    def test_query_no_criteria_returns_graph(self, client):
        graph_id = _create(client)
        body = client.post(f"/api/graph/{graph_id}/query", json={}).json()

        assert body["result"] == SAMPLE_GRAPH

    def test_query_node_ids(self, client):
        graph_id = _create(client)
        body = client.post(
            f"/api/graph/{graph_id}/query", json={"nodeIds": ["B", "C"]}
        ).json()

        assert [r["type"] for r in body["result"]["relationships"]] == ["NEXT"]

    def test_query_missing_graph(self, client):
        assert client.post("/api/graph/nope/query", json={}).status_code == 404

    def test_filter_focus(self, client):
        graph_id = _create(client)
        body = client.post(
            f"/api/graph/{graph_id}/filter", json={"focusNode": "A", "focusDepth": 1}
        ).json()

        assert [e["id"] for e in body["result"]["entities"]] == ["A", "B"]
        assert body["stats"]["original"] == {"entities": 3, "relationships": 2}
        assert body["filters"]["focusNode"] == "A"

    def test_filter_property(self, client):
        graph_id = _create(client)
        body = client.post(
            f"/api/graph/{graph_id}/filter", json={"properties": {"region": "emea"}}
        ).json()

        assert [e["id"] for e in body["result"]["entities"]] == ["A"]
        assert body["result"]["relationships"] == []

    def test_filter_missing_graph(self, client):
        assert client.post("/api/graph/nope/filter", json={}).status_code == 404


# ─── Misc endpoints ──────────────────────────────────────────


class TestServiceEndpoints:
    def test_root(self, client):
        assert client.get("/").json()["status"] == "operational"

    def test_health(self, client):
        _create(client)
        body = client.get("/api/health").json()

        assert body["status"] == "healthy"
        assert body["graphs"] == 1

    def test_visualizations(self, client):
        types = [v["type"] for v in client.get("/api/visualizations").json()["visualizations"]]

        assert types == ["force-directed", "chord", "heatmap", "tree", "swimlane", "sankey"]

    def test_correlation_id_echoed(self, client):
        response = client.get("/api/health", headers={"X-Correlation-ID": "abc123"})

        assert response.headers["X-Correlation-ID"] == "abc123"


# ─── API key authentication ──────────────────────────────────


class TestApiKeys:
    """API key checks when keys are configured."""

    def test_missing_key_rejected(self, secured_client):
        response = secured_client.get("/api/graphs")

        assert response.status_code == 401
        assert response.json() == {
            "error": "Unauthorized",
            "message": "Valid API key required",
        }

    def test_wrong_key_rejected(self, secured_client):
        response = secured_client.get("/api/graphs", headers={"X-API-Key": "nope"})

        assert response.status_code == 401

    def test_valid_key_accepted(self, secured_client):
        response = secured_client.get("/api/graphs", headers={"X-API-Key": "k2"})

        assert response.status_code == 200

    def test_public_routes_open(self, secured_client):
        assert secured_client.get("/").status_code == 200
        assert secured_client.get("/api/health").status_code == 200

    def test_no_keys_means_open(self, client):
        assert client.get("/api/graphs").status_code == 200
