"""Tests for the HTTP routes."""

import json

from fastapi.testclient import TestClient

from duracube_mcp.config.settings import Settings
from duracube_mcp.server.app import create_app
from duracube_mcp.tools.registry import list_tool_descriptors

TOOL_NAMES = [
    "get_duracube_principles",
    "get_learned_corrections",
    "get_output_format",
    "get_finance_extraction_guide",
    "get_section_principle_mapping",
]


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["server"] == "duracube-contract-mcp"
        assert body["version"] == "1.0.0"
        assert body["tools"] == TOOL_NAMES
        assert body["documents_loaded"] == []

    def test_health_reports_loaded_documents(self, client):
        client.post("/tools/get_duracube_principles", json={})
        assert client.get("/health").json()["documents_loaded"] == ["principles"]

    def test_startup_preload(self, store):
        app = create_app(store=store, app_settings=Settings(PRELOAD_KNOWLEDGE=True))
        with TestClient(app) as test_client:
            loaded = test_client.get("/health").json()["documents_loaded"]
        assert len(loaded) == 5

    def test_startup_preload_failure_keeps_serving(self, tmp_store, knowledge_dir):
        (knowledge_dir / "format.json").unlink()
        app = create_app(store=tmp_store, app_settings=Settings(PRELOAD_KNOWLEDGE=True))

        with TestClient(app) as test_client:
            assert test_client.get("/health").status_code == 200
            assert test_client.post("/tools/get_duracube_principles").status_code == 200
            assert test_client.get("/tools/get_output_format").status_code == 500


class TestRpcEndpoints:
    def test_tools_list(self, client):
        response = client.get("/tools")

        assert response.status_code == 200
        assert response.json() == {"tools": list_tool_descriptors()}

    def test_messages_and_legacy_endpoint_agree(self, client):
        envelopes = [
            {"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}},
            {"jsonrpc": "2.0", "method": "notifications/initialized"},
            {"jsonrpc": "2.0", "id": 2, "method": "tools/list"},
            {"jsonrpc": "2.0", "id": 3, "method": "tools/call", "params": {"name": "get_output_format"}},
            {"jsonrpc": "2.0", "id": 4, "method": "tools/call", "params": {"name": "nope"}},
            {"jsonrpc": "2.0", "id": 5, "method": "ping"},
        ]
        for envelope in envelopes:
            via_messages = client.post("/messages?sessionId=session_1", json=envelope)
            via_mcp = client.post("/mcp", json=envelope)
            assert via_messages.status_code == via_mcp.status_code
            assert via_messages.json() == via_mcp.json()

    def test_unknown_tool_is_400(self, client):
        response = client.post("/mcp", json={"jsonrpc": "2.0", "id": 4, "method": "tools/call", "params": {"name": "nope"}})

        assert response.status_code == 400
        assert response.json()["error"] == {"code": -32601, "message": "Unknown tool: nope"}

    def test_validation_failure_is_500(self, client):
        envelope = {
            "jsonrpc": "2.0",
            "id": 6,
            "method": "tools/call",
            "params": {"name": "get_duracube_principles", "arguments": {"include_examples": "true"}},
        }
        response = client.post("/messages", json=envelope)

        assert response.status_code == 500
        assert response.json()["error"]["code"] == -32603

    def test_parse_error(self, client):
        response = client.post("/mcp", content=b"{oops", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json() == {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}

    def test_tools_call_result(self, client):
        envelope = {
            "jsonrpc": "2.0",
            "id": 8,
            "method": "tools/call",
            "params": {"name": "get_section_principle_mapping", "arguments": {"group_id": "D", "include_prompts": False}},
        }
        response = client.post("/messages?sessionId=session_1", json=envelope)

        assert response.status_code == 200
        content = response.json()["result"]["content"]
        assert content[0]["type"] == "text"
        payload = json.loads(content[0]["text"])
        assert payload["section_groups"][0]["principles_to_check"] == [25]


class TestDirectEndpoints:
    def test_principles_empty_body(self, client):
        response = client.post("/tools/get_duracube_principles")

        assert response.status_code == 200
        body = response.json()
        assert body["total_principles"] == 28
        assert "departure_template" not in body["principles"][0]

    def test_principles_with_examples(self, client):
        response = client.post("/tools/get_duracube_principles", json={"include_examples": True})

        assert response.status_code == 200
        assert "departure_template" in response.json()["principles"][0]

    def test_learned_corrections(self, client):
        response = client.post("/tools/get_learned_corrections", json={"category": "dlp"})

        assert response.status_code == 200
        assert response.json()["total_learnings"] == 1

    def test_output_format(self, client):
        response = client.get("/tools/get_output_format")

        assert response.status_code == 200
        assert "example_rows" in response.json()

    def test_finance_extraction_guide(self, client):
        response = client.post("/tools/get_finance_extraction_guide", json={"category": "payment", "include_json_template": False})

        assert response.status_code == 200
        body = response.json()
        assert body["total_categories"] == 2
        assert "json_output_template" not in body

    def test_section_principle_mapping(self, client):
        response = client.post("/tools/get_section_principle_mapping", json={})

        assert response.status_code == 200
        assert response.json()["total_groups"] == 7

    def test_validation_failure(self, client):
        response = client.post("/tools/get_learned_corrections", json={"category": "Security"})

        assert response.status_code == 500
        assert response.json()["error"].startswith("category:")

    def test_invalid_json_body(self, client):
        response = client.post("/tools/get_learned_corrections", content=b"{oops", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON in request body"}

    def test_document_load_failure_and_recovery(self, tmp_client, knowledge_dir):
        path = knowledge_dir / "section-mapping.json"
        original = path.read_text(encoding="utf-8")
        path.unlink()

        response = tmp_client.post("/tools/get_section_principle_mapping", json={})
        assert response.status_code == 500
        assert "section-mapping.json" in response.json()["error"]

        path.write_text(original, encoding="utf-8")
        assert tmp_client.post("/tools/get_section_principle_mapping", json={}).status_code == 200


class TestCors:
    def test_preflight(self, client):
        response = client.options(
            "/mcp",
            headers={
                "Origin": "https://claude.ai",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    def test_simple_request_allows_any_origin(self, client):
        response = client.get("/health", headers={"Origin": "https://example.com"})

        assert response.headers["access-control-allow-origin"] == "*"
