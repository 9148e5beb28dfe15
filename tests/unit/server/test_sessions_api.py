"""Tests for the session endpoints."""

from fastapi.testclient import TestClient

from screenflow.server.api import create_app
from tests.factories import make_event, make_screen, update


class TestCreateSession:
    def test_create_on_server_document(self, test_client: TestClient):
        # Act
        response = test_client.post("/sessions", json={})

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["screen_id"] == "welcome"
        assert data["navigation_stack"] == ["welcome"]
        assert data["module_state"] == {"userName": "Ana"}
        assert data["screen"]["id"] == "welcome"
        assert data["screen"]["hidesBackButton"] is False

    def test_create_with_inline_document_and_options(self, test_client: TestClient):
        document = {"id": "inline", "screens": [make_screen("a"), make_screen("b")]}

        response = test_client.post(
            "/sessions",
            json={"document": document, "screen_id": "b", "module_state": {"plan": "pro"}},
        )

        assert response.status_code == 201
        assert response.json()["screen_id"] == "b"
        assert response.json()["module_state"] == {"plan": "pro"}

    def test_invalid_inline_document(self, test_client: TestClient):
        response = test_client.post("/sessions", json={"document": [{"title": "no id"}]})

        assert response.status_code == 422
        assert response.json()["detail"]["reference"].startswith("ERR-")

    def test_unknown_start_screen(self, test_client: TestClient):
        response = test_client.post("/sessions", json={"screen_id": "nowhere"})
        assert response.status_code == 409

    def test_no_document_available(self):
        client = TestClient(create_app())
        response = client.post("/sessions", json={})
        assert response.status_code == 422


class TestSessionLifecycle:
    def test_get_unknown_session(self, test_client: TestClient):
        response = test_client.get("/sessions/does-not-exist")
        assert response.status_code == 404

    def test_get_and_delete(self, test_client: TestClient, session_id):
        assert test_client.get(f"/sessions/{session_id}").status_code == 200

        deleted = test_client.delete(f"/sessions/{session_id}")
        again = test_client.delete(f"/sessions/{session_id}")

        assert deleted.json()["success"] is True
        assert again.json()["success"] is False
        assert test_client.get(f"/sessions/{session_id}").status_code == 404


class TestEvents:
    def test_trigger_event_navigates(self, test_client: TestClient, session_id):
        # Act
        response = test_client.post(f"/sessions/{session_id}/events/continue_event")

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["found"] is True
        assert data["executed"] == ["0:navigation"]
        assert data["current_screen"] == "question"

    def test_trigger_unknown_event(self, test_client: TestClient, session_id):
        data = test_client.post(f"/sessions/{session_id}/events/nope").json()

        assert data["found"] is False
        assert data["diagnostics"][0]["code"] == "event_not_found"

    def test_trigger_with_voice_source(self, test_client: TestClient, session_id):
        data = test_client.post(
            f"/sessions/{session_id}/events/continue_event", json={"source": "voice"}
        ).json()
        assert data["source"] == "voice"

    def test_back(self, test_client: TestClient, session_id):
        test_client.post(f"/sessions/{session_id}/events/continue_event")

        data = test_client.post(f"/sessions/{session_id}/back").json()

        assert data["screen_id"] == "welcome"
        assert data["navigation_stack"] == ["welcome"]

    def test_state_update(self, test_client: TestClient, session_id):
        data = test_client.post(
            f"/sessions/{session_id}/state",
            json={"scope": "module", "updates": {"plan": "pro"}},
        ).json()

        assert data["module_state"] == {"userName": "Ana", "plan": "pro"}

    def test_signals_in_snapshot(self, test_client: TestClient):
        document = {
            "screens": [
                make_screen(
                    "only",
                    events=[
                        make_event(
                            "done",
                            update({"x": 1}),
                            {"type": "closeModule", "flowCompleted": True},
                        )
                    ],
                )
            ]
        }
        session_id = test_client.post("/sessions", json={"document": document}).json()["session_id"]

        dispatch = test_client.post(f"/sessions/{session_id}/events/done").json()
        snapshot = test_client.get(f"/sessions/{session_id}").json()

        assert dispatch["signals"][0]["kind"] == "closeModule"
        assert snapshot["completed"] is True
        assert snapshot["signals"][0]["flow_completed"] is True


class TestToolCalls:
    def test_trigger_event_tool(self, test_client: TestClient, session_id):
        data = test_client.post(
            f"/sessions/{session_id}/tool-calls",
            json={"name": "trigger_event", "arguments": {"eventId": "continue_event"}},
        ).json()

        assert data["success"] is True
        assert data["dispatch"]["source"] == "voice"
        assert data["dispatch"]["current_screen"] == "question"

    def test_record_input_tool(self, test_client: TestClient, session_id):
        data = test_client.post(
            f"/sessions/{session_id}/tool-calls",
            json={
                "name": "record_input",
                "arguments": {
                    "title": "Goal",
                    "summary": "Marathon",
                    "storeKey": "goal",
                    "nextEventId": "continue_event",
                    "delay": 1,
                },
            },
        ).json()
        snapshot = test_client.get(f"/sessions/{session_id}").json()

        assert data["success"] is True
        assert data["next_event_id"] == "continue_event"
        assert data["delay"] == 1.0
        assert snapshot["module_state"]["goal"] == "Marathon"
        assert snapshot["screen_state"]["recordedInputTitle"] == "Goal"

    def test_unknown_tool(self, test_client: TestClient, session_id):
        data = test_client.post(
            f"/sessions/{session_id}/tool-calls", json={"name": "launch", "arguments": {}}
        ).json()
        assert data["success"] is False


def test_services_shared_with_sessions(services):
    """Test handlers given to create_app are wired into new sessions"""
    services.register_handler("svc.fn", lambda: {"value": 7})
    document = {
        "screens": [
            make_screen(
                "only",
                events=[
                    make_event(
                        "load",
                        {
                            "type": "serviceCall",
                            "serviceName": "svc",
                            "functionName": "fn",
                            "responseMapping": {"stateKey": "result", "transformation": "value"},
                        },
                    )
                ],
            )
        ]
    }
    client = TestClient(create_app(services=services))
    session_id = client.post("/sessions", json={"document": document}).json()["session_id"]

    client.post(f"/sessions/{session_id}/events/load")

    assert client.get(f"/sessions/{session_id}").json()["screen_state"] == {"result": 7}
