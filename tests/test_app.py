from fastapi.testclient import TestClient

from main import app
from start_server import server_options
from tasktracker.config.settings import Settings
from tasktracker.services.task_repository import TaskRepository


def test_health_and_root(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/").status_code == 200


def test_unexpected_errors_use_internal_error_body(client, admin, headers_for, monkeypatch):
    def broken_get_all(self):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(TaskRepository, "get_all", broken_get_all)

    # The server error middleware re-raises after responding
    tolerant_client = TestClient(app, raise_server_exceptions=False)
    response = tolerant_client.get("/tasks", headers=headers_for(admin))

    assert response.status_code == 500
    assert response.json() == {"kind": "InternalError", "message": "Internal server error"}
    assert "disk on fire" not in response.text


def test_server_options_come_from_settings(monkeypatch):
    monkeypatch.setattr(Settings, "HOST", "127.0.0.1")
    monkeypatch.setattr(Settings, "PORT", 9001)
    monkeypatch.setattr(Settings, "RELOAD", False)
    monkeypatch.setattr(Settings, "LOG_LEVEL", "WARNING")

    assert server_options() == {
        "host": "127.0.0.1",
        "port": 9001,
        "reload": False,
        "log_level": "warning",
    }
