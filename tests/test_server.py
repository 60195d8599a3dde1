import asyncio
from decimal import Decimal
from unittest.mock import patch

import pytest
from starlette.testclient import TestClient

from yolo.server import _TimeoutMiddleware, build_app, main
from yolo.server_state import ServerState


def test_build_app_serves_order_books():
    state = ServerState.default()
    client = TestClient(build_app(state))
    response = client.get("/order-book/usdt_eth")
    assert response.status_code == 200
    assert response.json()["ask_total_volume"] == 10


def test_build_app_defaults_to_seeded_state():
    client = TestClient(build_app())
    response = client.post("/order-book/usdt_eth/order/market", json={"side": "bid", "size": 10})
    assert response.status_code == 200
    assert len(response.json()) == 1


def test_build_app_keeps_error_format():
    client = TestClient(build_app(ServerState()))
    response = client.get("/order-book/usdt_eth")
    assert response.status_code == 404
    assert response.json() == {"code": None, "message": "Resource not found"}


def run_asgi(app, scope):
    messages = []

    async def receive():
        return {"type": "http.request", "body": b"", "more_body": False}

    async def send(message):
        messages.append(message)

    asyncio.run(app(scope, receive, send))
    return messages


def test_timeout_answers_request_timeout():
    async def slow_app(scope, receive, send):
        await asyncio.sleep(5)

    messages = run_asgi(_TimeoutMiddleware(slow_app, timeout=0.01), {"type": "http"})
    assert messages[0]["type"] == "http.response.start"
    assert messages[0]["status"] == 408


def test_timeout_passes_fast_responses_through():
    async def fast_app(scope, receive, send):
        await send({"type": "http.response.start", "status": 204, "headers": []})
        await send({"type": "http.response.body", "body": b""})

    messages = run_asgi(_TimeoutMiddleware(fast_app, timeout=1.0), {"type": "http"})
    assert [m.get("status") for m in messages] == [204, None]


@pytest.fixture
def project(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "base.yaml").write_text("host: 127.0.0.1\nport: 8123\n", encoding="utf-8")
    (config_dir / "local.yaml").write_text("base_url: http://localhost\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SERVER_ENV", raising=False)
    monkeypatch.delenv("SERVER__HOST", raising=False)
    monkeypatch.delenv("SERVER__PORT", raising=False)
    return tmp_path


def test_main_runs_server_with_configured_address(project):
    with patch("uvicorn.run") as run:
        assert main([]) == 0
    run.assert_called_once()
    args, kwargs = run.call_args
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 8123
    app = args[0]
    book = app.state.server_state.exchange["usdt_eth"]
    assert book.ask_total_volume == Decimal("10")


def test_main_rejects_unknown_arguments(project):
    with patch("uvicorn.run") as run, pytest.raises(SystemExit):
        main(["--bogus"])
    assert run.call_count == 0