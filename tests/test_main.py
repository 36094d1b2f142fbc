"""Tests for the HTTP surface and process entry point."""

import time
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from procrelay import main
from procrelay.config import Settings
from procrelay.sources.pm2 import Pm2Source
from procrelay.models.event import EventKind


def _wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def client(make_config, recording_channel):
    app = main.create_app(make_config(log=False, deploy=True), channel=recording_channel, settings=Settings())
    with TestClient(app) as test_client:
        yield test_client


def test_health(client) -> None:
    assert client.get("/health").json() == {"status": "healthy"}


def test_queue_status(client) -> None:
    assert client.get("/queue").json() == {"pending": 0, "limit": 10}


def test_error_log_is_delivered(client, recording_channel) -> None:
    response = client.post("/bus/log:err", json={"process": {"name": "api", "pm_id": 3}, "data": "Error: boom"})

    assert response.status_code == 202
    assert response.json() == {"status": "accepted", "kind": "log:err"}
    assert _wait_for(lambda: len(recording_channel.sent) == 1)
    destination, text = recording_channel.sent[0]
    assert destination.chat_id == "-100200"
    assert text == "*api*\n\n```\nError: boom```"


def test_events_delivered_in_order(client, recording_channel) -> None:
    for i in range(3):
        client.post("/bus/log:err", json={"process": {"name": "api"}, "data": f"line {i}"})

    assert _wait_for(lambda: len(recording_channel.sent) == 3)
    assert [text for _, text in recording_channel.sent] == [
        f"*api*\n\n```\nline {i}```" for i in range(3)
    ]


def test_unsubscribed_kind_is_ignored(client, recording_channel) -> None:
    response = client.post("/bus/log:out", json={"process": {"name": "api"}, "data": "hello"})

    assert response.status_code == 200
    assert response.json()["status"] == "ignored"


def test_custom_event(client, recording_channel) -> None:
    response = client.post(
        "/bus/process:event",
        json={"process": {"name": "api"}, "event": "deploy", "manually": False},
    )

    assert response.status_code == 202
    assert _wait_for(lambda: len(recording_channel.sent) == 1)
    assert recording_channel.sent[0][1] == "*api*\n\n```\ndeploy event occurred```"


def test_unknown_kind_rejected(client) -> None:
    response = client.post("/bus/process:online", json={"process": {"name": "api"}})
    assert response.status_code == 400


def test_payload_without_process_rejected(client) -> None:
    response = client.post("/bus/log:err", json={"data": "orphan"})
    assert response.status_code == 400


def test_non_object_payload_rejected(client) -> None:
    response = client.post("/bus/log:err", json=["not", "an", "object"])
    assert response.status_code == 400


def test_invalid_json_rejected(client) -> None:
    response = client.post(
        "/bus/log:err",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400


def test_pm2_source_parses_process_fields() -> None:
    event = Pm2Source().parse(
        EventKind.KILL,
        {"process": {"name": "PM2", "pm_id": "0", "namespace": "default"}, "msg": "pm2 has been killed"},
    )

    assert event.source_name == "PM2"
    assert event.process.pm_id == 0
    assert event.msg == "pm2 has been killed"
    assert event.manually is False


def test_run_exits_non_zero_without_module_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    settings = Settings(module_config=str(tmp_path / "missing.yaml"))
    monkeypatch.setattr(main, "get_settings", lambda: settings)

    with pytest.raises(SystemExit) as exc_info:
        main.run()

    assert exc_info.value.code == 1


def test_run_serves_with_loaded_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "procrelay.yaml"
    config_path.write_text("telegram_bot_token: 1:A\ntelegram_chat_id: g5\n", encoding="utf-8")
    settings = Settings(module_config=str(config_path), port=6000)
    served = {}

    def fake_uvicorn_run(app, **kwargs) -> None:
        served["app"] = app
        served.update(kwargs)

    monkeypatch.setattr(main, "get_settings", lambda: settings)
    monkeypatch.setattr(main.uvicorn, "run", fake_uvicorn_run)

    assert main.run() == 0
    assert served["port"] == 6000
    assert served["app"].state.module_config.telegram_chat_id == "g5"
