"""Room REST endpoints and the round-end signal."""

from __future__ import annotations

import importlib
from typing import Any

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect


def _new_client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setenv("ROOMCOORD_START_GRACE_SECONDS", "0")
    monkeypatch.setenv("ROOMCOORD_MIN_PLAYERS", "2")

    import roomcoord.main as app_main

    app_main = importlib.reload(app_main)
    return TestClient(app_main.app)


def _receive_until(websocket: Any, event_type: str) -> dict[str, Any]:
    for _ in range(50):
        message = websocket.receive_json()
        if message["type"] == event_type:
            return message
    raise AssertionError(f"no {event_type} message received")


def test_list_rooms_is_empty_without_connections(monkeypatch: pytest.MonkeyPatch) -> None:
    """Contract: GET /api/rooms on a fresh process returns []."""
    with _new_client(monkeypatch) as client:
        response = client.get("/api/rooms")

        assert response.status_code == 200
        assert response.json() == []


def test_unknown_room_detail_is_404(monkeypatch: pytest.MonkeyPatch) -> None:
    """Contract: GET /api/rooms/{id} for a missing room returns ROOM_NOT_FOUND."""
    with _new_client(monkeypatch) as client:
        response = client.get("/api/rooms/nowhere")

        assert response.status_code == 404
        payload = response.json()
        assert payload["code"] == "ROOM_NOT_FOUND"
        assert payload["detail"] == {"room_id": "nowhere"}


def test_invalid_room_id_is_400(monkeypatch: pytest.MonkeyPatch) -> None:
    """Contract: blank or oversized room ids return ROOM_ID_INVALID."""
    with _new_client(monkeypatch) as client:
        blank = client.get("/api/rooms/%20%20")
        oversized = client.post(f"/api/rooms/{'r' * 33}/end")

        assert blank.status_code == 400
        assert blank.json()["code"] == "ROOM_ID_INVALID"
        assert oversized.status_code == 400
        assert oversized.json()["code"] == "ROOM_ID_INVALID"


def test_health_reports_counts(monkeypatch: pytest.MonkeyPatch) -> None:
    """Contract: GET /health returns ok with room and connection counts."""
    with _new_client(monkeypatch) as client:
        with client.websocket_connect("/ws/rooms/alpha") as websocket:
            _receive_until(websocket, "lobbyUpdate")
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "rooms": 1, "connections": 1}


def test_ready_start_and_round_end_cycle(monkeypatch: pytest.MonkeyPatch) -> None:
    """Contract: two ready sockets start a round; POST end returns the room to its lobby."""
    with _new_client(monkeypatch) as client:
        with client.websocket_connect("/ws/rooms/alpha") as ws1:
            init1 = _receive_until(ws1, "init")["payload"]
            with client.websocket_connect("/ws/rooms/alpha") as ws2:
                init2 = _receive_until(ws2, "init")["payload"]
                assert init1["is_host"] is True
                assert init2["is_host"] is False
                assert init1["color"] != init2["color"]

                summary = client.get("/api/rooms").json()
                assert summary == [
                    {
                        "room_id": "alpha",
                        "status": "lobby",
                        "host_id": init1["participant_id"],
                        "player_count": 2,
                        "ready_count": 0,
                    }
                ]

                ws1.send_json({"type": "ready"})
                ws2.send_json({"type": "ready"})
                start = _receive_until(ws1, "gameStart")
                assert start["payload"] == {"room_id": "alpha", "round": 1, "trigger": "auto"}
                assert _receive_until(ws2, "gameStart") == start

                detail = client.get("/api/rooms/alpha").json()
                assert detail["status"] == "playing"
                assert [member["ready"] for member in detail["members"]] == [False, False]

                ended = client.post("/api/rooms/alpha/end")
                assert ended.status_code == 200
                assert ended.json()["status"] == "lobby"
                assert ended.json()["host_id"] == init1["participant_id"]

                end = _receive_until(ws2, "gameEnd")
                assert end["payload"] == {"room_id": "alpha", "reason": "round_over"}

                again = client.post("/api/rooms/alpha/end")
                assert again.status_code == 409
                assert again.json()["code"] == "ROOM_NOT_PLAYING"


def test_host_manual_start_over_websocket(monkeypatch: pytest.MonkeyPatch) -> None:
    """Contract: host startGame starts immediately without readiness."""
    with _new_client(monkeypatch) as client:
        with client.websocket_connect("/ws") as ws1:
            init1 = _receive_until(ws1, "init")["payload"]
            assert init1["room_id"] == "main"
            with client.websocket_connect("/ws") as ws2:
                _receive_until(ws2, "init")

                ws2.send_json({"type": "startGame"})
                error = _receive_until(ws2, "error")
                assert error["payload"]["code"] == "NOT_HOST"

                ws1.send_json({"type": "startGame"})
                start = _receive_until(ws2, "gameStart")
                assert start["payload"]["trigger"] == "manual"


def test_invalid_room_id_websocket_is_closed_4400(monkeypatch: pytest.MonkeyPatch) -> None:
    """Contract: websocket to an invalid room id is closed with 4400."""
    with _new_client(monkeypatch) as client:
        with client.websocket_connect("/ws/rooms/%20") as websocket:
            with pytest.raises(WebSocketDisconnect) as exc_info:
                websocket.receive_json()

        assert exc_info.value.code == 4400


def test_malformed_frames_keep_participant_seated(monkeypatch: pytest.MonkeyPatch) -> None:
    """Contract: binary and deeply nested frames are dropped; the sender stays in the room."""
    with _new_client(monkeypatch) as client:
        with client.websocket_connect("/ws/rooms/r1") as websocket:
            init = _receive_until(websocket, "init")["payload"]
            _receive_until(websocket, "lobbyUpdate")

            websocket.send_bytes(b"\x00\x01")
            websocket.send_text("[" * 200000)
            websocket.send_json({"type": "ready"})
            update = _receive_until(websocket, "lobbyUpdate")["payload"]["room"]

            detail = client.get("/api/rooms/r1")

        assert update["host_id"] == init["participant_id"]
        assert [member["ready"] for member in update["members"]] == [True]
        assert detail.status_code == 200
        assert [member["participant_id"] for member in detail.json()["members"]] == [init["participant_id"]]
