import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from server.app import create_app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def client():
    with TestClient(create_app(TEST_DATABASE_URL)) as c:
        yield c


def _create_room(client: TestClient, name: str = "Table") -> dict:
    resp = client.post("/api/rooms", json={"name": name})
    assert resp.status_code == 201, resp.text
    return resp.json()


def _join(client: TestClient, code: str, name: str) -> dict:
    resp = client.post("/api/rooms/join", json={"invite_code": code, "player_name": name})
    assert resp.status_code == 200, resp.text
    return resp.json()


def _started_room(client: TestClient):
    room = _create_room(client)
    alice = _join(client, room["invite_code"], "Alice")
    bob = _join(client, room["invite_code"], "Bob")
    resp = client.post(f"/api/rooms/{room['room_id']}/start")
    assert resp.status_code == 200, resp.text
    return room["room_id"], alice["player_id"], bob["player_id"]


def test_create_and_join_room(client):
    room = _create_room(client, "Friday")
    assert len(room["invite_code"]) == 6

    joined = _join(client, room["invite_code"].lower(), "Alice")
    assert joined["room_id"] == room["room_id"]
    assert joined["turn_order"] == 0

    info = client.get(f"/api/rooms/{room['room_id']}").json()
    assert info["name"] == "Friday"
    assert info["status"] == "waiting"
    assert [p["name"] for p in info["players"]] == ["Alice"]


def test_start_and_state(client):
    room_id, alice, _ = _started_room(client)

    state = client.get(f"/api/games/{room_id}/state")
    assert state.status_code == 200
    data = state.json()
    assert data["phase"] == "rolling"
    assert data["room_status"] == "playing"
    assert data["current_player_id"] == alice
    assert data["prices"] == {s: 100 for s in ["gold", "silver", "bonds", "oil", "industrials", "grain"]}
    assert len(data["players"]) == 2


def test_full_turn(client):
    room_id, alice, bob = _started_room(client)

    roll = client.post(f"/api/games/{room_id}/roll-dice", json={"player_id": alice})
    assert roll.status_code == 200, roll.text
    assert roll.json()["dice"]["stock"] in {"gold", "silver", "bonds", "oil", "industrials", "grain"}

    buy = client.post(
        f"/api/games/{room_id}/buy-stock",
        json={"player_id": bob, "stock_type": "gold", "shares": 500},
    )
    assert buy.status_code == 200, buy.text
    assert buy.json()["shares_after"] == 500

    sell = client.post(
        f"/api/games/{room_id}/sell-stock",
        json={"player_id": bob, "stock_type": "gold", "shares": 500},
    )
    assert sell.status_code == 200, sell.text
    assert sell.json()["shares_after"] == 0

    end = client.post(f"/api/games/{room_id}/end-turn")
    assert end.status_code == 200
    assert end.json() == {"turn": 1, "current_player_id": bob, "phase": "rolling"}

    txs = client.get(f"/api/games/{room_id}/transactions").json()["transactions"]
    assert [t["action"] for t in txs] == ["sell", "buy"]

    rolls = client.get(f"/api/games/{room_id}/dice-rolls").json()["rolls"]
    assert len(rolls) == 1
    assert rolls[0]["player_id"] == alice


def test_error_mapping(client):
    room_id, alice, bob = _started_room(client)

    resp = client.post("/api/rooms/join", json={"invite_code": "ZZZZZ9", "player_name": "X"})
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "ROOM_NOT_FOUND"
    assert resp.json()["detail"]["kind"] == "NOT_FOUND"

    resp = client.post(f"/api/games/{room_id}/roll-dice", json={"player_id": bob})
    assert resp.status_code == 403
    assert resp.json()["detail"]["code"] == "NOT_YOUR_TURN"

    resp = client.post(
        f"/api/games/{room_id}/buy-stock",
        json={"player_id": alice, "stock_type": "gold", "shares": 500},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "WRONG_PHASE"

    client.post(f"/api/games/{room_id}/roll-dice", json={"player_id": alice})
    resp = client.post(
        f"/api/games/{room_id}/buy-stock",
        json={"player_id": alice, "stock_type": "gold", "shares": 700},
    )
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["code"] == "INVALID_TRANSACTION"
    assert detail["reason"] == "INVALID_LOT"

    resp = client.get("/api/games/not-a-room/state")
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "GAME_NOT_FOUND"


def test_websocket_streams_snapshots_and_presence(client):
    room_id, alice, _ = _started_room(client)

    with client.websocket_connect(f"/ws/rooms/{room_id}?player_id={alice}") as ws:
        first = ws.receive_json()
        assert first["type"] == "snapshot"
        assert first["room_id"] == room_id

        second = ws.receive_json()
        assert second["type"] == "snapshot"
        players = {p["player_id"]: p for p in second["snapshot"]["players"]}
        assert players[alice]["is_connected"] is True


def test_websocket_unknown_room(client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws/rooms/not-a-room") as ws:
            ws.receive_json()
    assert exc.value.code == 4404
