from __future__ import annotations

from conftest import drain


def test_health(app) -> None:
    resp = app.test_client().get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"ok": True, "rooms": 0}


def test_create_room_code(app) -> None:
    resp = app.test_client().post("/api/rooms")
    code = resp.get_json()["roomCode"]
    assert len(code) == 6
    # Only a code; nothing is created until someone joins.
    assert app.test_client().get(f"/api/rooms/{code}").status_code == 404


def test_room_snapshot_follows_membership(app, connect) -> None:
    http = app.test_client()
    client = connect()
    ack = client.emit("joinRoom", {"roomCode": "XYZ789", "name": "Ann"}, callback=True)
    drain(client)

    resp = http.get("/api/rooms/xyz789")
    assert resp.status_code == 200
    assert resp.get_json() == {
        "roomCode": "XYZ789",
        "players": [{"id": ack["playerId"], "name": "Ann"}],
        "hostId": ack["playerId"],
        "started": False,
    }
    assert http.get("/api/health").get_json()["rooms"] == 1

    client.emit("leaveRoom", {"roomCode": "XYZ789"}, callback=True)
    assert http.get("/api/rooms/XYZ789").status_code == 404
    assert http.get("/api/health").get_json()["rooms"] == 0


def test_malformed_code(app) -> None:
    resp = app.test_client().get("/api/rooms/abc")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "invalid_room_code"}
