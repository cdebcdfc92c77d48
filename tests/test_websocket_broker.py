from __future__ import annotations

from fastapi.testclient import TestClient


def test_healthcheck_and_info(client: TestClient) -> None:
    assert client.get("/healthcheck").json() == {"status": "ok"}
    info = client.get("/info").json()
    assert info["name"] == "ws-broker"
    assert {"start", "move", "connections", "broker", "stock_price", "watchlist"} <= set(info["topics"])


def test_connect_announces_and_welcomes(client: TestClient) -> None:
    with client.websocket_connect("/ws") as ws:
        assert ws.receive_text() == "[broker][client_added,Client-1]"
        assert ws.receive_text() == "[broker_id][Client-1]"

        assert client.get("/connections").json() == {"connections": ["Client-1"]}


def test_new_peer_is_announced_to_existing_peers(client: TestClient) -> None:
    with client.websocket_connect("/ws") as first:
        first.receive_text()
        first.receive_text()

        with client.websocket_connect("/ws") as second:
            assert second.receive_text() == "[broker][client_added,Client-2]"
            assert second.receive_text() == "[broker_id][Client-2]"
            assert first.receive_text() == "[broker][client_added,Client-2]"
            assert client.get("/connections").json() == {"connections": ["Client-1", "Client-2"]}

        assert client.get("/connections").json() == {"connections": ["Client-1"]}


def test_game_round_trip_over_websocket(client: TestClient) -> None:
    with client.websocket_connect("/ws") as ws:
        ws.receive_text()
        ws.receive_text()

        ws.send_text("[start][g1]")
        # Broadcast lands before the direct reply.
        assert ws.receive_text() == "[update][g1,-,-,-,-,-,-,-,-,-,X,?,1]"
        assert ws.receive_text() == "[start][-,-,-,-,-,-,-,-,-,X,?,1]"

        ws.send_text("[move][g1,X5]")
        assert ws.receive_text() == "[update][g1,-,-,-,-,X,-,-,-,-,O,?,1]"
        assert ws.receive_text() == "[move][-,-,-,-,X,-,-,-,-,O,?,1]"

    snap = client.get("/games/g1").json()
    assert snap["board"][4] == "X"
    assert snap["current_player"] == "O"
    assert snap["status"] == 1
    assert snap["state"] == "-,-,-,-,X,-,-,-,-,O,?,1"


def test_errors_are_reported_and_session_survives(client: TestClient) -> None:
    with client.websocket_connect("/ws") as ws:
        ws.receive_text()
        ws.receive_text()

        ws.send_text("hello")
        assert ws.receive_text() == "unexpected message format: hello"

        ws.send_text("[unknown_topic][x]")
        assert ws.receive_text() == "topic not accepted: unknown_topic"

        ws.send_text("[move][ghost,X1]")
        assert ws.receive_text() == "error handling move: game not found: ghost"

        ws.send_text("[broker][still here]")
        assert ws.receive_text() == "[broker][hi from broker handler. you gave me: still here]"


def test_game_updates_reach_other_peers(client: TestClient) -> None:
    with client.websocket_connect("/ws") as player, client.websocket_connect("/ws") as watcher:
        for _ in range(3):
            player.receive_text()
        watcher.receive_text()
        watcher.receive_text()

        player.send_text("[start][g2]")
        assert player.receive_text() == "[update][g2,-,-,-,-,-,-,-,-,-,X,?,1]"
        assert player.receive_text() == "[start][-,-,-,-,-,-,-,-,-,X,?,1]"
        assert watcher.receive_text() == "[update][g2,-,-,-,-,-,-,-,-,-,X,?,1]"


def test_unknown_game_snapshot_is_404(client: TestClient) -> None:
    assert client.get("/games/missing").status_code == 404


def test_binary_frames_are_dispatched_and_session_survives(client: TestClient) -> None:
    with client.websocket_connect("/ws") as ws:
        ws.receive_text()
        ws.receive_text()

        ws.send_bytes(b"[broker][bin]")
        assert ws.receive_text() == "[broker][hi from broker handler. you gave me: bin]"
        assert client.get("/connections").json() == {"connections": ["Client-1"]}

        ws.send_text("[broker][still here]")
        assert ws.receive_text() == "[broker][hi from broker handler. you gave me: still here]"
