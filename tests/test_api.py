"""Tests for the FastAPI tic-tac-toe interface."""

from __future__ import annotations

from fastapi.testclient import TestClient

from tictactoe import ui
from tictactoe.ui import app


client = TestClient(app)
ui.AI_THINK_DELAY = (0.0, 0.0)


def _new_game(**body) -> dict:
    response = client.post("/api/game", json=body)
    assert response.status_code == 200
    return response.json()


def _move(game_id: str, cell_index: int):
    return client.post(f"/api/game/{game_id}/move", json={"cellIndex": cell_index})


def test_create_game_defaults():
    payload = _new_game()
    assert payload["mode"] == "pvp"
    assert payload["difficulty"] == "medium"
    assert payload["currentPlayer"] == "X"
    assert payload["board"] == [""] * 9
    assert payload["moveLog"] == []
    assert payload["scores"] == {"X": 0, "O": 0, "ties": 0}
    assert payload["message"] is None


def test_pvp_game_to_a_win_updates_scores():
    game_id = _new_game(mode="pvp")["id"]
    for index in (0, 3, 1, 4):
        assert _move(game_id, index).status_code == 200

    state = _move(game_id, 2).json()
    assert state["winner"] == "X"
    assert state["winningLine"] == [0, 1, 2]
    assert state["message"] == "Player X wins!"
    assert state["scores"] == {"X": 1, "O": 0, "ties": 0}
    assert state["availableMoves"] == []

    finished = _move(game_id, 8)
    assert finished.status_code == 400


def test_pvc_computer_replies():
    payload = _new_game(mode="pvc", difficulty="hard")
    game_id = payload["id"]

    state = _move(game_id, 0).json()
    assert state["board"][0] == "X"
    assert state["currentPlayer"] == "O"
    assert state["aiPending"] is True

    follow_up = client.get(f"/api/game/{game_id}").json()
    assert follow_up["currentPlayer"] == "X"
    assert follow_up["aiPending"] is False
    assert follow_up["moveLog"][-1]["player"] == "O"
    # Hard replies to a corner opening by taking the centre
    assert follow_up["board"][4] == "O"


def test_invalid_move_rejected():
    game_id = _new_game()["id"]
    assert _move(game_id, 0).status_code == 200

    duplicate = _move(game_id, 0)
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"]


def test_out_of_range_cell_rejected():
    game_id = _new_game()["id"]
    assert _move(game_id, 9).status_code == 422


def test_rejects_unknown_difficulty():
    response = client.post("/api/game", json={"difficulty": "impossible"})
    assert response.status_code == 422


def test_missing_game_returns_404():
    assert client.get("/api/game/missing").status_code == 404


def test_reset_keeps_scores_and_settings():
    game_id = _new_game(mode="pvp", difficulty="easy")["id"]
    for index in (0, 3, 1, 4, 2):
        _move(game_id, index)

    state = client.post(f"/api/game/{game_id}/reset").json()
    assert state["board"] == [""] * 9
    assert state["currentPlayer"] == "X"
    assert state["winner"] is None
    assert state["moveLog"] == []
    assert state["scores"]["X"] == 1
    assert state["difficulty"] == "easy"

    cleared = client.post(f"/api/game/{game_id}/scores/reset").json()
    assert cleared["scores"] == {"X": 0, "O": 0, "ties": 0}


def test_settings_mode_change_starts_new_board():
    game_id = _new_game(mode="pvp")["id"]
    _move(game_id, 4)

    state = client.patch(
        f"/api/game/{game_id}/settings", json={"difficulty": "hard"}
    ).json()
    assert state["difficulty"] == "hard"
    assert state["board"][4] == "X"

    state = client.patch(f"/api/game/{game_id}/settings", json={"mode": "pvc"}).json()
    assert state["mode"] == "pvc"
    assert state["board"] == [""] * 9


def test_tie_message():
    game_id = _new_game(mode="pvp")["id"]
    for index in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        state = _move(game_id, index).json()
    assert state["drawn"] is True
    assert state["message"] == "It's a tie!"
    assert state["scores"]["ties"] == 1


def test_index_serves_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "Tic Tac Toe" in response.text
