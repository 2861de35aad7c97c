"""Tests for the FastAPI tic-tac-toe interface."""

from __future__ import annotations

from fastapi.testclient import TestClient

from tictactoe import ui
from tictactoe.ui import app


client = TestClient(app)
ui.AI_THINK_DELAY = (0.0, 0.0)


def _new_game(mode: str) -> str:
    response = client.post("/api/game", json={"mode": mode})
    assert response.status_code == 200
    return response.json()["id"]


def _move(game_id: str, index: int):
    return client.post(f"/api/game/{game_id}/move", json={"cellIndex": index})


def test_create_game_defaults_to_computer_mode():
    response = client.post("/api/game", json={})
    assert response.status_code == 200
    payload = response.json()
    assert payload["mode"] == "pva"
    assert payload["currentPlayer"] == "X"
    assert payload["board"] == [""] * 9
    assert payload["moveLog"] == []
    assert payload["scores"] == {"X": 0, "O": 0}
    assert payload["status"] == "Turn: Player X"


def test_computer_replies_after_human_move():
    game_id = _new_game("pva")
    state = _move(game_id, 0).json()
    assert state["board"][0] == "X"
    assert state["currentPlayer"] == "O"
    assert state["aiPending"] is True

    final_state = client.get(f"/api/game/{game_id}").json()
    assert final_state["currentPlayer"] == "X"
    assert final_state["aiPending"] is False
    assert final_state["moveLog"][-1] == {"player": "O", "cellIndex": 4}
    assert final_state["board"][4] == "O"


def test_invalid_move_rejected():
    game_id = _new_game("pvp")
    assert _move(game_id, 0).status_code == 200

    duplicate_move = _move(game_id, 0)
    assert duplicate_move.status_code == 400
    assert duplicate_move.json()["detail"]


def test_out_of_range_cell_rejected():
    game_id = _new_game("pvp")
    assert _move(game_id, 9).status_code == 422


def test_rejects_unknown_mode():
    response = client.post("/api/game", json={"mode": "ai-vs-ai"})
    assert response.status_code == 422


def test_missing_game_returns_404():
    assert client.get("/api/game/missing").status_code == 404
    assert _move("missing", 0).status_code == 404


def test_player_vs_player_win_and_play_again():
    game_id = _new_game("pvp")
    for index in (0, 3, 1, 4):
        state = _move(game_id, index).json()
        assert state["aiPending"] is False
    state = _move(game_id, 2).json()
    assert state["winner"] == "X"
    assert state["winningLine"] == [0, 1, 2]
    assert state["status"] == "X Wins! Congrats!!!"
    assert state["scores"] == {"X": 1, "O": 0}
    assert state["availableMoves"] == []

    finished = _move(game_id, 8)
    assert finished.status_code == 400

    reset = client.post(f"/api/game/{game_id}/reset").json()
    assert reset["board"] == [""] * 9
    assert reset["currentPlayer"] == "X"
    assert reset["winner"] is None
    assert reset["moveLog"] == []
    assert reset["scores"] == {"X": 1, "O": 0}


def test_draw_does_not_change_scores():
    game_id = _new_game("pvp")
    for index in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        state = _move(game_id, index).json()
    assert state["drawn"] is True
    assert state["status"] == "Game ends in a Draw"
    assert state["scores"] == {"X": 0, "O": 0}


def test_computer_game_never_scores_for_x():
    game_id = _new_game("pva")
    preferences = (1, 3, 5, 7, 0, 2, 6, 8)
    state = client.get(f"/api/game/{game_id}").json()
    while not (state["winner"] or state["drawn"]):
        index = next(i for i in preferences if state["board"][i] == "")
        _move(game_id, index)
        state = client.get(f"/api/game/{game_id}").json()

    assert state["winner"] != "X"
    assert state["scores"]["X"] == 0
    assert state["scores"]["O"] == (1 if state["winner"] == "O" else 0)


def test_index_serves_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "Tic-Tac-Toe" in response.text


def test_new_game_discards_replaced_session():
    old_id = _new_game("pvp")
    response = client.post("/api/game", json={"mode": "pva", "previousId": old_id})
    assert response.status_code == 200
    new_id = response.json()["id"]

    assert old_id not in ui.SESSIONS
    assert new_id in ui.SESSIONS
    assert client.get(f"/api/game/{old_id}").status_code == 404


def test_new_game_ignores_unknown_previous_id():
    response = client.post("/api/game", json={"mode": "pvp", "previousId": "missing"})
    assert response.status_code == 200


def test_page_blanks_turn_line_when_game_ends():
    page = client.get("/").text
    assert "const finished = gameState.winner || gameState.drawn;" in page
    assert "turnEl.textContent = finished ? '' :" in page
