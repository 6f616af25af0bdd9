"""Tests of the HTTP layer, with the service running on the mock repository"""

import random
from typing import Generator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from src.api.routes import create_app, get_chess_service
from src.services.chess_service import ChessService, GameLocks
from tests.conftest import MockRepository


@pytest.fixture
def client(mock_repository: MockRepository) -> Generator[TestClient, None, None]:
    app = create_app()
    app.dependency_overrides[get_chess_service] = lambda: ChessService(
        mock_repository, rng=random.Random(0), locks=GameLocks()
    )
    with TestClient(app) as test_client:
        yield test_client


def new_game(client: TestClient, **body: str) -> str:
    response = client.post("/games", json=body)
    assert response.status_code == 201
    return response.json()["game_id"]


def test_create_game(client: TestClient) -> None:
    response = client.post("/games", json={})
    assert response.status_code == 201
    data = response.json()
    assert data["position"] == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
    assert data["turn"] == "white"
    assert data["status"] == "in progress"
    assert data["message"] == "White to move"


def test_create_game_with_invalid_position(client: TestClient) -> None:
    response = client.post("/games", json={"starting_position": "not/a/board"})
    assert response.status_code == 422


def test_get_game(client: TestClient) -> None:
    game_id = new_game(client)
    response = client.get(f"/games/{game_id}")
    assert response.status_code == 200
    assert response.json()["game_id"] == game_id


def test_get_unknown_game(client: TestClient) -> None:
    response = client.get(f"/games/{uuid4()}")
    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


def test_legal_moves(client: TestClient) -> None:
    game_id = new_game(client)
    response = client.get(f"/games/{game_id}/legal-moves/g1")
    assert response.status_code == 200
    assert response.json()["destinations"] == ["f3", "h3"]


def test_legal_moves_of_invalid_square(client: TestClient) -> None:
    game_id = new_game(client)
    response = client.get(f"/games/{game_id}/legal-moves/x9")
    assert response.status_code == 422


def test_make_move(client: TestClient) -> None:
    game_id = new_game(client)
    response = client.post(
        f"/games/{game_id}/moves", params={"from_square": "e2", "to_square": "e4"}
    )
    assert response.status_code == 200
    assert response.json()["turn"] == "black"
    assert response.json()["move_history"] == ["e2e4"]


def test_illegal_move(client: TestClient) -> None:
    game_id = new_game(client)
    response = client.post(
        f"/games/{game_id}/moves", params={"from_square": "e2", "to_square": "e5"}
    )
    assert response.status_code == 409


def test_move_with_promotion(client: TestClient) -> None:
    game_id = new_game(client, starting_position="4k3/P7/8/8/8/8/8/4K3")
    response = client.post(
        f"/games/{game_id}/moves",
        params={"from_square": "a7", "to_square": "a8", "promote_to": "queen"},
    )
    assert response.status_code == 200
    assert response.json()["position"] == "Q3k3/8/8/8/8/8/8/4K3"


def test_ai_move(client: TestClient) -> None:
    game_id = new_game(client, starting_position="4k3/8/8/3q4/8/8/8/3RK3")
    response = client.post(f"/games/{game_id}/ai-move", params={"difficulty": "hard"})
    assert response.status_code == 200
    assert response.json()["move_history"] == ["d1d5"]


def test_ai_move_in_finished_game(client: TestClient) -> None:
    game_id = new_game(client, starting_position="k7/8/1QK5/8/8/8/8/8", turn="black")
    response = client.post(f"/games/{game_id}/ai-move")
    assert response.status_code == 409


def test_reset_game(client: TestClient) -> None:
    game_id = new_game(client)
    client.post(f"/games/{game_id}/moves", params={"from_square": "e2", "to_square": "e4"})
    response = client.post(f"/games/{game_id}/reset")
    assert response.status_code == 200
    assert response.json()["move_history"] == []
    assert response.json()["turn"] == "white"


def test_delete_game(client: TestClient) -> None:
    game_id = new_game(client)
    response = client.delete(f"/games/{game_id}")
    assert response.status_code == 204
    assert client.get(f"/games/{game_id}").status_code == 404


def test_move_on_the_computers_turn(client: TestClient) -> None:
    game_id = new_game(client, ai_color="white", difficulty="easy")
    response = client.post(
        f"/games/{game_id}/moves", params={"from_square": "e2", "to_square": "e4"}
    )
    assert response.status_code == 409
    assert client.post(f"/games/{game_id}/ai-move").status_code == 200
