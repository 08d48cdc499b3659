"""Tests for the maze workshop endpoints."""

import logging
import uuid
from unittest.mock import patch

import pytest
from httpx import AsyncClient

from mouse_maze.core import Maze


async def create_maze(client: AsyncClient, **payload) -> dict:
    """Create a maze and return the response body."""
    response = await client.post("/v1/maze", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_maze_from_dimensions(client):
    """Test POST /v1/maze with dimensions builds a border-only maze."""
    data = await create_maze(client, name="Small", row_count=2, column_count=2)

    assert data["name"] == "Small"
    assert data["row_count"] == 2
    assert data["column_count"] == 2
    assert data["finalized"] is False
    assert data["text"] == " _ _\n|   |\n|_ _|"
    assert uuid.UUID(data["id"])


@pytest.mark.asyncio
async def test_create_maze_from_text(client, sample_maze_text):
    """Test POST /v1/maze with text parses the maze."""
    data = await create_maze(client, name="Sample", text=sample_maze_text)

    assert data["row_count"] == 4
    assert data["column_count"] == 4
    assert data["text"] == sample_maze_text


@pytest.mark.asyncio
async def test_create_maze_rejects_bad_input(client):
    """Test POST /v1/maze error responses."""
    # Invalid dimension
    response = await client.post("/v1/maze", json={"row_count": 0, "column_count": 3})
    assert response.status_code == 400
    assert "less than 1" in response.json()["detail"]

    # Malformed text
    response = await client.post("/v1/maze", json={"text": "abc\ndef"})
    assert response.status_code == 400

    # Over the configured maximum
    response = await client.post("/v1/maze", json={"row_count": 1000, "column_count": 2})
    assert response.status_code == 400
    assert "may not exceed" in response.json()["detail"]

    # Neither text nor dimensions
    response = await client.post("/v1/maze", json={"name": "Nothing"})
    assert response.status_code == 422

    # Both text and dimensions
    response = await client.post(
        "/v1/maze",
        json={"text": Maze(1, 1).render(), "row_count": 1, "column_count": 1},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_maze_workshop_full(client, workshop):
    """Test that a full workshop answers 409."""
    for _ in range(workshop.max_mazes):
        await create_maze(client, row_count=1, column_count=1)

    response = await client.post("/v1/maze", json={"row_count": 1, "column_count": 1})
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_list_and_get_mazes(client):
    """Test GET /v1/maze and GET /v1/maze/{id}."""
    first = await create_maze(client, name="First", row_count=1, column_count=2)
    second = await create_maze(client, name="Second", row_count=3, column_count=3)

    response = await client.get("/v1/maze")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert [maze["id"] for maze in data["mazes"]] == [first["id"], second["id"]]
    # Text is not part of the list response
    assert all("text" not in maze for maze in data["mazes"])

    response = await client.get(f"/v1/maze/{second['id']}")
    assert response.status_code == 200
    assert response.json() == second

    response = await client.get(f"/v1/maze/{uuid.uuid4()}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_maze_text(client, sample_maze_text):
    """Test GET /v1/maze/{id}/text returns plain text."""
    created = await create_maze(client, text=sample_maze_text)

    response = await client.get(f"/v1/maze/{created['id']}/text")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == sample_maze_text


@pytest.mark.asyncio
async def test_delete_maze(client):
    """Test DELETE /v1/maze/{id}."""
    created = await create_maze(client, row_count=2, column_count=2)

    response = await client.delete(f"/v1/maze/{created['id']}")
    assert response.status_code == 204

    response = await client.get(f"/v1/maze/{created['id']}")
    assert response.status_code == 404

    response = await client.delete(f"/v1/maze/{created['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_validate_maze(client, sample_maze_text):
    """Test POST /v1/maze/validate."""
    response = await client.post("/v1/maze/validate", json={"text": sample_maze_text})
    assert response.status_code == 200
    assert response.json() == {
        "valid": True,
        "error": None,
        "row_count": 4,
        "column_count": 4,
    }

    response = await client.post("/v1/maze/validate", json={"text": " _ _\n|   |\n|  _|"})
    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is False
    assert "southern border" in data["error"]


@pytest.mark.asyncio
async def test_cell_walls(client):
    """Test reading and setting the walls of a cell."""
    created = await create_maze(client, row_count=3, column_count=3)
    base = f"/v1/maze/{created['id']}/cells"

    response = await client.get(f"{base}/0/0")
    assert response.status_code == 200
    assert response.json() == {"north": True, "east": False, "south": False, "west": True}

    walls = {"north": True, "east": True, "south": True, "west": True}
    response = await client.put(f"{base}/1/1", json=walls)
    assert response.status_code == 200
    data = response.json()
    assert data["applied"] is True
    assert data["result"] == "applied"
    assert data["cell"] == walls

    # The neighbour shares the wall
    response = await client.get(f"{base}/0/1")
    assert response.json()["south"] is True

    # Removing the border is refused, not an error
    response = await client.put(
        f"{base}/0/1",
        json={"north": False, "east": False, "south": True, "west": False},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["applied"] is False
    assert data["result"] == "rejected_border"
    assert data["cell"]["north"] is True

    response = await client.get(f"{base}/3/0")
    assert response.status_code == 400

    response = await client.put(f"{base}/-1/0", json=walls)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_add_and_remove_wall(client):
    """Test the per-direction wall endpoints."""
    created = await create_maze(client, row_count=2, column_count=2)
    maze_id = created["id"]

    response = await client.post(f"/v1/maze/{maze_id}/cells/0/0/walls/east")
    assert response.status_code == 200
    assert response.json()["applied"] is True

    response = await client.get(f"/v1/maze/{maze_id}/text")
    assert response.text == " _ _\n| | |\n|_ _|"

    response = await client.delete(f"/v1/maze/{maze_id}/cells/0/0/walls/east")
    assert response.json()["applied"] is True
    assert response.json()["cell"]["east"] is False

    response = await client.delete(f"/v1/maze/{maze_id}/cells/0/0/walls/west")
    assert response.json() == {
        "applied": False,
        "result": "rejected_border",
        "cell": {"north": True, "east": False, "south": False, "west": True},
    }

    response = await client.post(f"/v1/maze/{maze_id}/cells/0/0/walls/up")
    assert response.status_code == 422

    response = await client.post(f"/v1/maze/{maze_id}/cells/0/5/walls/north")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_finalize_maze(client):
    """Test POST /v1/maze/{id}/finalize locks the maze."""
    created = await create_maze(client, row_count=2, column_count=2)
    maze_id = created["id"]

    response = await client.post(f"/v1/maze/{maze_id}/finalize")
    assert response.status_code == 200
    assert response.json() == {"was_finalized": False}

    response = await client.post(f"/v1/maze/{maze_id}/finalize")
    assert response.json() == {"was_finalized": True}

    response = await client.post(f"/v1/maze/{maze_id}/cells/0/0/walls/east")
    assert response.status_code == 200
    assert response.json()["applied"] is False
    assert response.json()["result"] == "rejected_finalized"

    response = await client.get(f"/v1/maze/{maze_id}")
    assert response.json()["finalized"] is True
    assert response.json()["text"] == created["text"]

    response = await client.post(f"/v1/maze/{uuid.uuid4()}/finalize")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_maze_checks_size_before_building(client):
    """Test that oversized dimensions are refused without allocating a maze."""
    with patch("mouse_maze.api.routes.maze.Maze", wraps=Maze) as maze_class:
        response = await client.post(
            "/v1/maze",
            json={"row_count": 10**6, "column_count": 10**6},
        )

    assert response.status_code == 400
    assert "may not exceed" in response.json()["detail"]
    maze_class.assert_not_called()


@pytest.mark.asyncio
async def test_create_maze_text_over_limit(client):
    """Test that parsed mazes above the size limit are refused."""
    response = await client.post("/v1/maze", json={"text": Maze(1, 65).render()})
    assert response.status_code == 400
    assert "may not exceed" in response.json()["detail"]


@pytest.mark.asyncio
async def test_refused_wall_update_is_logged(client, caplog):
    """Test that a refused wall change is logged with the maze id."""
    created = await create_maze(client, row_count=2, column_count=2)

    with caplog.at_level(logging.INFO, logger="mouse_maze.api.routes.maze"):
        response = await client.delete(f"/v1/maze/{created['id']}/cells/0/0/walls/north")

    assert response.json()["applied"] is False
    assert f"Maze {created['id']}" in caplog.text
    assert "rejected_border" in caplog.text
