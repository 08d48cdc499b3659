"""Pytest configuration and fixtures."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from mouse_maze.api.routes.maze import limiter
from mouse_maze.main import app
from mouse_maze.services.maze_workshop import MazeWorkshop, get_maze_workshop


@pytest.fixture
def workshop() -> MazeWorkshop:
    """Create an empty workshop."""
    return MazeWorkshop(max_mazes=8)


@pytest_asyncio.fixture(scope="function")
async def client(workshop) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client backed by the test workshop."""

    app.dependency_overrides[get_maze_workshop] = lambda: workshop
    limiter.reset()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def sample_maze_text() -> str:
    """Sample 4x4 maze with interior walls."""
    return """ _ _ _ _
|_  |   |
|  _|_| |
| |    _|
|_ _|_ _|"""
