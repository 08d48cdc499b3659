"""API dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends

from mouse_maze.services.maze_workshop import MazeWorkshop, get_maze_workshop

# Type aliases for cleaner route signatures
Workshop = Annotated[MazeWorkshop, Depends(get_maze_workshop)]
