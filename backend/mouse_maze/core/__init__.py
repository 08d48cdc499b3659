# Core module
from .maze import (
    DEFAULT_DIMENSION,
    Cell,
    Direction,
    InvalidDimensionError,
    MalformedMazeError,
    Maze,
    MazeError,
    OutOfBoundsError,
    WallUpdate,
)
from .maze_parser import (
    parse_maze_text,
    load_maze_file,
    load_all_mazes,
    validate_maze_text,
)

__all__ = [
    "DEFAULT_DIMENSION",
    "Cell",
    "Direction",
    "InvalidDimensionError",
    "MalformedMazeError",
    "Maze",
    "MazeError",
    "OutOfBoundsError",
    "WallUpdate",
    "parse_maze_text",
    "load_maze_file",
    "load_all_mazes",
    "validate_maze_text",
]
