"""
Maze Parser for Mouse Maze.

Builds mazes from their ASCII representation and loads maze files from the
filesystem.

Maze Format:
    _ = Horizontal wall (north border row, or south wall of a cell)
    | = Vertical wall (west border, or east wall of a cell)
      = No wall

    The first row is the northern border: a space then '_' per column.
    Every following row starts with the western border, then holds two
    characters per column: the cell's southern wall and its eastern wall.
"""

import logging
from pathlib import Path
from typing import Optional

from .maze import (
    EMPTY_WALL,
    HORIZONTAL_WALL,
    NEWLINE,
    VERTICAL_WALL,
    MalformedMazeError,
    Maze,
)

logger = logging.getLogger(__name__)

VALID_CHARS = {HORIZONTAL_WALL, VERTICAL_WALL, EMPTY_WALL}


def _split_rows(maze_text: str) -> list[str]:
    """Split maze text into trimmed rows, restoring the northern row's leading space."""
    rows = [row.strip() for row in maze_text.strip().split(NEWLINE)]
    rows[0] = EMPTY_WALL + rows[0]
    return rows


def _check_northern_border(border: str, column_count: int) -> None:
    if len(border) != column_count * 2:
        raise MalformedMazeError(
            f"The northern border row has {len(border) - 1} characters, "
            f"which does not describe a whole number of columns"
        )
    for column in range(column_count):
        if border[column * 2] != EMPTY_WALL:
            raise MalformedMazeError(
                f"Invalid character '{border[column * 2]}' in the northern border "
                f"before column {column}"
            )
        if border[column * 2 + 1] != HORIZONTAL_WALL:
            raise MalformedMazeError(
                f"The maze has an invalid northern border at row 0, column {column}"
            )


def _check_row(line: str, row: int, row_count: int, column_count: int) -> None:
    if line[0] != VERTICAL_WALL:
        raise MalformedMazeError(
            f"The maze has an invalid western border at row {row}, column 0"
        )
    if line[column_count * 2] != VERTICAL_WALL:
        raise MalformedMazeError(
            f"The maze has an invalid eastern border at row {row}, column {column_count - 1}"
        )
    if row == row_count - 1:
        for column in range(column_count):
            if line[column * 2 + 1] != HORIZONTAL_WALL:
                raise MalformedMazeError(
                    f"The maze has an invalid southern border at row {row}, column {column}"
                )

    for offset, char in enumerate(line):
        if char not in VALID_CHARS:
            raise MalformedMazeError(
                f"Invalid character '{char}' in row {row} at offset {offset}. "
                f"Valid characters: '{HORIZONTAL_WALL}', '{VERTICAL_WALL}' and space"
            )
        # Vertical walls sit on even offsets, horizontal walls on odd ones
        if char == VERTICAL_WALL and offset % 2 == 1:
            raise MalformedMazeError(
                f"Misplaced vertical wall in row {row} at offset {offset}"
            )
        if char == HORIZONTAL_WALL and offset % 2 == 0:
            raise MalformedMazeError(
                f"Misplaced horizontal wall in row {row} at offset {offset}"
            )


def parse_maze_text(maze_text: str) -> Maze:
    """
    Parse maze text into a Maze.

    Args:
        maze_text: Multi-line string in the ASCII maze format.

    Returns:
        A new, unfinalized Maze holding the walls described by the text.

    Raises:
        MalformedMazeError: If the text does not describe a valid maze.
    """
    if not maze_text or not maze_text.strip():
        raise MalformedMazeError("Maze text is empty")

    rows = _split_rows(maze_text)
    row_count = len(rows) - 1
    if row_count < 1:
        raise MalformedMazeError("Maze must have at least one row below the northern border")

    column_count = (len(rows[0]) + 1) // 2
    row_width = column_count * 2 + 1
    for row, line in enumerate(rows[1:]):
        if len(line) != row_width:
            raise MalformedMazeError(
                f"Row {row} has a different number of columns than the northern border "
                f"(expected {row_width} characters, got {len(line)})"
            )

    _check_northern_border(rows[0], column_count)
    for row, line in enumerate(rows[1:]):
        _check_row(line, row, row_count, column_count)

    maze = Maze(row_count, column_count)
    for row, line in enumerate(rows[1:]):
        for column in range(column_count):
            if line[column * 2 + 2] == VERTICAL_WALL:
                maze.add_eastern_wall_to_cell(row, column)
            if line[column * 2 + 1] == HORIZONTAL_WALL:
                maze.add_southern_wall_to_cell(row, column)

    return maze


def load_maze_file(file_path: Path | str) -> Maze:
    """
    Load and parse a maze file from the filesystem.

    Args:
        file_path: Path to the maze file.

    Returns:
        The parsed Maze.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        MalformedMazeError: If the path is not a file or the maze cannot be parsed.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Maze file not found: {file_path}")

    if not file_path.is_file():
        raise MalformedMazeError(f"Path is not a file: {file_path}")

    try:
        maze_text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedMazeError(f"Failed to read maze file: {e}") from e

    return parse_maze_text(maze_text)


def maze_name_from_path(file_path: Path) -> str:
    """Derive a display name from a maze file name."""
    return file_path.stem.replace("_", " ").replace("-", " ").title()


def load_all_mazes(mazes_dir: Path | str) -> list[tuple[str, Maze]]:
    """
    Load all maze files from a directory.

    Args:
        mazes_dir: Path to the directory containing *.txt maze files.

    Returns:
        List of (name, maze) pairs, sorted by file name. Files that fail to
        parse are logged and skipped.

    Raises:
        FileNotFoundError: If the directory doesn't exist.
        MalformedMazeError: If the path is not a directory.
    """
    mazes_dir = Path(mazes_dir)

    if not mazes_dir.exists():
        raise FileNotFoundError(f"Mazes directory not found: {mazes_dir}")

    if not mazes_dir.is_dir():
        raise MalformedMazeError(f"Path is not a directory: {mazes_dir}")

    mazes = []
    for maze_file in sorted(mazes_dir.glob("*.txt")):
        try:
            maze = load_maze_file(maze_file)
        except MalformedMazeError as e:
            logger.warning(f"Failed to load {maze_file}: {e}")
            continue
        mazes.append((maze_name_from_path(maze_file), maze))

    return mazes


def validate_maze_text(maze_text: str) -> tuple[bool, Optional[str]]:
    """
    Validate maze text without raising exceptions.

    Args:
        maze_text: Multi-line string in the ASCII maze format.

    Returns:
        Tuple of (is_valid, error_message).
        error_message is None if valid.
    """
    try:
        parse_maze_text(maze_text)
        return True, None
    except MalformedMazeError as e:
        return False, str(e)
