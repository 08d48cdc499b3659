"""
Mouse Maze core model.

A rectangular grid of cells, each holding four wall flags. Walls between
neighbouring cells are stored in both cells and every change goes through
a single paired-update primitive, so the two copies never disagree.

Text Format:
     _ _        northern border row (space, then '_' per column)
    |   |       maze rows: west marker, then per column south + east
    |_ _|
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator

logger = logging.getLogger(__name__)

# The default number of rows and columns of a maze
DEFAULT_DIMENSION = 16

HORIZONTAL_WALL = "_"
VERTICAL_WALL = "|"
EMPTY_WALL = " "
NEWLINE = "\n"


class MazeError(Exception):
    """Base exception for maze errors."""

    pass


class InvalidDimensionError(MazeError, ValueError):
    """Exception raised when a maze is created with fewer than one row or column."""

    pass


class OutOfBoundsError(MazeError, IndexError):
    """Exception raised when a row or column lies outside the maze."""

    pass


class MalformedMazeError(MazeError, ValueError):
    """Exception raised when maze text does not describe a valid maze."""

    pass


class Direction(Enum):
    """Cardinal directions of a cell's walls."""
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def delta(self) -> tuple[int, int]:
        """Get (d_row, d_column) for this direction."""
        deltas = {
            Direction.NORTH: (-1, 0),
            Direction.EAST: (0, 1),
            Direction.SOUTH: (1, 0),
            Direction.WEST: (0, -1),
        }
        return deltas[self]

    @property
    def opposite(self) -> "Direction":
        """Get the direction facing this one."""
        opposites = {
            Direction.NORTH: Direction.SOUTH,
            Direction.EAST: Direction.WEST,
            Direction.SOUTH: Direction.NORTH,
            Direction.WEST: Direction.EAST,
        }
        return opposites[self]


class WallUpdate(Enum):
    """Outcome of a wall mutation."""
    APPLIED = "applied"
    REJECTED_FINALIZED = "rejected_finalized"
    REJECTED_BORDER = "rejected_border"


@dataclass
class Cell:
    """Wall flags of a single maze cell."""
    north: bool = False
    east: bool = False
    south: bool = False
    west: bool = False

    def has_wall(self, direction: Direction) -> bool:
        """Check the wall on the given side."""
        return getattr(self, direction.value)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "north": self.north,
            "east": self.east,
            "south": self.south,
            "west": self.west,
        }


class Maze:
    """
    Micromouse maze with an unbreakable outer border.

    Example usage:
        maze = Maze(4, 4)
        maze.add_eastern_wall_to_cell(0, 1)   # also sets west of (0, 2)
        maze.remove_northern_wall_from_cell(0, 0)   # False, border
        maze.finalize_maze()
        print(maze)
    """

    def __init__(self, row_count: int = DEFAULT_DIMENSION, column_count: int = DEFAULT_DIMENSION):
        """
        Initialize a maze with walls along its border and nowhere else.

        Args:
            row_count: Number of rows, at least 1.
            column_count: Number of columns, at least 1.

        Raises:
            InvalidDimensionError: If either dimension is less than 1.
        """
        for label, value in (("rows", row_count), ("columns", column_count)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidDimensionError(f"The number of {label} must be an integer, got {value!r}")
            if value < 1:
                raise InvalidDimensionError(f"The number of {label} can not be less than 1, got {value}")

        self._row_count = row_count
        self._column_count = column_count
        self._finalized = False
        self._grid: list[list[Cell]] = [
            [
                Cell(
                    north=row == 0,
                    east=column == column_count - 1,
                    south=row == row_count - 1,
                    west=column == 0,
                )
                for column in range(column_count)
            ]
            for row in range(row_count)
        ]

    @classmethod
    def from_text(cls, maze_text: str) -> "Maze":
        """Build a maze from its ASCII representation."""
        from .maze_parser import parse_maze_text

        return parse_maze_text(maze_text)

    @property
    def row_count(self) -> int:
        return self._row_count

    @property
    def column_count(self) -> int:
        return self._column_count

    @property
    def finalized(self) -> bool:
        return self._finalized

    def _check_bounds(self, row: int, column: int) -> None:
        if not 0 <= row < self._row_count:
            raise OutOfBoundsError(
                f"Row {row} does not exist within the bounds of the maze (0-{self._row_count - 1})"
            )
        if not 0 <= column < self._column_count:
            raise OutOfBoundsError(
                f"Column {column} does not exist within the bounds of the maze (0-{self._column_count - 1})"
            )

    def get_cell(self, row: int, column: int) -> Cell:
        """Get a copy of the cell at the given position."""
        self._check_bounds(row, column)
        return replace(self._grid[row][column])

    def has_wall(self, row: int, column: int, direction: Direction) -> bool:
        """Check whether a cell has a wall on the given side."""
        self._check_bounds(row, column)
        return self._grid[row][column].has_wall(direction)

    def has_northern_wall(self, row: int, column: int) -> bool:
        return self.has_wall(row, column, Direction.NORTH)

    def has_eastern_wall(self, row: int, column: int) -> bool:
        return self.has_wall(row, column, Direction.EAST)

    def has_southern_wall(self, row: int, column: int) -> bool:
        return self.has_wall(row, column, Direction.SOUTH)

    def has_western_wall(self, row: int, column: int) -> bool:
        return self.has_wall(row, column, Direction.WEST)

    def apply_cell_walls(
        self,
        row: int,
        column: int,
        north: bool,
        east: bool,
        south: bool,
        west: bool,
    ) -> WallUpdate:
        """
        Set all four walls of a cell, updating the neighbours that share them.

        Args:
            row: Row of the cell.
            column: Column of the cell.
            north, east, south, west: Whether the cell should have each wall.

        Returns:
            WallUpdate.APPLIED if the walls were written. Otherwise the reason
            the maze was left untouched: it is finalized, or the request would
            remove part of the outer border.

        Raises:
            OutOfBoundsError: If the cell is outside the maze.
        """
        self._check_bounds(row, column)

        if self._finalized:
            logger.debug("Rejected wall update at (%d, %d): maze is finalized", row, column)
            return WallUpdate.REJECTED_FINALIZED

        last_row = self._row_count - 1
        last_column = self._column_count - 1
        if (
            (row == 0 and not north)
            or (column == last_column and not east)
            or (row == last_row and not south)
            or (column == 0 and not west)
        ):
            logger.debug("Rejected wall update at (%d, %d): would remove the border", row, column)
            return WallUpdate.REJECTED_BORDER

        walls = {
            Direction.NORTH: north,
            Direction.EAST: east,
            Direction.SOUTH: south,
            Direction.WEST: west,
        }
        cell = self._grid[row][column]
        for direction, present in walls.items():
            setattr(cell, direction.value, present)

            # Mirror the side onto the neighbour that shares it
            d_row, d_column = direction.delta
            neighbour_row, neighbour_column = row + d_row, column + d_column
            if 0 <= neighbour_row <= last_row and 0 <= neighbour_column <= last_column:
                neighbour = self._grid[neighbour_row][neighbour_column]
                setattr(neighbour, direction.opposite.value, present)

        return WallUpdate.APPLIED

    def set_cell_walls(
        self,
        row: int,
        column: int,
        north: bool,
        east: bool,
        south: bool,
        west: bool,
    ) -> bool:
        """
        Set all four walls of a cell.

        Returns:
            True if the walls were written, False if the maze is finalized or
            the change would remove part of the border. Nothing changes on False.

        Raises:
            OutOfBoundsError: If the cell is outside the maze.
        """
        return self.apply_cell_walls(row, column, north, east, south, west) is WallUpdate.APPLIED

    def _update_wall(self, row: int, column: int, direction: Direction, present: bool) -> WallUpdate:
        self._check_bounds(row, column)
        walls = self._grid[row][column].to_dict()
        walls[direction.value] = present
        return self.apply_cell_walls(row, column, **walls)

    def add_wall(self, row: int, column: int, direction: Direction) -> WallUpdate:
        """Add a wall on one side of a cell."""
        return self._update_wall(row, column, direction, True)

    def remove_wall(self, row: int, column: int, direction: Direction) -> WallUpdate:
        """Remove a wall from one side of a cell."""
        return self._update_wall(row, column, direction, False)

    def add_northern_wall_to_cell(self, row: int, column: int) -> bool:
        return self.add_wall(row, column, Direction.NORTH) is WallUpdate.APPLIED

    def add_eastern_wall_to_cell(self, row: int, column: int) -> bool:
        return self.add_wall(row, column, Direction.EAST) is WallUpdate.APPLIED

    def add_southern_wall_to_cell(self, row: int, column: int) -> bool:
        return self.add_wall(row, column, Direction.SOUTH) is WallUpdate.APPLIED

    def add_western_wall_to_cell(self, row: int, column: int) -> bool:
        return self.add_wall(row, column, Direction.WEST) is WallUpdate.APPLIED

    def remove_northern_wall_from_cell(self, row: int, column: int) -> bool:
        return self.remove_wall(row, column, Direction.NORTH) is WallUpdate.APPLIED

    def remove_eastern_wall_from_cell(self, row: int, column: int) -> bool:
        return self.remove_wall(row, column, Direction.EAST) is WallUpdate.APPLIED

    def remove_southern_wall_from_cell(self, row: int, column: int) -> bool:
        return self.remove_wall(row, column, Direction.SOUTH) is WallUpdate.APPLIED

    def remove_western_wall_from_cell(self, row: int, column: int) -> bool:
        return self.remove_wall(row, column, Direction.WEST) is WallUpdate.APPLIED

    def finalize_maze(self) -> bool:
        """
        Lock the maze against further wall changes.

        Returns:
            Whether the maze was already finalized before this call.
        """
        was_finalized = self._finalized
        self._finalized = True
        return was_finalized

    def iter_violations(self) -> Iterator[str]:
        """Yield a description of every broken border or shared wall."""
        last_row = self._row_count - 1
        last_column = self._column_count - 1
        for row, cells in enumerate(self._grid):
            for column, cell in enumerate(cells):
                if row == 0 and not cell.north:
                    yield f"Missing northern border at ({row}, {column})"
                if row == last_row and not cell.south:
                    yield f"Missing southern border at ({row}, {column})"
                if column == 0 and not cell.west:
                    yield f"Missing western border at ({row}, {column})"
                if column == last_column and not cell.east:
                    yield f"Missing eastern border at ({row}, {column})"
                if column < last_column and cell.east != cells[column + 1].west:
                    yield f"Inconsistent wall between ({row}, {column}) and ({row}, {column + 1})"
                if row < last_row and cell.south != self._grid[row + 1][column].north:
                    yield f"Inconsistent wall between ({row}, {column}) and ({row + 1}, {column})"

    def render(self) -> str:
        """
        Generate the ASCII representation of the maze.

        Returns:
            Rows joined by newlines, without a trailing newline.
        """
        lines = []

        # Northern border
        lines.append("".join(
            EMPTY_WALL + (HORIZONTAL_WALL if cell.north else EMPTY_WALL)
            for cell in self._grid[0]
        ))

        for cells in self._grid:
            line = VERTICAL_WALL if cells[0].west else EMPTY_WALL
            for cell in cells:
                line += HORIZONTAL_WALL if cell.south else EMPTY_WALL
                line += VERTICAL_WALL if cell.east else EMPTY_WALL
            lines.append(line)

        return NEWLINE.join(lines)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "row_count": self._row_count,
            "column_count": self._column_count,
            "finalized": self._finalized,
            "text": self.render(),
        }

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"Maze(row_count={self._row_count}, column_count={self._column_count}, "
            f"finalized={self._finalized})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Maze):
            return NotImplemented
        return (
            self._row_count == other._row_count
            and self._column_count == other._column_count
            and self._grid == other._grid
        )
