"""In-memory workshop of editable mazes."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Optional

from mouse_maze.config import get_settings
from mouse_maze.core import Maze, load_all_mazes

logger = logging.getLogger(__name__)


class WorkshopFullError(Exception):
    """Exception raised when the workshop holds its maximum number of mazes."""

    pass


@dataclass
class WorkshopEntry:
    """A maze held by the workshop."""

    id: uuid.UUID
    name: str
    maze: Maze
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class MazeWorkshop:
    """
    Registry of mazes being built or used by a simulation driver.

    Each maze has a single owner: the workshop. Callers address mazes by id
    and every maze operation runs synchronously, so a request's edit is never
    interleaved with another one.
    """

    def __init__(self, max_mazes: int):
        self.max_mazes = max_mazes
        self._entries: dict[uuid.UUID, WorkshopEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, name: str, maze: Maze) -> WorkshopEntry:
        """
        Register a maze under a fresh id.

        Raises:
            WorkshopFullError: If the workshop is at capacity.
        """
        if len(self._entries) >= self.max_mazes:
            raise WorkshopFullError(
                f"Workshop already holds {self.max_mazes} mazes; delete one first"
            )

        entry = WorkshopEntry(id=uuid.uuid4(), name=name, maze=maze)
        self._entries[entry.id] = entry
        logger.info(
            f"Added maze '{name}' ({maze.row_count}x{maze.column_count}) as {entry.id}"
        )
        return entry

    def get(self, maze_id: uuid.UUID) -> Optional[WorkshopEntry]:
        """Get a maze entry by ID."""
        return self._entries.get(maze_id)

    def entries(self) -> list[WorkshopEntry]:
        """List entries, oldest first."""
        return list(self._entries.values())

    def remove(self, maze_id: uuid.UUID) -> bool:
        """Remove a maze. Returns False if it was not registered."""
        if maze_id in self._entries:
            del self._entries[maze_id]
            logger.info(f"Removed maze {maze_id}")
            return True
        return False

    def seed_from_directory(self, mazes_dir: Path) -> int:
        """
        Load every maze file in a directory and finalize it.

        Returns:
            Number of mazes added.
        """
        added = 0
        for name, maze in load_all_mazes(mazes_dir):
            maze.finalize_maze()
            try:
                self.add(name, maze)
            except WorkshopFullError:
                logger.warning(f"Workshop full, skipped remaining mazes from {mazes_dir}")
                break
            added += 1
        return added


@lru_cache
def get_maze_workshop() -> MazeWorkshop:
    """Get the process-wide workshop."""
    return MazeWorkshop(max_mazes=get_settings().max_workshop_mazes)
