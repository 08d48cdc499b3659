"""Maze routes for building, editing and rendering workshop mazes."""

import logging
import uuid

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import PlainTextResponse, Response
from slowapi import Limiter
from slowapi.util import get_remote_address

from mouse_maze.api.deps import Workshop
from mouse_maze.config import get_settings
from mouse_maze.core import (
    Direction,
    InvalidDimensionError,
    MalformedMazeError,
    Maze,
    OutOfBoundsError,
    WallUpdate,
    parse_maze_text,
)
from mouse_maze.schemas.maze import (
    CellWalls,
    FinalizeResponse,
    MazeCreateRequest,
    MazeDetail,
    MazeListItem,
    MazeListResponse,
    MazeValidateRequest,
    MazeValidateResponse,
    WallUpdateResponse,
)
from mouse_maze.services.maze_workshop import WorkshopEntry, WorkshopFullError

logger = logging.getLogger(__name__)

settings = get_settings()
limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/maze", tags=["Mazes"])


def _list_item(entry: WorkshopEntry) -> MazeListItem:
    return MazeListItem(
        id=entry.id,
        name=entry.name,
        row_count=entry.maze.row_count,
        column_count=entry.maze.column_count,
        finalized=entry.maze.finalized,
        created_at=entry.created_at,
    )


def _detail(entry: WorkshopEntry) -> MazeDetail:
    return MazeDetail(
        **_list_item(entry).model_dump(),
        text=entry.maze.render(),
    )


def _get_entry(workshop: Workshop, maze_id: uuid.UUID) -> WorkshopEntry:
    entry = workshop.get(maze_id)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Maze not found: {maze_id}",
        )
    return entry


def _wall_update_response(
    maze_id: uuid.UUID,
    maze: Maze,
    row: int,
    column: int,
    result: WallUpdate,
) -> WallUpdateResponse:
    if result is WallUpdate.APPLIED:
        logger.debug(f"Maze {maze_id}: updated walls of cell ({row}, {column})")
    else:
        logger.info(f"Maze {maze_id}: wall update at ({row}, {column}) refused ({result.value})")
    return WallUpdateResponse(
        applied=result is WallUpdate.APPLIED,
        result=result,
        cell=CellWalls(**maze.get_cell(row, column).to_dict()),
    )


def _check_dimensions(row_count: int, column_count: int) -> None:
    if max(row_count, column_count) > settings.max_dimension:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Maze dimensions may not exceed {settings.max_dimension}",
        )


def _out_of_bounds(e: OutOfBoundsError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post(
    "",
    response_model=MazeDetail,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(f"{settings.rate_limit_requests}/minute")
async def create_maze(
    request: Request,
    maze_data: MazeCreateRequest,
    workshop: Workshop,
) -> MazeDetail:
    """Create a maze from dimensions or from its ASCII text.

    A maze built from dimensions has walls along its border only.
    """
    try:
        if maze_data.text is not None:
            maze = parse_maze_text(maze_data.text)
        else:
            _check_dimensions(maze_data.row_count, maze_data.column_count)
            maze = Maze(maze_data.row_count, maze_data.column_count)
    except (InvalidDimensionError, MalformedMazeError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    _check_dimensions(maze.row_count, maze.column_count)

    try:
        entry = workshop.add(maze_data.name, maze)
    except WorkshopFullError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return _detail(entry)


@router.get(
    "",
    response_model=MazeListResponse,
)
async def list_mazes(workshop: Workshop) -> MazeListResponse:
    """List all workshop mazes without their text."""
    maze_items = [_list_item(entry) for entry in workshop.entries()]
    return MazeListResponse(mazes=maze_items, total=len(maze_items))


@router.post(
    "/validate",
    response_model=MazeValidateResponse,
)
async def validate_maze(request: MazeValidateRequest) -> MazeValidateResponse:
    """Check maze text without storing it."""
    try:
        maze = parse_maze_text(request.text)
    except MalformedMazeError as e:
        return MazeValidateResponse(valid=False, error=str(e))

    return MazeValidateResponse(
        valid=True,
        row_count=maze.row_count,
        column_count=maze.column_count,
    )


@router.get(
    "/{maze_id}",
    response_model=MazeDetail,
)
async def get_maze(maze_id: uuid.UUID, workshop: Workshop) -> MazeDetail:
    """Get a maze including its ASCII text."""
    return _detail(_get_entry(workshop, maze_id))


@router.get(
    "/{maze_id}/text",
    response_class=PlainTextResponse,
)
async def get_maze_text(maze_id: uuid.UUID, workshop: Workshop) -> PlainTextResponse:
    """Get the maze rendered as plain text."""
    return PlainTextResponse(_get_entry(workshop, maze_id).maze.render())


@router.delete(
    "/{maze_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_maze(maze_id: uuid.UUID, workshop: Workshop) -> Response:
    """Remove a maze from the workshop."""
    if not workshop.remove(maze_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Maze not found: {maze_id}",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{maze_id}/cells/{row}/{column}",
    response_model=CellWalls,
)
async def get_cell(maze_id: uuid.UUID, row: int, column: int, workshop: Workshop) -> CellWalls:
    """Get the four walls of a cell."""
    maze = _get_entry(workshop, maze_id).maze
    try:
        return CellWalls(**maze.get_cell(row, column).to_dict())
    except OutOfBoundsError as e:
        raise _out_of_bounds(e)


@router.put(
    "/{maze_id}/cells/{row}/{column}",
    response_model=WallUpdateResponse,
)
async def set_cell_walls(
    maze_id: uuid.UUID,
    row: int,
    column: int,
    walls: CellWalls,
    workshop: Workshop,
) -> WallUpdateResponse:
    """Set all four walls of a cell.

    A rejected change (finalized maze, or a border wall would be removed) is
    not an error: the response reports applied=false and the reason.
    """
    maze = _get_entry(workshop, maze_id).maze
    try:
        result = maze.apply_cell_walls(row, column, walls.north, walls.east, walls.south, walls.west)
    except OutOfBoundsError as e:
        raise _out_of_bounds(e)

    return _wall_update_response(maze_id, maze, row, column, result)


@router.post(
    "/{maze_id}/cells/{row}/{column}/walls/{direction}",
    response_model=WallUpdateResponse,
)
async def add_wall(
    maze_id: uuid.UUID,
    row: int,
    column: int,
    direction: Direction,
    workshop: Workshop,
) -> WallUpdateResponse:
    """Add a wall to one side of a cell."""
    maze = _get_entry(workshop, maze_id).maze
    try:
        result = maze.add_wall(row, column, direction)
    except OutOfBoundsError as e:
        raise _out_of_bounds(e)

    return _wall_update_response(maze_id, maze, row, column, result)


@router.delete(
    "/{maze_id}/cells/{row}/{column}/walls/{direction}",
    response_model=WallUpdateResponse,
)
async def remove_wall(
    maze_id: uuid.UUID,
    row: int,
    column: int,
    direction: Direction,
    workshop: Workshop,
) -> WallUpdateResponse:
    """Remove a wall from one side of a cell."""
    maze = _get_entry(workshop, maze_id).maze
    try:
        result = maze.remove_wall(row, column, direction)
    except OutOfBoundsError as e:
        raise _out_of_bounds(e)

    return _wall_update_response(maze_id, maze, row, column, result)


@router.post(
    "/{maze_id}/finalize",
    response_model=FinalizeResponse,
)
async def finalize_maze(maze_id: uuid.UUID, workshop: Workshop) -> FinalizeResponse:
    """Lock a maze against further wall changes."""
    entry = _get_entry(workshop, maze_id)
    was_finalized = entry.maze.finalize_maze()
    if not was_finalized:
        logger.info(f"Finalized maze {maze_id}")
    return FinalizeResponse(was_finalized=was_finalized)
