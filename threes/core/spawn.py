"""
Spawn selection: where new tiles enter the board after a valid move.
"""

from typing import AbstractSet, Sequence

from numpy import ndarray

from threes.addons.types import Direction, Position
from threes.core.gameboard import empty_cells
from threes.core.seeding import SeededRandom


def spawn_edge_cells(direction: Direction, size: int) -> list[Position]:
    """
    Return the cells of the edge opposite to the swipe, where new tiles enter.

    Parameters
    ----------
    direction : Direction
        Swipe direction.
    size : int
        Board size.

    Returns
    -------
    list[Position]
        Right column for a left swipe, left column for a right swipe, bottom row for an up swipe and
        top row for a down swipe.
    """
    direction = Direction(direction)
    if direction is Direction.LEFT:
        return [Position(row, size - 1) for row in range(size)]
    if direction is Direction.RIGHT:
        return [Position(row, 0) for row in range(size)]
    if direction is Direction.UP:
        return [Position(size - 1, col) for col in range(size)]
    return [Position(0, col) for col in range(size)]


def select_spawn_position(
    grid: ndarray,
    direction: Direction,
    changed_lines: AbstractSet[int],
    rng: SeededRandom,
    spawn_on_changed_line: bool = True,
) -> Position | None:
    """
    Choose the cell hosting the next tile.

    Parameters
    ----------
    grid : ndarray
        Board after the move.
    direction : Direction
        Swipe direction.
    changed_lines : AbstractSet[int]
        Lines that had an event during the move.
    rng : SeededRandom
        Random stream. Exactly one draw is consumed when a cell is found, none otherwise.
    spawn_on_changed_line : bool, optional
        Whether changed lines of the spawn edge are preferred (default is True).

    Returns
    -------
    Position | None
        The chosen cell, or None when the board is full.

    Notes
    -----
    Candidates cascade, each tier only consulted when the previous one is empty:

    1. Empty spawn edge cells on a changed line.
    2. Any empty spawn edge cell.
    3. Any empty cell.
    """
    direction = Direction(direction)
    size = grid.shape[0]
    horizontal = direction.is_horizontal

    empty_edge = [cell for cell in spawn_edge_cells(direction, size) if grid[cell.row, cell.col] == 0]

    if spawn_on_changed_line:
        candidates = [cell for cell in empty_edge if (cell.row if horizontal else cell.col) in changed_lines]
        if candidates:
            return rng.pick(candidates)

    if empty_edge:
        return rng.pick(empty_edge)

    anywhere = empty_cells(grid)
    if anywhere:
        return rng.pick(anywhere)
    return None


def spawn_from_queue(
    grid: ndarray,
    queue: Sequence[int],
    direction: Direction,
    changed_lines: AbstractSet[int],
    rng: SeededRandom,
    count: int,
    spawn_on_changed_line: bool = True,
) -> tuple[list[tuple[Position, int]], int]:
    """
    Place up to ``count`` queued tiles on the board.

    Parameters
    ----------
    grid : ndarray
        Board after the move. **Modified in-place.**
    queue : Sequence[int]
        Pending tiles, front first. Never modified.
    direction : Direction
        Swipe direction.
    changed_lines : AbstractSet[int]
        Lines that had an event during the move.
    rng : SeededRandom
        Random stream, one draw per placed tile.
    count : int
        Maximum number of tiles to place.
    spawn_on_changed_line : bool, optional
        Forwarded to ``select_spawn_position``.

    Returns
    -------
    tuple[list[tuple[Position, int]], int]
        The placed ``(position, value)`` pairs and the number of tiles taken from the queue.
    """
    spawned: list[tuple[Position, int]] = []
    for value in list(queue)[:count]:
        position = select_spawn_position(grid, direction, changed_lines, rng, spawn_on_changed_line)
        if position is None:
            break
        grid[position.row, position.col] = value
        spawned.append((position, int(value)))
    return spawned, len(spawned)
