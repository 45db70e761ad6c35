"""
Scoring of tiles and boards, with optional per-cell multipliers.
"""

from typing import Iterable

from numpy import int64, ndarray, zeros

from threes.addons.types import MoveEvent
from threes.core.tiles import is_tile, tile_level, tile_tier

# ##>: Highest multiplier a cell can carry.
MAX_MULTIPLIER = 3


def score_tile(value: int) -> int:
    """
    Score a single tile.

    Parameters
    ----------
    value : int
        A cell value.

    Returns
    -------
    int
        ``3 ** (tier + level + 1)``, or 0 for an empty or invalid cell.

    Notes
    -----
    Strictly increasing in both tier and level. A base tile without dots scores 3.
    """
    if not is_tile(value):
        return 0
    tier = tile_tier(value)
    if tier < 0:
        return 0
    return 3 ** (tier + tile_level(value) + 1)


def score_grid(grid: ndarray) -> int:
    """Sum the score of every tile on the board."""
    return sum(score_tile(value) for value in grid.ravel().tolist())


def score_grid_with_multipliers(grid: ndarray, multipliers: ndarray) -> int:
    """
    Score a board where each cell's score is scaled by ``2 ** multiplier``.

    Parameters
    ----------
    grid : ndarray
        The board.
    multipliers : ndarray
        Parallel grid of multipliers, same shape as ``grid``.

    Returns
    -------
    int
        Scaled total. Equals ``score_grid(grid)`` when all multipliers are zero.
    """
    return sum(
        score_tile(value) * 2**multiplier
        for value, multiplier in zip(grid.ravel().tolist(), multipliers.ravel().tolist())
    )


def track_multipliers(previous: ndarray, events: Iterable[MoveEvent]) -> ndarray:
    """
    Rebuild the multiplier grid from a move's event log.

    Parameters
    ----------
    previous : ndarray
        Multipliers before the move. Never modified.
    events : Iterable[MoveEvent]
        Events of the move, in order.

    Returns
    -------
    ndarray
        Multipliers after the move.

    Notes
    -----
    - A moving tile carries its multiplier.
    - A merge keeps the highest multiplier of the two tiles plus one, capped at ``MAX_MULTIPLIER``.
    - A cell gains at most one level per event log. Further merges into it, as in a catalyst mix, only
      keep the highest multiplier.
    - A spawned tile starts at zero.
    - Replaying events in order keeps the multipliers in step with the tiles.
    """
    multipliers = previous.copy()
    merged: set[tuple[int, int]] = set()
    for event in events:
        target = (event.to.row, event.to.col)
        if event.kind == 'spawn':
            multipliers[target] = 0
            continue

        source = (event.source.row, event.source.col)
        carried = int(multipliers[source])
        multipliers[source] = 0
        if event.kind == 'merge' and target in merged:
            multipliers[target] = max(int(multipliers[target]), min(carried + 1, MAX_MULTIPLIER))
        elif event.kind == 'merge':
            multipliers[target] = min(max(carried, int(multipliers[target])) + 1, MAX_MULTIPLIER)
            merged.add(target)
        else:
            multipliers[target] = carried
    return multipliers


def empty_multipliers(size: int) -> ndarray:
    """Create an all-zero multiplier grid."""
    return zeros((size, size), dtype=int64)
