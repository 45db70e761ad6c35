"""
Catalyst mix: a Gray tile consumes two neighbouring primaries and turns into their mix.

This is the only board mutation outside the swipe mechanic. It does not count as a turn.
"""

from types import MappingProxyType

from numpy import ndarray

from threes.addons.types import MoveEvent, Position
from threes.core.gameboard import clone_grid
from threes.core.tiles import (
    BLUE_IDX,
    CHARTREUSE_IDX,
    GRAY_IDX,
    GREEN_IDX,
    PRIMARY_FAMILIES,
    RED_IDX,
    TURQUOISE_IDX,
    VIOLET_IDX,
    encode_tile,
    tile_family,
    tile_level,
)

CATALYST_MIXES = MappingProxyType(
    {
        frozenset((RED_IDX, BLUE_IDX)): VIOLET_IDX,
        frozenset((BLUE_IDX, GREEN_IDX)): TURQUOISE_IDX,
        frozenset((GREEN_IDX, RED_IDX)): CHARTREUSE_IDX,
    }
)


def adjacent_positions(position: Position, size: int) -> list[Position]:
    """Return the orthogonal neighbours of a cell that lie on the board."""
    row, col = position
    candidates = ((row - 1, col), (row + 1, col), (row, col - 1), (row, col + 1))
    return [Position(r, c) for r, c in candidates if 0 <= r < size and 0 <= c < size]


def catalyst_mix_family(first: int, second: int) -> int:
    """Return the family produced by mixing two families, or ``-1`` if they do not mix."""
    if first not in PRIMARY_FAMILIES or second not in PRIMARY_FAMILIES:
        return -1
    return CATALYST_MIXES.get(frozenset((first, second)), -1)


def _is_gray(grid: ndarray, position: Position) -> bool:
    return tile_family(grid[position.row, position.col]) == GRAY_IDX


def catalyst_targets(grid: ndarray, gray: Position) -> list[Position]:
    """
    List the neighbours of a Gray tile that can take part in a mix.

    Parameters
    ----------
    grid : ndarray
        The board.
    gray : Position
        Position of the Gray tile.

    Returns
    -------
    list[Position]
        Neighbouring primaries having at least one other neighbouring primary to mix with.
    """
    gray = Position(*gray)
    if not _is_gray(grid, gray):
        return []

    neighbours = adjacent_positions(gray, grid.shape[0])
    families = {cell: tile_family(grid[cell.row, cell.col]) for cell in neighbours}
    return [
        cell
        for cell in neighbours
        if any(other != cell and catalyst_mix_family(families[cell], families[other]) >= 0 for other in neighbours)
    ]


def can_catalyst_mix(grid: ndarray, gray: Position, first: Position, second: Position) -> bool:
    """
    Check a catalyst mix.

    Parameters
    ----------
    grid : ndarray
        The board.
    gray : Position
        Position of the Gray tile sacrificed by the mix.
    first, second : Position
        The two tiles to mix, distinct orthogonal neighbours of ``gray``.

    Returns
    -------
    bool
        True if the mix is allowed.
    """
    gray, first, second = Position(*gray), Position(*first), Position(*second)
    size = grid.shape[0]
    if not (0 <= gray.row < size and 0 <= gray.col < size) or not _is_gray(grid, gray):
        return False

    neighbours = adjacent_positions(gray, size)
    if first == second or first not in neighbours or second not in neighbours:
        return False

    mixed = catalyst_mix_family(tile_family(grid[first.row, first.col]), tile_family(grid[second.row, second.col]))
    return mixed >= 0


def apply_catalyst_mix(
    grid: ndarray, gray: Position, first: Position, second: Position
) -> tuple[ndarray, int, list[MoveEvent]] | None:
    """
    Apply a catalyst mix.

    Parameters
    ----------
    grid : ndarray
        The board. Never modified.
    gray : Position
        Position of the Gray tile.
    first, second : Position
        The two tiles to mix.

    Returns
    -------
    tuple[ndarray, int, list[MoveEvent]] | None
        The new board, the produced value and the merge events, or None if the mix is not allowed.

    Notes
    -----
    The produced tile replaces the Gray one and carries the highest level of the two sources. Both
    sources are cleared. One merge event is emitted per source so renderers can animate both; each names
    the two mixed tiles in ``merged_from``. The mix still counts as a single merge for the multipliers.
    """
    if not can_catalyst_mix(grid, gray, first, second):
        return None

    gray, first, second = Position(*gray), Position(*first), Position(*second)
    first_value = int(grid[first.row, first.col])
    second_value = int(grid[second.row, second.col])

    family = catalyst_mix_family(tile_family(first_value), tile_family(second_value))
    result = encode_tile(family, max(tile_level(first_value), tile_level(second_value)))

    board = clone_grid(grid)
    board[first.row, first.col] = 0
    board[second.row, second.col] = 0
    board[gray.row, gray.col] = result

    events = [
        MoveEvent('merge', gray, result, source=first, merged_from=(first_value, second_value)),
        MoveEvent('merge', gray, result, source=second, merged_from=(first_value, second_value)),
    ]
    return board, result, events


def has_valid_catalyst_mix(grid: ndarray) -> bool:
    """True if some Gray tile on the board can perform a mix."""
    size = grid.shape[0]
    for row in range(size):
        for col in range(size):
            if catalyst_targets(grid, Position(row, col)):
                return True
    return False
