"""
Board helpers: allocation, cloning, empty cell lookup and reference fixtures.
"""

from numpy import argwhere, array, int64, ndarray, zeros

from threes.addons.types import Direction, Position
from threes.core.tiles import (
    BLUE,
    CYAN,
    GRAY,
    GREEN,
    MAGENTA,
    RED,
    RED_IDX,
    VIOLET_IDX,
    YELLOW,
    encode_tile,
    is_tile,
    tile_display_dots,
    tile_family,
    tile_label,
)

# ##>: Fixture boards, keyed by the merge rules they showcase, with the next tile to show.
_C, _M, _Y, _B, _R, _G = CYAN, MAGENTA, YELLOW, BLUE, RED, GREEN
_R2 = encode_tile(RED_IDX, 2)
_V = encode_tile(VIOLET_IDX, 0)

FIXTURES: dict[str, tuple[tuple[tuple[int, ...], ...], int]] = {
    # ##>: Swipe up mixes C+M (col 0) into Blue and Y+C (col 3) into Green.
    'mix': (
        (
            (_C, _M, 0, _Y),
            (_M, 0, 0, _C),
            (0, 0, 0, 0),
            (0, 0, 0, 0),
        ),
        MAGENTA,
    ),
    # ##>: Swipe left promotes the two red tiles at the last level into a new family.
    'same': (
        (
            (_R2, _R2, 0, _B),
            (_C, 0, 0, _C),
            (0, 0, 0, 0),
            (0, 0, 0, 0),
        ),
        CYAN,
    ),
    # ##>: Swipe left fuses the two violets and breaks down a byproduct.
    'breakdown': (
        (
            (_V, _V, 0, _G),
            (_Y, 0, GRAY, 0),
            (0, 0, 0, 0),
            (0, 0, 0, 0),
        ),
        YELLOW,
    ),
}


def create_grid(size: int) -> ndarray:
    """
    Create an empty square board.

    Parameters
    ----------
    size : int
        Number of rows and columns.

    Returns
    -------
    ndarray
        A ``(size, size)`` array of zeros.
    """
    return zeros((size, size), dtype=int64)


def clone_grid(grid: ndarray) -> ndarray:
    """Return an independent copy of a board."""
    return array(grid, dtype=int64, copy=True)


def empty_cells(grid: ndarray) -> list[Position]:
    """
    List empty cells in row-major order.

    Parameters
    ----------
    grid : ndarray
        The board.

    Returns
    -------
    list[Position]
        Positions of all cells holding ``0``.
    """
    return [Position(int(row), int(col)) for row, col in argwhere(grid == 0)]


def is_full(grid: ndarray) -> bool:
    """True when every cell is occupied."""
    return bool(grid.all())


def edge_cells(size: int, direction: Direction) -> list[Position]:
    """
    List the cells of the board edge a swipe pushes tiles towards.

    Parameters
    ----------
    size : int
        Board size.
    direction : Direction
        Swipe direction.

    Returns
    -------
    list[Position]
        The ``size`` cells of the leading edge, in increasing line order.
    """
    direction = Direction(direction)
    if direction is Direction.LEFT:
        return [Position(row, 0) for row in range(size)]
    if direction is Direction.RIGHT:
        return [Position(row, size - 1) for row in range(size)]
    if direction is Direction.UP:
        return [Position(0, col) for col in range(size)]
    return [Position(size - 1, col) for col in range(size)]


def border_values(grid: ndarray) -> list[int]:
    """Return the non-empty values on any of the four board edges, each cell once."""
    size = grid.shape[0]
    cells = {cell for direction in Direction for cell in edge_cells(size, direction)}
    return [int(grid[cell.row, cell.col]) for cell in sorted(cells) if is_tile(grid[cell.row, cell.col])]


def fixture_grid(name: str = 'mix') -> tuple[ndarray, int]:
    """
    Load a reference board.

    Parameters
    ----------
    name : str
        Fixture name, one of ``'mix'``, ``'same'`` or ``'breakdown'``.

    Returns
    -------
    tuple[ndarray, int]
        A fresh copy of the board and the next tile it is shown with.

    Raises
    ------
    KeyError
        If the fixture does not exist.
    """
    rows, next_tile = FIXTURES[name]
    return array(rows, dtype=int64), next_tile


def grid_to_string(grid: ndarray) -> str:
    """
    Render a board as text, for debugging and test output.

    Empty cells are drawn as ``.``; tiles show their label (or family index) followed by one ``*`` per dot.
    """
    cells = []
    for row in grid.tolist():
        line = []
        for value in row:
            if not is_tile(value):
                line.append(f'{".":^5}')
                continue
            label = tile_label(value) or str(tile_family(value))
            line.append(f'{label + "*" * tile_display_dots(value):^5}')
        cells.append(' '.join(line))
    return '\n'.join(cells)
