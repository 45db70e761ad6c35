"""
Move engine: applies one swipe to the board.

Each swipe moves every tile by exactly one cell. A tile slides into an empty neighbour, merges into an
occupied neighbour when the rules allow it and the neighbour has not already absorbed a merge this turn,
and stays put otherwise.
"""

from numpy import ndarray, zeros

from threes.addons.types import DIRECTIONS, Direction, MoveEvent, MoveResult, Position
from threes.core.gameboard import clone_grid
from threes.core.rules import MergeRules
from threes.core.scoring import score_tile
from threes.core.seeding import SeededRandom

# ##>: Orthogonal offsets used by the pop phase.
_NEIGHBOURS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def direction_delta(direction: Direction) -> tuple[int, int]:
    """
    Return the ``(d_row, d_col)`` step of a swipe.

    Parameters
    ----------
    direction : Direction
        Swipe direction.

    Returns
    -------
    tuple[int, int]
        ``(0, -1)`` for left, ``(0, 1)`` for right, ``(-1, 0)`` for up and ``(1, 0)`` for down.
    """
    direction = Direction(direction)
    if direction is Direction.LEFT:
        return 0, -1
    if direction is Direction.RIGHT:
        return 0, 1
    if direction is Direction.UP:
        return -1, 0
    return 1, 0


def processing_order(direction: Direction, line: int, size: int) -> list[Position]:
    """
    Return the cells of one line in the order they are resolved.

    Parameters
    ----------
    direction : Direction
        Swipe direction.
    line : int
        Row index for horizontal swipes, column index for vertical ones.
    size : int
        Board size.

    Returns
    -------
    list[Position]
        Cells of the line, nearest to the leading edge first. The leading edge cell itself is skipped.
    """
    direction = Direction(direction)
    if direction is Direction.LEFT:
        return [Position(line, col) for col in range(1, size)]
    if direction is Direction.RIGHT:
        return [Position(line, col) for col in range(size - 2, -1, -1)]
    if direction is Direction.UP:
        return [Position(row, line) for row in range(1, size)]
    return [Position(row, line) for row in range(size - 2, -1, -1)]


def _in_bounds(row: int, col: int, size: int) -> bool:
    return 0 <= row < size and 0 <= col < size


def apply_move(
    grid: ndarray,
    direction: Direction,
    rules: MergeRules,
    rng: SeededRandom | None = None,
    pop: bool = True,
) -> MoveResult:
    """
    Apply a one-step swipe.

    Parameters
    ----------
    grid : ndarray
        The board. Never modified.
    direction : Direction
        Swipe direction.
    rules : MergeRules
        Merge rule table.
    rng : SeededRandom, optional
        Random stream handed to the rules for merges that pick among several results.
    pop : bool, optional
        Whether merges crossing a tier boundary push their neighbours outward (default is True).

    Returns
    -------
    MoveResult
        The new board, whether anything changed, the changed lines, the events and the split outputs.

    Notes
    -----
    - Lines are resolved front to back so that a vacated cell is immediately available to the tile behind.
    - Each tile is visited once; a tile that slid is never reconsidered in the same move.
    - A cell that absorbed a merge cannot absorb another one during the same move.
    - Pop moves never merge, they only reposition tiles into empty cells.
    """
    direction = Direction(direction)
    size = grid.shape[0]
    board = clone_grid(grid)
    merged = zeros((size, size), dtype=bool)

    d_row, d_col = direction_delta(direction)
    horizontal = direction.is_horizontal

    changed_lines: set[int] = set()
    events: list[MoveEvent] = []
    split_outputs: list[int] = []
    split_score = 0
    boundary_merges: list[Position] = []

    # ##: Slide and merge, line by line.
    for line in range(size):
        for row, col in processing_order(direction, line, size):
            value = int(board[row, col])
            if value == 0:
                continue

            dest_row, dest_col = row + d_row, col + d_col
            dest_value = int(board[dest_row, dest_col])

            if dest_value == 0:
                board[dest_row, dest_col] = value
                board[row, col] = 0
                events.append(MoveEvent('move', Position(dest_row, dest_col), value, source=Position(row, col)))
            elif not merged[dest_row, dest_col] and rules.can_merge(value, dest_value):
                boundary = rules.crosses_boundary(value, dest_value)
                outcome = rules.merge_outcome(value, dest_value, rng)
                result = outcome.outputs[0]

                board[dest_row, dest_col] = result
                board[row, col] = 0
                merged[dest_row, dest_col] = True
                events.append(
                    MoveEvent(
                        'merge',
                        Position(dest_row, dest_col),
                        result,
                        source=Position(row, col),
                        merged_from=(value, dest_value),
                        is_milestone=outcome.is_milestone,
                    )
                )

                # ##>: Split rules queue every output after the first one.
                if len(outcome.outputs) > 1:
                    split_outputs.extend(outcome.outputs[1:])
                    split_score += sum(score_tile(output) for output in outcome.outputs)
                if boundary:
                    boundary_merges.append(Position(dest_row, dest_col))
            else:
                continue

            changed_lines.add(row if horizontal else col)

    # ##: Pop phase around merges that crossed a tier boundary.
    if pop:
        popped = zeros((size, size), dtype=bool)
        for center in boundary_merges:
            for p_row, p_col in _NEIGHBOURS:
                adj_row, adj_col = center.row + p_row, center.col + p_col
                push_row, push_col = adj_row + p_row, adj_col + p_col
                if not (_in_bounds(adj_row, adj_col, size) and _in_bounds(push_row, push_col, size)):
                    continue

                value = int(board[adj_row, adj_col])
                if value == 0 or merged[adj_row, adj_col] or popped[adj_row, adj_col]:
                    continue
                if board[push_row, push_col] != 0:
                    continue

                board[push_row, push_col] = value
                board[adj_row, adj_col] = 0
                popped[push_row, push_col] = True
                changed_lines.add(adj_row if horizontal else adj_col)
                events.append(
                    MoveEvent('move', Position(push_row, push_col), value, source=Position(adj_row, adj_col))
                )

    return MoveResult(
        grid=board,
        changed=bool(events),
        changed_lines=frozenset(changed_lines),
        events=events,
        split_outputs=split_outputs,
        split_score=split_score,
    )


def is_valid_move(grid: ndarray, direction: Direction, rules: MergeRules) -> bool:
    """
    Check whether a swipe would move or merge at least one tile.

    Parameters
    ----------
    grid : ndarray
        The board.
    direction : Direction
        Swipe direction.
    rules : MergeRules
        Merge rule table.

    Returns
    -------
    bool
        True if ``apply_move`` would report a change.

    Notes
    -----
    Only ``can_merge`` is consulted, so no random draw is ever consumed. Since the first tile of a line
    able to move always sees its destination untouched, a move is valid exactly when some tile has an
    empty or mergeable destination on the original board.
    """
    size = grid.shape[0]
    d_row, d_col = direction_delta(direction)
    for line in range(size):
        for row, col in processing_order(direction, line, size):
            value = int(grid[row, col])
            if value == 0:
                continue
            dest_value = int(grid[row + d_row, col + d_col])
            if dest_value == 0 or rules.can_merge(value, dest_value):
                return True
    return False


def legal_actions_mask(grid: ndarray, rules: MergeRules) -> tuple[bool, ...]:
    """Return, for each direction of ``DIRECTIONS``, whether the swipe is valid."""
    return tuple(is_valid_move(grid, direction, rules) for direction in DIRECTIONS)


def legal_actions(grid: ndarray, rules: MergeRules) -> list[Direction]:
    """List the directions that change the board."""
    return [direction for direction in DIRECTIONS if is_valid_move(grid, direction, rules)]


def illegal_actions(grid: ndarray, rules: MergeRules) -> list[Direction]:
    """List the directions that leave the board unchanged."""
    return [direction for direction in DIRECTIONS if not is_valid_move(grid, direction, rules)]


def has_any_valid_move(grid: ndarray, rules: MergeRules) -> bool:
    """True while at least one swipe changes the board."""
    return any(is_valid_move(grid, direction, rules) for direction in DIRECTIONS)
