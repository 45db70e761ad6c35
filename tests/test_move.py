"""
Tests for the one-step move engine.
"""

from unittest import TestCase, main

import numpy as np

from threes.addons.types import Direction, Position
from threes.core.gamemove import (
    apply_move,
    direction_delta,
    has_any_valid_move,
    illegal_actions,
    is_valid_move,
    legal_actions,
    legal_actions_mask,
    processing_order,
)
from threes.core.rules import BreakdownRules, ColorMixRules, SameValueRules
from threes.core.scoring import score_tile
from threes.core.seeding import SeededRandom
from threes.core.tiles import (
    BLUE,
    CYAN,
    CYAN_IDX,
    GREEN,
    MAGENTA,
    ORANGE_IDX,
    RED,
    RED_IDX,
    VIOLET_IDX,
    YELLOW,
    encode_tile,
)

_C, _M, _Y, _R = CYAN, MAGENTA, YELLOW, RED


def checkerboard(first: int, second: int, size: int = 4) -> np.ndarray:
    """Full board alternating two tiles."""
    return np.array([[first if (row + col) % 2 == 0 else second for col in range(size)] for row in range(size)])


class TestDirections(TestCase):
    """Direction helpers."""

    def test_deltas(self):
        """Each swipe steps one cell towards its edge."""
        self.assertEqual(direction_delta(Direction.LEFT), (0, -1))
        self.assertEqual(direction_delta(Direction.RIGHT), (0, 1))
        self.assertEqual(direction_delta('up'), (-1, 0))
        self.assertEqual(direction_delta('down'), (1, 0))

    def test_processing_order(self):
        """Cells nearest to the leading edge come first, the edge itself is skipped."""
        self.assertEqual(processing_order(Direction.LEFT, 2, 4), [Position(2, 1), Position(2, 2), Position(2, 3)])
        self.assertEqual(processing_order(Direction.DOWN, 0, 3), [Position(1, 0), Position(0, 0)])


class TestSlide(TestCase):
    """Tiles move by exactly one cell."""

    def setUp(self):
        self.rules = ColorMixRules()

    def test_single_tile_moves_one_cell(self):
        """A tile in column 2 ends in column 1 after a left swipe, not in column 0."""
        grid = np.array([[0, 0, _Y, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        result = apply_move(grid, Direction.LEFT, self.rules)

        np.testing.assert_array_equal(result.grid[0], [0, _Y, 0, 0])
        self.assertTrue(result.changed)
        self.assertEqual(result.changed_lines, frozenset({0}))

    def test_every_direction(self):
        """A centred tile steps once in each direction."""
        grid = np.zeros((4, 4), dtype=int)
        grid[1, 1] = _C
        expected = {
            Direction.LEFT: (1, 0),
            Direction.RIGHT: (1, 2),
            Direction.UP: (0, 1),
            Direction.DOWN: (2, 1),
        }
        for direction, (row, col) in expected.items():
            result = apply_move(grid, direction, self.rules)
            self.assertEqual(result.grid[row, col], _C, direction)
            self.assertEqual(int(result.grid.sum()), _C, direction)

    def test_tile_on_leading_edge_stays(self):
        """A tile already against the edge cannot move."""
        grid = np.array([[_C, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        result = apply_move(grid, Direction.LEFT, self.rules)

        self.assertFalse(result.changed)
        self.assertEqual(result.events, [])
        np.testing.assert_array_equal(result.grid, grid)

    def test_vacated_cell_is_reused(self):
        """A cell freed by the tile in front is taken by the tile behind."""
        grid = np.array([[0, _C, _C, _C], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        result = apply_move(grid, Direction.LEFT, self.rules)
        np.testing.assert_array_equal(result.grid[0], [_C, _C, _C, 0])

    def test_input_not_modified(self):
        """The engine never mutates its input board."""
        grid = np.array([[0, _C, _M, 0], [0, 0, 0, 0], [0, _Y, 0, 0], [0, 0, 0, 0]])
        before = grid.copy()
        apply_move(grid, Direction.LEFT, self.rules)
        np.testing.assert_array_equal(grid, before)

    def test_changed_lines(self):
        """Rows for horizontal swipes, columns for vertical ones."""
        grid = np.array([[0, _C, 0, 0], [0, 0, 0, 0], [0, _M, 0, 0], [0, 0, 0, 0]])
        self.assertEqual(apply_move(grid, Direction.LEFT, self.rules).changed_lines, frozenset({0, 2}))
        self.assertEqual(apply_move(grid, Direction.DOWN, self.rules).changed_lines, frozenset({1}))

    def test_move_event(self):
        """A slide reports its origin, destination and value."""
        grid = np.array([[0, 0, _Y, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        (event,) = apply_move(grid, Direction.LEFT, self.rules).events

        self.assertEqual(event.kind, 'move')
        self.assertEqual(event.source, Position(0, 2))
        self.assertEqual(event.to, Position(0, 1))
        self.assertEqual(event.value, _Y)
        self.assertEqual(
            event.to_dict(),
            {'type': 'move', 'to': {'row': 0, 'col': 1}, 'value': _Y, 'from': {'row': 0, 'col': 2}},
        )


class TestMerge(TestCase):
    """Merges during a swipe."""

    def test_same_value_merge(self):
        """Two base tiles become one tile with a dot on the edge cell."""
        grid = np.array([[_C, _C, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        result = apply_move(grid, Direction.LEFT, SameValueRules())

        np.testing.assert_array_equal(result.grid[0], [encode_tile(CYAN_IDX, 1), 0, 0, 0])
        (event,) = result.events
        self.assertEqual(event.kind, 'merge')
        self.assertEqual(event.merged_from, (_C, _C))
        self.assertEqual(event.source, Position(0, 1))
        self.assertEqual(event.to, Position(0, 0))

    def test_full_row_of_same_values(self):
        """Only the front pair merges; the tiles behind slide one cell."""
        grid = np.array([[_C, _C, _C, _C], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        result = apply_move(grid, Direction.LEFT, SameValueRules())
        np.testing.assert_array_equal(result.grid[0], [encode_tile(CYAN_IDX, 1), _C, _C, 0])

    def test_colour_mix(self):
        """Cyan moving into Magenta gives Blue."""
        grid = np.array([[_M, _C, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        result = apply_move(grid, Direction.LEFT, ColorMixRules())
        np.testing.assert_array_equal(result.grid[0], [BLUE, 0, 0, 0])

    def test_blocked_pair_does_not_move(self):
        """Same colours cannot mix, so nothing changes."""
        grid = np.array([[_C, _C, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        result = apply_move(grid, Direction.LEFT, ColorMixRules())
        self.assertFalse(result.changed)

    def test_at_most_one_merge_per_target(self):
        """No destination absorbs two merges in a single swipe."""
        rules = ColorMixRules()
        grid = np.array(
            [
                [_C, _M, _Y, _C],
                [_M, _Y, _C, _M],
                [_Y, _C, _M, _Y],
                [_C, _M, _Y, _C],
            ]
        )
        for direction in Direction:
            result = apply_move(grid, direction, rules)
            targets = [event.to for event in result.events if event.kind == 'merge']
            self.assertEqual(len(targets), len(set(targets)), direction)

    def test_breakdown_split(self):
        """Extra outputs are handed back for the queue and scored."""
        violet = encode_tile(VIOLET_IDX, 0)
        grid = np.array([[violet, violet, 0, GREEN], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        result = apply_move(grid, Direction.LEFT, BreakdownRules())

        fused = encode_tile(VIOLET_IDX, 1)
        np.testing.assert_array_equal(result.grid[0], [fused, 0, GREEN, 0])
        self.assertEqual(result.split_outputs, [MAGENTA])
        self.assertEqual(result.split_score, score_tile(fused) + score_tile(MAGENTA))

    def test_promotion_uses_random_stream(self):
        """A chained promotion draws from the stream handed to the engine."""
        last = encode_tile(CYAN_IDX, 2)
        grid = np.array([[last, last, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        rng = SeededRandom(3)
        result = apply_move(grid, Direction.LEFT, SameValueRules(), rng, pop=False)

        self.assertIn(result.grid[0, 0], (BLUE, GREEN))
        self.assertEqual(rng.draws, 1)


class TestPop(TestCase):
    """Neighbours are pushed outward around merges crossing a tier boundary."""

    def setUp(self):
        last_red = encode_tile(RED_IDX, 2)
        # ##>: Two last-level reds merge at (1, 1), Cyan at (2, 1) is blocked by Yellow on its left.
        self.grid = np.array(
            [
                [0, 0, 0, 0],
                [BLUE, last_red, last_red, 0],
                [_Y, _C, 0, 0],
                [0, 0, 0, 0],
            ]
        )
        self.rules = SameValueRules()

    def test_neighbour_pushed(self):
        """The tile below the merge point is pushed one cell further down."""
        result = apply_move(self.grid, Direction.LEFT, self.rules)
        orange = encode_tile(ORANGE_IDX, 0)

        np.testing.assert_array_equal(
            result.grid,
            [
                [0, 0, 0, 0],
                [BLUE, orange, 0, 0],
                [_Y, 0, 0, 0],
                [0, _C, 0, 0],
            ],
        )
        self.assertEqual(result.changed_lines, frozenset({1, 2}))
        self.assertEqual([event.kind for event in result.events], ['merge', 'move'])
        self.assertEqual(result.events[1].source, Position(2, 1))
        self.assertEqual(result.events[1].to, Position(3, 1))

    def test_pop_disabled(self):
        """Without the pop phase only the merge happens."""
        result = apply_move(self.grid, Direction.LEFT, self.rules, pop=False)

        np.testing.assert_array_equal(result.grid[2], [_Y, _C, 0, 0])
        self.assertFalse(result.grid[3].any())
        self.assertEqual(result.changed_lines, frozenset({1}))

    def test_no_pop_without_boundary(self):
        """Ordinary merges leave their neighbours in place."""
        grid = self.grid.copy()
        grid[1, 1] = grid[1, 2] = _M
        result = apply_move(grid, Direction.LEFT, self.rules)
        np.testing.assert_array_equal(result.grid[2], [_Y, _C, 0, 0])


class TestValidity(TestCase):
    """Move validity and game over detection."""

    def test_matches_apply_move(self):
        """A move is valid exactly when applying it changes the board."""
        boards = [
            np.array([[0, 0, _Y, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]),
            np.array([[_C, _C, 0, 0], [_M, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]),
            np.array([[_C, _M, _Y, _C], [_M, _Y, _C, _M], [_Y, _C, _M, _Y], [_C, _M, _Y, 0]]),
            checkerboard(_C, _R),
        ]
        for rules in (ColorMixRules(), SameValueRules(), BreakdownRules()):
            for grid in boards:
                for direction in Direction:
                    expected = apply_move(grid, direction, rules).changed
                    self.assertEqual(is_valid_move(grid, direction, rules), expected)

    def test_stuck_board(self):
        """A full board without mixable neighbours has no valid move."""
        grid = checkerboard(_C, _R)
        rules = ColorMixRules()

        self.assertFalse(has_any_valid_move(grid, rules))
        self.assertEqual(legal_actions(grid, rules), [])
        self.assertEqual(len(illegal_actions(grid, rules)), 4)
        self.assertEqual(legal_actions_mask(grid, rules), (False, False, False, False))

    def test_stuck_board_same_value(self):
        """The same-value variant is stuck on an alternating board."""
        self.assertFalse(has_any_valid_move(checkerboard(_C, _M), SameValueRules()))

    def test_legal_actions(self):
        """A single tile in a corner can only move away from it."""
        grid = np.zeros((4, 4), dtype=int)
        grid[0, 0] = _C
        rules = ColorMixRules()

        self.assertEqual(legal_actions(grid, rules), [Direction.RIGHT, Direction.DOWN])
        self.assertEqual(legal_actions_mask(grid, rules), (False, True, False, True))


if __name__ == '__main__':
    main()
