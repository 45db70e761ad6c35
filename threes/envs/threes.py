"""Colour-mixing sliding-tile game: the state machine owning the board, the queue and the random stream."""

import logging
from dataclasses import replace
from typing import Any, Mapping

from numpy import ndarray

from threes.addons.types import Direction, GameStatus, MoveEvent, Position
from threes.core.catalyst import apply_catalyst_mix, has_valid_catalyst_mix
from threes.core.gameboard import clone_grid, create_grid, empty_cells, fixture_grid, grid_to_string
from threes.core.gamemove import apply_move, has_any_valid_move, legal_actions
from threes.core.nexttile import make_generator
from threes.core.rules import make_rules
from threes.core.scoring import empty_multipliers, score_grid, score_grid_with_multipliers, track_multipliers
from threes.core.seeding import SeededRandom, fresh_seed
from threes.core.spawn import spawn_from_queue
from threes.core.tiles import BASE_TILES
from threes.envs.config import RANDOM_START_TILES, GameConfig, resolve_config

# ##>: Module logger.
_logger = logging.getLogger(__name__)


class ThreesGame:
    """
    Colour-mixing game engine.

    This class sequences every turn (move, spawn, next tile, score, game over check) and exposes read-only
    copies of its state. All randomness flows through one seeded stream, so the same seed and the same moves
    always replay the same game.
    """

    # ##: Current game state.
    _grid: ndarray | None = None
    _multipliers: ndarray | None = None

    def __init__(self, config: GameConfig | Mapping[str, Any] | None = None, **overrides: Any):
        """
        Initialize the game.

        Parameters
        ----------
        config : GameConfig | Mapping[str, Any], optional
            A full configuration, or overrides to merge onto the defaults.
        **overrides
            Further overrides.

        Raises
        ------
        ConfigurationError
            If the configuration is invalid.
        """
        if isinstance(config, GameConfig):
            self.config = replace(config, **overrides) if overrides else config
        else:
            self.config = resolve_config(config, **overrides)

        self.rules = make_rules(self.config.merge_rules)
        self._start(self.config.seed)

    # ##: Read-only state.
    @property
    def grid(self) -> ndarray:
        """
        Get a copy of the board.

        Returns
        -------
        ndarray
            The board, safe to modify.
        """
        return clone_grid(self._grid)

    @property
    def next_tile(self) -> int:
        """Tile that will spawn after the next valid move."""
        return self._queue[0]

    @property
    def queue(self) -> list[int]:
        """Tiles waiting to spawn, front first."""
        return list(self._queue)

    @property
    def status(self) -> GameStatus:
        """Either playing or ended."""
        return self._status

    @property
    def is_finished(self) -> bool:
        """True once no move nor special action is left."""
        return self._status is GameStatus.ENDED

    @property
    def score(self) -> int:
        """Current score, 0 when scoring is disabled."""
        return self._score

    @property
    def move_count(self) -> int:
        """Number of valid moves played."""
        return self._move_count

    @property
    def seed(self) -> int:
        """Seed of the current game."""
        return self._rng.seed

    @property
    def multipliers(self) -> ndarray:
        """Copy of the per-cell multiplier grid."""
        return self._multipliers.copy()

    @property
    def last_move_events(self) -> list[MoveEvent]:
        """Events of the most recent valid move or special action, for renderers."""
        return list(self._last_move_events)

    @property
    def legal_actions(self) -> list[Direction]:
        """Directions that would change the board."""
        return legal_actions(self._grid, self.rules)

    def get_state(self) -> dict[str, Any]:
        """
        Return a serializable snapshot of the game.

        Returns
        -------
        dict[str, Any]
            Plain Python values only: ``grid``, ``next_tile``, ``queue``, ``status``, ``score``,
            ``move_count`` and ``last_move_events``.
        """
        return {
            'grid': self._grid.tolist(),
            'next_tile': int(self.next_tile),
            'queue': [int(value) for value in self._queue],
            'status': self._status.value,
            'score': int(self._score),
            'move_count': self._move_count,
            'last_move_events': [event.to_dict() for event in self._last_move_events],
        }

    # ##: Actions.
    def move(self, direction: Direction | str) -> bool:
        """
        Play a swipe.

        Parameters
        ----------
        direction : Direction | str
            Swipe direction.

        Returns
        -------
        bool
            True if the move changed the board. An invalid move changes nothing and returns False.

        Raises
        ------
        ValueError
            If ``direction`` is not a known direction.

        Notes
        -----
        Turn flow: move and merge, spawn queued tiles on the edge opposite the swipe, draw new tiles into the
        queue, update the score, then check for game over.
        """
        direction = Direction(direction)
        if self._status is not GameStatus.PLAYING:
            return False

        result = apply_move(self._grid, direction, self.rules, self._rng, pop=self.config.pop_on_transition)
        if not result.changed:
            _logger.debug('Move %s rejected: board unchanged', direction.value)
            self._last_move_events = []
            return False

        self._grid = result.grid
        self._move_count += 1

        # ##: Spawn queued tiles.
        spawned, consumed = spawn_from_queue(
            self._grid,
            self._queue,
            direction,
            result.changed_lines,
            self._rng,
            self.config.queue_spawn_count,
            self.config.spawn_on_changed_line,
        )
        del self._queue[:consumed]
        events = result.events + [MoveEvent('spawn', position, value) for position, value in spawned]
        self._last_move_events = events

        # ##: Queue split outputs, then draw new tiles.
        self._queue.extend(result.split_outputs)
        self._generator.observe(event.value for event in result.events if event.kind == 'merge')
        self._refill_queue()

        # ##: Score and game over.
        if self.config.multipliers_enabled:
            self._multipliers = track_multipliers(self._multipliers, events)
        self._banked_score += result.split_score
        self._update_score()
        self._check_game_over()

        _logger.debug(
            'Move %d %s: %d events, %d spawned, score=%d',
            self._move_count,
            direction.value,
            len(events),
            len(spawned),
            self._score,
        )
        return True

    def special_action(self, gray: Position, first: Position, second: Position) -> bool:
        """
        Perform a catalyst mix: the Gray tile at ``gray`` consumes its neighbours ``first`` and ``second``.

        Parameters
        ----------
        gray : Position
            Position of the Gray tile.
        first, second : Position
            The two neighbouring primaries to mix.

        Returns
        -------
        bool
            True if the mix was applied.

        Notes
        -----
        A mix does not count as a move and draws no new tile, but it updates the score and may end the game.
        """
        if self._status is not GameStatus.PLAYING or not self.config.catalyst_enabled:
            return False

        outcome = apply_catalyst_mix(self._grid, gray, first, second)
        if outcome is None:
            return False

        self._grid, value, events = outcome
        self._last_move_events = events
        self._generator.observe([value])

        if self.config.multipliers_enabled:
            self._multipliers = track_multipliers(self._multipliers, events)
        self._update_score()
        self._check_game_over()

        _logger.debug('Catalyst mix at %s produced %d', tuple(gray), value)
        return True

    def restart(self) -> None:
        """
        Start a new game, discarding the current one.

        The new game uses a fresh seed, or the configured one when ``replay_on_restart`` is set.
        """
        seed = self.config.seed if self.config.replay_on_restart else fresh_seed()
        self._start(seed)

    def render(self) -> None:  # pragma: no cover
        """Print the board, the queue and the score."""
        print(grid_to_string(self._grid))
        print(f'Next: {self._queue}  Score: {self._score}  Moves: {self._move_count}')

    # ##: Internal helpers.
    def _start(self, seed: int) -> None:
        size = self.config.grid_size
        self._rng = SeededRandom(seed)
        self._generator = make_generator(
            self.config.next_tile_strategy, self._rng, self.rules, fixed_tile=self.config.fixed_tile
        )
        self._grid = create_grid(size)
        self._multipliers = empty_multipliers(size)
        self._queue: list[int] = []
        self._status = GameStatus.PLAYING
        self._score = 0
        self._banked_score = 0
        self._move_count = 0
        self._last_move_events: list[MoveEvent] = []

        if self.config.fixture_mode:
            self._grid, next_tile = fixture_grid(self.config.merge_rules)
            self._queue.append(next_tile)
        else:
            self._place_start_tiles()
        self._refill_queue()

        self._update_score()
        self._check_game_over()
        _logger.info('New game: seed=%d, rules=%s, strategy=%s', seed, self.rules.name, self.config.next_tile_strategy)

    def _place_start_tiles(self) -> None:
        """Place base tiles on random cells; a random count in ``RANDOM_START_TILES`` when none is set."""
        count = self.config.start_tiles_count
        if count == 0:
            low, high = RANDOM_START_TILES
            count = self._rng.randint(low, high + 1)

        for _ in range(count):
            cells = empty_cells(self._grid)
            if not cells:
                break
            position = self._rng.pick(cells)
            self._grid[position.row, position.col] = self._rng.pick(BASE_TILES)

    def _refill_queue(self) -> None:
        while len(self._queue) < self.config.queue_spawn_count:
            self._queue.append(self._generator.next(self._grid))

    def _update_score(self) -> None:
        """Recompute the score. With multipliers the score is a running maximum."""
        if not self.config.scoring_enabled:
            return

        if self.config.multipliers_enabled:
            board_score = score_grid_with_multipliers(self._grid, self._multipliers) + self._banked_score
            self._score = max(self._score, board_score)
        else:
            self._score = score_grid(self._grid) + self._banked_score

    def _check_game_over(self) -> None:
        if has_any_valid_move(self._grid, self.rules):
            return
        if self.config.catalyst_enabled and has_valid_catalyst_mix(self._grid):
            return

        self._status = GameStatus.ENDED
        self._update_score()
        _logger.info('Game over after %d moves, score=%d', self._move_count, self._score)
