# -*- coding: utf-8 -*-
"""
Game configuration.
"""
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from threes.core.nexttile import NextTileStrategy
from threes.core.rules import RULES
from threes.core.tiles import MAGENTA, is_tile

# ##>: Range of starting tiles when ``start_tiles_count`` is 0.
RANDOM_START_TILES = (3, 5)


class ConfigurationError(ValueError):
    """Raised when a game configuration cannot produce a playable board."""


@dataclass(frozen=True)
class GameConfig:
    """
    Immutable game configuration.

    Attributes
    ----------
    grid_size : int
        Number of rows and columns.
    start_tiles_count : int
        Tiles placed at game start, 0 for a random count in ``RANDOM_START_TILES``.
    spawn_on_changed_line : bool
        Prefer spawning on lines that changed during the move.
    next_tile_strategy : str
        One of ``'fixed'``, ``'bag'``, ``'random'`` or ``'progressive'``.
    scoring_enabled : bool
        Whether the score is computed.
    seed : int
        Seed of the random stream.
    fixture_mode : bool
        Start from the reference board of the merge rules instead of a random one.
    queue_spawn_count : int
        Tiles spawned from the queue after each move.
    merge_rules : str
        One of ``'same'``, ``'mix'`` or ``'breakdown'``.
    multipliers_enabled : bool
        Track per-cell score multipliers; the score then becomes a running maximum.
    catalyst_enabled : bool
        Allow the Gray catalyst mix.
    pop_on_transition : bool
        Push neighbours outward around merges crossing a tier boundary.
    replay_on_restart : bool
        Restart with the configured seed instead of a fresh one.
    fixed_tile : int
        Tile produced by the fixed next-tile strategy.
    """

    grid_size: int = 4
    start_tiles_count: int = 0
    spawn_on_changed_line: bool = True
    next_tile_strategy: str = NextTileStrategy.PROGRESSIVE.value
    scoring_enabled: bool = True
    seed: int = 42
    fixture_mode: bool = False
    queue_spawn_count: int = 1
    merge_rules: str = 'mix'
    multipliers_enabled: bool = False
    catalyst_enabled: bool = True
    pop_on_transition: bool = True
    replay_on_restart: bool = False
    fixed_tile: int = MAGENTA

    def __post_init__(self):
        for name in ('grid_size', 'start_tiles_count', 'seed', 'queue_spawn_count', 'fixed_tile'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f'{name} must be an integer, got {value!r}')

        if self.grid_size < 2:
            raise ConfigurationError(f'grid_size must be at least 2, got {self.grid_size}')
        if self.start_tiles_count < 0:
            raise ConfigurationError(f'start_tiles_count must be >= 0, got {self.start_tiles_count}')
        if self.start_tiles_count > self.grid_size**2:
            raise ConfigurationError(
                f'start_tiles_count ({self.start_tiles_count}) exceeds the {self.grid_size**2} cells of the board'
            )
        if self.queue_spawn_count < 1:
            raise ConfigurationError(f'queue_spawn_count must be >= 1, got {self.queue_spawn_count}')
        if self.seed < 0:
            raise ConfigurationError(f'seed must be >= 0, got {self.seed}')
        if not is_tile(self.fixed_tile):
            raise ConfigurationError(f'fixed_tile must be a tile value, got {self.fixed_tile}')

        strategies = {strategy.value for strategy in NextTileStrategy}
        if self.next_tile_strategy not in strategies:
            raise ConfigurationError(
                f'Unknown next_tile_strategy {self.next_tile_strategy!r}, expected one of {sorted(strategies)}'
            )
        if self.merge_rules not in RULES:
            raise ConfigurationError(f'Unknown merge_rules {self.merge_rules!r}, expected one of {sorted(RULES)}')
        if self.fixture_mode and self.grid_size != 4:
            raise ConfigurationError('fixture_mode requires a 4x4 board')


DEFAULT_CONFIG = GameConfig()

# ##>: Keys used by presentation layers.
_CAMEL_CASE_KEYS = {
    'gridSize': 'grid_size',
    'startTilesCount': 'start_tiles_count',
    'spawnOnlyOnChangedLine': 'spawn_on_changed_line',
    'spawnOnChangedLine': 'spawn_on_changed_line',
    'nextTileStrategy': 'next_tile_strategy',
    'scoringEnabled': 'scoring_enabled',
    'fixtureMode': 'fixture_mode',
    'queueSpawnCount': 'queue_spawn_count',
    'mergeRules': 'merge_rules',
    'multipliersEnabled': 'multipliers_enabled',
    'catalystEnabled': 'catalyst_enabled',
    'popOnTransition': 'pop_on_transition',
    'replayOnRestart': 'replay_on_restart',
    'fixedTile': 'fixed_tile',
}


def resolve_config(overrides: Mapping[str, Any] | None = None, **kwargs: Any) -> GameConfig:
    """
    Merge user overrides onto the default configuration.

    Parameters
    ----------
    overrides : Mapping[str, Any], optional
        Overrides, keyed by field name or by its camelCase alias.
    **kwargs
        Further overrides, applied after ``overrides``.

    Returns
    -------
    GameConfig
        The validated configuration.

    Raises
    ------
    ConfigurationError
        If a key is unknown or a value is invalid.
    """
    known = {field.name for field in fields(GameConfig)}
    resolved: dict[str, Any] = {}
    for key, value in {**dict(overrides or {}), **kwargs}.items():
        name = _CAMEL_CASE_KEYS.get(key, key)
        if name not in known:
            raise ConfigurationError(f'Unknown configuration key {key!r}')
        if isinstance(value, NextTileStrategy):
            value = value.value
        resolved[name] = value
    return replace(DEFAULT_CONFIG, **resolved)
