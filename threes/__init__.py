# -*- coding: utf-8 -*-
"""
Rules engine of a colour-mixing sliding-tile puzzle.

The `threes.core` package holds the pure engine functions, `threes.envs` the game state machine.
"""

from .addons.types import Direction, GameStatus, MoveEvent, Position
from .envs import DEFAULT_CONFIG, ConfigurationError, GameConfig, ThreesGame, resolve_config

__all__ = [
    "ThreesGame",
    "GameConfig",
    "DEFAULT_CONFIG",
    "ConfigurationError",
    "resolve_config",
    "Direction",
    "GameStatus",
    "MoveEvent",
    "Position",
]
