# -*- coding: utf-8 -*-
"""
Game orchestration.

This module provides the `ThreesGame` class, which owns the board, the tile queue and the random stream, and
the `GameConfig` record it is built from.
"""

from .config import DEFAULT_CONFIG, ConfigurationError, GameConfig, resolve_config
from .threes import ThreesGame

__all__ = ["ThreesGame", "GameConfig", "DEFAULT_CONFIG", "ConfigurationError", "resolve_config"]
