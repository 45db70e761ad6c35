# -*- coding: utf-8 -*-
"""
Deterministic rules engine of the colour-mixing sliding-tile game.

It includes the tile codec, the merge rule tables, the seeded random stream, board helpers, the one-step
move engine, spawn selection, next-tile generation, scoring and the catalyst mix.
"""

from .catalyst import apply_catalyst_mix, can_catalyst_mix, catalyst_targets, has_valid_catalyst_mix
from .gameboard import clone_grid, create_grid, empty_cells, fixture_grid, grid_to_string, is_full
from .gamemove import (
    apply_move,
    direction_delta,
    has_any_valid_move,
    illegal_actions,
    is_valid_move,
    legal_actions,
)
from .nexttile import NextTileGenerator, NextTileStrategy, make_generator
from .rules import BreakdownRules, ColorMixRules, MergeRules, SameValueRules, make_rules
from .scoring import score_grid, score_grid_with_multipliers, score_tile, track_multipliers
from .seeding import SeededRandom
from .spawn import select_spawn_position, spawn_edge_cells, spawn_from_queue
from .tiles import decode_tile, encode_tile, tile_family, tile_level

__all__ = [
    "apply_catalyst_mix",
    "can_catalyst_mix",
    "catalyst_targets",
    "has_valid_catalyst_mix",
    "clone_grid",
    "create_grid",
    "empty_cells",
    "fixture_grid",
    "grid_to_string",
    "is_full",
    "apply_move",
    "direction_delta",
    "has_any_valid_move",
    "illegal_actions",
    "is_valid_move",
    "legal_actions",
    "NextTileGenerator",
    "NextTileStrategy",
    "make_generator",
    "BreakdownRules",
    "ColorMixRules",
    "MergeRules",
    "SameValueRules",
    "make_rules",
    "score_grid",
    "score_grid_with_multipliers",
    "score_tile",
    "track_multipliers",
    "SeededRandom",
    "select_spawn_position",
    "spawn_edge_cells",
    "spawn_from_queue",
    "decode_tile",
    "encode_tile",
    "tile_family",
    "tile_level",
]
