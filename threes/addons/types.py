# -*- coding: utf-8 -*-
"""
Set of types shared by the game engine.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

from numpy import ndarray


class Direction(str, Enum):
    """Swipe direction."""

    LEFT = 'left'
    RIGHT = 'right'
    UP = 'up'
    DOWN = 'down'

    @property
    def is_horizontal(self) -> bool:
        """True for left and right swipes."""
        return self in (Direction.LEFT, Direction.RIGHT)


# ##>: Fixed iteration order used wherever all directions are scanned.
DIRECTIONS: tuple[Direction, ...] = (Direction.LEFT, Direction.RIGHT, Direction.UP, Direction.DOWN)


class GameStatus(str, Enum):
    """Whether the game can still be played."""

    PLAYING = 'playing'
    ENDED = 'ended'


class Position(NamedTuple):
    """Cell coordinates on the grid."""

    row: int
    col: int

    def to_dict(self) -> dict[str, int]:
        """Return a JSON-safe mapping."""
        return {'row': int(self.row), 'col': int(self.col)}


class MergeOutcome(NamedTuple):
    """
    Result of combining two tiles.

    Attributes
    ----------
    outputs : tuple[int, ...]
        Produced tiles. The first one lands on the merge point, the others are queued.
    is_milestone : bool
        Whether the merge was a milestone split.
    """

    outputs: tuple[int, ...]
    is_milestone: bool = False


@dataclass(frozen=True)
class MoveEvent:
    """
    Animation event emitted while resolving a turn.

    Attributes
    ----------
    kind : str
        One of ``'move'``, ``'merge'`` or ``'spawn'``.
    to : Position
        Destination cell.
    value : int
        Tile value at the destination after the event.
    source : Position | None
        Origin cell, None for spawns.
    merged_from : tuple[int, int] | None
        For merges, the moving tile and the absorbing tile.
    is_milestone : bool
        For merges, whether the rule produced a milestone split.
    """

    kind: str
    to: Position
    value: int
    source: Position | None = None
    merged_from: tuple[int, int] | None = None
    is_milestone: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-safe mapping using the renderer field names."""
        event: dict[str, Any] = {'type': self.kind, 'to': self.to.to_dict(), 'value': int(self.value)}
        if self.source is not None:
            event['from'] = self.source.to_dict()
        if self.merged_from is not None:
            event['merged_from'] = [int(value) for value in self.merged_from]
            event['is_milestone'] = self.is_milestone
        return event


@dataclass
class MoveResult:
    """
    Outcome of one swipe, before any spawn.

    Attributes
    ----------
    grid : ndarray
        Board after movement and merges.
    changed : bool
        True if at least one tile moved or merged.
    changed_lines : frozenset[int]
        Row indices for horizontal swipes, column indices for vertical ones.
    events : list[MoveEvent]
        Ordered animation events.
    split_outputs : list[int]
        Extra tiles produced by split merges, waiting to be queued.
    split_score : int
        Score earned by split merges during this move.
    """

    grid: ndarray
    changed: bool
    changed_lines: frozenset[int] = frozenset()
    events: list[MoveEvent] = field(default_factory=list)
    split_outputs: list[int] = field(default_factory=list)
    split_score: int = 0
