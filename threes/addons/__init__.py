"""..."""
from .types import DIRECTIONS, Direction, GameStatus, MergeOutcome, MoveEvent, MoveResult, Position
