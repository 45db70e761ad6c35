"""
Next-tile generators: decide the value of the tiles entering the board.

All strategies share one interface, ``next(grid) -> value``. Stateful strategies keep their buffer behind it.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, Sequence

from numpy import ndarray

from threes.core.gameboard import border_values
from threes.core.rules import MergeRules
from threes.core.seeding import SeededRandom
from threes.core.tiles import BASE_TILES, MAGENTA, encode_tile, is_tile, tile_family, tile_tier

# ##>: Module logger.
_logger = logging.getLogger(__name__)

# ##>: Copies of each base tile in a fresh bag.
BAG_COPIES = 4

# ##>: Share of the progressive pool kept by the base tier.
BASE_TIER_WEIGHT = 0.75

# ##>: Probability that the progressive generator favours tiles matching the board edges.
EDGE_BIAS = 0.5

# ##>: Random draws consumed by every progressive call, whatever branch is taken.
PROGRESSIVE_DRAWS = 3


class NextTileStrategy(str, Enum):
    """Available next-tile strategies."""

    FIXED = 'fixed'
    BAG = 'bag'
    RANDOM = 'random'
    PROGRESSIVE = 'progressive'


class NextTileGenerator(ABC):
    """Interface of a next-tile generator."""

    @abstractmethod
    def next(self, grid: ndarray) -> int:
        """
        Produce the next tile value.

        Parameters
        ----------
        grid : ndarray
            The live board, for strategies that adapt to it.

        Returns
        -------
        int
            A non-empty tile value.
        """

    def observe(self, values: Iterable[int]) -> None:
        """Record tiles produced by merges. Ignored by strategies without board history."""


class FixedGenerator(NextTileGenerator):
    """Always returns the same tile."""

    def __init__(self, value: int = MAGENTA):
        self.value = int(value)

    def next(self, grid: ndarray) -> int:
        return self.value


class BagGenerator(NextTileGenerator):
    """
    Draws tiles from a shuffled bag, refilled from a template whenever it runs empty.

    Parameters
    ----------
    rng : SeededRandom
        Random stream used to shuffle each fresh bag.
    template : Sequence[int], optional
        Content of a fresh bag (default is four copies of each base tile).
    """

    def __init__(self, rng: SeededRandom, template: Sequence[int] | None = None):
        self._rng = rng
        self._template = tuple(BASE_TILES * BAG_COPIES if template is None else template)
        if not self._template:
            raise ValueError('Bag template must not be empty')
        self._bag: list[int] = []

    @property
    def remaining(self) -> int:
        """Number of tiles left before the next reshuffle."""
        return len(self._bag)

    def next(self, grid: ndarray) -> int:
        if not self._bag:
            self._bag = self._rng.shuffle(self._template)
            _logger.debug('Bag refilled with %d tiles', len(self._bag))
        return self._bag.pop()


class RandomGenerator(NextTileGenerator):
    """Uniformly samples a tile from a fixed set at every call."""

    def __init__(self, rng: SeededRandom, tiles: Sequence[int] = BASE_TILES):
        self._rng = rng
        self._tiles = tuple(tiles)

    def next(self, grid: ndarray) -> int:
        return self._rng.pick(self._tiles)


class ProgressiveGenerator(NextTileGenerator):
    """
    Introduces higher tiers as the player discovers them.

    The pool holds the base tiles plus the level 0 tile of every family discovered on the board or produced
    by a merge. The base tier keeps ``BASE_TIER_WEIGHT`` of the probability; the rest is split between the
    discovered tiers, halving at each tier. With probability ``EDGE_BIAS`` the candidates of the chosen tier
    are first filtered down to those able to merge with a tile on a board edge, then one is picked; when
    none matches, the pick falls back to the whole tier.

    Notes
    -----
    Every call consumes exactly ``PROGRESSIVE_DRAWS`` random draws (tier roll, edge roll, pick roll), so
    the random stream stays aligned whatever the board holds.
    """

    def __init__(self, rng: SeededRandom, rules: MergeRules):
        self._rng = rng
        self._rules = rules
        self._discovered: dict[int, set[int]] = {}

    @property
    def discovered_tiers(self) -> list[int]:
        """Tiers above the base one that entered the pool."""
        return sorted(self._discovered)

    def observe(self, values: Iterable[int]) -> None:
        for value in values:
            tier = tile_tier(value)
            if tier > 0:
                self._discovered.setdefault(tier, set()).add(tile_family(value))

    def pool(self) -> list[tuple[float, list[int]]]:
        """
        Return the weighted tiers of the pool.

        Returns
        -------
        list[tuple[float, list[int]]]
            ``(weight, candidates)`` pairs, base tier first. Weights sum to one.
        """
        tiers = self.discovered_tiers
        if not tiers:
            return [(1.0, list(BASE_TILES))]

        shares = [0.5**index for index in range(len(tiers))]
        total = sum(shares)
        weighted = [(BASE_TIER_WEIGHT, list(BASE_TILES))]
        for tier, share in zip(tiers, shares):
            candidates = sorted(encode_tile(family, 0) for family in self._discovered[tier])
            weighted.append(((1.0 - BASE_TIER_WEIGHT) * share / total, candidates))
        return weighted

    def _mixes_with_any(self, candidate: int, values: Sequence[int]) -> bool:
        return any(self._rules.can_merge(candidate, value) or self._rules.can_merge(value, candidate) for value in values)

    def next(self, grid: ndarray) -> int:
        self.observe(value for value in grid.ravel().tolist() if is_tile(value))

        # ##: Always draw the same number of floats.
        tier_roll, edge_roll, pick_roll = (self._rng.random() for _ in range(PROGRESSIVE_DRAWS))

        # ##: Choose the tier.
        pool = self.pool()
        candidates = pool[-1][1]
        cumulative = 0.0
        for weight, tier_candidates in pool:
            cumulative += weight
            if tier_roll < cumulative:
                candidates = tier_candidates
                break

        # ##: Filter on the board edges, then pick.
        if edge_roll < EDGE_BIAS:
            edges = border_values(grid)
            matching = [candidate for candidate in candidates if self._mixes_with_any(candidate, edges)]
            if matching:
                candidates = matching

        return candidates[int(pick_roll * len(candidates))]


def make_generator(
    strategy: NextTileStrategy | str,
    rng: SeededRandom,
    rules: MergeRules,
    fixed_tile: int = MAGENTA,
) -> NextTileGenerator:
    """
    Build a next-tile generator.

    Parameters
    ----------
    strategy : NextTileStrategy | str
        Strategy name.
    rng : SeededRandom
        Shared random stream.
    rules : MergeRules
        Merge rules, used by the progressive edge bias.
    fixed_tile : int, optional
        Tile returned by the fixed strategy (default is Magenta).

    Returns
    -------
    NextTileGenerator
        The generator.
    """
    strategy = NextTileStrategy(strategy)
    if strategy is NextTileStrategy.FIXED:
        return FixedGenerator(fixed_tile)
    if strategy is NextTileStrategy.BAG:
        return BagGenerator(rng)
    if strategy is NextTileStrategy.RANDOM:
        return RandomGenerator(rng)
    return ProgressiveGenerator(rng, rules)
