"""
Merge rule tables.

The move engine is written once against ``MergeRules``; the game variants only differ by the rule object
they plug in. Rules only look at the ``(family, level)`` of the two tiles, never at their position.
"""

from abc import ABC, abstractmethod
from types import MappingProxyType

from threes.addons.types import MergeOutcome
from threes.core.seeding import SeededRandom
from threes.core.tiles import (
    BLUE_IDX,
    CHARTREUSE_IDX,
    CYAN_IDX,
    GRAY_IDX,
    GREEN_IDX,
    INDIGO_IDX,
    MAGENTA_IDX,
    NUM_FAMILIES,
    ORANGE_IDX,
    RED_IDX,
    SECONDARY_FAMILIES,
    TEAL_IDX,
    TURQUOISE_IDX,
    VIOLET_IDX,
    YELLOW_IDX,
    encode_tile,
    is_tile,
    tile_family,
    tile_level,
)


class MergeRules(ABC):
    """
    Interface of a merge rule table.

    Implementations must be pure: the same inputs (and the same random stream state) always give the same
    outcome.
    """

    name: str = 'abstract'

    @abstractmethod
    def can_merge(self, a: int, b: int) -> bool:
        """
        Check whether a moving tile ``a`` may combine with the tile ``b`` it runs into.

        Parameters
        ----------
        a : int
            Value of the moving tile.
        b : int
            Value of the destination tile.

        Returns
        -------
        bool
            True if the two tiles combine. Always False when either cell is empty.
        """

    @abstractmethod
    def merge_outcome(self, a: int, b: int, rng: SeededRandom | None = None) -> MergeOutcome:
        """
        Compute the tiles produced by a merge.

        Parameters
        ----------
        a : int
            Value of the moving tile.
        b : int
            Value of the destination tile.
        rng : SeededRandom, optional
            Random stream, used only by rules that pick among several results.

        Returns
        -------
        MergeOutcome
            The produced tiles, the first of which lands on the merge point.

        Notes
        -----
        Only defined when ``can_merge(a, b)`` holds.
        """

    def merge_result(self, a: int, b: int, rng: SeededRandom | None = None) -> int:
        """Return the tile that lands on the merge point."""
        return self.merge_outcome(a, b, rng).outputs[0]

    def crosses_boundary(self, a: int, b: int) -> bool:
        """Return True if merging ``a`` into ``b`` crosses a tier boundary (triggers the pop phase)."""
        return False

    def merge_partners(self, value: int) -> list[int]:
        """
        List the families a tile can combine with at its own level.

        Parameters
        ----------
        value : int
            A tile value.

        Returns
        -------
        list[int]
            Sorted family indices, empty for an empty cell.
        """
        if not is_tile(value):
            return []
        level = tile_level(value)
        return [family for family in range(NUM_FAMILIES) if self.can_merge(value, encode_tile(family, level))]


# ##: Same-value rules.
DEFAULT_CHAIN = MappingProxyType(
    {
        CYAN_IDX: (BLUE_IDX, GREEN_IDX),
        MAGENTA_IDX: (BLUE_IDX, RED_IDX),
        YELLOW_IDX: (RED_IDX, GREEN_IDX),
        BLUE_IDX: (INDIGO_IDX, TURQUOISE_IDX),
        RED_IDX: (ORANGE_IDX, VIOLET_IDX),
        GREEN_IDX: (CHARTREUSE_IDX, TEAL_IDX),
        **{family: (GRAY_IDX,) for family in SECONDARY_FAMILIES},
    }
)


class SameValueRules(MergeRules):
    """
    Identical tiles merge into the next level of their family.

    Two tiles at the last level of a family (``transition_level - 1``) promote into level 0 of one of the
    families listed in ``chain``. When several families are listed, the choice consumes exactly one draw of
    the random stream. Families absent from the chain level up forever.
    """

    name = 'same'

    def __init__(self, transition_level: int = 3, chain: dict[int, tuple[int, ...]] | None = None):
        if transition_level < 1:
            raise ValueError(f'transition_level must be >= 1, got {transition_level}')
        self.transition_level = transition_level
        self.chain = dict(DEFAULT_CHAIN if chain is None else chain)

    def _promotes(self, value: int) -> bool:
        return tile_level(value) + 1 >= self.transition_level and bool(self.chain.get(tile_family(value)))

    def can_merge(self, a: int, b: int) -> bool:
        return is_tile(a) and int(a) == int(b)

    def merge_outcome(self, a: int, b: int, rng: SeededRandom | None = None) -> MergeOutcome:
        family, level = tile_family(a), tile_level(a)
        if not self._promotes(a):
            return MergeOutcome(outputs=(encode_tile(family, level + 1),))

        candidates = self.chain[family]
        promoted = candidates[0] if rng is None else rng.pick(candidates)
        return MergeOutcome(outputs=(encode_tile(promoted, 0),))

    def crosses_boundary(self, a: int, b: int) -> bool:
        return self.can_merge(a, b) and self._promotes(a)


# ##: Colour mixing rules.
def _pair_key(first: int, second: int) -> frozenset[int]:
    return frozenset((first, second))


FORWARD_MIXES = MappingProxyType(
    {
        _pair_key(CYAN_IDX, MAGENTA_IDX): BLUE_IDX,
        _pair_key(MAGENTA_IDX, YELLOW_IDX): RED_IDX,
        _pair_key(YELLOW_IDX, CYAN_IDX): GREEN_IDX,
        _pair_key(RED_IDX, YELLOW_IDX): ORANGE_IDX,
        _pair_key(RED_IDX, MAGENTA_IDX): VIOLET_IDX,
        _pair_key(GREEN_IDX, YELLOW_IDX): CHARTREUSE_IDX,
        _pair_key(GREEN_IDX, CYAN_IDX): TEAL_IDX,
        _pair_key(BLUE_IDX, CYAN_IDX): TURQUOISE_IDX,
        _pair_key(BLUE_IDX, MAGENTA_IDX): INDIGO_IDX,
    }
)

# ##>: Secondary family -> the two families that mix into it.
PARENTS = MappingProxyType(
    {result: tuple(sorted(pair)) for pair, result in FORWARD_MIXES.items() if result in SECONDARY_FAMILIES}
)


class ColorMixRules(MergeRules):
    """
    Colour mixing: different colours combine through a symmetric pairing table.

    - Listed forward pairs produce their mix, carrying the highest level of the inputs.
    - A secondary merged with one of its parents gives that parent one more dot.
    - Any two different secondaries produce Gray.
    - Gray merges with Gray of the same level into Gray with one more dot.
    - Same-colour pairs and unlisted pairs are blocked.
    """

    name = 'mix'

    def can_merge(self, a: int, b: int) -> bool:
        if not (is_tile(a) and is_tile(b)):
            return False

        family_a, family_b = tile_family(a), tile_family(b)
        if family_a == GRAY_IDX and family_b == GRAY_IDX:
            return tile_level(a) == tile_level(b)
        if family_a == family_b:
            return False
        if _pair_key(family_a, family_b) in FORWARD_MIXES:
            return True
        if self._backward_parent(family_a, family_b) is not None:
            return True
        return family_a in SECONDARY_FAMILIES and family_b in SECONDARY_FAMILIES

    @staticmethod
    def _backward_parent(family_a: int, family_b: int) -> int | None:
        if family_b in PARENTS.get(family_a, ()):
            return family_b
        if family_a in PARENTS.get(family_b, ()):
            return family_a
        return None

    def merge_outcome(self, a: int, b: int, rng: SeededRandom | None = None) -> MergeOutcome:
        family_a, family_b = tile_family(a), tile_family(b)

        if family_a == GRAY_IDX and family_b == GRAY_IDX:
            return MergeOutcome(outputs=(encode_tile(GRAY_IDX, tile_level(a) + 1),))

        forward = FORWARD_MIXES.get(_pair_key(family_a, family_b))
        if forward is not None:
            return MergeOutcome(outputs=(encode_tile(forward, max(tile_level(a), tile_level(b))),))

        parent = self._backward_parent(family_a, family_b)
        if parent is not None:
            parent_level = tile_level(a) if family_a == parent else tile_level(b)
            return MergeOutcome(outputs=(encode_tile(parent, parent_level + 1),))

        return MergeOutcome(outputs=(encode_tile(GRAY_IDX, 0),))

    def crosses_boundary(self, a: int, b: int) -> bool:
        family_a, family_b = tile_family(a), tile_family(b)
        return (
            family_a != family_b
            and family_a in SECONDARY_FAMILIES
            and family_b in SECONDARY_FAMILIES
        )


# ##: Breakdown rules.
BYPRODUCTS = MappingProxyType(
    {
        CYAN_IDX: (MAGENTA_IDX, YELLOW_IDX),
        MAGENTA_IDX: (YELLOW_IDX, CYAN_IDX),
        YELLOW_IDX: (CYAN_IDX, MAGENTA_IDX),
        BLUE_IDX: (CYAN_IDX, MAGENTA_IDX),
        RED_IDX: (MAGENTA_IDX, YELLOW_IDX),
        GREEN_IDX: (YELLOW_IDX, CYAN_IDX),
        **PARENTS,
        GRAY_IDX: (CYAN_IDX, MAGENTA_IDX),
    }
)


class BreakdownRules(MergeRules):
    """
    Identical tiles fuse and break down a byproduct.

    The fused tile (one more level) lands on the merge point. An ordinary merge also releases one
    byproduct tile; a milestone merge, reaching a level multiple of ``milestone_interval``, releases two.
    Byproducts are the level 0 components of the family.
    """

    name = 'breakdown'

    def __init__(self, milestone_interval: int = 3):
        if milestone_interval < 1:
            raise ValueError(f'milestone_interval must be >= 1, got {milestone_interval}')
        self.milestone_interval = milestone_interval

    def is_milestone(self, value: int) -> bool:
        """Return True if merging two ``value`` tiles is a milestone split."""
        return (tile_level(value) + 1) % self.milestone_interval == 0

    def can_merge(self, a: int, b: int) -> bool:
        return is_tile(a) and int(a) == int(b)

    def merge_outcome(self, a: int, b: int, rng: SeededRandom | None = None) -> MergeOutcome:
        family, level = tile_family(a), tile_level(a)
        milestone = self.is_milestone(a)
        byproducts = BYPRODUCTS[family][: 2 if milestone else 1]
        outputs = (encode_tile(family, level + 1), *(encode_tile(component, 0) for component in byproducts))
        return MergeOutcome(outputs=outputs, is_milestone=milestone)

    def crosses_boundary(self, a: int, b: int) -> bool:
        return self.can_merge(a, b) and self.is_milestone(a)


RULES: dict[str, type[MergeRules]] = {
    SameValueRules.name: SameValueRules,
    ColorMixRules.name: ColorMixRules,
    BreakdownRules.name: BreakdownRules,
}


def make_rules(name: str) -> MergeRules:
    """
    Build a rule table from its name.

    Parameters
    ----------
    name : str
        One of ``'same'``, ``'mix'`` or ``'breakdown'``.

    Returns
    -------
    MergeRules
        A rule table with default parameters.

    Raises
    ------
    ValueError
        If the name is unknown.
    """
    if name not in RULES:
        raise ValueError(f'Unknown merge rules {name!r}, expected one of {sorted(RULES)}')
    return RULES[name]()
