"""
Seeded random source shared by every stochastic part of the engine.

All randomness of a game flows through one ``SeededRandom`` instance, so that the same seed and the same
sequence of moves always replay the same game.
"""

from typing import Sequence, TypeVar

from numpy.random import PCG64DXSM, Generator, SeedSequence

T = TypeVar('T')

# ##>: Seeds are kept in the positive 31-bit range so they survive any JSON consumer.
MAX_SEED = 2**31 - 1


class SeededRandom:
    """
    Deterministic stream of floats in ``[0, 1)``.

    Every helper documents how many floats it consumes, which is what replay determinism relies on.
    """

    def __init__(self, seed: int):
        self.seed = int(seed)
        self._generator = Generator(PCG64DXSM(self.seed))
        self._draws = 0

    @property
    def draws(self) -> int:
        """Number of floats consumed since construction."""
        return self._draws

    def random(self) -> float:
        """Draw the next float in ``[0, 1)``."""
        self._draws += 1
        return float(self._generator.random())

    def randint(self, low: int, high: int) -> int:
        """
        Draw an integer in ``[low, high)``. Consumes one float.

        Parameters
        ----------
        low : int
            Inclusive lower bound.
        high : int
            Exclusive upper bound, strictly greater than ``low``.

        Returns
        -------
        int
            The drawn integer.
        """
        return low + int(self.random() * (high - low))

    def pick(self, items: Sequence[T]) -> T:
        """Pick a uniformly random element of a non-empty sequence. Consumes one float."""
        return items[int(self.random() * len(items))]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """
        Fisher-Yates shuffle returning a new list. Consumes ``len(items) - 1`` floats.

        Parameters
        ----------
        items : Sequence
            Items to shuffle; left untouched.

        Returns
        -------
        list
            The shuffled copy.
        """
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = int(self.random() * (i + 1))
            result[i], result[j] = result[j], result[i]
        return result


def fresh_seed() -> int:
    """Return a new seed drawn from OS entropy."""
    return int(SeedSequence().generate_state(1)[0]) % MAX_SEED
