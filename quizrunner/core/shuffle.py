"""
Uniform in-place shuffle.
"""

from __future__ import annotations

import random
from typing import MutableSequence, TypeVar

T = TypeVar("T")


def fisher_yates_shuffle(
    items: MutableSequence[T],
    rng: random.Random | None = None,
) -> MutableSequence[T]:
    """
    Shuffle items in place with the Fisher-Yates (Knuth) algorithm.

    Walks i from the last index down to 1, picks j uniformly in [0, i]
    and swaps items[i] and items[j]. Every one of the n! orderings is
    equally likely.

    Args:
        items: Sequence to permute in place
        rng: Random source (defaults to the module-level generator)

    Returns:
        The same sequence, for chaining
    """
    randrange = (rng or random).randrange
    for i in range(len(items) - 1, 0, -1):
        # randrange draws without modulo bias
        j = randrange(i + 1)
        items[i], items[j] = items[j], items[i]
    return items
