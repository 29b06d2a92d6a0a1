"""
Item selection - pick the next item to present.

Candidates are listed explicitly (every index whose key is not learned) and
one is drawn uniformly. Drawing random indices until one is not excluded
would stall as the unlearned share of a large dataset shrinks.
"""

import random
from typing import AbstractSet, Callable, Optional


def unlearned_indices(
    dataset_size: int,
    learned_keys: AbstractSet[str],
    key_of: Callable[[int], str],
) -> list[int]:
    """Indices of items whose key is not in `learned_keys`, in dataset order."""
    return [idx for idx in range(dataset_size) if key_of(idx) not in learned_keys]


def select_next(
    dataset_size: int,
    learned_keys: AbstractSet[str],
    key_of: Callable[[int], str],
    rng: Optional[random.Random] = None,
) -> Optional[int]:
    """
    Select the index of the next item to present.

    Args:
        dataset_size: Number of items in the active dataset
        learned_keys: Content keys already learned
        key_of: Maps an index to its content key
        rng: Random source (module-level random if omitted)

    Returns:
        An unlearned index, or None when every item is learned (session complete)
    """
    candidates = unlearned_indices(dataset_size, learned_keys, key_of)
    if not candidates:
        return None
    return (rng or random).choice(candidates)
