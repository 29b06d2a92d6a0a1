"""
Content keys - stable identity for drill items.

A content key is derived from the item's primary text, expected preposition
and example sentence. It never depends on the item's position in a dataset,
so progress survives reordering and reloading of the CSV.

Known limitation: two items that share all three fields get the same key
and therefore share progress. find_key_collisions() reports such rows.
"""

from collections import defaultdict
from typing import Sequence

from prepdrill.schemas import Item


# ASCII unit separator; not expected in tabular content
KEY_SEPARATOR = "\x1f"


def derive_key(item: Item) -> str:
    """Derive the content key for an item."""
    return KEY_SEPARATOR.join((
        item.primary_text,
        item.expected_preposition or "",
        item.example,
    ))


def derive_keys(items: Sequence[Item]) -> list[str]:
    """Keys for a dataset, aligned with item positions."""
    return [derive_key(item) for item in items]


def find_key_collisions(items: Sequence[Item]) -> dict[str, list[int]]:
    """
    Find items that share a content key.

    Returns:
        Mapping of key -> row indices, only for keys used by more than one row
    """
    positions = defaultdict(list)
    for idx, item in enumerate(items):
        positions[derive_key(item)].append(idx)
    return {key: idxs for key, idxs in positions.items() if len(idxs) > 1}


def describe_key(key: str) -> str:
    """Human-readable form of a key for logs and reports."""
    return " | ".join(part or "-" for part in key.split(KEY_SEPARATOR))
