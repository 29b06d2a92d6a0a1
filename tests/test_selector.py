"""Tests for next-item selection."""

import random
from collections import Counter

from prepdrill.classroom import select_next, unlearned_indices


KEYS = ["k0", "k1", "k2", "k3", "k4"]


class TestSelectNext:

    def test_never_returns_learned(self):
        learned = {"k0", "k2", "k3"}
        rng = random.Random(1)
        for _ in range(200):
            idx = select_next(len(KEYS), learned, KEYS.__getitem__, rng)
            assert KEYS[idx] not in learned

    def test_single_remaining_item(self):
        learned = {"k0", "k1", "k2", "k4"}
        picks = {select_next(len(KEYS), learned, KEYS.__getitem__) for _ in range(50)}
        assert picks == {3}

    def test_complete_when_all_learned(self):
        assert select_next(len(KEYS), set(KEYS), KEYS.__getitem__) is None

    def test_complete_on_empty_dataset(self):
        assert select_next(0, set(), KEYS.__getitem__) is None

    def test_not_complete_with_extra_learned_keys(self):
        learned = {"k0", "k1", "k2", "k3", "other"}
        assert select_next(len(KEYS), learned, KEYS.__getitem__) == 4

    def test_uniform_over_candidates(self):
        rng = random.Random(42)
        counts = Counter(select_next(len(KEYS), {"k1"}, KEYS.__getitem__, rng) for _ in range(4000))
        assert set(counts) == {0, 2, 3, 4}
        for count in counts.values():
            assert 850 < count < 1150

    def test_large_dataset_one_left(self):
        keys = [f"k{i}" for i in range(10000)]
        learned = set(keys) - {"k9876"}
        assert select_next(len(keys), learned, keys.__getitem__) == 9876

    def test_unlearned_indices_in_order(self):
        assert unlearned_indices(len(KEYS), {"k1", "k3"}, KEYS.__getitem__) == [0, 2, 4]
