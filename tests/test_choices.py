"""Tests for multiple-choice option building."""

import random

from prepdrill.classroom import CASE_OPTIONS, MAX_WRONG_CHOICES, case_choices, preposition_choices

from conftest import make_item


class TestPrepositionChoices:

    def test_contains_correct_answer(self):
        item = make_item("denken", "an", wrong_prepositions=["auf", "über"])
        choices = preposition_choices(item, random.Random(0))
        assert sorted(choices) == ["an", "auf", "über"]

    def test_at_most_three_wrong(self):
        item = make_item("denken", "an", wrong_prepositions=["auf", "über", "von", "mit", "zu"])
        for seed in range(20):
            choices = preposition_choices(item, random.Random(seed))
            assert len(choices) == MAX_WRONG_CHOICES + 1
            assert "an" in choices

    def test_duplicates_and_correct_dropped(self):
        item = make_item("stolz", "auf", wrong_prepositions=["Auf", "über", "ÜBER", "von"])
        choices = preposition_choices(item, random.Random(1))
        assert set(choices) == {"auf", "über", "von"}

    def test_no_wrong_candidates(self):
        assert preposition_choices(make_item("denken", "an"), random.Random(0)) == ["an"]


class TestCaseChoices:

    def test_fixed_options(self):
        assert case_choices(make_item(case="Dat")) == list(CASE_OPTIONS)

    def test_unusual_case_added(self):
        assert case_choices(make_item(case="Gen")) == ["Akk", "Dat", "Gen"]
