"""Answer options for the multiple-choice level."""

import random
from typing import Optional

from prepdrill.schemas import Item


CASE_OPTIONS = ("Akk", "Dat")
MAX_WRONG_CHOICES = 3


def preposition_choices(item: Item, rng: Optional[random.Random] = None) -> list[str]:
    """
    Correct preposition plus up to three wrong candidates, shuffled.

    Candidates equal to the correct answer (ignoring case) or to each other
    are dropped.
    """
    rng = rng or random
    correct = item.expected_preposition
    seen = {correct.casefold()} if correct else set()
    wrongs = []
    for candidate in item.wrong_prepositions:
        folded = candidate.casefold()
        if folded in seen:
            continue
        seen.add(folded)
        wrongs.append(candidate)

    rng.shuffle(wrongs)
    choices = ([correct] if correct else []) + wrongs[:MAX_WRONG_CHOICES]
    rng.shuffle(choices)
    return choices


def case_choices(item: Item) -> list[str]:
    """Fixed case buttons, extended with the expected case if it is another one."""
    options = list(CASE_OPTIONS)
    expected = item.expected_case
    if expected and expected.casefold() not in {c.casefold() for c in options}:
        options.append(expected)
    return options
