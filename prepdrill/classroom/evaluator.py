"""
Answer grading under the active quiz mode.

Provides:
- check_answer: per-field result used to reveal the answer
- grade: overall correctness
- is_guess_complete: whether every sub-answer the mode needs is filled in
"""

from dataclasses import dataclass
from typing import Optional

from prepdrill.schemas import Guess, Item, QuizMode


@dataclass(frozen=True)
class AnswerCheck:
    """Grading result. A sub-check not graded in the mode is None."""
    preposition_correct: Optional[bool]
    case_correct: Optional[bool]

    @property
    def correct(self) -> bool:
        return self.preposition_correct is not False and self.case_correct is not False


def normalize(value: Optional[str]) -> str:
    """Trim and case-fold; absent values compare as empty."""
    return (value or "").strip().casefold()


def grades_preposition(mode: QuizMode) -> bool:
    return mode != QuizMode.CASE_ONLY


def grades_case(mode: QuizMode) -> bool:
    return mode != QuizMode.PREPOSITION_ONLY


def check_answer(item: Item, guess: Guess, mode: QuizMode) -> AnswerCheck:
    """Compare a guess with the item's expected answer field by field."""
    preposition_correct = None
    case_correct = None
    if grades_preposition(mode):
        preposition_correct = normalize(guess.preposition) == normalize(item.expected_preposition)
    if grades_case(mode):
        case_correct = normalize(guess.case) == normalize(item.expected_case)
    return AnswerCheck(preposition_correct=preposition_correct, case_correct=case_correct)


def grade(item: Item, guess: Guess, mode: QuizMode) -> bool:
    return check_answer(item, guess, mode).correct


def is_guess_complete(guess: Guess, mode: QuizMode) -> bool:
    """True once every sub-answer required by the mode is non-blank."""
    if grades_preposition(mode) and not normalize(guess.preposition):
        return False
    if grades_case(mode) and not normalize(guess.case):
        return False
    return True
