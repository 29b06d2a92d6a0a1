"""
Mastery state machine - consecutive-correct counting and the learned flag.

Per item:
    NEW          consecutive_correct == 0, not learned
    IN_PROGRESS  0 < consecutive_correct < MASTERY_THRESHOLD, not learned
    LEARNED      learned (sticky; the counter keeps moving but is cosmetic)

The learned flag only ever goes false -> true. The score is the size of the
learned-key set, so it grows exactly once per item, on that edge.
"""

from dataclasses import dataclass
from enum import Enum

from prepdrill.schemas import MasteryRecord, ProgressSnapshot


MASTERY_THRESHOLD = 3


class MasteryState(str, Enum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    LEARNED = "learned"


@dataclass(frozen=True)
class MasteryTransition:
    """Result of grading one answer."""
    record: MasteryRecord
    newly_learned: bool


def evaluate(record: MasteryRecord, is_correct: bool) -> MasteryTransition:
    """Apply one graded answer to a record. Never raises."""
    if not is_correct:
        return MasteryTransition(
            record=MasteryRecord(consecutive_correct=0, learned=record.learned),
            newly_learned=False,
        )

    count = record.consecutive_correct + 1
    newly_learned = not record.learned and count >= MASTERY_THRESHOLD
    return MasteryTransition(
        record=MasteryRecord(consecutive_correct=count, learned=record.learned or newly_learned),
        newly_learned=newly_learned,
    )


def state_of(record: MasteryRecord) -> MasteryState:
    if record.learned:
        return MasteryState.LEARNED
    if record.consecutive_correct > 0:
        return MasteryState.IN_PROGRESS
    return MasteryState.NEW


def apply_grade(snapshot: ProgressSnapshot, key: str, is_correct: bool) -> MasteryTransition:
    """Grade one answer for `key` and write the new record into the snapshot."""
    transition = evaluate(snapshot.record_for(key), is_correct)
    snapshot.store_record(key, transition.record)
    return transition


def repair_snapshot(snapshot: ProgressSnapshot) -> ProgressSnapshot:
    """
    Mark keys whose stored streak already reached the threshold as learned.

    Older saves could hold such counters without the matching learned key.
    """
    for key, count in snapshot.attempts.items():
        if count >= MASTERY_THRESHOLD:
            snapshot.learned_keys.add(key)
    return snapshot
