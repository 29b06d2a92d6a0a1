"""
Progress tracking schemas for PrepDrill.

Defines Pydantic models for learner progress including:
- Per-item mastery records
- Per-dataset progress snapshots
- Quiz configuration (mode and level)
"""

from enum import Enum

from pydantic import BaseModel, Field, computed_field, field_serializer, field_validator


class QuizMode(str, Enum):
    """Which sub-answers are required and graded."""
    PREPOSITION_ONLY = "prep"
    CASE_ONLY = "case"
    BOTH = "both"


class Level(str, Enum):
    """Input modality. Orthogonal to grading."""
    MULTIPLE_CHOICE = "choice"
    TEXT_INPUT = "text"


class QuizConfiguration(BaseModel):
    mode: QuizMode = QuizMode.BOTH
    level: Level = Level.MULTIPLE_CHOICE


class MasteryRecord(BaseModel):
    """Consecutive-correct counter and sticky learned flag for one item."""
    consecutive_correct: int = Field(default=0, ge=0)
    learned: bool = False


class ProgressSnapshot(BaseModel):
    """
    Persisted progress for one dataset.

    `score` is computed from `learned_keys` so the two cannot diverge;
    a `score` present in stored JSON is ignored on validation.
    Keys are content keys, never array indices.
    """
    learned_keys: set[str] = set()
    attempts: dict[str, int] = {}

    @field_validator('attempts')
    @classmethod
    def attempts_non_negative(cls, v):
        for key, count in v.items():
            if count < 0:
                raise ValueError(f'attempts for {key!r} must be >= 0')
        return v

    @field_serializer('learned_keys')
    def learned_keys_sorted(self, v):
        return sorted(v)

    @computed_field
    @property
    def score(self) -> int:
        return len(self.learned_keys)

    def record_for(self, key: str) -> MasteryRecord:
        """Mastery record for a key; the default record if never graded."""
        return MasteryRecord(
            consecutive_correct=self.attempts.get(key, 0),
            learned=key in self.learned_keys,
        )

    def store_record(self, key: str, record: MasteryRecord):
        """Write a record back. Learned keys are only ever added."""
        self.attempts[key] = record.consecutive_correct
        if record.learned:
            self.learned_keys.add(key)

    def is_learned(self, key: str) -> bool:
        return key in self.learned_keys

    def restricted_to(self, keys) -> "ProgressSnapshot":
        """Copy holding only the records of `keys`."""
        keep = set(keys)
        return ProgressSnapshot(
            learned_keys=self.learned_keys & keep,
            attempts={k: v for k, v in self.attempts.items() if k in keep},
        )
