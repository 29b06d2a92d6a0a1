"""
PrepDrill Schemas - Pydantic models for the preposition/case drill trainer.

This module exports all schema classes for:
- Content: drill items, guesses, dataset catalog entries
- Progress: mastery records, progress snapshots, quiz configuration
"""

# Content schemas
from .item import (
    Item,
    Guess,
    DatasetEntry,
    FALLBACK_LANGUAGE,
)

# Progress schemas
from .progress import (
    QuizMode,
    Level,
    QuizConfiguration,
    MasteryRecord,
    ProgressSnapshot,
)

__all__ = [
    # Content
    'Item',
    'Guess',
    'DatasetEntry',
    'FALLBACK_LANGUAGE',
    # Progress
    'QuizMode',
    'Level',
    'QuizConfiguration',
    'MasteryRecord',
    'ProgressSnapshot',
]
