"""
PrepDrill Classroom - Runtime components of the adaptive progress engine.

This module provides:
- Content keys: stable item identity
- Mastery: consecutive-correct counting and the sticky learned flag
- Evaluator: grading under a quiz mode
- Selector: next-item selection excluding learned items
- Storage / Preferences: persistence behind a key-value port
- DatasetLoader: CSV datasets and the dataset catalog
- SessionController: the per-round drill loop
"""

from .errors import (
    PrepDrillError,
    DatasetLoadError,
    DatasetLoadErrorKind,
    PersistenceReadError,
    PersistenceWriteError,
)

from .keys import (
    KEY_SEPARATOR,
    derive_key,
    derive_keys,
    find_key_collisions,
    describe_key,
)

from .mastery import (
    MASTERY_THRESHOLD,
    MasteryState,
    MasteryTransition,
    evaluate,
    state_of,
    apply_grade,
    repair_snapshot,
)

from .evaluator import (
    AnswerCheck,
    check_answer,
    grade,
    is_guess_complete,
)

from .selector import (
    select_next,
    unlearned_indices,
)

from .choices import (
    CASE_OPTIONS,
    MAX_WRONG_CHOICES,
    preposition_choices,
    case_choices,
)

from .storage import (
    KeyValueStore,
    InMemoryKeyValueStore,
    SQLiteKeyValueStore,
    ProgressStore,
    DEFAULT_PROGRESS_DIR,
    DEFAULT_PROGRESS_DB,
)

from .preferences import PreferencesStore

from .loader import (
    DatasetLoader,
    load_catalog,
    parse_wrong_prepositions,
)

from .session import (
    SessionController,
    SessionState,
    LoadTicket,
    ItemProgress,
)

__all__ = [
    # Errors
    "PrepDrillError",
    "DatasetLoadError",
    "DatasetLoadErrorKind",
    "PersistenceReadError",
    "PersistenceWriteError",
    # Keys
    "KEY_SEPARATOR",
    "derive_key",
    "derive_keys",
    "find_key_collisions",
    "describe_key",
    # Mastery
    "MASTERY_THRESHOLD",
    "MasteryState",
    "MasteryTransition",
    "evaluate",
    "state_of",
    "apply_grade",
    "repair_snapshot",
    # Evaluator
    "AnswerCheck",
    "check_answer",
    "grade",
    "is_guess_complete",
    # Selector
    "select_next",
    "unlearned_indices",
    # Choices
    "CASE_OPTIONS",
    "MAX_WRONG_CHOICES",
    "preposition_choices",
    "case_choices",
    # Storage
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "SQLiteKeyValueStore",
    "ProgressStore",
    "DEFAULT_PROGRESS_DIR",
    "DEFAULT_PROGRESS_DB",
    "PreferencesStore",
    # Loader
    "DatasetLoader",
    "load_catalog",
    "parse_wrong_prepositions",
    # Session
    "SessionController",
    "SessionState",
    "LoadTicket",
    "ItemProgress",
]
