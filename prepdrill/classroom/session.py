"""
SessionController - Per-round drill loop.

Combines DatasetLoader (content), ProgressStore (per-dataset mastery) and
PreferencesStore (quiz configuration) into the state machine the UI drives:

    LOADING -> PRESENTING -> ANSWER_REVEALED -> PRESENTING ... -> SESSION_COMPLETE
    LOADING -> LOAD_FAILED

Every action runs to completion synchronously. Progress is written through
to the store after each in-memory change.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from prepdrill.schemas import (
    DatasetEntry,
    Guess,
    Item,
    Level,
    ProgressSnapshot,
    QuizMode,
)

from .choices import case_choices, preposition_choices
from .errors import DatasetLoadError
from .evaluator import AnswerCheck, check_answer, is_guess_complete
from .keys import derive_keys
from .loader import DatasetLoader
from .mastery import MasteryState, MasteryTransition, apply_grade, state_of
from .preferences import PreferencesStore
from .selector import select_next
from .storage import ProgressStore


logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Controller state for UI display."""
    IDLE = "idle"                       # No dataset selected yet
    LOADING = "loading"                 # Waiting for a dataset load
    LOAD_FAILED = "load_failed"         # Blocking error, no session
    PRESENTING = "presenting"           # Item shown, input enabled
    ANSWER_REVEALED = "answer_revealed" # Input disabled, answer shown
    SESSION_COMPLETE = "session_complete"


@dataclass(frozen=True)
class LoadTicket:
    """Identifies one dataset load. Only the latest ticket may complete."""
    dataset_id: str
    generation: int


@dataclass(frozen=True)
class ItemProgress:
    """Row of the learned-items overview."""
    index: int
    item: Item
    key: str
    consecutive_correct: int
    learned: bool
    state: MasteryState


class SessionController:
    """
    Drive one learner's drill session.

    The presentation layer reads `state`, `current_item`, `last_check`,
    the score counters and the choice lists, and calls the action methods.
    """

    def __init__(
        self,
        progress_store: ProgressStore,
        preferences: PreferencesStore,
        loader: Optional[DatasetLoader] = None,
        catalog: Optional[Sequence[DatasetEntry]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize controller.

        Args:
            progress_store: Per-dataset progress persistence
            preferences: Quiz configuration / language persistence
            loader: Dataset loader used by select_dataset()
            catalog: Known datasets; an id not in the catalog is used as the source itself
            rng: Random source for selection and choice shuffling
        """
        self.progress_store = progress_store
        self.preferences = preferences
        self.loader = loader or DatasetLoader()
        self.catalog = {entry.id: entry for entry in (catalog or [])}
        self.rng = rng or random.Random()

        self.config = preferences.get_quiz_configuration()
        self.language = preferences.get_language()

        self.state = SessionState.IDLE
        self.dataset_id: Optional[str] = None
        self.items: list[Item] = []
        self.keys: list[str] = []
        self.snapshot = ProgressSnapshot()
        self.error: Optional[DatasetLoadError] = None

        self.current_index: Optional[int] = None
        self.guess = Guess()
        self.last_check: Optional[AnswerCheck] = None
        self.last_transition: Optional[MasteryTransition] = None
        self.gave_up = False
        self.preposition_choices: list[str] = []
        self.case_choices: list[str] = []
        self.round_number = 0

        self._generation = 0
        self._closed = False

    # -------------------------------------------------------------------------
    # Read-only view
    # -------------------------------------------------------------------------

    @property
    def current_item(self) -> Optional[Item]:
        if self.current_index is None:
            return None
        return self.items[self.current_index]

    @property
    def current_key(self) -> Optional[str]:
        if self.current_index is None:
            return None
        return self.keys[self.current_index]

    @property
    def score(self) -> int:
        return self.snapshot.score

    @property
    def learned_count(self) -> int:
        """Items of the active dataset whose key is learned."""
        return sum(1 for key in self.keys if self.snapshot.is_learned(key))

    @property
    def total_count(self) -> int:
        return len(self.items)

    @property
    def is_loaded(self) -> bool:
        return self.state in (
            SessionState.PRESENTING,
            SessionState.ANSWER_REVEALED,
            SessionState.SESSION_COMPLETE,
        )

    def source_for(self, dataset_id: str) -> str:
        entry = self.catalog.get(dataset_id)
        return entry.source if entry else dataset_id

    def progress_overview(self) -> list[ItemProgress]:
        """Per-item mastery for the active dataset, in dataset order."""
        rows = []
        for idx, (item, key) in enumerate(zip(self.items, self.keys)):
            record = self.snapshot.record_for(key)
            rows.append(ItemProgress(
                index=idx,
                item=item,
                key=key,
                consecutive_correct=record.consecutive_correct,
                learned=record.learned,
                state=state_of(record),
            ))
        return rows

    # -------------------------------------------------------------------------
    # Dataset loading
    # -------------------------------------------------------------------------

    def begin_load(self, dataset_id: str) -> LoadTicket:
        """
        Start switching to a dataset.

        The active dataset's snapshot is saved and dropped before anything
        of the new dataset is loaded. Any earlier ticket becomes stale.
        """
        if self.dataset_id is not None:
            self.progress_store.save(self.dataset_id, self.snapshot)

        self._generation += 1
        self.dataset_id = None
        self.items = []
        self.keys = []
        self.snapshot = ProgressSnapshot()
        self.error = None
        self._clear_round()
        self.current_index = None
        self.state = SessionState.LOADING
        return LoadTicket(dataset_id=dataset_id, generation=self._generation)

    def _is_current(self, ticket: LoadTicket) -> bool:
        if self._closed or ticket.generation != self._generation:
            logger.debug(f"Discarding stale load of '{ticket.dataset_id}'")
            return False
        return True

    def complete_load(self, ticket: LoadTicket, items: Sequence[Item]) -> bool:
        """
        Install loaded items and restore their progress.

        Returns:
            False if the ticket is stale and the result was discarded
        """
        if not self._is_current(ticket):
            return False

        self.dataset_id = ticket.dataset_id
        self.items = list(items)
        self.keys = derive_keys(self.items)
        # Records of rows no longer in the dataset are dropped
        self.snapshot = self.progress_store.load(ticket.dataset_id).restricted_to(self.keys)
        self.preferences.set_dataset_id(ticket.dataset_id)
        logger.info(
            f"Dataset '{ticket.dataset_id}': {self.learned_count}/{self.total_count} learned"
        )
        self._advance()
        return True

    def fail_load(self, ticket: LoadTicket, error: DatasetLoadError) -> bool:
        """Record a load failure. Returns False if the ticket is stale."""
        if not self._is_current(ticket):
            return False
        logger.error(f"Dataset '{ticket.dataset_id}' failed to load: {error}")
        self.error = error
        self.state = SessionState.LOAD_FAILED
        return True

    def select_dataset(self, dataset_id: str):
        """
        Switch to a dataset and load it synchronously.

        Raises:
            DatasetLoadError: the dataset could not be loaded; the controller
                is left in LOAD_FAILED
        """
        ticket = self.begin_load(dataset_id)
        try:
            items = self.loader.load(self.source_for(dataset_id))
        except DatasetLoadError as e:
            self.fail_load(ticket, e)
            raise
        self.complete_load(ticket, items)

    def teardown(self):
        """Persist progress and ignore any load still in flight."""
        if self.dataset_id is not None:
            self.progress_store.save(self.dataset_id, self.snapshot)
        self._generation += 1
        self._closed = True

    # -------------------------------------------------------------------------
    # Round actions
    # -------------------------------------------------------------------------

    def update_guess(self, preposition: Optional[str] = None, case: Optional[str] = None) -> Optional[AnswerCheck]:
        """
        Fill in part of the answer.

        At the multiple-choice level the answer is submitted as soon as
        every sub-answer the mode requires is filled in.
        """
        if self.state != SessionState.PRESENTING:
            logger.debug(f"Ignoring guess update in state {self.state.value}")
            return None

        update = {}
        if preposition is not None:
            update["preposition"] = preposition
        if case is not None:
            update["case"] = case
        self.guess = self.guess.model_copy(update=update)

        if self.config.level == Level.MULTIPLE_CHOICE and is_guess_complete(self.guess, self.config.mode):
            return self.submit_answer()
        return None

    def submit_answer(self, guess: Optional[Guess] = None) -> Optional[AnswerCheck]:
        """
        Grade the current item and reveal the answer.

        Only grades while PRESENTING; a repeated submit for an answer that is
        already revealed returns the earlier result without grading again.
        """
        if self.state != SessionState.PRESENTING:
            logger.debug(f"Ignoring submit in state {self.state.value}")
            return self.last_check

        if guess is not None:
            self.guess = guess

        check = check_answer(self.current_item, self.guess, self.config.mode)
        transition = apply_grade(self.snapshot, self.current_key, check.correct)
        self.progress_store.save(self.dataset_id, self.snapshot)

        if transition.newly_learned:
            logger.info(f"Learned '{self.current_item.primary_text}' (score {self.score})")

        self.last_check = check
        self.last_transition = transition
        self.state = SessionState.ANSWER_REVEALED
        return check

    def give_up(self):
        """Reveal the answer without grading. Not counted as an attempt."""
        if self.state != SessionState.PRESENTING:
            logger.debug(f"Ignoring give up in state {self.state.value}")
            return
        self.gave_up = True
        self.last_check = None
        self.last_transition = None
        self.state = SessionState.ANSWER_REVEALED

    def acknowledge_and_advance(self):
        """Move on from a revealed answer to the next item."""
        if self.state != SessionState.ANSWER_REVEALED:
            logger.debug(f"Ignoring advance in state {self.state.value}")
            return
        self._advance()

    def reset_progress(self):
        """Start the active dataset over with an empty snapshot."""
        if not self.is_loaded:
            logger.debug(f"Ignoring reset in state {self.state.value}")
            return
        logger.info(f"Resetting progress for '{self.dataset_id}'")
        self.snapshot = self.progress_store.reset(self.dataset_id)
        self._advance()

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def change_mode(self, mode: QuizMode):
        self.config = self.config.model_copy(update={"mode": QuizMode(mode)})
        self.preferences.set_quiz_configuration(self.config)
        self._restart_round()

    def change_level(self, level: Level):
        self.config = self.config.model_copy(update={"level": Level(level)})
        self.preferences.set_quiz_configuration(self.config)
        self._restart_round()

    def change_language(self, language: str):
        self.preferences.set_language(language)
        self.language = language.strip().lower()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _clear_round(self):
        self.guess = Guess()
        self.last_check = None
        self.last_transition = None
        self.gave_up = False
        self.preposition_choices = []
        self.case_choices = []

    def _refresh_choices(self):
        item = self.current_item
        self.preposition_choices = preposition_choices(item, self.rng)
        self.case_choices = case_choices(item)

    def _restart_round(self):
        """Drop a half-entered guess after a settings change."""
        if self.state == SessionState.PRESENTING:
            self.guess = Guess()
            self._refresh_choices()

    def _advance(self):
        self._clear_round()
        self.round_number += 1
        index = select_next(len(self.items), self.snapshot.learned_keys, self.keys.__getitem__, self.rng)
        self.current_index = index
        if index is None:
            self.state = SessionState.SESSION_COMPLETE
            logger.info(f"All {self.total_count} items of '{self.dataset_id}' learned")
            return
        self.state = SessionState.PRESENTING
        self._refresh_choices()
