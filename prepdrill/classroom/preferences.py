"""
Learner preferences - quiz configuration, UI language, selected dataset.

Stored in the "settings" namespace, independent of any dataset's progress.
Each value falls back to its own default when absent or unparsable.
"""

import logging
import re
from typing import Optional

from pydantic import ValidationError

from prepdrill.schemas import FALLBACK_LANGUAGE, QuizConfiguration

from .errors import PersistenceReadError, PersistenceWriteError
from .storage import KeyValueStore


logger = logging.getLogger(__name__)

SETTINGS_NAMESPACE = "settings"

QUIZ_CONFIG_KEY = "quiz_config"
LANGUAGE_KEY = "language"
DATASET_KEY = "dataset"

LANGUAGE_PATTERN = re.compile(r'^[a-z]{2}$')


class PreferencesStore:
    """Read and write learner preferences through a key-value backend."""

    def __init__(self, backend: KeyValueStore):
        self.backend = backend
        self.degraded = False

    def _get(self, key: str) -> Optional[str]:
        try:
            return self.backend.get(SETTINGS_NAMESPACE, key)
        except PersistenceReadError as e:
            logger.warning(f"Setting '{key}' unreadable, using default: {e}")
            return None

    def _set(self, key: str, value: str):
        try:
            self.backend.set(SETTINGS_NAMESPACE, key, value)
        except PersistenceWriteError as e:
            logger.warning(f"Setting '{key}' not saved: {e}")
            self.degraded = True

    # -------------------------------------------------------------------------
    # Quiz configuration
    # -------------------------------------------------------------------------

    def get_quiz_configuration(self) -> QuizConfiguration:
        raw = self._get(QUIZ_CONFIG_KEY)
        if raw is None:
            return QuizConfiguration()
        try:
            return QuizConfiguration.model_validate_json(raw)
        except ValidationError:
            logger.warning("Stored quiz configuration is malformed, using defaults")
            return QuizConfiguration()

    def set_quiz_configuration(self, config: QuizConfiguration):
        self._set(QUIZ_CONFIG_KEY, config.model_dump_json())

    # -------------------------------------------------------------------------
    # UI language
    # -------------------------------------------------------------------------

    def get_language(self) -> str:
        raw = self._get(LANGUAGE_KEY)
        if raw is None or not LANGUAGE_PATTERN.match(raw):
            return FALLBACK_LANGUAGE
        return raw

    def set_language(self, language: str):
        language = language.strip().lower()
        if not LANGUAGE_PATTERN.match(language):
            raise ValueError(f"Invalid language code: {language!r}")
        self._set(LANGUAGE_KEY, language)

    # -------------------------------------------------------------------------
    # Selected dataset
    # -------------------------------------------------------------------------

    def get_dataset_id(self) -> Optional[str]:
        return self._get(DATASET_KEY) or None

    def set_dataset_id(self, dataset_id: str):
        self._set(DATASET_KEY, dataset_id)
