"""
Content schemas for PrepDrill.

Defines Pydantic models for drill content including:
- Item: one quiz row (verb/preposition/case triple or declension sentence)
- Guess: a learner's answer, possibly partial
- DatasetEntry: one row of the dataset catalog
"""

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


logger = logging.getLogger(__name__)

FALLBACK_LANGUAGE = "en"


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    """Shared normalization: strip text, treat blank as absent."""
    if v is None:
        return None
    v = str(v).strip()
    return v or None


class Item(BaseModel):
    """
    One content row, immutable for the session.

    Identity is not stored on the item; it is derived from its fields
    (see prepdrill.classroom.keys.derive_key).
    """
    model_config = ConfigDict(frozen=True)

    primary_text: str = Field(..., min_length=1)
    expected_preposition: Optional[str] = None
    expected_case: Optional[str] = None
    wrong_prepositions: list[str] = []
    translations: dict[str, str] = {}
    example: str = ""
    example_translations: dict[str, str] = {}

    @field_validator('primary_text')
    @classmethod
    def primary_text_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('primary_text must not be blank')
        return v

    @field_validator('expected_preposition', 'expected_case', mode='before')
    @classmethod
    def optional_text(cls, v):
        return _blank_to_none(v)

    @field_validator('example', mode='before')
    @classmethod
    def example_text(cls, v):
        return _blank_to_none(v) or ""

    @field_validator('wrong_prepositions', mode='before')
    @classmethod
    def drop_blank_candidates(cls, v):
        if v is None:
            return []
        return [str(p).strip() for p in v if str(p).strip()]

    @field_validator('translations', 'example_translations', mode='before')
    @classmethod
    def drop_blank_translations(cls, v):
        if v is None:
            return {}
        return {str(lang).strip().lower(): str(text).strip()
                for lang, text in dict(v).items() if str(text).strip()}

    def translation_for(self, language: str) -> Optional[str]:
        """Translation of the primary text, falling back to English."""
        return _pick_translation(self.translations, language, self.primary_text)

    def example_translation_for(self, language: str) -> Optional[str]:
        """Translation of the example sentence, falling back to English."""
        return _pick_translation(self.example_translations, language, self.primary_text)


def _pick_translation(table: dict[str, str], language: str, label: str) -> Optional[str]:
    """
    Look up a translation by language code.

    Order: requested language, English, any available language.
    Returns None when the item carries no translation at all.
    """
    language = (language or FALLBACK_LANGUAGE).lower()
    if language in table:
        return table[language]
    if not table:
        logger.warning(f"No translation available for '{label}'")
        return None
    if FALLBACK_LANGUAGE in table:
        logger.warning(f"Missing '{language}' translation for '{label}', falling back to English")
        return table[FALLBACK_LANGUAGE]
    fallback = sorted(table)[0]
    logger.warning(f"Missing '{language}' translation for '{label}', falling back to '{fallback}'")
    return table[fallback]


class Guess(BaseModel):
    """A submitted (or partially entered) answer."""
    preposition: Optional[str] = None
    case: Optional[str] = None


class DatasetEntry(BaseModel):
    """One dataset in the catalog (datasets.yaml)."""
    id: str = Field(..., pattern=r'^[A-Za-z0-9_\-]+$')
    label: str
    source: str
