"""Exception types raised by PrepDrill classroom components."""

from enum import Enum
from typing import Optional


class PrepDrillError(Exception):
    """Base class for PrepDrill errors."""


class DatasetLoadErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    EMPTY = "empty"
    MALFORMED = "malformed"


class DatasetLoadError(PrepDrillError):
    """A dataset source could not be turned into items. Fatal to session start."""

    def __init__(self, kind: DatasetLoadErrorKind, source: str, message: Optional[str] = None):
        self.kind = kind
        self.source = source
        self.message = message or kind.value.replace("_", " ")
        super().__init__(f"{self.message}: {source}")


class PersistenceReadError(PrepDrillError):
    """Stored data could not be read from the backend."""


class PersistenceWriteError(PrepDrillError):
    """Stored data could not be written to the backend."""
