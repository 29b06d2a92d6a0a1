"""Shared fixtures for PrepDrill tests."""

import random

import pytest

from prepdrill.classroom import (
    DatasetLoadError,
    DatasetLoadErrorKind,
    InMemoryKeyValueStore,
    PersistenceWriteError,
    PreferencesStore,
    ProgressStore,
    SessionController,
)
from prepdrill.schemas import Item


def make_item(primary_text="denken", preposition="an", case="Akk", example=None, **kwargs) -> Item:
    return Item(
        primary_text=primary_text,
        expected_preposition=preposition,
        expected_case=case,
        example=example if example is not None else f"Beispiel mit {primary_text}.",
        **kwargs,
    )


class StaticLoader:
    """Loader returning canned datasets keyed by source."""

    def __init__(self, datasets: dict[str, list[Item]]):
        self.datasets = datasets
        self.calls = []

    def load(self, source: str) -> list[Item]:
        self.calls.append(source)
        if source not in self.datasets:
            raise DatasetLoadError(DatasetLoadErrorKind.NOT_FOUND, source, "CSV file not found")
        return self.datasets[source]


class FailingWriteStore(InMemoryKeyValueStore):
    """In-memory store whose writes always fail."""

    def set(self, namespace, key, value):
        raise PersistenceWriteError("quota exceeded")


@pytest.fixture
def verbs():
    return [
        make_item("denken", "an", "Akk"),
        make_item("warten", "auf", "Akk"),
        make_item("teilnehmen", "an", "Dat"),
        make_item("sprechen", "mit", "Dat"),
        make_item("träumen", "von", "Dat"),
    ]


@pytest.fixture
def adjectives():
    return [
        make_item("stolz", "auf", "Akk"),
        make_item("abhängig", "von", "Dat"),
    ]


@pytest.fixture
def backend():
    return InMemoryKeyValueStore()


@pytest.fixture
def progress_store(backend):
    return ProgressStore(backend)


@pytest.fixture
def preferences(backend):
    return PreferencesStore(backend)


@pytest.fixture
def loader(verbs, adjectives):
    return StaticLoader({"verbs.csv": verbs, "adjectives.csv": adjectives})


@pytest.fixture
def controller(progress_store, preferences, loader):
    return SessionController(progress_store, preferences, loader=loader, rng=random.Random(7))
