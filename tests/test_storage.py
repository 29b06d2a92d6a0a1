"""Tests for progress and preference persistence."""

import pytest

from prepdrill.classroom import (
    InMemoryKeyValueStore,
    PersistenceReadError,
    PreferencesStore,
    ProgressStore,
    SQLiteKeyValueStore,
)
from prepdrill.schemas import Level, ProgressSnapshot, QuizConfiguration, QuizMode

from conftest import FailingWriteStore


class FailingReadStore(InMemoryKeyValueStore):

    def get(self, namespace, key):
        raise PersistenceReadError("disk gone")


@pytest.fixture(params=["memory", "sqlite"])
def any_backend(request, tmp_path):
    if request.param == "memory":
        return InMemoryKeyValueStore()
    return SQLiteKeyValueStore(tmp_path / "progress.db")


class TestProgressStore:

    def test_missing_dataset_is_empty(self, any_backend):
        snapshot = ProgressStore(any_backend).load("verbs")
        assert snapshot.score == 0
        assert snapshot.learned_keys == set()
        assert snapshot.attempts == {}

    def test_round_trip(self, any_backend):
        store = ProgressStore(any_backend)
        saved = ProgressSnapshot(learned_keys={"a", "b"}, attempts={"a": 3, "b": 0, "c": 2})
        store.save("verbs", saved)
        loaded = store.load("verbs")
        assert loaded.score == saved.score
        assert loaded.learned_keys == saved.learned_keys
        assert loaded.attempts == saved.attempts

    def test_save_is_idempotent(self, any_backend):
        store = ProgressStore(any_backend)
        snapshot = ProgressSnapshot(learned_keys={"a"}, attempts={"a": 3})
        store.save("verbs", snapshot)
        store.save("verbs", snapshot)
        assert store.load("verbs") == snapshot

    def test_datasets_are_isolated(self, any_backend):
        store = ProgressStore(any_backend)
        store.save("verbs", ProgressSnapshot(learned_keys={"a"}, attempts={"a": 3}))
        store.save("adjectives", ProgressSnapshot(attempts={"x": 1}))
        assert store.load("verbs").learned_keys == {"a"}
        assert store.load("adjectives").learned_keys == set()
        assert store.load("adjectives").attempts == {"x": 1}

    @pytest.mark.parametrize("raw", [
        "not json",
        "[]",
        '{"learned_keys": 5}',
        '{"attempts": {"a": -1}}',
        '{"attempts": {"a": "many"}}',
    ])
    def test_malformed_is_empty(self, raw):
        backend = InMemoryKeyValueStore()
        backend.set("progress", "verbs", raw)
        assert ProgressStore(backend).load("verbs") == ProgressSnapshot()

    def test_unreadable_is_empty(self):
        assert ProgressStore(FailingReadStore()).load("verbs") == ProgressSnapshot()

    def test_stored_score_is_recomputed(self):
        backend = InMemoryKeyValueStore()
        backend.set("progress", "verbs", '{"score": 7, "learned_keys": ["a"], "attempts": {"a": 3}}')
        assert ProgressStore(backend).load("verbs").score == 1

    def test_old_counters_repaired(self):
        backend = InMemoryKeyValueStore()
        backend.set("progress", "verbs", '{"learned_keys": [], "attempts": {"a": 4}}')
        assert ProgressStore(backend).load("verbs").learned_keys == {"a"}

    def test_write_failure_is_absorbed(self):
        store = ProgressStore(FailingWriteStore())
        store.save("verbs", ProgressSnapshot(learned_keys={"a"}))
        assert store.degraded is True

    def test_reset(self, any_backend):
        store = ProgressStore(any_backend)
        store.save("verbs", ProgressSnapshot(learned_keys={"a"}, attempts={"a": 3}))
        assert store.reset("verbs") == ProgressSnapshot()
        assert store.load("verbs") == ProgressSnapshot()


class TestSQLiteKeyValueStore:

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "progress.db"
        SQLiteKeyValueStore(path).set("progress", "verbs", "{}")
        assert SQLiteKeyValueStore(path).get("progress", "verbs") == "{}"

    def test_namespaces_are_separate(self, tmp_path):
        store = SQLiteKeyValueStore(tmp_path / "progress.db")
        store.set("progress", "x", "1")
        store.set("settings", "x", "2")
        assert store.get("progress", "x") == "1"
        assert store.get("settings", "x") == "2"

    def test_overwrite(self, tmp_path):
        store = SQLiteKeyValueStore(tmp_path / "progress.db")
        store.set("progress", "x", "1")
        store.set("progress", "x", "2")
        assert store.get("progress", "x") == "2"


class TestPreferencesStore:

    def test_defaults(self):
        prefs = PreferencesStore(InMemoryKeyValueStore())
        assert prefs.get_quiz_configuration() == QuizConfiguration()
        assert prefs.get_language() == "en"
        assert prefs.get_dataset_id() is None

    def test_round_trip(self, any_backend):
        prefs = PreferencesStore(any_backend)
        config = QuizConfiguration(mode=QuizMode.CASE_ONLY, level=Level.TEXT_INPUT)
        prefs.set_quiz_configuration(config)
        prefs.set_language("FR")
        prefs.set_dataset_id("adjectives")
        assert prefs.get_quiz_configuration() == config
        assert prefs.get_language() == "fr"
        assert prefs.get_dataset_id() == "adjectives"

    def test_malformed_configuration_uses_default(self):
        backend = InMemoryKeyValueStore()
        backend.set("settings", "quiz_config", '{"mode": "everything"}')
        assert PreferencesStore(backend).get_quiz_configuration() == QuizConfiguration()

    def test_malformed_language_uses_default(self):
        backend = InMemoryKeyValueStore()
        backend.set("settings", "language", "klingon")
        assert PreferencesStore(backend).get_language() == "en"

    def test_invalid_language_rejected(self):
        with pytest.raises(ValueError):
            PreferencesStore(InMemoryKeyValueStore()).set_language("english")

    def test_independent_of_progress(self):
        backend = InMemoryKeyValueStore()
        PreferencesStore(backend).set_quiz_configuration(QuizConfiguration(mode=QuizMode.CASE_ONLY))
        ProgressStore(backend).reset("verbs")
        assert PreferencesStore(backend).get_quiz_configuration().mode == QuizMode.CASE_ONLY
        assert backend.get("settings", "quiz_config") is not None
        assert backend.get("progress", "verbs") is not None

    def test_write_failure_is_absorbed(self):
        prefs = PreferencesStore(FailingWriteStore())
        prefs.set_language("de")
        assert prefs.degraded is True
