"""
Integrity Store Unit Tests
Tests for core/integrity/store.py and core/integrity/root_log.py

Tests:
- Store / compare / detect_updates semantics
- Log persistence: append, reload, last entry wins per label
- Malformed and invalid entries
"""
import pytest

from core.integrity import (
    IntegrityStore,
    RootRecord,
    append_record,
    iter_records,
    load_latest,
    make_record,
    parse_line,
)
from core.schemas.errors import InputError, StateError, StorageError
from core.schemas.results import IntegrityStatus, RootComparison, UpdateStatus

ROOT_A = "a" * 64
ROOT_B = "b" * 64


class TestStoreAndCompare:
    """In-memory behaviour."""

    def test_compare_matching_root(self):
        """A stored root compares VERIFIED."""
        store = IntegrityStore()
        store.store_root("electronics", ROOT_A)
        assert store.compare("electronics", ROOT_A) == IntegrityStatus.VERIFIED

    def test_compare_differing_root(self):
        """A different candidate compares VIOLATED."""
        store = IntegrityStore()
        store.store_root("electronics", ROOT_A)
        assert store.compare("electronics", ROOT_B) == IntegrityStatus.VIOLATED

    def test_unknown_label(self):
        """An unknown label compares NOT_FOUND."""
        assert IntegrityStore().compare("nothing", ROOT_A) == IntegrityStatus.NOT_FOUND

    def test_empty_candidate_is_error(self):
        """An empty candidate root compares ERROR."""
        store = IntegrityStore()
        store.store_root("electronics", ROOT_A)
        assert store.compare("electronics", "") == IntegrityStatus.ERROR

    def test_compare_defaults_to_current_root(self):
        """Without a candidate, the last stored root is used."""
        store = IntegrityStore()
        store.store_root("books", ROOT_A)
        store.store_root("music", ROOT_B)
        assert store.current_label == "music"
        assert store.current_root == ROOT_B
        assert store.compare("music") == IntegrityStatus.VERIFIED
        assert store.compare("books") == IntegrityStatus.VIOLATED

    def test_compare_root_alias(self):
        """compare_root is the same operation."""
        store = IntegrityStore()
        store.store_root("x", ROOT_A)
        assert store.compare_root("x", ROOT_A) == IntegrityStatus.VERIFIED

    def test_upsert(self):
        """Storing again replaces the label's root."""
        store = IntegrityStore()
        store.store_root("x", ROOT_A)
        store.store_root("x", ROOT_B)
        assert store.get_root("x") == ROOT_B
        assert store.stored_roots() == {"x": ROOT_B}

    def test_detect_updates(self):
        """UNKNOWN, NO_UPDATES and UPDATE_DETECTED."""
        store = IntegrityStore()
        assert store.detect_updates("x", ROOT_A) == UpdateStatus.UNKNOWN
        store.store_root("x", ROOT_A)
        assert store.detect_updates("x", ROOT_A) == UpdateStatus.NO_UPDATES
        assert store.detect_updates("x", ROOT_B) == UpdateStatus.UPDATE_DETECTED

    def test_compare_roots(self):
        """Stateless pairwise comparison."""
        assert IntegrityStore.compare_roots(ROOT_A, ROOT_A) == RootComparison.MATCH
        assert IntegrityStore.compare_roots(ROOT_A, ROOT_B) == RootComparison.DIFFER
        assert IntegrityStore.compare_roots("", ROOT_B) == RootComparison.ERROR
        assert IntegrityStore.compare_roots(ROOT_A, None) == RootComparison.ERROR

    def test_clear(self):
        """clear() forgets roots and the current root."""
        store = IntegrityStore()
        store.store_root("x", ROOT_A)
        store.clear()
        assert not store.has_root("x")
        assert store.current_root is None

    @pytest.mark.parametrize("label", ["", "a|b", "line\nbreak"])
    def test_invalid_label(self, label):
        """Empty labels and labels with delimiters are rejected."""
        with pytest.raises(InputError):
            IntegrityStore().store_root(label, ROOT_A)


class TestPersistence:
    """Root log persistence."""

    def test_store_persist_and_reload(self, root_log):
        """A persisted root survives a fresh store."""
        IntegrityStore(root_log).store_root("electronics", ROOT_A, persist=True)
        reloaded = IntegrityStore(root_log)
        assert reloaded.load() == 1
        assert reloaded.get_root("electronics") == ROOT_A
        assert reloaded.compare("electronics", ROOT_A) == IntegrityStatus.VERIFIED

    def test_last_entry_wins(self, root_log):
        """Reload keeps the last entry per label in file order."""
        store = IntegrityStore(root_log)
        store.save_root("x", ROOT_A)
        store.save_root("y", ROOT_A)
        store.save_root("x", ROOT_B)
        assert store.load() == 3
        assert store.stored_roots() == {"x": ROOT_B, "y": ROOT_A}

    def test_save_root_does_not_touch_memory(self, root_log):
        """save_root only appends to the log."""
        store = IntegrityStore(root_log)
        store.save_root("x", ROOT_A)
        assert not store.has_root("x")

    def test_line_format(self, root_log):
        """Entries are label|root|timestamp lines."""
        append_record(root_log, make_record("x", ROOT_A, timestamp=1700000000))
        assert root_log.read_text(encoding="utf-8") == f"x|{ROOT_A}|1700000000\n"

    def test_malformed_lines_skipped(self, root_log):
        """Blank and malformed lines are ignored on load."""
        root_log.parent.mkdir(parents=True)
        root_log.write_text(
            f"x|{ROOT_A}|1\n"
            "\n"
            "garbage\n"
            f"y|{ROOT_B}|notanumber\n"
            f"z|{ROOT_B}\n",
            encoding="utf-8",
        )
        latest, count = load_latest(root_log)
        assert count == 2
        assert set(latest) == {"x", "z"}
        assert latest["z"].timestamp == 0

    def test_load_without_path(self):
        """load() needs a configured path."""
        with pytest.raises(StateError):
            IntegrityStore().load()

    def test_persist_without_path(self):
        """persist=True needs a configured path."""
        with pytest.raises(StateError):
            IntegrityStore().store_root("x", ROOT_A, persist=True)

    def test_missing_log(self, root_log):
        """Loading a missing log is a StorageError."""
        with pytest.raises(StorageError):
            IntegrityStore(root_log).load()

    def test_undecodable_log(self, root_log):
        """A log that is not valid UTF-8 is a StorageError carrying the path."""
        root_log.parent.mkdir(parents=True)
        root_log.write_bytes(f"x|{ROOT_A}|1\n".encode("ascii") + b"\xff\xfe|bad|2\n")
        with pytest.raises(StorageError) as exc_info:
            IntegrityStore(root_log).load()
        assert exc_info.value.details["path"] == str(root_log)

    def test_iter_records_order(self, root_log):
        """Records are yielded in file order."""
        for label in ("a", "b", "c"):
            append_record(root_log, make_record(label, ROOT_A, timestamp=5))
        assert [r.label for r in iter_records(root_log)] == ["a", "b", "c"]


class TestParseLine:
    """Tests for parse_line()."""

    def test_round_trip_line(self):
        """to_line() output parses back to the same record."""
        record = RootRecord(label="x", root_hash=ROOT_A, timestamp=42)
        assert parse_line(record.to_line() + "\n") == record

    @pytest.mark.parametrize("line", ["", "   ", "onlylabel", "|hash|1", "label||1"])
    def test_rejects(self, line):
        """Incomplete lines parse to None."""
        assert parse_line(line) is None
