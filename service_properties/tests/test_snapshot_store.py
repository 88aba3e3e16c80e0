"""
Unit tests for the snapshot store.
"""

import threading

import pytest

from service_properties.app.models import Property
from service_properties.app.store import SnapshotStore
from shared.errors import PropertyNotFoundError
from shared.test_helpers import TestDataFactory


def make_properties(*slugs):
    return [Property.model_validate(doc) for doc in TestDataFactory.create_property_documents(list(slugs))]


class TestSnapshotStore:
    """Test cases for SnapshotStore."""

    @pytest.fixture
    def store(self):
        """Create an empty store."""
        return SnapshotStore()

    def test_starts_empty(self, store):
        """The snapshot is empty until the first replace."""
        assert store.read_all() == []
        assert len(store) == 0
        assert store.snapshot().generation == 0
        assert store.snapshot().refreshed_at is None

    def test_replace_installs_new_list(self, store):
        """Replace makes the new list visible."""
        snapshot = store.replace(make_properties("a", "b"))

        assert [p.slug.current for p in store.read_all()] == ["a", "b"]
        assert snapshot.generation == 1
        assert snapshot.refreshed_at is not None

    def test_replace_is_wholesale(self, store):
        """Items absent from a new list disappear."""
        store.replace(make_properties("a", "b"))
        store.replace(make_properties("c"))

        assert [p.slug.current for p in store.read_all()] == ["c"]
        assert store.snapshot().generation == 2

    def test_read_all_returns_copy(self, store):
        """Mutating the returned list does not touch the snapshot."""
        store.replace(make_properties("a"))

        items = store.read_all()
        items.clear()

        assert len(store.read_all()) == 1

    def test_replace_copies_input(self, store):
        """Mutating the list passed to replace does not touch the snapshot."""
        items = make_properties("a")
        store.replace(items)
        items.append(make_properties("b")[0])

        assert len(store) == 1

    def test_read_by_slug_hit(self, store):
        """Lookup returns the matching property."""
        store.replace(make_properties("a", "garden-heights"))

        assert store.read_by_slug("garden-heights").id == "prop-garden-heights"

    def test_read_by_slug_miss(self, store):
        """Lookup miss raises PropertyNotFoundError."""
        store.replace(make_properties("a"))

        with pytest.raises(PropertyNotFoundError) as exc_info:
            store.read_by_slug("does-not-exist")

        assert exc_info.value.slug == "does-not-exist"
        assert exc_info.value.message == "Property not found"

    def test_read_by_slug_first_duplicate_wins(self, store):
        """With duplicate slugs the earliest entry is returned."""
        first = Property.model_validate(TestDataFactory.create_property_document("dup", _id="first"))
        second = Property.model_validate(TestDataFactory.create_property_document("dup", _id="second"))
        store.replace([first, second])

        assert store.read_by_slug("dup").id == "first"

    def test_held_snapshot_unaffected_by_replace(self, store):
        """A reader holding a snapshot keeps seeing it after a replace."""
        store.replace(make_properties("a", "b"))
        held = store.snapshot()

        store.replace(make_properties("c"))

        assert [p.slug.current for p in held.properties] == ["a", "b"]

    def test_concurrent_reads_see_complete_snapshots(self, store):
        """Readers racing a writer only ever see whole lists."""
        batches = [make_properties(*[f"gen{n}-{i}" for i in range(50)]) for n in range(20)]
        valid = {tuple(p.slug.current for p in batch) for batch in batches}
        valid.add(())
        seen = []
        done = threading.Event()

        def reader():
            while True:
                seen.append(tuple(p.slug.current for p in store.read_all()))
                if done.is_set():
                    break

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for thread in threads:
            thread.start()
        for batch in batches:
            store.replace(batch)
        done.set()
        for thread in threads:
            thread.join()

        assert seen
        assert all(observed in valid for observed in seen)
