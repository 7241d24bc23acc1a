"""
Tests for the mantafs.events module.
"""

from mantafs.events import CollectingEventSink, FilesystemEvent


class TestFilesystemEvent:
    """Tests for FilesystemEvent."""

    def test_defaults(self):
        event = FilesystemEvent(operation="open", path="~~/a", key="/bob/a")

        assert event.event_type == "filesystem.open"
        assert event.event_id
        assert event.timestamp > 0
        assert event.metadata == {}

    def test_unique_ids(self):
        assert FilesystemEvent("open").event_id != FilesystemEvent("open").event_id


class TestCollectingEventSink:
    """Tests for CollectingEventSink."""

    def test_collects_events(self):
        sink = CollectingEventSink()

        sink(FilesystemEvent("create"))
        sink(FilesystemEvent("delete"))

        assert sink.operations() == ["create", "delete"]

    def test_clear(self):
        sink = CollectingEventSink()
        sink(FilesystemEvent("create"))

        sink.clear()

        assert sink.events == []
