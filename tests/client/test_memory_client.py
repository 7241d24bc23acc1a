"""
Tests for the mantafs.client.memory module.

This module tests:
- HEAD tagged results and header round trips
- Paginated listings and continuation tokens
- Write streams, moves and deletes
- Error behaviour for missing keys and directory conflicts
"""

import pytest

from mantafs.client.base import ObjectStoreClient
from mantafs.client.memory import InMemoryObjectStoreClient
from mantafs.exceptions import CollaboratorError, NotFoundError
from mantafs.filesystem.data_models import EntryType, HeadStatus


@pytest.fixture
def client():
    return InMemoryObjectStoreClient(page_size=2)


class TestHead:
    """Tests for head."""

    def test_is_object_store_client(self, client):
        assert isinstance(client, ObjectStoreClient)

    def test_root_exists(self, client):
        result = client.head("/")

        assert result.status == HeadStatus.FOUND
        assert result.record.is_directory

    def test_missing_key(self, client):
        assert client.head("/nope").status == HeadStatus.NOT_FOUND

    def test_object_metadata(self, client):
        client.put("/bob/a.json", b"{}", {"content-type": "application/json", "durability-level": "3"})

        record = client.head("/bob/a.json").record

        assert record.type == EntryType.FILE
        assert record.size == 2
        assert record.content_type == "application/json"
        assert record.durability == 3
        assert record.etag
        assert record.last_modified is not None

    def test_closed_client_reports_failure(self, client):
        client.close()

        result = client.head("/")

        assert result.status == HeadStatus.FAILED
        assert isinstance(result.error, CollaboratorError)


class TestWrites:
    """Tests for put and write streams."""

    def test_put_creates_parents(self, client):
        client.put("/bob/stor/deep/a", b"x")

        assert client.head("/bob/stor/deep").record.is_directory
        assert client.head("/bob").record.is_directory

    def test_default_content_type(self, client):
        client.put("/a", b"x")

        assert client.head("/a").record.content_type == "application/octet-stream"

    def test_write_stream_commits_on_close(self, client):
        stream = client.get_write_stream("/bob/a", {"durability-level": "4"})
        stream.write(b"abc")

        assert not client.exists_and_accessible("/bob/a")

        stream.close()

        assert client.get_read_channel("/bob/a").read() == b"abc"
        assert client.head("/bob/a").record.durability == 4

    def test_write_over_directory_fails(self, client):
        client.put_directory("/bob/dir")

        with pytest.raises(CollaboratorError):
            client.put("/bob/dir", b"x")
        with pytest.raises(CollaboratorError):
            client.get_write_stream("/bob/dir")

    def test_read_missing(self, client):
        with pytest.raises(NotFoundError):
            client.get_read_channel("/nope")

    def test_read_directory(self, client):
        with pytest.raises(CollaboratorError):
            client.get_read_channel("/")


class TestListing:
    """Tests for list_page."""

    def test_pages(self, client):
        for name in ["c", "a", "b"]:
            client.put(f"/bob/{name}", b"")

        first = client.list_page("/bob")
        second = client.list_page("/bob", first.continuation_token)

        assert [r.name for r in first.records] == ["a", "b"]
        assert first.continuation_token == "b"
        assert [r.name for r in second.records] == ["c"]
        assert second.is_last

    def test_exact_page_has_no_token(self, client):
        client.put("/bob/a", b"")
        client.put("/bob/b", b"")

        assert client.list_page("/bob").is_last

    def test_lists_only_direct_children(self, client):
        client.put("/bob/a/deep", b"")
        client.put("/bob/b", b"")

        page = client.list_page("/bob")

        assert [(r.name, r.type) for r in page.records] == [("a", EntryType.DIRECTORY), ("b", EntryType.FILE)]

    def test_listing_missing_directory(self, client):
        with pytest.raises(NotFoundError):
            client.list_page("/nope")

    def test_listing_object(self, client):
        client.put("/a", b"")

        with pytest.raises(CollaboratorError):
            client.list_page("/a")

    def test_limit_caps_page_size(self, client):
        for name in ["a", "b", "c"]:
            client.put(f"/bob/{name}", b"")

        page = client.list_page("/bob", limit=1)

        assert [r.name for r in page.records] == ["a"]
        assert page.continuation_token == "a"

    def test_limit_above_page_size_is_ignored(self, client):
        for name in ["a", "b", "c"]:
            client.put(f"/bob/{name}", b"")

        page = client.list_page("/bob", limit=100)

        assert len(page) == client.page_size

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            InMemoryObjectStoreClient(page_size=0)


class TestNamespace:
    """Tests for delete, move and put_directory."""

    def test_delete_non_empty_directory_fails(self, client):
        client.put("/bob/a", b"")

        with pytest.raises(CollaboratorError) as exc_info:
            client.delete("/bob")

        assert exc_info.value.status_code == 400

    def test_delete_recursive(self, client):
        client.put("/bob/x/y/z", b"")

        client.delete_recursive("/bob/x")

        assert not client.exists_and_accessible("/bob/x/y/z")
        assert client.exists_and_accessible("/bob")

    def test_delete_recursive_does_not_touch_siblings_with_common_prefix(self, client):
        client.put("/bob/x/a", b"")
        client.put("/bob/xy", b"")

        client.delete_recursive("/bob/x")

        assert client.exists_and_accessible("/bob/xy")

    def test_delete_missing(self, client):
        with pytest.raises(NotFoundError):
            client.delete("/nope")

    def test_delete_root(self, client):
        with pytest.raises(CollaboratorError):
            client.delete_recursive("/")

    def test_move_into_itself(self, client):
        client.put_directory("/bob/x")

        with pytest.raises(CollaboratorError):
            client.move("/bob/x", "/bob/x/y")

    def test_put_directory_idempotent(self, client):
        assert client.put_directory("/bob/d") is True
        assert client.put_directory("/bob/d") is True

    def test_calls_are_recorded(self, client):
        client.exists_and_accessible("/bob")

        assert client.calls[-1] == ("exists_and_accessible", "/bob")

    def test_closed_client_raises(self, client):
        client.close()

        with pytest.raises(CollaboratorError):
            client.exists_and_accessible("/")
