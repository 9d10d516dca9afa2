"""Tests for the kclcat.sync module."""

import json
from unittest.mock import MagicMock

import pytest

from kclcat.cache import CacheEntry, LocalCache
from kclcat.errors import ConfigMissing, RemoteUnavailable
from kclcat.ghremote import RemoteFile
from kclcat.sync import synchronize


def _fake_client(files, authors):
    client = MagicMock()
    client.list_files.return_value = files
    client.latest_author.side_effect = lambda file_id: authors[file_id]
    return client


def _write_cache(cache, data):
    cache.path.parent.mkdir(parents=True, exist_ok=True)
    cache.path.write_text(json.dumps(data))


class TestSynchronize:
    """Tests for synchronize."""

    def test_end_to_end(self, config, tmp_path):
        cache = LocalCache(data_dir=tmp_path)
        _write_cache(
            cache, {"a": {"sha": "sha0", "mass": 1.23, "mass-unit": "lb", "author": "Old"}}
        )
        client = _fake_client(
            [
                RemoteFile(file_id="a", name="a.kcl", sha="sha1"),
                RemoteFile(file_id="b", name="b.kcl", sha="sha2"),
            ],
            {"a": "Alice", "b": "Bob"},
        )

        state = synchronize(config, cache, client)

        expected = {
            "a": CacheEntry(sha="sha1", mass=1.23, mass_unit="lb", author="Alice"),
            "b": CacheEntry(sha="sha2", mass=None, mass_unit=None, author="Bob"),
        }
        assert state.entries == expected
        assert cache.load().entries == expected

    def test_one_author_lookup_per_file(self, config, tmp_path):
        """Authors are always refreshed, even with unchanged fingerprints."""
        cache = LocalCache(data_dir=tmp_path)
        _write_cache(cache, {"a": {"sha": "sha1", "author": "Alice"}})
        client = _fake_client(
            [
                RemoteFile(file_id="a", name="a.kcl", sha="sha1"),
                RemoteFile(file_id="b", name="b.kcl", sha="sha2"),
            ],
            {"a": "Carol", "b": "Bob"},
        )

        state = synchronize(config, cache, client)

        client.list_files.assert_called_once_with()
        assert [c.args for c in client.latest_author.call_args_list] == [("a",), ("b",)]
        assert state.entries["a"].author == "Carol"

    def test_keeps_entries_not_listed_remotely(self, config, tmp_path):
        cache = LocalCache(data_dir=tmp_path)
        _write_cache(cache, {"gone": {"sha": "sha0", "author": "Old"}})
        client = _fake_client([RemoteFile(file_id="a", name="a.kcl", sha="sha1")], {"a": "Alice"})

        state = synchronize(config, cache, client)

        assert set(state.entries) == {"gone", "a"}

    def test_missing_config(self, tmp_path):
        cache = LocalCache(data_dir=tmp_path)
        client = MagicMock()

        with pytest.raises(ConfigMissing):
            synchronize(None, cache, client)

        client.list_files.assert_not_called()
        assert not cache.path.exists()

    def test_listing_failure_leaves_cache_untouched(self, config, tmp_path):
        cache = LocalCache(data_dir=tmp_path)
        _write_cache(cache, {"a": {"sha": "sha0", "mass": 1.0, "mass-unit": "kg", "author": "X"}})
        before = cache.path.read_text()
        client = MagicMock()
        client.list_files.side_effect = RemoteUnavailable("status 500")

        with pytest.raises(RemoteUnavailable):
            synchronize(config, cache, client)

        assert cache.path.read_text() == before

    def test_author_failure_leaves_cache_untouched(self, config, tmp_path):
        cache = LocalCache(data_dir=tmp_path)
        _write_cache(cache, {"a": {"sha": "sha0", "author": "X"}})
        before = cache.path.read_text()
        client = MagicMock()
        client.list_files.return_value = [
            RemoteFile(file_id="a", name="a.kcl", sha="sha1"),
            RemoteFile(file_id="b", name="b.kcl", sha="sha2"),
        ]
        client.latest_author.side_effect = ["Alice", RemoteUnavailable("status 502")]

        with pytest.raises(RemoteUnavailable):
            synchronize(config, cache, client)

        assert cache.path.read_text() == before

    def test_first_run_creates_cache(self, config, tmp_path):
        cache = LocalCache(data_dir=tmp_path)
        client = _fake_client([], {})

        state = synchronize(config, cache, client)

        assert state.entries == {}
        assert json.loads(cache.path.read_text()) == {}
