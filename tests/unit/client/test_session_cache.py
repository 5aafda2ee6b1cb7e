"""
Unit tests for session caches.
"""

import os
import stat

from huissier.client import FileSessionCache, InMemorySessionCache
from huissier.domain.entities.session import AuthSession

SESSION = AuthSession(
    identity_id="user-123",
    token="tok-1",
    wallet_address="7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU",
)


class TestInMemorySessionCache:
    """Tests for the process-local cache."""

    def test_set_get_clear(self):
        """Test basic lifecycle."""
        cache = InMemorySessionCache()
        assert cache.get() is None

        cache.set(SESSION)
        assert cache.get() == SESSION

        cache.clear()
        assert cache.get() is None


class TestFileSessionCache:
    """Tests for the JSON file cache."""

    def test_persists_across_instances(self, tmp_path):
        """Test session written by one cache is loaded by the next."""
        path = tmp_path / "session.json"
        FileSessionCache(path).set(SESSION)

        assert FileSessionCache(path).get() == SESSION

    def test_file_is_private(self, tmp_path):
        """Test cache file is readable by owner only."""
        path = tmp_path / "session.json"
        FileSessionCache(path).set(SESSION)

        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600

    def test_clear_removes_file(self, tmp_path):
        """Test clear deletes the file and tolerates a missing one."""
        path = tmp_path / "session.json"
        cache = FileSessionCache(path)
        cache.set(SESSION)

        cache.clear()
        cache.clear()

        assert not path.exists()
        assert cache.get() is None

    def test_corrupt_file_is_ignored(self, tmp_path):
        """Test unreadable cache file means no session."""
        path = tmp_path / "session.json"
        path.write_text("{not json")

        assert FileSessionCache(path).get() is None

    def test_creates_parent_directory(self, tmp_path):
        """Test missing parent directory is created on write."""
        path = tmp_path / "nested" / "session.json"

        FileSessionCache(path).set(SESSION)

        assert path.exists()
