"""Tests for ProfileStore."""

from pathlib import Path

import pytest

from mnemos.storage import ProfileStore


@pytest.fixture
def store(tmp_path: Path) -> ProfileStore:
    """Create an initialized store in a temporary directory."""
    store = ProfileStore(tmp_path / "profiles.db")
    store.init_db()
    yield store
    store.close()


class TestProfileStore:
    """Tests for profile persistence."""

    def test_missing_profile(self, store: ProfileStore):
        assert store.get_profile("nobody") is None

    def test_save_and_get(self, store: ProfileStore):
        store.save_profile("u-1", {"full_name": "Ada Lovelace", "email": "ada@example.com"})
        assert store.get_profile("u-1") == {"full_name": "Ada Lovelace", "email": "ada@example.com"}

    def test_save_overwrites(self, store: ProfileStore):
        """Saving again replaces the stored data."""
        store.save_profile("u-1", {"full_name": "Ada"})
        store.save_profile("u-1", {"full_name": "Ada", "email": "a@b.c"})
        assert store.get_profile("u-1") == {"full_name": "Ada", "email": "a@b.c"}

    def test_unicode_roundtrip(self, store: ProfileStore):
        store.save_profile("u-1", {"address": "Calle Ñandú 5, Córdoba"})
        assert store.get_profile("u-1")["address"] == "Calle Ñandú 5, Córdoba"

    def test_users_isolated(self, store: ProfileStore):
        store.save_profile("u-1", {"email": "one@x.org"})
        store.save_profile("u-2", {"email": "two@x.org"})
        assert store.get_profile("u-1") == {"email": "one@x.org"}

    def test_delete(self, store: ProfileStore):
        store.save_profile("u-1", {"email": "one@x.org"})
        assert store.delete_profile("u-1") is True
        assert store.get_profile("u-1") is None
        assert store.delete_profile("u-1") is False

    def test_persists_across_connections(self, tmp_path: Path):
        db_path = tmp_path / "nested" / "profiles.db"
        first = ProfileStore(db_path)
        first.init_db()
        first.save_profile("u-1", {"email": "one@x.org"})
        first.close()

        second = ProfileStore(db_path)
        assert second.get_profile("u-1") == {"email": "one@x.org"}
        second.close()

    def test_init_db_idempotent(self, store: ProfileStore):
        store.init_db()
        store.save_profile("u-1", {})
        assert store.get_profile("u-1") == {}

    def test_close_twice(self, store: ProfileStore):
        store.close()
        store.close()
