"""Tests for login sessions and their idle expiry."""

from datetime import datetime, timedelta, timezone

from digiwallet.services.session_store import SessionStore


class _Clock:
    def __init__(self):
        self.now = datetime(2025, 10, 15, 9, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class TestSessionStore:

    def test_create_and_get(self):
        store = SessionStore()
        session_id = store.create("U1")

        session = store.get(session_id)

        assert session.user_id == "U1"
        assert len(store) == 1

    def test_unknown_session(self):
        assert SessionStore().get("nope") is None

    def test_destroy(self):
        store = SessionStore()
        session_id = store.create("U1")

        assert store.destroy(session_id) is True
        assert store.destroy(session_id) is False
        assert store.get(session_id) is None

    def test_session_expires_after_idle_ttl(self):
        clock = _Clock()
        store = SessionStore(ttl=timedelta(hours=24), clock=clock)
        session_id = store.create("U1")

        clock.advance(hours=24, seconds=1)

        assert store.get(session_id) is None
        assert len(store) == 0

    def test_access_refreshes_expiry(self):
        clock = _Clock()
        store = SessionStore(ttl=timedelta(hours=24), clock=clock)
        session_id = store.create("U1")

        clock.advance(hours=20)
        assert store.get(session_id) is not None
        clock.advance(hours=20)

        assert store.get(session_id).user_id == "U1"

    def test_purge_expired(self):
        clock = _Clock()
        store = SessionStore(ttl=timedelta(hours=1), clock=clock)
        old = store.create("U1")
        clock.advance(minutes=90)
        fresh = store.create("U2")

        assert store.purge_expired() == 1
        assert store.get(old) is None
        assert store.get(fresh).user_id == "U2"
