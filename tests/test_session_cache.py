import unittest

from chat_sessions.cache import SessionCache
from chat_sessions.errors import SessionNotFoundError
from chat_sessions.models import Session


class SessionCacheTests(unittest.TestCase):
    def test_keeps_insertion_order(self) -> None:
        a, b, c = Session(name="a"), Session(name="b"), Session(name="c")
        cache = SessionCache([a, b])
        cache.add(c)
        self.assertEqual(["a", "b", "c"], [s.name for s in cache.sessions()])
        self.assertEqual(3, len(cache))

    def test_replace_all_drops_previous_entries(self) -> None:
        old, new = Session(), Session()
        cache = SessionCache([old])
        cache.replace_all([new])
        self.assertNotIn(old.id, cache)
        self.assertIn(new.id, cache)

    def test_get_returns_none_and_require_raises(self) -> None:
        cache = SessionCache()
        self.assertIsNone(cache.get("missing"))
        with self.assertRaises(SessionNotFoundError):
            cache.require("missing")

    def test_remove(self) -> None:
        session = Session()
        cache = SessionCache([session])
        self.assertIs(session, cache.remove(session.id))
        self.assertEqual(0, len(cache))
        with self.assertRaises(SessionNotFoundError):
            cache.remove(session.id)


if __name__ == "__main__":
    unittest.main()
