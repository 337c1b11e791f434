import unittest
from contextlib import ExitStack

from fitplan.backends import SqlBackend
from fitplan.crud.records import ProfileFields
from fitplan.utils.utils import hash_password


def alice_fields(**overrides) -> ProfileFields:
    values = dict(name="Alice", age=30, weight=65.0, dietary_preference="veg", target_body_type="lean")
    values.update(overrides)
    return ProfileFields(**values)


class SqlStoreTestCase(unittest.TestCase):
    """Fresh in-memory SQLite backend per test, with the stores opened."""

    def setUp(self):
        self.backend = SqlBackend("sqlite://")
        self.backend.startup()
        self._stack = ExitStack()
        self.stores = self._stack.enter_context(self.backend.open())
        self.db = self.stores.accounts.db

    def tearDown(self):
        self._stack.close()
        self.backend.shutdown()

    def make_account(self, username="alice", email="a@x.com", password="pw1"):
        return self.stores.accounts.create_account(username, email, hash_password(password)).unwrap()
