import unittest
from datetime import timedelta

from fitplan.exceptions import NotFoundError, StoreError
from fitplan.models.account import Account
from fitplan.models.profile import Profile
from fitplan.models.session import SessionRecord
from fitplan.crud.records import SessionData
from fitplan.utils.utils import utcnow

from support import SqlStoreTestCase, alice_fields


class TestSqlProfileStore(SqlStoreTestCase):

    def setUp(self):
        super().setUp()
        self.account_id = self.make_account()

    def test_no_profile_yet(self):
        found = self.stores.profiles.find_by_account(self.account_id)
        self.assertTrue(found.ok)
        self.assertIsNone(found.value)

    def test_upsert_creates_profile(self):
        saved = self.stores.profiles.upsert_profile(self.account_id, alice_fields())

        self.assertTrue(saved.ok)
        self.assertEqual(saved.value.account_id, self.account_id)
        self.assertEqual(saved.value.fields(), alice_fields())
        self.assertIsNone(saved.value.workout_plan)
        self.assertEqual(saved.value.created_at, saved.value.updated_at)

    def test_second_upsert_overwrites_without_duplicating(self):
        first = self.stores.profiles.upsert_profile(self.account_id, alice_fields()).unwrap()

        second = self.stores.profiles.upsert_profile(
            self.account_id, alice_fields(weight=61.5, dietary_preference="nonveg", target_body_type="athletic")
        ).unwrap()

        self.assertEqual(self.db.query(Profile).count(), 1)
        self.assertEqual(second.id, first.id)
        self.assertEqual(second.weight, 61.5)
        self.assertEqual(second.dietary_preference, "nonveg")
        self.assertEqual(second.target_body_type, "athletic")
        self.assertEqual(second.created_at, first.created_at)
        self.assertGreaterEqual(second.updated_at, first.updated_at)

    def test_repeated_identical_upsert_keeps_one_profile(self):
        for _ in range(3):
            self.stores.profiles.upsert_profile(self.account_id, alice_fields())

        self.assertEqual(self.db.query(Profile).count(), 1)
        found = self.stores.profiles.find_by_account(self.account_id).unwrap()
        self.assertEqual(found.fields(), alice_fields())

    def test_upsert_keeps_existing_plan(self):
        self.stores.profiles.upsert_profile(self.account_id, alice_fields())
        self.stores.profiles.set_workout_plan(self.account_id, "Day 1: squats")

        saved = self.stores.profiles.upsert_profile(self.account_id, alice_fields(age=31)).unwrap()

        self.assertEqual(saved.age, 31)
        self.assertEqual(saved.workout_plan, "Day 1: squats")

    def test_set_workout_plan_without_profile(self):
        outcome = self.stores.profiles.set_workout_plan(self.account_id, "Day 1: squats")

        self.assertIsInstance(outcome.error, NotFoundError)
        self.assertEqual(self.db.query(Profile).count(), 0)

    def test_set_workout_plan_touches_only_the_plan(self):
        created = self.stores.profiles.upsert_profile(self.account_id, alice_fields()).unwrap()

        updated = self.stores.profiles.set_workout_plan(self.account_id, "Day 1: squats").unwrap()

        self.assertEqual(updated.workout_plan, "Day 1: squats")
        self.assertEqual(updated.fields(), created.fields())
        self.assertEqual(updated.created_at, created.created_at)

    def test_profile_for_unknown_account_is_rejected(self):
        outcome = self.stores.profiles.upsert_profile(self.account_id + 100, alice_fields())

        self.assertIsInstance(outcome.error, StoreError)
        self.assertEqual(self.db.query(Profile).count(), 0)

    def test_deleting_account_cascades(self):
        self.stores.profiles.upsert_profile(self.account_id, alice_fields())
        now = utcnow()
        self.stores.sessions.create(SessionData(
            token="tok", account_id=self.account_id, username="alice",
            created_at=now, expires_at=now + timedelta(hours=1),
        ))

        self.db.query(Account).filter(Account.id == self.account_id).delete()
        self.db.commit()

        self.assertEqual(self.db.query(Profile).count(), 0)
        self.assertEqual(self.db.query(SessionRecord).count(), 0)


if __name__ == '__main__':
    unittest.main()
