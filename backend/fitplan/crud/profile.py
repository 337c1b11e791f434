import logging
from dataclasses import asdict
from typing import Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from fitplan.crud.outcome import Outcome
from fitplan.crud.records import AccountId, ProfileFields, ProfileRecord
from fitplan.exceptions import NotFoundError, StoreError
from fitplan.models.profile import Profile
from fitplan.utils.utils import utcnow

logger = logging.getLogger(__name__)

PROFILES_COLLECTION = "userprofiles"


def _profile_from_row(row: Profile) -> ProfileRecord:
    return ProfileRecord(
        id=row.id,
        account_id=row.account_id,
        name=row.name,
        age=row.age,
        weight=row.weight,
        dietary_preference=row.dietary_preference,
        target_body_type=row.target_body_type,
        workout_plan=row.workout_plan,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlProfileStore:
    def __init__(self, db: Session):
        self.db = db

    def _get(self, account_id: AccountId) -> Optional[Profile]:
        return self.db.query(Profile).filter(Profile.account_id == account_id).first()

    def find_by_account(self, account_id: AccountId) -> Outcome[Optional[ProfileRecord]]:
        try:
            row = self._get(account_id)
            return Outcome.success(_profile_from_row(row) if row else None)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read profile for account {account_id}: {e}")
            return Outcome.failure(StoreError(str(e)))

    def upsert_profile(self, account_id: AccountId, fields: ProfileFields) -> Outcome[ProfileRecord]:
        """
        Create the account's profile, or overwrite every mutable field of the
        existing one. Never produces a second row for the same account.
        """
        now = utcnow()
        try:
            row = self._get(account_id)
            if row is None:
                row = Profile(account_id=account_id, created_at=now, updated_at=now, **asdict(fields))
                self.db.add(row)
                try:
                    self.db.commit()
                except IntegrityError as e:
                    self.db.rollback()
                    row = self._get(account_id)
                    if row is None:
                        # Not a duplicate: unknown account or a rejected value
                        logger.error(f"Profile insert rejected for account {account_id}: {e}")
                        return Outcome.failure(StoreError(str(e.orig)))
                    self._overwrite(row, fields, now)
            else:
                self._overwrite(row, fields, now)
            self.db.refresh(row)
            return Outcome.success(_profile_from_row(row))
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save profile for account {account_id}: {e}")
            return Outcome.failure(StoreError(str(e)))

    def _overwrite(self, row: Profile, fields: ProfileFields, now) -> None:
        for field, value in asdict(fields).items():
            setattr(row, field, value)
        row.updated_at = now
        self.db.commit()

    def set_workout_plan(self, account_id: AccountId, text: Optional[str]) -> Outcome[ProfileRecord]:
        try:
            row = self._get(account_id)
            if row is None:
                return Outcome.failure(NotFoundError(f"No profile for account {account_id}"))
            row.workout_plan = text
            row.updated_at = utcnow()
            self.db.commit()
            self.db.refresh(row)
            return Outcome.success(_profile_from_row(row))
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to store workout plan for account {account_id}: {e}")
            return Outcome.failure(StoreError(str(e)))


def _profile_from_document(doc: dict) -> ProfileRecord:
    return ProfileRecord(
        id=str(doc["_id"]),
        account_id=str(doc["user_id"]),
        name=doc["name"],
        age=doc["age"],
        weight=doc["weight"],
        dietary_preference=doc["dietary_preference"],
        target_body_type=doc["target_body_type"],
        workout_plan=doc.get("workout_plan"),
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


class MongoProfileStore:
    def __init__(self, database):
        self.collection = database[PROFILES_COLLECTION]

    def find_by_account(self, account_id: AccountId) -> Outcome[Optional[ProfileRecord]]:
        try:
            doc = self.collection.find_one({"user_id": ObjectId(str(account_id))})
            return Outcome.success(_profile_from_document(doc) if doc else None)
        except PyMongoError as e:
            logger.error(f"Failed to read profile for account {account_id}: {e}")
            return Outcome.failure(StoreError(str(e)))

    def upsert_profile(self, account_id: AccountId, fields: ProfileFields) -> Outcome[ProfileRecord]:
        now = utcnow()
        selector = {"user_id": ObjectId(str(account_id))}
        changes = {"$set": {**asdict(fields), "updated_at": now}}
        try:
            try:
                doc = self.collection.find_one_and_update(
                    selector,
                    {**changes, "$setOnInsert": {"created_at": now, "workout_plan": None}},
                    upsert=True,
                    return_document=ReturnDocument.AFTER,
                )
            except DuplicateKeyError:
                # A concurrent save inserted first; update the document it created
                doc = self.collection.find_one_and_update(
                    selector, changes, return_document=ReturnDocument.AFTER
                )
            return Outcome.success(_profile_from_document(doc))
        except PyMongoError as e:
            logger.error(f"Failed to save profile for account {account_id}: {e}")
            return Outcome.failure(StoreError(str(e)))

    def set_workout_plan(self, account_id: AccountId, text: Optional[str]) -> Outcome[ProfileRecord]:
        try:
            doc = self.collection.find_one_and_update(
                {"user_id": ObjectId(str(account_id))},
                {"$set": {"workout_plan": text, "updated_at": utcnow()}},
                return_document=ReturnDocument.AFTER,
            )
            if doc is None:
                return Outcome.failure(NotFoundError(f"No profile for account {account_id}"))
            return Outcome.success(_profile_from_document(doc))
        except PyMongoError as e:
            logger.error(f"Failed to store workout plan for account {account_id}: {e}")
            return Outcome.failure(StoreError(str(e)))
