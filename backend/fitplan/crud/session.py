import logging
from datetime import datetime
from typing import Optional

from pymongo.errors import PyMongoError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fitplan.crud.outcome import Outcome
from fitplan.crud.records import SessionData
from fitplan.exceptions import StoreError
from fitplan.models.session import SessionRecord

logger = logging.getLogger(__name__)

SESSIONS_COLLECTION = "sessions"


def _session_from_row(row: SessionRecord) -> SessionData:
    return SessionData(
        token=row.token,
        account_id=row.account_id,
        username=row.username,
        created_at=row.created_at,
        expires_at=row.expires_at,
    )


class SqlSessionStore:
    def __init__(self, db: Session):
        self.db = db

    def create(self, data: SessionData) -> Outcome[SessionData]:
        try:
            row = SessionRecord(
                token=data.token,
                account_id=data.account_id,
                username=data.username,
                created_at=data.created_at,
                expires_at=data.expires_at,
            )
            self.db.add(row)
            self.db.commit()
            return Outcome.success(data)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create session for account {data.account_id}: {e}")
            return Outcome.failure(StoreError(str(e)))

    def get(self, token: str) -> Outcome[Optional[SessionData]]:
        try:
            row = self.db.get(SessionRecord, token)
            return Outcome.success(_session_from_row(row) if row else None)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read session: {e}")
            return Outcome.failure(StoreError(str(e)))

    def delete(self, token: str) -> Outcome[bool]:
        try:
            deleted = self.db.query(SessionRecord).filter(SessionRecord.token == token).delete()
            self.db.commit()
            return Outcome.success(deleted > 0)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete session: {e}")
            return Outcome.failure(StoreError(str(e)))

    def purge_expired(self, now: datetime) -> Outcome[int]:
        try:
            deleted = self.db.query(SessionRecord).filter(SessionRecord.expires_at <= now).delete()
            self.db.commit()
            return Outcome.success(deleted)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to purge expired sessions: {e}")
            return Outcome.failure(StoreError(str(e)))


def _session_from_document(doc: dict) -> SessionData:
    return SessionData(
        token=doc["_id"],
        account_id=doc["account_id"],
        username=doc["username"],
        created_at=doc["created_at"],
        expires_at=doc["expires_at"],
    )


class MongoSessionStore:
    """Sessions keyed by token; a TTL index on ``expires_at`` reaps stale ones."""

    def __init__(self, database):
        self.collection = database[SESSIONS_COLLECTION]

    def create(self, data: SessionData) -> Outcome[SessionData]:
        try:
            self.collection.insert_one({
                "_id": data.token,
                "account_id": str(data.account_id),
                "username": data.username,
                "created_at": data.created_at,
                "expires_at": data.expires_at,
            })
            return Outcome.success(data)
        except PyMongoError as e:
            logger.error(f"Failed to create session for account {data.account_id}: {e}")
            return Outcome.failure(StoreError(str(e)))

    def get(self, token: str) -> Outcome[Optional[SessionData]]:
        try:
            doc = self.collection.find_one({"_id": token})
            return Outcome.success(_session_from_document(doc) if doc else None)
        except PyMongoError as e:
            logger.error(f"Failed to read session: {e}")
            return Outcome.failure(StoreError(str(e)))

    def delete(self, token: str) -> Outcome[bool]:
        try:
            result = self.collection.delete_one({"_id": token})
            return Outcome.success(result.deleted_count > 0)
        except PyMongoError as e:
            logger.error(f"Failed to delete session: {e}")
            return Outcome.failure(StoreError(str(e)))

    def purge_expired(self, now: datetime) -> Outcome[int]:
        try:
            result = self.collection.delete_many({"expires_at": {"$lte": now}})
            return Outcome.success(result.deleted_count)
        except PyMongoError as e:
            logger.error(f"Failed to purge expired sessions: {e}")
            return Outcome.failure(StoreError(str(e)))
