import logging
from typing import Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError, PyMongoError
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from fitplan.crud.outcome import Outcome
from fitplan.crud.records import AccountId, AccountRecord
from fitplan.exceptions import ConflictError, StoreError
from fitplan.models.account import Account
from fitplan.utils.utils import utcnow

logger = logging.getLogger(__name__)

DUPLICATE_ACCOUNT_MESSAGE = "Username or email already exists"

# Legacy collection and field names (users.password, userprofiles.user_id) are kept
ACCOUNTS_COLLECTION = "users"


def _account_from_row(row: Account) -> AccountRecord:
    return AccountRecord(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        created_at=row.created_at,
    )


class SqlAccountStore:
    def __init__(self, db: Session):
        self.db = db

    def create_account(self, username: str, email: str, password_hash: str) -> Outcome[AccountId]:
        try:
            existing = self.db.query(Account.id).filter(
                or_(Account.username == username, Account.email == email)
            ).first()
            if existing:
                return Outcome.failure(ConflictError(DUPLICATE_ACCOUNT_MESSAGE))

            db_account = Account(
                username=username,
                email=email,
                password_hash=password_hash,
                created_at=utcnow(),
            )
            self.db.add(db_account)
            self.db.commit()
            self.db.refresh(db_account)
            return Outcome.success(db_account.id)
        except IntegrityError:
            # Lost a race with a concurrent sign-up; the unique index decided
            self.db.rollback()
            logger.info(f"Unique constraint rejected account '{username}'")
            return Outcome.failure(ConflictError(DUPLICATE_ACCOUNT_MESSAGE))
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create account '{username}': {e}")
            return Outcome.failure(StoreError(str(e)))

    def find_by_username(self, username: str) -> Outcome[Optional[AccountRecord]]:
        try:
            row = self.db.query(Account).filter(Account.username == username).first()
            return Outcome.success(_account_from_row(row) if row else None)
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up account '{username}': {e}")
            return Outcome.failure(StoreError(str(e)))


def _account_from_document(doc: dict) -> AccountRecord:
    return AccountRecord(
        id=str(doc["_id"]),
        username=doc["username"],
        email=doc["email"],
        password_hash=doc["password"],
        created_at=doc.get("created_at"),
    )


class MongoAccountStore:
    def __init__(self, database):
        self.collection = database[ACCOUNTS_COLLECTION]

    def create_account(self, username: str, email: str, password_hash: str) -> Outcome[AccountId]:
        try:
            existing = self.collection.find_one(
                {"$or": [{"username": username}, {"email": email}]}, {"_id": 1}
            )
            if existing:
                return Outcome.failure(ConflictError(DUPLICATE_ACCOUNT_MESSAGE))

            result = self.collection.insert_one({
                "_id": ObjectId(),
                "username": username,
                "email": email,
                "password": password_hash,
                "created_at": utcnow(),
            })
            return Outcome.success(str(result.inserted_id))
        except DuplicateKeyError:
            logger.info(f"Unique index rejected account '{username}'")
            return Outcome.failure(ConflictError(DUPLICATE_ACCOUNT_MESSAGE))
        except PyMongoError as e:
            logger.error(f"Failed to create account '{username}': {e}")
            return Outcome.failure(StoreError(str(e)))

    def find_by_username(self, username: str) -> Outcome[Optional[AccountRecord]]:
        try:
            doc = self.collection.find_one({"username": username})
            return Outcome.success(_account_from_document(doc) if doc else None)
        except PyMongoError as e:
            logger.error(f"Failed to look up account '{username}': {e}")
            return Outcome.failure(StoreError(str(e)))
