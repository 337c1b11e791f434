import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Union

from pymongo import ASCENDING, MongoClient

from fitplan import config
from fitplan.crud.account import ACCOUNTS_COLLECTION, MongoAccountStore, SqlAccountStore
from fitplan.crud.profile import PROFILES_COLLECTION, MongoProfileStore, SqlProfileStore
from fitplan.crud.session import SESSIONS_COLLECTION, MongoSessionStore, SqlSessionStore
from fitplan.database import Base, create_db_engine, make_session_factory
from fitplan.services.session_manager import SessionManager
import fitplan.models  # registers tables on Base.metadata

logger = logging.getLogger(__name__)


@dataclass
class Stores:
    """The three stores a request works with, bound to one DB session or client."""
    accounts: Union[SqlAccountStore, MongoAccountStore]
    profiles: Union[SqlProfileStore, MongoProfileStore]
    sessions: Union[SqlSessionStore, MongoSessionStore]


class SqlBackend:
    name = "sql"

    def __init__(self, url: str = config.SQLALCHEMY_DATABASE_URL):
        self.engine = create_db_engine(url)
        self.SessionLocal = make_session_factory(self.engine)

    def startup(self) -> None:
        logger.info(f"Connecting to {self.engine.url.render_as_string(hide_password=True)}")
        Base.metadata.create_all(bind=self.engine)
        with self.open() as stores:
            SessionManager(stores.sessions).purge_expired()

    @contextmanager
    def open(self) -> Iterator[Stores]:
        db = self.SessionLocal()
        try:
            yield Stores(
                accounts=SqlAccountStore(db),
                profiles=SqlProfileStore(db),
                sessions=SqlSessionStore(db),
            )
        finally:
            db.close()

    def shutdown(self) -> None:
        self.engine.dispose()


class MongoBackend:
    name = "mongo"

    def __init__(self, uri: str = config.MONGODB_URI, db_name: str = config.MONGODB_DB, client=None):
        self.client = client or MongoClient(uri)
        self.database = self.client[db_name]

    def startup(self) -> None:
        logger.info(f"Connecting to MongoDB database '{self.database.name}'")
        accounts = self.database[ACCOUNTS_COLLECTION]
        accounts.create_index([("username", ASCENDING)], unique=True)
        accounts.create_index([("email", ASCENDING)], unique=True)
        self.database[PROFILES_COLLECTION].create_index([("user_id", ASCENDING)], unique=True)
        # The server deletes sessions once expires_at has passed
        self.database[SESSIONS_COLLECTION].create_index([("expires_at", ASCENDING)], expireAfterSeconds=0)

    @contextmanager
    def open(self) -> Iterator[Stores]:
        yield Stores(
            accounts=MongoAccountStore(self.database),
            profiles=MongoProfileStore(self.database),
            sessions=MongoSessionStore(self.database),
        )

    def shutdown(self) -> None:
        self.client.close()


def build_backend(kind: str = config.DATABASE_BACKEND):
    if kind == "mongo":
        return MongoBackend()
    if kind != "sql":
        raise ValueError(f"Unknown DATABASE_BACKEND '{kind}', expected 'sql' or 'mongo'")
    return SqlBackend()
