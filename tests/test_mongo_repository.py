from types import SimpleNamespace

import pytest
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from common.config.settings import settings
from common.exceptions.base_exception import ConflictException, DatabaseConnectionException
from infrastructure.database.mongodb.connection import MongoDBConnection
from infrastructure.database.mongodb.repositories.admin_session_repository import AdminSessionRepository
from infrastructure.database.mongodb.repository import MongoRepository


class StubCollection:
    """Records calls the way motor's collection receives them."""

    def __init__(self, name, insert_error=None, deleted_count=1):
        self.name = name
        self.insert_error = insert_error
        self.deleted_count = deleted_count
        self.calls = []

    async def insert_one(self, document, session=None):
        self.calls.append(("insert_one", document, session))
        if self.insert_error:
            raise self.insert_error
        return SimpleNamespace(inserted_id=document["_id"])

    async def delete_one(self, query, session=None):
        self.calls.append(("delete_one", query, session))
        return SimpleNamespace(deleted_count=self.deleted_count)


class StubDatabase(dict):
    name = "qv_test"


class StubTransaction:
    def __init__(self, events):
        self.events = events

    async def __aenter__(self):
        self.events.append("start")
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.events.append("abort" if exc_type else "commit")
        return False


class StubClientSession:
    def __init__(self):
        self.events = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.events.append("end_session")
        return False

    def start_transaction(self):
        return StubTransaction(self.events)


class StubClient:
    def __init__(self):
        self.session = StubClientSession()

    async def start_session(self):
        return self.session


def make_repo(collection):
    return MongoRepository(StubDatabase({collection.name: collection}), collection.name)


async def test_insert_one_stamps_uuid_and_timestamps():
    collection = StubCollection("admins")

    inserted_id = await make_repo(collection).insert_one({"email": "admin@example.com"}, session="tx")

    _, document, session = collection.calls[0]
    assert inserted_id == document["_id"]
    assert len(inserted_id) == 36
    assert document["created_at"] == document["updated_at"]
    assert session == "tx"


async def test_duplicate_key_becomes_conflict():
    collection = StubCollection("admin_sessions", insert_error=DuplicateKeyError("E11000 duplicate key error"))

    with pytest.raises(ConflictException):
        await make_repo(collection).insert_one({"admin_id": "a-1"})


async def test_driver_failure_becomes_service_unavailable():
    collection = StubCollection("admins", insert_error=ServerSelectionTimeoutError("no servers"))

    with pytest.raises(DatabaseConnectionException) as exc:
        await make_repo(collection).insert_one({"email": "admin@example.com"})
    assert exc.value.status_code == 503


async def test_session_repository_surfaces_unique_index_conflict():
    collection = StubCollection("admin_sessions", insert_error=DuplicateKeyError("E11000 duplicate key error"))
    repo = AdminSessionRepository(StubDatabase({"admin_sessions": collection}))

    with pytest.raises(ConflictException):
        await repo.insert("a-1", "otp-hash", None, tx="tx")
    assert collection.calls[0][2] == "tx"


async def test_session_delete_reports_removed_rows():
    gone = StubCollection("admin_sessions", deleted_count=0)
    repo = AdminSessionRepository(StubDatabase({"admin_sessions": gone}))

    assert await repo.delete("s-1", tx="tx") == 0
    assert gone.calls == [("delete_one", {"_id": "s-1"}, "tx")]


async def test_transaction_yields_none_when_disabled(monkeypatch):
    monkeypatch.setattr(settings, "MONGO_USE_TRANSACTIONS", False)
    monkeypatch.setattr(MongoDBConnection, "_client", None)

    async with MongoDBConnection.transaction() as tx:
        assert tx is None


async def test_transaction_commits_on_success(monkeypatch):
    client = StubClient()
    monkeypatch.setattr(settings, "MONGO_USE_TRANSACTIONS", True)
    monkeypatch.setattr(MongoDBConnection, "_client", client)

    async with MongoDBConnection.transaction() as tx:
        assert tx is client.session

    assert client.session.events == ["start", "commit", "end_session"]


async def test_transaction_aborts_when_block_raises(monkeypatch):
    client = StubClient()
    monkeypatch.setattr(settings, "MONGO_USE_TRANSACTIONS", True)
    monkeypatch.setattr(MongoDBConnection, "_client", client)

    with pytest.raises(ConflictException):
        async with MongoDBConnection.transaction():
            raise ConflictException("Duplicate record")

    assert client.session.events == ["start", "abort", "end_session"]
