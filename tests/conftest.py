# =============================================================================
# Worker Provisioning Service - Test Fixtures
# =============================================================================
"""
In-memory stand-ins for Firebase Auth and Firestore.

The fakes keep the async interfaces of IdentityService and DocumentStore
so WorkerProvisioner and the routes run unchanged against them.
"""

import asyncio
from typing import Dict, Optional, Tuple

import pytest

from provisioning.models import AuthContext, IdentityLookup, IdentityRecord
from provisioning.services import (
    DocumentStoreError,
    EmailAlreadyExistsError,
    WorkerProvisioner,
)


VALID_TOKEN = "valid-id-token"
CUSTOMER_UID = "customer_1"


class FakeIdentityService:
    """Firebase Auth double with an email -> user table."""
    
    def __init__(self) -> None:
        self.users: Dict[str, IdentityRecord] = {}
        self.create_calls = 0
        self.lookup_error: Optional[Exception] = None
        self.create_error: Optional[Exception] = None
        self.verify_error: Optional[Exception] = None
        # Suspend between reading the table and returning, so concurrent
        # callers can both observe NOT_FOUND
        self.yield_after_lookup = False
        self._next_uid = 0
    
    def add_user(self, email: str, uid: str) -> IdentityRecord:
        record = IdentityRecord(uid=uid, email=email)
        self.users[email] = record
        return record
    
    async def find_by_email(self, email: str) -> IdentityLookup:
        if self.lookup_error is not None:
            raise self.lookup_error
        record = self.users.get(email)
        if self.yield_after_lookup:
            await asyncio.sleep(0)
        if record is None:
            return IdentityLookup.not_found()
        return IdentityLookup.found(record)
    
    async def create_user(self, email: str, password: str) -> IdentityRecord:
        self.create_calls += 1
        if self.create_error is not None:
            raise self.create_error
        if email in self.users:
            raise EmailAlreadyExistsError(f"Email already registered: {email}")
        self._next_uid += 1
        return self.add_user(email, f"uid_{self._next_uid}")
    
    async def verify_caller(self, id_token: Optional[str]) -> Optional[AuthContext]:
        if self.verify_error is not None:
            raise self.verify_error
        if id_token == VALID_TOKEN:
            return AuthContext(uid=CUSTOMER_UID, token={"uid": CUSTOMER_UID})
        return None
    
    def close(self) -> None:
        pass


class FakeDocumentStore:
    """Firestore double; a failed batch applies nothing."""
    
    def __init__(self) -> None:
        self.documents: Dict[Tuple[str, str], dict] = {}
        self.batch_calls = 0
        self.commit_error: Optional[Exception] = None
    
    async def get_document(self, collection: str, document_id: str) -> Optional[dict]:
        doc = self.documents.get((collection, document_id))
        return dict(doc) if doc is not None else None
    
    async def batch_write(self, writes) -> None:
        writes = list(writes)
        self.batch_calls += 1
        if self.commit_error is not None:
            raise DocumentStoreError(f"Failed to commit batch write: {self.commit_error}")
        for write in writes:
            self.documents[(write.collection, write.document_id)] = dict(write.fields)
    
    def close(self) -> None:
        pass


@pytest.fixture
def identity():
    return FakeIdentityService()


@pytest.fixture
def store():
    return FakeDocumentStore()


@pytest.fixture
def provisioner(identity, store):
    return WorkerProvisioner(
        identity=identity,
        store=store,
        workers_collection="workers",
        users_collection="users",
    )


@pytest.fixture
def caller():
    return AuthContext(uid=CUSTOMER_UID)


@pytest.fixture
def worker_payload():
    return {
        "email": "a@b.com",
        "password": "pw123456",
        "workerData": {"worker_id": "W1"},
        "userData": {"name": "A"},
    }
