"""
Shared pytest fixtures.

The document store dependency is replaced with ``FakeDocumentStore``, an
in-memory store honouring the same contract as the Cosmos DB binding, so
no database is needed.
"""

import copy
import uuid
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from bengkel_api.exceptions import StoreUnavailableError
from bengkel_api.store.base import Collection, Document, DocumentStore


class FakeDocumentStore(DocumentStore):
    """
    In-memory document store.

    Add an operation name (e.g. ``"add_documents"``) to ``fail_on`` to make
    that operation raise ``StoreUnavailableError``. Batch calls are recorded
    in ``batches`` as ``(operation, collection, size)``.
    """

    def __init__(self):
        self.collections: Dict[Collection, Dict[str, Document]] = {
            collection: {} for collection in Collection
        }
        self.fail_on = set()
        self.batches: List[tuple] = []

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise StoreUnavailableError(
                f"{operation} failed", original_exception=RuntimeError(operation)
            )

    def seed(self, collection: Collection, data: Document) -> str:
        document_id = uuid.uuid4().hex
        self.collections[collection][document_id] = copy.deepcopy(data)
        return document_id

    @staticmethod
    def _with_id(document_id: str, data: Document) -> Document:
        return {**copy.deepcopy(data), "id": document_id}

    async def list_documents(self, collection: Collection) -> List[Document]:
        self._check("list_documents")
        return [
            self._with_id(document_id, data)
            for document_id, data in self.collections[collection].items()
        ]

    async def find_by_field(
        self, collection: Collection, field: str, value: Any
    ) -> List[Document]:
        self._check("find_by_field")
        return [
            self._with_id(document_id, data)
            for document_id, data in self.collections[collection].items()
            if field in data and data[field] == value
        ]

    async def get_document(
        self, collection: Collection, document_id: str
    ) -> Optional[Document]:
        self._check("get_document")
        data = self.collections[collection].get(document_id)
        return None if data is None else self._with_id(document_id, data)

    async def add_document(self, collection: Collection, data: Document) -> Document:
        self._check("add_document")
        document_id = self.seed(collection, {k: v for k, v in data.items() if k != "id"})
        return self._with_id(document_id, self.collections[collection][document_id])

    async def update_document(
        self, collection: Collection, document_id: str, changes: Document
    ) -> Document:
        self._check("update_document")
        self.collections[collection][document_id].update(copy.deepcopy(changes))
        return self._with_id(document_id, self.collections[collection][document_id])

    async def delete_document(self, collection: Collection, document_id: str) -> None:
        self._check("delete_document")
        self.collections[collection].pop(document_id, None)

    async def delete_documents(
        self, collection: Collection, document_ids: List[str]
    ) -> None:
        self._check("delete_documents")
        self.batches.append(("delete", collection, len(document_ids)))
        for document_id in document_ids:
            self.collections[collection].pop(document_id, None)

    async def add_documents(
        self, collection: Collection, items: List[Document]
    ) -> List[Document]:
        self._check("add_documents")
        self.batches.append(("create", collection, len(items)))
        created = []
        for item in items:
            created.append(await self.add_document(collection, item))
        return created


@pytest.fixture
def store():
    return FakeDocumentStore()


@pytest_asyncio.fixture
async def client(store):
    """HTTPX AsyncClient talking to the app with the fake store injected."""
    from bengkel_api.app import app
    from bengkel_api.db import get_document_store

    app.dependency_overrides[get_document_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()
