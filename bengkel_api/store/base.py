from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional


Document = Dict[str, Any]


class Collection(str, Enum):
    INVENTORY = "stok"
    CART = "keranjang"
    HISTORY = "riwayat"


class DocumentStore(ABC):
    """
    Capabilities the handlers need from a hosted document database.

    Every returned document is the stored field map with the document id
    under the ``id`` key. Implementations raise ``StoreUnavailableError``
    when the underlying call fails for any reason.

    ``max_batch_size`` is the most operations one atomic batch may hold,
    or None when batches are unbounded.
    """

    max_batch_size: Optional[int] = None

    @abstractmethod
    async def list_documents(self, collection: Collection) -> List[Document]:
        """Return every document in the collection."""

    @abstractmethod
    async def find_by_field(
        self, collection: Collection, field: str, value: Any
    ) -> List[Document]:
        """Return the documents whose ``field`` equals ``value``."""

    @abstractmethod
    async def get_document(
        self, collection: Collection, document_id: str
    ) -> Optional[Document]:
        """Return the document, or None when no document has that id."""

    @abstractmethod
    async def add_document(self, collection: Collection, data: Document) -> Document:
        """Insert ``data`` as a new document under a freshly assigned id."""

    @abstractmethod
    async def update_document(
        self, collection: Collection, document_id: str, changes: Document
    ) -> Document:
        """Overwrite the given fields of an existing document and return it."""

    @abstractmethod
    async def delete_document(self, collection: Collection, document_id: str) -> None:
        """Delete a document. Deleting an absent id is a no-op."""

    @abstractmethod
    async def delete_documents(
        self, collection: Collection, document_ids: List[str]
    ) -> None:
        """Delete the given documents as one atomic batch."""

    @abstractmethod
    async def add_documents(
        self, collection: Collection, items: List[Document]
    ) -> List[Document]:
        """Insert every item as a new document as one atomic batch."""

    async def close(self) -> None:
        """Release any held connections."""
