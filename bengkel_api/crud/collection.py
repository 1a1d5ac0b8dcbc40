from typing import List

from bengkel_api.logging_config import get_child_logger, tracer
from bengkel_api.store.base import Collection, Document, DocumentStore

logger = get_child_logger("crud.collection")


async def fetch_all(store: DocumentStore, collection: Collection) -> List[Document]:
    """
    Return every document of a collection as ``{"id": ..., **fields}``.

    Store failures propagate as ``StoreUnavailableError`` and are never
    retried.
    """
    with tracer.start_as_current_span("fetch_all") as span:
        span.set_attribute("collection", collection.value)

        documents = await store.list_documents(collection)

        span.set_attribute("documents.count", len(documents))
        logger.info(
            f"Retrieved {len(documents)} documents from '{collection.value}'",
            extra={"collection": collection.value, "count": len(documents)},
        )
        return documents
