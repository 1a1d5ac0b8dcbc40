from bengkel_api.logging_config import get_child_logger
from bengkel_api.store.base import Collection, Document, DocumentStore

logger = get_child_logger("crud.history")


async def append_history_entry(store: DocumentStore, entry: Document) -> Document:
    """Store ``entry`` verbatim and return it with its assigned id."""
    created = await store.add_document(Collection.HISTORY, entry)
    logger.info("Added new history entry", extra={"entry_id": created["id"]})
    return created


async def delete_history_entry(store: DocumentStore, entry_id: str) -> None:
    # No existence check: deleting an absent entry succeeds.
    await store.delete_document(Collection.HISTORY, entry_id)
    logger.info(f"History entry with ID {entry_id} deleted", extra={"entry_id": entry_id})
