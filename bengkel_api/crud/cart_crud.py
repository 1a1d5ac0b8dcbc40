from typing import List

from bengkel_api.exceptions import StoreUnavailableError
from bengkel_api.logging_config import get_child_logger, tracer
from bengkel_api.store.base import Collection, Document, DocumentStore

logger = get_child_logger("crud.cart")


async def replace_cart(store: DocumentStore, items: List[Document]) -> List[Document]:
    """
    Replace the whole cart with ``items``.

    Runs in two batches: every existing cart document is deleted first,
    then the new items are inserted. Each batch is atomic but the pair is
    not; if the insert fails the cart stays empty and the error propagates.
    When either batch would exceed the store's batch limit nothing is
    written and ``StoreUnavailableError`` is raised.

    Returns:
        The inserted cart documents with their new ids
    """
    with tracer.start_as_current_span("replace_cart") as span:
        span.set_attribute("cart.new_size", len(items))

        existing = await store.list_documents(Collection.CART)
        existing_ids = [document["id"] for document in existing]

        limit = store.max_batch_size
        if limit is not None and max(len(existing_ids), len(items)) > limit:
            span.set_attribute("error", True)
            raise StoreUnavailableError(
                f"Cart replace needs {len(existing_ids)} deletes and {len(items)} "
                f"inserts; one batch holds at most {limit} operations"
            )

        if existing_ids:
            await store.delete_documents(Collection.CART, existing_ids)
        span.set_attribute("cart.deleted", len(existing_ids))

        created: List[Document] = []
        if items:
            created = await store.add_documents(Collection.CART, items)

        logger.info(
            "Cart replaced",
            extra={"deleted": len(existing_ids), "inserted": len(created)},
        )
        return created
