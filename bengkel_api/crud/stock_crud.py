from typing import Tuple

from bengkel_api.exceptions import DocumentNotFoundError, MissingFieldError
from bengkel_api.logging_config import get_child_logger, tracer
from bengkel_api.models.stock import StockItem, StockItemCreate
from bengkel_api.store.base import Collection, DocumentStore

logger = get_child_logger("crud.stock")


async def upsert_stock_item(
    store: DocumentStore, item: StockItemCreate
) -> Tuple[StockItem, bool]:
    """
    Create an inventory item, or add to an existing one with the same name.

    When a document with the same ``nama`` exists its ``harga`` is
    overwritten and the new ``stok`` is added to the stored quantity.
    The lookup and the write are separate store calls, so concurrent
    upserts of one name may race.

    Args:
        store: Document store holding the inventory collection
        item: Name, price and quantity to record

    Returns:
        The stored item and True when it was newly created

    Raises:
        MissingFieldError: If nama, harga or stok is absent
        StoreUnavailableError: If a store call fails
    """
    if not item.nama or item.harga is None or item.stok is None:
        raise MissingFieldError("Nama, harga, dan stok harus diisi.")

    with tracer.start_as_current_span("upsert_stock_item") as span:
        span.set_attribute("item.nama", item.nama)

        matches = await store.find_by_field(Collection.INVENTORY, "nama", item.nama)

        if matches:
            existing = matches[0]
            quantity = (existing.get("stok") or 0) + item.stok
            updated = await store.update_document(
                Collection.INVENTORY,
                existing["id"],
                {"harga": item.harga, "stok": quantity},
            )
            span.set_attribute("item.created", False)
            logger.info(
                f"Updated inventory item: {item.nama}",
                extra={"item_id": existing["id"], "quantity": quantity},
            )
            return StockItem.model_validate({**existing, **updated}), False

        created = await store.add_document(
            Collection.INVENTORY,
            {"nama": item.nama, "harga": item.harga, "stok": item.stok},
        )
        span.set_attribute("item.created", True)
        logger.info(
            f"Added new inventory item: {item.nama}",
            extra={"item_id": created["id"]},
        )
        return StockItem.model_validate(created), True


async def delete_stock_item(store: DocumentStore, item_id: str) -> None:
    """
    Delete an inventory item by id.

    Raises:
        DocumentNotFoundError: If no inventory item has that id
        StoreUnavailableError: If a store call fails
    """
    existing = await store.get_document(Collection.INVENTORY, item_id)
    if existing is None:
        raise DocumentNotFoundError("Item tidak ditemukan.")

    await store.delete_document(Collection.INVENTORY, item_id)
    logger.info(f"Inventory item with ID {item_id} deleted", extra={"item_id": item_id})
