from typing import List

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Response, status

from bengkel_api.crud.stock_crud import delete_stock_item, upsert_stock_item
from bengkel_api.db import get_document_store
from bengkel_api.exceptions import (
    DocumentNotFoundError,
    MissingFieldError,
    StoreUnavailableError,
)
from bengkel_api.logging_config import get_child_logger, tracer
from bengkel_api.models.stock import StockItem, StockItemCreate
from bengkel_api.routes.common import list_collection
from bengkel_api.store.base import Collection, Document, DocumentStore

logger = get_child_logger("routes.stock")

router = APIRouter(prefix="/api/stok", tags=["stok"])

SAVE_FAILED = "Gagal menyimpan data stok."
DELETE_FAILED = "Gagal menghapus data stok."


@router.get("", response_model=List[Document])
async def get_stock_items(store: DocumentStore = Depends(get_document_store)):
    return await list_collection(store, Collection.INVENTORY)


@router.post(
    "",
    response_model=StockItem,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_200_OK: {"model": StockItem, "description": "Existing item updated"}},
)
async def upsert_stock(
    response: Response,
    item: StockItemCreate = Body(..., description="Name, price and quantity to record"),
    store: DocumentStore = Depends(get_document_store),
):
    with tracer.start_as_current_span("api_upsert_stock") as span:
        logger.info("Handling POST /api/stok request", extra={"nama": item.nama})
        try:
            stored, created = await upsert_stock_item(store, item)
        except MissingFieldError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except StoreUnavailableError as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", "store_unavailable")
            logger.error(
                f"Store error during stock upsert: {e}", exc_info=e.original_exception
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SAVE_FAILED
            )
        except Exception as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)
            logger.error(f"Unexpected error during stock upsert: {e}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SAVE_FAILED
            )

        if not created:
            response.status_code = status.HTTP_200_OK
        return stored


@router.delete("/{item_id}")
async def delete_stock(
    item_id: str = Path(..., title="The ID of the inventory item to delete"),
    store: DocumentStore = Depends(get_document_store),
):
    try:
        await delete_stock_item(store, item_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StoreUnavailableError as e:
        logger.error(f"Store error: {e}", exc_info=e.original_exception)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=DELETE_FAILED
        )
    except Exception as e:
        logger.error(f"Unexpected error in DELETE /api/stok/{item_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=DELETE_FAILED
        )
    return {"message": "Item berhasil dihapus."}
