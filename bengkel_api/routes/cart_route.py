from typing import List

from fastapi import APIRouter, Body, Depends, HTTPException, status

from bengkel_api.crud.cart_crud import replace_cart
from bengkel_api.db import get_document_store
from bengkel_api.exceptions import StoreUnavailableError
from bengkel_api.logging_config import get_child_logger, tracer
from bengkel_api.routes.common import list_collection
from bengkel_api.store.base import Collection, Document, DocumentStore

logger = get_child_logger("routes.cart")

router = APIRouter(prefix="/api/keranjang", tags=["keranjang"])

SAVE_FAILED = "Gagal menyimpan data keranjang."


@router.get("", response_model=List[Document])
async def get_cart(store: DocumentStore = Depends(get_document_store)):
    return await list_collection(store, Collection.CART)


@router.post("")
async def replace_cart_items(
    items: List[Document] = Body(..., description="The complete new cart"),
    store: DocumentStore = Depends(get_document_store),
):
    with tracer.start_as_current_span("api_replace_cart") as span:
        span.set_attribute("batch.size", len(items))
        logger.info(
            f"Handling cart replace request with {len(items)} items",
            extra={"batch_size": len(items)},
        )
        try:
            await replace_cart(store, items)
        except StoreUnavailableError as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", "store_unavailable")
            logger.error(
                "Store error during cart replace",
                extra={"error": str(e), "batch_size": len(items)},
                exc_info=e.original_exception,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SAVE_FAILED
            )
        except Exception as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)
            logger.error(
                "Unexpected error during cart replace",
                extra={"error": str(e), "error_type": type(e).__name__},
                exc_info=True,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SAVE_FAILED
            )
        return {"message": "Keranjang berhasil diperbarui."}
