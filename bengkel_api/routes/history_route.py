from typing import List

from fastapi import APIRouter, Body, Depends, HTTPException, Path, status

from bengkel_api.crud.history_crud import append_history_entry, delete_history_entry
from bengkel_api.db import get_document_store
from bengkel_api.exceptions import StoreUnavailableError
from bengkel_api.logging_config import get_child_logger
from bengkel_api.routes.common import list_collection
from bengkel_api.store.base import Collection, Document, DocumentStore

logger = get_child_logger("routes.history")

router = APIRouter(prefix="/api/riwayat", tags=["riwayat"])


@router.get("", response_model=List[Document])
async def get_history(store: DocumentStore = Depends(get_document_store)):
    return await list_collection(store, Collection.HISTORY)


@router.post("", response_model=Document, status_code=status.HTTP_201_CREATED)
async def add_history_entry(
    entry: Document = Body(..., description="History entry to record"),
    store: DocumentStore = Depends(get_document_store),
):
    try:
        return await append_history_entry(store, entry)
    except StoreUnavailableError as e:
        logger.error(f"Store error: {e}", exc_info=e.original_exception)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Gagal menyimpan data riwayat.",
        )
    except Exception as e:
        logger.error(f"Unexpected error during history append: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Gagal menyimpan data riwayat.",
        )


@router.delete("/{entry_id}")
async def delete_history(
    entry_id: str = Path(..., title="The ID of the history entry to delete"),
    store: DocumentStore = Depends(get_document_store),
):
    try:
        await delete_history_entry(store, entry_id)
    except StoreUnavailableError as e:
        logger.error(f"Store error: {e}", exc_info=e.original_exception)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Gagal menghapus data riwayat.",
        )
    except Exception as e:
        logger.error(
            f"Unexpected error in DELETE /api/riwayat/{entry_id}: {e}", exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Gagal menghapus data riwayat.",
        )
    return {"message": "Riwayat berhasil dihapus."}
