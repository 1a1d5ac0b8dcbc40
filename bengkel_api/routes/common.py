from typing import List

from fastapi import HTTPException, status

from bengkel_api.crud.collection import fetch_all
from bengkel_api.exceptions import StoreUnavailableError
from bengkel_api.logging_config import get_child_logger, tracer
from bengkel_api.store.base import Collection, Document, DocumentStore

logger = get_child_logger("routes.common")

LOAD_FAILED = "Gagal memuat data dari database."


async def list_collection(store: DocumentStore, collection: Collection) -> List[Document]:
    """Shared body of every GET listing endpoint."""
    with tracer.start_as_current_span(f"api_list_{collection.value}") as span:
        try:
            return await fetch_all(store, collection)
        except StoreUnavailableError as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", "store_unavailable")
            logger.error(
                f"Failed to load collection {collection.value}",
                extra={"error": str(e), "collection": collection.value},
                exc_info=e.original_exception,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=LOAD_FAILED,
            )
        except Exception as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)
            logger.error(
                f"Unexpected error loading collection {collection.value}",
                extra={"error_type": type(e).__name__, "collection": collection.value},
                exc_info=True,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=LOAD_FAILED,
            )
