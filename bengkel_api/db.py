import os
from typing import Optional

from azure.cosmos.aio import CosmosClient
from azure.identity.aio import DefaultAzureCredential

from bengkel_api.logging_config import get_child_logger
from bengkel_api.store.base import Collection, DocumentStore
from bengkel_api.store.cosmos import CosmosDocumentStore

logger = get_child_logger("db")

_store: Optional[DocumentStore] = None


def _container_names() -> dict:
    return {
        Collection.INVENTORY: os.environ.get("COSMOSDB_CONTAINER_STOK", Collection.INVENTORY.value),
        Collection.CART: os.environ.get("COSMOSDB_CONTAINER_KERANJANG", Collection.CART.value),
        Collection.HISTORY: os.environ.get("COSMOSDB_CONTAINER_RIWAYAT", Collection.HISTORY.value),
    }


def _create_store() -> CosmosDocumentStore:
    """
    Build the Cosmos DB backed store from environment variables.

    Uses the master key when COSMOSDB_KEY is set, otherwise
    DefaultAzureCredential (managed identity in Azure).
    """
    endpoint = os.environ.get("COSMOSDB_ENDPOINT")
    if not endpoint:
        raise ValueError("COSMOSDB_ENDPOINT environment variable must be set")

    database_name = os.environ.get("COSMOSDB_DATABASE", "bengkel")
    key = os.environ.get("COSMOSDB_KEY")

    if key:
        logger.info("Creating CosmosDB client with master key")
        return CosmosDocumentStore(
            CosmosClient(url=endpoint, credential=key),
            database_name,
            _container_names(),
        )

    logger.info("Creating CosmosDB client with DefaultAzureCredential")
    credential = DefaultAzureCredential()
    return CosmosDocumentStore(
        CosmosClient(url=endpoint, credential=credential),
        database_name,
        _container_names(),
        credential=credential,
    )


async def get_document_store() -> DocumentStore:
    """FastAPI dependency returning the process-wide document store."""
    global _store
    if _store is None:
        _store = _create_store()
    return _store


async def close_document_store() -> None:
    global _store
    if _store is not None:
        await _store.close()
        _store = None
