import re
import uuid
from typing import Any, Dict, List, Optional

from azure.cosmos.aio import ContainerProxy, CosmosClient
from azure.cosmos.exceptions import (
    CosmosBatchOperationError,
    CosmosHttpResponseError,
    CosmosResourceNotFoundError,
)

from bengkel_api.exceptions import StoreUnavailableError
from bengkel_api.logging_config import get_child_logger, tracer
from bengkel_api.store.base import Collection, Document, DocumentStore

logger = get_child_logger("store.cosmos")

# Every document of a collection shares this partition key value so that
# transactional batches can span the whole collection.
PARTITION_KEY_FIELD = "partitionKey"
SYSTEM_PROPERTIES = ("_rid", "_self", "_etag", "_attachments", "_ts")
MAX_BATCH_OPERATIONS = 100

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _to_document(item: Dict[str, Any]) -> Document:
    """Strip Cosmos system properties and the partition key from a stored item."""
    return {
        key: value
        for key, value in item.items()
        if key not in SYSTEM_PROPERTIES and key != PARTITION_KEY_FIELD
    }


class CosmosDocumentStore(DocumentStore):
    """
    Document store backed by Azure Cosmos DB, one container per collection.

    Containers must be partitioned on ``/partitionKey``.
    """

    max_batch_size = MAX_BATCH_OPERATIONS

    def __init__(
        self,
        client: CosmosClient,
        database_name: str,
        container_names: Dict[Collection, str],
        credential=None,
    ):
        self._client = client
        self._database_name = database_name
        self._container_names = container_names
        self._credential = credential

    def _container(self, collection: Collection) -> ContainerProxy:
        container_name = self._container_names.get(collection)
        if not container_name:
            raise ValueError(
                f"Container for '{collection.value}' not configured. "
                f"Valid options: {[c.value for c in self._container_names]}"
            )
        database = self._client.get_database_client(self._database_name)
        return database.get_container_client(container_name)

    def _unavailable(
        self, operation: str, collection: Collection, exc: Exception
    ) -> StoreUnavailableError:
        # Routes log the traceback; only the Cosmos details are recorded here.
        if isinstance(exc, CosmosHttpResponseError):
            logger.error(
                f"Cosmos DB error during {operation}",
                extra={
                    "collection": collection.value,
                    "status_code": exc.status_code,
                    "error_message": exc.message,
                },
            )
            return StoreUnavailableError(
                f"Cosmos DB error during {operation} on '{collection.value}': "
                f"Status Code {exc.status_code}, Message: {exc.message}",
                original_exception=exc,
            )
        logger.error(
            f"Unexpected error during {operation}",
            extra={"collection": collection.value, "error_type": type(exc).__name__},
        )
        return StoreUnavailableError(
            "An unexpected error occurred during database operation.",
            original_exception=exc,
        )

    async def _query(
        self, collection: Collection, query: str, parameters: List[Dict[str, Any]]
    ) -> List[Document]:
        container = self._container(collection)
        items = container.query_items(
            query=query, parameters=parameters, partition_key=collection.value
        )
        return [_to_document(item) async for item in items]

    async def list_documents(self, collection: Collection) -> List[Document]:
        with tracer.start_as_current_span("cosmos_list_documents") as span:
            span.set_attribute("collection", collection.value)
            try:
                documents = await self._query(collection, "SELECT * FROM c", [])
            except Exception as e:
                span.set_attribute("error", True)
                raise self._unavailable("document listing", collection, e) from e
            span.set_attribute("documents.count", len(documents))
            return documents

    async def find_by_field(
        self, collection: Collection, field: str, value: Any
    ) -> List[Document]:
        if not _FIELD_NAME.match(field):
            raise ValueError(f"Invalid field name for query: {field!r}")

        with tracer.start_as_current_span("cosmos_find_by_field") as span:
            span.set_attribute("collection", collection.value)
            span.set_attribute("field", field)
            query = f'SELECT * FROM c WHERE c["{field}"] = @value'
            try:
                return await self._query(
                    collection, query, [{"name": "@value", "value": value}]
                )
            except Exception as e:
                span.set_attribute("error", True)
                raise self._unavailable("field query", collection, e) from e

    async def get_document(
        self, collection: Collection, document_id: str
    ) -> Optional[Document]:
        try:
            item = await self._container(collection).read_item(
                item=document_id, partition_key=collection.value
            )
        except CosmosResourceNotFoundError:
            return None
        except Exception as e:
            raise self._unavailable("document read", collection, e) from e
        return _to_document(item)

    async def add_document(self, collection: Collection, data: Document) -> Document:
        body = dict(data)
        body["id"] = str(uuid.uuid4())
        body[PARTITION_KEY_FIELD] = collection.value
        try:
            result = await self._container(collection).create_item(body=body)
        except Exception as e:
            raise self._unavailable("document creation", collection, e) from e
        return _to_document(result)

    async def update_document(
        self, collection: Collection, document_id: str, changes: Document
    ) -> Document:
        patch_operations = [
            {"op": "set", "path": f"/{key}", "value": value}
            for key, value in changes.items()
            if key not in ("id", PARTITION_KEY_FIELD)
        ]
        try:
            result = await self._container(collection).patch_item(
                item=document_id,
                partition_key=collection.value,
                patch_operations=patch_operations,
            )
        except Exception as e:
            raise self._unavailable("document update", collection, e) from e
        return _to_document(result)

    async def delete_document(self, collection: Collection, document_id: str) -> None:
        try:
            await self._container(collection).delete_item(
                item=document_id, partition_key=collection.value
            )
        except CosmosResourceNotFoundError:
            logger.debug(
                "Delete of absent document ignored",
                extra={"collection": collection.value, "document_id": document_id},
            )
        except Exception as e:
            raise self._unavailable("document deletion", collection, e) from e

    async def _execute_batch(
        self, collection: Collection, operations: List[tuple], item_ids: List[str]
    ) -> None:
        try:
            await self._container(collection).execute_item_batch(
                batch_operations=operations, partition_key=collection.value
            )
        except CosmosBatchOperationError as e:
            logger.error(
                f"Cosmos DB batch error for '{collection.value}': "
                f"First failed op index: {e.error_index}. Msg: {str(e)}"
            )
            for item_id, op_response in zip(item_ids, e.operation_responses):
                if op_response.get("statusCode", 200) >= 400:
                    logger.error(
                        f"  Failed op in batch for item ID '{item_id}': {op_response}"
                    )
            raise StoreUnavailableError(
                f"Cosmos DB batch failed on '{collection.value}' at operation {e.error_index}",
                original_exception=e,
            ) from e
        except Exception as e:
            raise self._unavailable("batch operation", collection, e) from e

    def _check_batch_size(self, collection: Collection, size: int) -> None:
        if size > self.max_batch_size:
            logger.error(
                f"Batch of {size} operations on '{collection.value}' exceeds "
                f"the transactional batch limit of {self.max_batch_size}"
            )
            raise StoreUnavailableError(
                f"Batch of {size} operations exceeds the limit of {self.max_batch_size}"
            )

    async def delete_documents(
        self, collection: Collection, document_ids: List[str]
    ) -> None:
        with tracer.start_as_current_span("cosmos_delete_documents") as span:
            span.set_attribute("collection", collection.value)
            span.set_attribute("batch.size", len(document_ids))
            self._check_batch_size(collection, len(document_ids))
            if not document_ids:
                return
            operations = [("delete", (document_id,), {}) for document_id in document_ids]
            await self._execute_batch(collection, operations, document_ids)

    async def add_documents(
        self, collection: Collection, items: List[Document]
    ) -> List[Document]:
        with tracer.start_as_current_span("cosmos_add_documents") as span:
            span.set_attribute("collection", collection.value)
            span.set_attribute("batch.size", len(items))
            self._check_batch_size(collection, len(items))
            if not items:
                return []

            bodies = []
            for item in items:
                body = dict(item)
                body["id"] = str(uuid.uuid4())
                body[PARTITION_KEY_FIELD] = collection.value
                bodies.append(body)

            operations = [("create", (body,), {}) for body in bodies]
            await self._execute_batch(
                collection, operations, [body["id"] for body in bodies]
            )
            return [_to_document(body) for body in bodies]

    async def close(self) -> None:
        await self._client.close()
        if self._credential is not None:
            await self._credential.close()
