"""Unit tests for the Cosmos DB document store against mocked containers."""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from azure.cosmos.exceptions import (
    CosmosBatchOperationError,
    CosmosHttpResponseError,
    CosmosResourceNotFoundError,
)

from bengkel_api.exceptions import StoreUnavailableError
from bengkel_api.store.base import Collection
from bengkel_api.store.cosmos import (
    MAX_BATCH_OPERATIONS,
    PARTITION_KEY_FIELD,
    CosmosDocumentStore,
)


class AsyncItems:
    """Stands in for the AsyncItemPaged returned by query_items."""

    def __init__(self, items):
        self._items = list(items)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for item in self._items:
            yield item


@pytest.fixture
def container():
    container = MagicMock()
    container.read_item = AsyncMock()
    container.create_item = AsyncMock(side_effect=lambda body: dict(body, _etag="x", _ts=1))
    container.patch_item = AsyncMock()
    container.delete_item = AsyncMock()
    container.execute_item_batch = AsyncMock(return_value=[])
    return container


@pytest.fixture
def cosmos_store(container):
    client = MagicMock()
    client.get_database_client.return_value.get_container_client.return_value = container
    names = {collection: collection.value for collection in Collection}
    return CosmosDocumentStore(client, "bengkel", names)


@pytest.mark.asyncio
async def test_list_strips_system_properties(cosmos_store, container):
    container.query_items.return_value = AsyncItems([
        {"id": "a", "nama": "Oli", PARTITION_KEY_FIELD: "stok", "_rid": "r", "_ts": 5},
    ])

    documents = await cosmos_store.list_documents(Collection.INVENTORY)

    assert documents == [{"id": "a", "nama": "Oli"}]
    assert container.query_items.call_args.kwargs["partition_key"] == "stok"


@pytest.mark.asyncio
async def test_find_by_field_passes_value_as_parameter(cosmos_store, container):
    container.query_items.return_value = AsyncItems([])

    await cosmos_store.find_by_field(Collection.INVENTORY, "nama", "Oli")

    kwargs = container.query_items.call_args.kwargs
    assert kwargs["query"] == 'SELECT * FROM c WHERE c["nama"] = @value'
    assert kwargs["parameters"] == [{"name": "@value", "value": "Oli"}]


@pytest.mark.asyncio
async def test_find_by_field_rejects_unsafe_field_names(cosmos_store):
    with pytest.raises(ValueError):
        await cosmos_store.find_by_field(Collection.INVENTORY, 'nama"] OR 1=1 --', "x")


@pytest.mark.asyncio
async def test_add_document_assigns_id_and_partition(cosmos_store, container):
    document = await cosmos_store.add_document(
        Collection.HISTORY, {"id": "caller-id", "total": 10}
    )

    body = container.create_item.call_args.kwargs["body"]
    assert body[PARTITION_KEY_FIELD] == "riwayat"
    assert body["id"] != "caller-id"
    assert document == {"id": body["id"], "total": 10}


@pytest.mark.asyncio
async def test_get_missing_document_returns_none(cosmos_store, container):
    container.read_item.side_effect = CosmosResourceNotFoundError(
        status_code=404, message="missing"
    )

    assert await cosmos_store.get_document(Collection.INVENTORY, "nope") is None


@pytest.mark.asyncio
async def test_update_document_patches_fields(cosmos_store, container):
    container.patch_item.return_value = {"id": "a", "nama": "Oli", "harga": 2, "stok": 3}

    await cosmos_store.update_document(Collection.INVENTORY, "a", {"harga": 2, "stok": 3})

    assert container.patch_item.call_args.kwargs["patch_operations"] == [
        {"op": "set", "path": "/harga", "value": 2},
        {"op": "set", "path": "/stok", "value": 3},
    ]


@pytest.mark.asyncio
async def test_delete_missing_document_is_a_no_op(cosmos_store, container):
    container.delete_item.side_effect = CosmosResourceNotFoundError(
        status_code=404, message="missing"
    )

    await cosmos_store.delete_document(Collection.HISTORY, "nope")


@pytest.mark.asyncio
async def test_http_errors_become_store_unavailable(cosmos_store, container):
    container.delete_item.side_effect = CosmosHttpResponseError(
        status_code=503, message="unavailable"
    )

    with pytest.raises(StoreUnavailableError) as exc_info:
        await cosmos_store.delete_document(Collection.HISTORY, "a")
    assert isinstance(exc_info.value.original_exception, CosmosHttpResponseError)


@pytest.mark.asyncio
async def test_add_documents_runs_as_one_transactional_batch(cosmos_store, container):
    items = [{"n": i} for i in range(MAX_BATCH_OPERATIONS)]

    created = await cosmos_store.add_documents(Collection.CART, items)

    assert len(created) == MAX_BATCH_OPERATIONS
    container.execute_item_batch.assert_awaited_once()
    kwargs = container.execute_item_batch.call_args.kwargs
    assert len(kwargs["batch_operations"]) == MAX_BATCH_OPERATIONS
    assert kwargs["partition_key"] == "keranjang"


@pytest.mark.asyncio
async def test_oversized_add_batch_is_refused_before_writing(cosmos_store, container):
    items = [{"n": i} for i in range(MAX_BATCH_OPERATIONS + 1)]

    with pytest.raises(StoreUnavailableError):
        await cosmos_store.add_documents(Collection.CART, items)
    container.execute_item_batch.assert_not_awaited()


@pytest.mark.asyncio
async def test_oversized_delete_batch_is_refused_before_writing(cosmos_store, container):
    ids = [f"id-{i}" for i in range(MAX_BATCH_OPERATIONS + 50)]

    with pytest.raises(StoreUnavailableError):
        await cosmos_store.delete_documents(Collection.CART, ids)
    container.execute_item_batch.assert_not_awaited()


@pytest.mark.asyncio
async def test_query_http_error_becomes_store_unavailable(cosmos_store, container):
    container.query_items.side_effect = CosmosHttpResponseError(
        status_code=503, message="unavailable"
    )

    with pytest.raises(StoreUnavailableError) as exc_info:
        await cosmos_store.list_documents(Collection.INVENTORY)
    assert exc_info.value.original_exception.status_code == 503


@pytest.mark.asyncio
async def test_batch_http_error_becomes_store_unavailable(cosmos_store, container):
    container.execute_item_batch.side_effect = CosmosHttpResponseError(
        status_code=503, message="unavailable"
    )

    with pytest.raises(StoreUnavailableError):
        await cosmos_store.delete_documents(Collection.CART, ["a"])


@pytest.mark.asyncio
async def test_store_errors_are_logged_without_traceback(cosmos_store, container, caplog):
    container.delete_item.side_effect = CosmosHttpResponseError(
        status_code=503, message="unavailable"
    )

    with caplog.at_level(logging.ERROR, logger="bengkel_api"):
        with pytest.raises(StoreUnavailableError):
            await cosmos_store.delete_document(Collection.HISTORY, "a")

    records = [r for r in caplog.records if r.name == "bengkel_api.store.cosmos"]
    assert len(records) == 1
    assert records[0].exc_info is None
    assert records[0].status_code == 503
    assert "unavailable" in records[0].error_message


@pytest.mark.asyncio
async def test_delete_documents_batch_failure(cosmos_store, container):
    container.execute_item_batch.side_effect = CosmosBatchOperationError(
        error_index=0,
        headers={},
        status_code=404,
        message="batch failed",
        operation_responses=[{"statusCode": 404}],
    )

    with pytest.raises(StoreUnavailableError):
        await cosmos_store.delete_documents(Collection.CART, ["a"])
