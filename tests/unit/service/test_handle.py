"""
Cache Proxy - Request Dispatch Tests
"""

import pytest
from pydantic import ValidationError

from cacheproxy.errors import ConflictError, NotFoundError, error_response
from cacheproxy.service import HTTP_CREATED, HTTP_OK, CacheProxyService, CacheRequest, Operation


class TestOperation:
    @pytest.mark.parametrize(
        ("method", "operation"),
        [
            ("GET", Operation.FETCH),
            ("put", Operation.UPSERT),
            ("POST", Operation.CREATE),
            ("PATCH", Operation.PARTIAL_UPDATE),
            ("DELETE", Operation.DELETE),
        ],
    )
    def test_from_http_method(self, method: str, operation: Operation) -> None:
        assert Operation.from_http_method(method) is operation

    def test_unsupported_method(self) -> None:
        with pytest.raises(ValueError):
            Operation.from_http_method("OPTIONS")


class TestCacheRequest:
    def test_is_frozen(self) -> None:
        request = CacheRequest(operation=Operation.FETCH, resource_path="a")
        with pytest.raises(ValidationError):
            request.resource_path = "b"  # type: ignore[misc]


class TestHandle:
    async def test_create_reports_created(self, local_service: CacheProxyService) -> None:
        result = await local_service.handle(
            CacheRequest(operation=Operation.CREATE, resource_path="foo/bar", body="hello", content_type="txt")
        )
        assert result.status_code == HTTP_CREATED
        assert result.created is True
        assert result.content == {"foo.bar": "hello"}

    async def test_create_conflict(self, local_service: CacheProxyService) -> None:
        request = CacheRequest(operation=Operation.CREATE, resource_path="k", body="v")
        await local_service.handle(request)
        with pytest.raises(ConflictError) as exc_info:
            await local_service.handle(request)
        body, status = error_response(exc_info.value)
        assert status == 409
        assert body["success"] is False

    async def test_upsert_parses_structured_body(self, local_service: CacheProxyService) -> None:
        result = await local_service.handle(
            CacheRequest(
                operation=Operation.UPSERT,
                body='{"a": 1, "b": 2}',
                content_type="application/json",
                ttl=5,
            )
        )
        assert result.status_code == HTTP_OK
        assert result.content == {"success": True}
        assert await local_service.fetch("b") == 2

    async def test_partial_update(self, local_service: CacheProxyService) -> None:
        result = await local_service.handle(
            CacheRequest(operation=Operation.PARTIAL_UPDATE, resource_path="k", body="[1, 2]")
        )
        assert result.content == {"k": [1, 2]}

    async def test_fetch_with_default(self, local_service: CacheProxyService) -> None:
        result = await local_service.handle(
            CacheRequest(operation=Operation.FETCH, resource_path="foo/bar", default="x")
        )
        assert result.content == "x"
        assert result.status_code == HTTP_OK

    async def test_fetch_clear(self, local_service: CacheProxyService) -> None:
        await local_service.upsert("k", "v")
        result = await local_service.handle(CacheRequest(operation=Operation.FETCH, resource_path="k", clear=True))
        assert result.content == "v"
        with pytest.raises(NotFoundError):
            await local_service.handle(CacheRequest(operation=Operation.FETCH, resource_path="k"))

    async def test_delete(self, local_service: CacheProxyService) -> None:
        await local_service.upsert("k", "v")
        result = await local_service.handle(CacheRequest(operation=Operation.DELETE, resource_path="k"))
        assert result.content == {"success": True}
