"""
Accrual 클라이언트 테스트

AccrualClient 응답 매핑 테스트 (httpx mock 사용).
"""

from decimal import Decimal
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from adapters.accrual.client import AccrualClient, normalize_base_url
from adapters.accrual.errors import (
    AccrualRateLimitError,
    AccrualServiceError,
    OrderNotRegisteredError,
)
from adapters.interfaces import IAccrualClient
from core.domain.errors import TransientUpstreamError
from core.types import OrderStatus


def _response(status_code: int, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, **kwargs)


async def _get_order(client: AccrualClient, number: str, response: httpx.Response):
    """HTTP 클라이언트를 모킹하여 get_order 실행"""
    with patch.object(client, "_get_client") as mock_get_client:
        mock_http_client = AsyncMock()
        mock_http_client.get.return_value = response
        mock_get_client.return_value = mock_http_client

        result = await client.get_order(number)

        mock_http_client.get.assert_awaited_once_with(f"/api/orders/{number}")
        return result


class TestNormalizeBaseUrl:
    """normalize_base_url 테스트"""

    @pytest.mark.parametrize(
        "address, expected",
        [
            ("http://localhost:8080", "http://localhost:8080"),
            ("http://localhost:8080/", "http://localhost:8080"),
            ("localhost:8080", "http://localhost:8080"),
            ("https://accrual.example.com/", "https://accrual.example.com"),
        ],
    )
    def test_normalize(self, address: str, expected: str) -> None:
        """스킴 보충 + 끝 슬래시 제거"""
        assert normalize_base_url(address) == expected


class TestAccrualClientResponses:
    """상태 코드별 매핑 테스트"""

    def test_implements_protocol(self) -> None:
        """IAccrualClient Protocol 준수"""
        assert isinstance(AccrualClient("http://accrual.test"), IAccrualClient)

    @pytest.mark.asyncio
    async def test_processed(self) -> None:
        """200 PROCESSED + accrual"""
        client = AccrualClient("http://accrual.test")
        response = _response(
            200,
            json={"order": "79927398713", "status": "PROCESSED", "accrual": 729.98},
        )

        result = await _get_order(client, "79927398713", response)

        assert result.order == "79927398713"
        assert result.status is OrderStatus.PROCESSED
        assert result.accrual == Decimal("729.98")

    @pytest.mark.asyncio
    async def test_integer_accrual(self) -> None:
        """정수 accrual"""
        client = AccrualClient("http://accrual.test")
        response = _response(200, json={"order": "18", "status": "PROCESSED", "accrual": 500})

        result = await _get_order(client, "18", response)

        assert result.accrual == Decimal("500")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["REGISTERED", "PROCESSING", "INVALID"])
    async def test_intermediate_without_accrual(self, status: str) -> None:
        """accrual 없는 상태"""
        client = AccrualClient("http://accrual.test")
        response = _response(200, json={"order": "18", "status": status})

        result = await _get_order(client, "18", response)

        assert result.status is OrderStatus.parse(status)
        assert result.accrual is None

    @pytest.mark.asyncio
    async def test_not_registered(self) -> None:
        """204 → OrderNotRegisteredError"""
        client = AccrualClient("http://accrual.test")

        with pytest.raises(OrderNotRegisteredError) as exc_info:
            await _get_order(client, "18", _response(204))

        assert isinstance(exc_info.value, TransientUpstreamError)

    @pytest.mark.asyncio
    async def test_rate_limited_with_retry_after(self) -> None:
        """429 + Retry-After"""
        client = AccrualClient("http://accrual.test")
        response = _response(
            429,
            headers={"Retry-After": "60"},
            text="No more than N requests per minute allowed",
        )

        with pytest.raises(AccrualRateLimitError) as exc_info:
            await _get_order(client, "18", response)

        assert exc_info.value.retry_after == 60

    @pytest.mark.asyncio
    async def test_rate_limited_without_retry_after(self) -> None:
        """429, 헤더 없음"""
        client = AccrualClient("http://accrual.test")

        with pytest.raises(AccrualRateLimitError) as exc_info:
            await _get_order(client, "18", _response(429))

        assert exc_info.value.retry_after is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [500, 404, 503])
    async def test_service_error(self, status_code: int) -> None:
        """500 및 예상하지 못한 상태 코드"""
        client = AccrualClient("http://accrual.test")

        with pytest.raises(AccrualServiceError) as exc_info:
            await _get_order(client, "18", _response(status_code))

        assert exc_info.value.status_code == status_code

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        """연결 실패 → AccrualServiceError"""
        client = AccrualClient("http://accrual.test")

        with patch.object(client, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.get.side_effect = httpx.ConnectError("connection refused")
            mock_get_client.return_value = mock_http_client

            with pytest.raises(AccrualServiceError) as exc_info:
                await client.get_order("18")

        assert exc_info.value.status_code is None


class TestAccrualClientBody:
    """200 응답 본문 검증 테스트"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"text": "not json"},
            {"json": ["PROCESSED"]},
            {"json": {"order": "18", "status": "DONE"}},
            {"json": {"order": "18", "status": "NEW"}},
            {"json": {"order": "18"}},
            {"json": {"order": "26", "status": "PROCESSED", "accrual": 1}},
            {"json": {"order": "18", "status": "PROCESSED", "accrual": -1}},
            {"json": {"order": "18", "status": "PROCESSED", "accrual": "10"}},
            {"json": {"order": "18", "status": "PROCESSED", "accrual": True}},
        ],
    )
    async def test_malformed(self, kwargs) -> None:
        """잘못된 본문 → AccrualServiceError"""
        client = AccrualClient("http://accrual.test")

        with pytest.raises(AccrualServiceError):
            await _get_order(client, "18", _response(200, **kwargs))


class TestAccrualClientLifecycle:
    """HTTP 클라이언트 수명 주기 테스트"""

    @pytest.mark.asyncio
    async def test_lazy_client(self) -> None:
        """최초 요청 시 생성, close 후 해제"""
        client = AccrualClient("accrual.test:8080/", timeout=2.5)
        assert client._client is None

        http_client = await client._get_client()

        assert http_client is await client._get_client()
        assert str(http_client.base_url).startswith("http://accrual.test:8080")

        await client.close()
        assert client._client is None

    @pytest.mark.asyncio
    async def test_close_without_client(self) -> None:
        """생성 전 close는 무시"""
        client = AccrualClient("http://accrual.test")

        await client.close()

        assert client._client is None
