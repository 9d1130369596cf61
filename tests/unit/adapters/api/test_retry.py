"""
Tests unitaires pour le mecanisme de retry avec backoff exponentiel.

Ces tests verifient:
- RateLimitError capture le header Retry-After
- with_retry relance sur erreur passagere et pas sur les autres
- request_with_retry relance sur 429, 5xx et erreurs de transport
- Les 4xx (hors 429) remontent immediatement sans retry
"""

import httpx
import pytest
import respx

from src.adapters.api.retry import (
    RateLimitError,
    ServerError,
    request_with_retry,
    with_retry,
)

URL = "http://catalog.test/api/v1/products/1"


class TestRateLimitError:
    """Tests pour l'exception RateLimitError."""

    def test_rate_limit_error_stores_retry_after(self) -> None:
        """RateLimitError stocke la valeur Retry-After."""
        error = RateLimitError(retry_after=60)
        assert error.retry_after == 60
        assert error.status_code == 429
        assert "60" in str(error)

    def test_rate_limit_error_without_retry_after(self) -> None:
        """RateLimitError fonctionne sans Retry-After."""
        error = RateLimitError(retry_after=None)
        assert error.retry_after is None


class TestWithRetryDecorator:
    """Tests pour le decorateur with_retry."""

    @pytest.mark.asyncio
    async def test_with_retry_retries_on_server_error(self) -> None:
        """with_retry relance quand ServerError est levee."""
        call_count = 0

        @with_retry(max_attempts=3, max_wait=0.01)
        async def flaky_function() -> str:
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise ServerError(503)
            return "success"

        result = await flaky_function()
        assert result == "success"
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_with_retry_retries_on_transport_error(self) -> None:
        """with_retry relance sur erreur de connexion httpx."""
        call_count = 0

        @with_retry(max_attempts=2, max_wait=0.01)
        async def unreachable() -> str:
            nonlocal call_count
            call_count += 1
            raise httpx.ConnectError("connection refused")

        with pytest.raises(httpx.ConnectError):
            await unreachable()
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_with_retry_stops_after_max_attempts(self) -> None:
        """with_retry abandonne apres max_attempts tentatives."""
        call_count = 0

        @with_retry(max_attempts=3, max_wait=0.01)
        async def always_fails() -> str:
            nonlocal call_count
            call_count += 1
            raise RateLimitError(retry_after=1)

        with pytest.raises(RateLimitError):
            await always_fails()
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_with_retry_does_not_retry_other_exceptions(self) -> None:
        """with_retry ne relance pas les autres exceptions."""
        call_count = 0

        @with_retry(max_attempts=3, max_wait=0.01)
        async def raises_value_error() -> str:
            nonlocal call_count
            call_count += 1
            raise ValueError("not a transient error")

        with pytest.raises(ValueError):
            await raises_value_error()
        assert call_count == 1  # Pas de retry


class TestRequestWithRetry:
    """Tests pour request_with_retry avec httpx."""

    @pytest.mark.asyncio
    async def test_request_with_retry_raises_on_429(self, respx_mock: respx.Router) -> None:
        """request_with_retry convertit 429 en RateLimitError et relance."""
        route = respx_mock.get(URL).mock(
            return_value=httpx.Response(429, headers={"Retry-After": "30"})
        )

        async with httpx.AsyncClient() as client:
            with pytest.raises(RateLimitError) as exc_info:
                await request_with_retry(client, "GET", URL, max_attempts=3, max_wait=0.01)

        assert exc_info.value.retry_after == 30
        assert route.call_count == 3

    @pytest.mark.asyncio
    async def test_request_with_retry_ignores_non_numeric_retry_after(
        self, respx_mock: respx.Router
    ) -> None:
        """Un Retry-After au format date est ignore."""
        respx_mock.get(URL).mock(
            return_value=httpx.Response(
                429, headers={"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"}
            )
        )

        async with httpx.AsyncClient() as client:
            with pytest.raises(RateLimitError) as exc_info:
                await request_with_retry(client, "GET", URL, max_attempts=1)

        assert exc_info.value.retry_after is None

    @pytest.mark.asyncio
    async def test_request_with_retry_retries_5xx_then_succeeds(
        self, respx_mock: respx.Router
    ) -> None:
        """request_with_retry reussit apres des 5xx initiaux."""
        route = respx_mock.get(URL).mock(
            side_effect=[
                httpx.Response(503),
                httpx.Response(500),
                httpx.Response(200, json={"status": "ok"}),
            ]
        )

        async with httpx.AsyncClient() as client:
            response = await request_with_retry(client, "GET", URL, max_attempts=3, max_wait=0.01)

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert route.call_count == 3

    @pytest.mark.asyncio
    async def test_request_with_retry_raises_server_error_when_exhausted(
        self, respx_mock: respx.Router
    ) -> None:
        """Les 5xx persistants remontent en ServerError."""
        route = respx_mock.get(URL).mock(return_value=httpx.Response(502))

        async with httpx.AsyncClient() as client:
            with pytest.raises(ServerError) as exc_info:
                await request_with_retry(client, "GET", URL, max_attempts=2, max_wait=0.01)

        assert exc_info.value.status_code == 502
        assert route.call_count == 2

    @pytest.mark.asyncio
    async def test_request_with_retry_retries_timeouts(self, respx_mock: respx.Router) -> None:
        """Un timeout est une erreur passagere."""
        route = respx_mock.get(URL).mock(
            side_effect=[
                httpx.ReadTimeout("timed out"),
                httpx.Response(200, json={"ok": True}),
            ]
        )

        async with httpx.AsyncClient() as client:
            response = await request_with_retry(client, "GET", URL, max_attempts=3, max_wait=0.01)

        assert response.status_code == 200
        assert route.call_count == 2

    @pytest.mark.asyncio
    async def test_request_with_retry_passes_on_success(self, respx_mock: respx.Router) -> None:
        """request_with_retry retourne directement sur 200."""
        route = respx_mock.get(URL).mock(
            return_value=httpx.Response(200, json={"data": "value"})
        )

        async with httpx.AsyncClient() as client:
            response = await request_with_retry(client, "GET", URL)

        assert response.json() == {"data": "value"}
        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_request_with_retry_does_not_retry_404(self, respx_mock: respx.Router) -> None:
        """request_with_retry leve HTTPStatusError sur 4xx, sans retry."""
        route = respx_mock.get(URL).mock(return_value=httpx.Response(404))

        async with httpx.AsyncClient() as client:
            with pytest.raises(httpx.HTTPStatusError) as exc_info:
                await request_with_retry(client, "GET", URL, max_attempts=3)

        assert exc_info.value.response.status_code == 404
        assert route.call_count == 1  # Pas de retry sur 404
