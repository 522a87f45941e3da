"""
Unit tests for the request executor.
"""

import asyncio
import json

import httpx
import pytest

from light_http.request.executor import HttpRequest
from light_http.request.models import RequestOutcome
from shared.errors import RequestCancelledError, UriResolutionError
from shared.test_helpers import (
    TrackingStream,
    create_test_request,
    json_responder,
    text_responder,
)


class TestSendStatus:
    """Test cases for HttpRequest.send_status."""

    @pytest.mark.asyncio
    async def test_success_reports_status_code(self):
        """Test a 2xx answer is a success carrying the server's code."""
        request, transport = create_test_request(json_responder({"ok": True}, status_code=201))

        status = await request.send_status("POST", "v1/items", json_body={"name": "item"})

        assert status.success is True
        assert status.status_code == 201
        assert status.transport_error is None
        assert status.outcome == RequestOutcome.SUCCESS
        assert str(status) == "Success"
        assert transport.call_count == 1
        assert str(transport.requests[0].url) == "https://api.example.com/v1/items"
        assert json.loads(transport.requests[0].content) == {"name": "item"}

    @pytest.mark.asyncio
    async def test_method_headers_and_content_are_sent(self):
        """Test the outbound request carries method, headers and body."""
        request, transport = create_test_request(json_responder({}))

        await request.send_status(
            "PUT",
            "v1/items/7",
            content="raw-body",
            headers={"X-Api-Key": "secret"}
        )

        sent = transport.requests[0]
        assert sent.method == "PUT"
        assert sent.headers["X-Api-Key"] == "secret"
        assert sent.content == b"raw-body"

    @pytest.mark.asyncio
    async def test_status_failure_uses_body_as_reason(self):
        """Test a non-2xx body becomes the reason with newlines collapsed."""
        request, _ = create_test_request(text_responder("Item not found\nCheck the id\r\nand retry", 404))

        status = await request.send_status("GET", "v1/items/9")

        assert status.success is False
        assert status.status_code == 404
        assert status.transport_error is None
        assert status.reason_phrase == "Item not found. Check the id. and retry"
        assert status.outcome == RequestOutcome.STATUS_FAILURE
        assert str(status) == status.reason_phrase

    @pytest.mark.asyncio
    async def test_status_failure_without_body_uses_standard_reason(self):
        """Test an empty error body falls back to the HTTP reason phrase."""
        request, _ = create_test_request(lambda r: httpx.Response(503))

        status = await request.send_status("GET", "status/503")

        assert status.success is False
        assert status.status_code == 503
        assert status.reason_phrase == "Service Unavailable"

    @pytest.mark.asyncio
    async def test_internal_server_error_body_is_not_read(self):
        """Test a 500 answer never derives its reason from the body."""
        stream = TrackingStream(b"stack trace\nwith details")
        request, _ = create_test_request(lambda r: httpx.Response(500, stream=stream))

        status = await request.send_status("GET", "boom")

        assert status.status_code == 500
        assert status.reason_phrase == "Internal Server Error"
        assert stream.close_count == 1

    @pytest.mark.asyncio
    async def test_timeout_becomes_transport_failure(self):
        """Test a timeout during send is reported, not raised."""

        def respond(r: httpx.Request):
            raise httpx.ReadTimeout("timed out waiting for server", request=r)

        request, _ = create_test_request(respond)

        status = await request.send_status("GET", "slow")

        assert status.success is False
        assert isinstance(status.transport_error, httpx.ReadTimeout)
        assert status.reason_phrase == "timed out waiting for server"
        assert status.status_code is None
        assert status.outcome == RequestOutcome.TRANSPORT_FAILURE

    @pytest.mark.asyncio
    async def test_builtin_timeout_becomes_transport_failure(self):
        """Test the builtin TimeoutError is treated like an httpx timeout."""

        def respond(r: httpx.Request):
            raise TimeoutError("deadline exceeded")

        request, _ = create_test_request(respond)

        status = await request.send_status("GET", "slow")

        assert isinstance(status.transport_error, TimeoutError)
        assert status.reason_phrase == "deadline exceeded"

    @pytest.mark.asyncio
    async def test_asyncio_timeout_becomes_transport_failure(self):
        """Test asyncio.TimeoutError is treated like any other timeout."""

        def respond(r: httpx.Request):
            raise asyncio.TimeoutError()

        request, _ = create_test_request(respond)

        status = await request.send_status("GET", "slow")

        assert status.outcome == RequestOutcome.TRANSPORT_FAILURE
        assert isinstance(status.transport_error, asyncio.TimeoutError)

    @pytest.mark.asyncio
    async def test_error_body_read_failure_becomes_transport_failure(self):
        """Test a broken error body is a transport failure and the response is released."""
        stream = TrackingStream(error=httpx.ReadError("peer reset"))
        request, _ = create_test_request(lambda r: httpx.Response(404, stream=stream))

        status = await request.send_status("GET", "v1/items/9")

        assert status.outcome == RequestOutcome.TRANSPORT_FAILURE
        assert isinstance(status.transport_error, httpx.ReadError)
        assert status.reason_phrase == "peer reset"
        assert status.status_code is None
        assert stream.close_count == 1

    @pytest.mark.asyncio
    async def test_error_body_read_failure_when_always_parsing(self):
        """Test the JSON path releases a broken error body exactly once."""
        stream = TrackingStream(error=httpx.ReadError("peer reset"))
        request, _ = create_test_request(lambda r: httpx.Response(404, stream=stream))

        result = await request.send_json("GET", "v1/items/9", only_on_success=False)

        assert result.status.outcome == RequestOutcome.TRANSPORT_FAILURE
        assert result.value is None
        assert stream.close_count == 1

    @pytest.mark.asyncio
    async def test_connection_error_becomes_transport_failure(self):
        """Test a connection error is reported, not raised."""

        def respond(r: httpx.Request):
            raise httpx.ConnectError("connection refused", request=r)

        request, _ = create_test_request(respond)

        status = await request.send_status("GET", "v1/items")

        assert status.success is False
        assert isinstance(status.transport_error, httpx.ConnectError)
        assert status.reason_phrase == "connection refused"

    @pytest.mark.asyncio
    async def test_unexpected_error_propagates(self):
        """Test errors outside the transport kinds are not converted."""

        def respond(r: httpx.Request):
            raise RuntimeError("bug in transport")

        request, _ = create_test_request(respond)

        with pytest.raises(RuntimeError, match="bug in transport"):
            await request.send_status("GET", "v1/items")

    @pytest.mark.asyncio
    async def test_relative_uri_without_base_raises(self):
        """Test a relative URI on a client without base address is fatal."""
        request, transport = create_test_request(json_responder({}), base_url="")

        with pytest.raises(UriResolutionError):
            await request.send_status("GET", "v1/items")

        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_success_response_is_released_once(self):
        """Test the response stream is closed exactly once."""
        stream = TrackingStream(b"{}")
        request, _ = create_test_request(lambda r: httpx.Response(200, stream=stream))

        await request.send_status("GET", "v1/items")

        assert stream.close_count == 1


class TestCancellation:
    """Test cases for the cancellation event."""

    @pytest.mark.asyncio
    async def test_event_set_before_send(self):
        """Test an already-set event cancels without touching the network."""
        request, transport = create_test_request(json_responder({}))
        cancel_event = asyncio.Event()
        cancel_event.set()

        status = await request.send_status("GET", "v1/items", cancel_event=cancel_event)

        assert status.success is False
        assert isinstance(status.transport_error, RequestCancelledError)
        assert status.reason_phrase == "The operation was canceled"
        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_event_set_during_send(self):
        """Test the in-flight send is abandoned when the event fires."""

        async def respond(r: httpx.Request):
            await asyncio.sleep(10)
            return httpx.Response(200, json={})

        request, _ = create_test_request(respond)
        cancel_event = asyncio.Event()
        asyncio.get_running_loop().call_later(0.01, cancel_event.set)

        status = await asyncio.wait_for(
            request.send_status("GET", "v1/items", cancel_event=cancel_event),
            timeout=5
        )

        assert status.success is False
        assert isinstance(status.transport_error, RequestCancelledError)

    @pytest.mark.asyncio
    async def test_late_response_is_released(self):
        """Test a response produced after the event fired is closed."""
        stream = TrackingStream(b"{}")

        async def respond(r: httpx.Request):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                return httpx.Response(200, stream=stream)

        request, _ = create_test_request(respond)
        cancel_event = asyncio.Event()
        asyncio.get_running_loop().call_later(0.01, cancel_event.set)

        status = await asyncio.wait_for(
            request.send_status("GET", "v1/items", cancel_event=cancel_event),
            timeout=5
        )

        assert isinstance(status.transport_error, RequestCancelledError)
        assert stream.close_count == 1

    @pytest.mark.asyncio
    async def test_caller_cancellation_releases_response(self):
        """Test cancelling the calling task still closes a response that arrives."""
        stream = TrackingStream(b"{}")
        started = asyncio.Event()

        async def respond(r: httpx.Request):
            started.set()
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                return httpx.Response(200, stream=stream)

        request, _ = create_test_request(respond)
        task = asyncio.ensure_future(
            request.send_status("GET", "v1/items", cancel_event=asyncio.Event())
        )
        await asyncio.wait_for(started.wait(), timeout=5)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert stream.close_count == 1

    @pytest.mark.asyncio
    async def test_unset_event_does_not_interfere(self):
        """Test a send completes normally when the event never fires."""
        request, _ = create_test_request(json_responder({"id": 1}))

        result = await request.send_json("GET", "v1/items/1", cancel_event=asyncio.Event())

        assert result.status.success is True
        assert result.value == {"id": 1}


class TestFullUri:
    """Test cases for HttpRequest.full_uri."""

    def test_uses_client_base_address(self):
        """Test resolution against the client's configured base address."""
        request = HttpRequest(httpx.AsyncClient(base_url="https://api.example.com/"))

        assert str(request.full_uri("v1/items")) == "https://api.example.com/v1/items"
        assert str(request.full_uri()) == "https://api.example.com/"
