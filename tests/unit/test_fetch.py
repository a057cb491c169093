import httpx
import pytest

from restgraph.core.errors import ExecutionError
from restgraph.runtime.fetch import HttpxFetch


@pytest.mark.asyncio
async def test_httpx_fetch_sends_request_and_adapts_response():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["content_type"] = request.headers.get("content-type")
        seen["body"] = request.content
        return httpx.Response(201, content=b'{"id":1}', headers={"X-Trace": "abc"})

    fetch = HttpxFetch(transport=httpx.MockTransport(handler))
    try:
        response = await fetch(
            "https://api.example.com/users",
            method="POST",
            headers={"Content-Type": "application/json"},
            body='{"name":"Ada"}',
        )

        assert response.status == 201
        assert response.status_text == "Created"
        assert response.headers.get("x-trace") == "abc"
        assert await response.text() == '{"id":1}'
    finally:
        await fetch.close()

    assert seen == {
        "method": "POST",
        "url": "https://api.example.com/users",
        "content_type": "application/json",
        "body": b'{"name":"Ada"}',
    }


@pytest.mark.asyncio
async def test_httpx_fetch_reuses_client_until_closed():
    fetch = HttpxFetch(transport=httpx.MockTransport(lambda request: httpx.Response(204)))

    await fetch("https://api.example.com/a", method="GET", headers={})
    client = fetch._client
    await fetch("https://api.example.com/b", method="GET", headers={})

    assert fetch._client is client
    await fetch.close()
    assert fetch._client is None


@pytest.mark.asyncio
async def test_transport_errors_become_execution_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetch = HttpxFetch(transport=httpx.MockTransport(handler))

    with pytest.raises(ExecutionError) as exc_info:
        await fetch("https://api.example.com/users", method="GET", headers={})
    await fetch.close()

    assert exc_info.value.url == "https://api.example.com/users"
    assert "connection refused" in str(exc_info.value)
