"""HTTP client for server-delivered form specs."""

import httpx
import pytest

from payform.errors import PayFormError
from payform.provider import FormSpecProvider
from payform.transport.http import HttpClient

SPECS = [{"type": "eps", "fields": [{"type": "name"}]}]


def make_client(handler, token=None) -> HttpClient:
    return HttpClient(base_url="https://example.test", token=token, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_get_form_specs_unwraps_envelope():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["path"] = request.url.path
        return httpx.Response(200, json={"payment_method_specs": SPECS, "object": "elements_session"})

    client = make_client(handler, token="sk_test_123")
    try:
        specs = await client.get_form_specs("/v1/elements/sessions")
    finally:
        await client.close()
    assert specs == SPECS
    assert seen == {"auth": "Bearer sk_test_123", "path": "/v1/elements/sessions"}

    provider = FormSpecProvider()
    assert provider.update(specs)
    assert provider.payment_methods == ["eps"]


@pytest.mark.asyncio
async def test_bare_list_response():
    client = make_client(lambda request: httpx.Response(200, json=SPECS))
    try:
        assert await client.get_form_specs("/specs") == SPECS
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_http_error_raises():
    client = make_client(lambda request: httpx.Response(404, text="not found"))
    with pytest.raises(PayFormError) as exc:
        await client.get_form_specs()
    await client.close()
    assert exc.value.code == "http_error"
    assert "404" in str(exc.value)


@pytest.mark.asyncio
async def test_non_list_response_raises():
    client = make_client(lambda request: httpx.Response(200, json={"error": "nope"}))
    with pytest.raises(PayFormError):
        await client.get_form_specs()
    await client.close()


@pytest.mark.asyncio
async def test_connection_failure_raises_http_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)
    with pytest.raises(PayFormError) as exc:
        await client.get_form_specs()
    await client.close()
    assert exc.value.code == "http_error"


@pytest.mark.asyncio
async def test_non_json_body_raises_http_error():
    client = make_client(lambda request: httpx.Response(200, text="<html>maintenance</html>"))
    with pytest.raises(PayFormError) as exc:
        await client.get_form_specs()
    await client.close()
    assert exc.value.code == "http_error"
    assert "not JSON" in str(exc.value)
