# tests/unit/test_data_requester.py
import json
from unittest.mock import AsyncMock, Mock

import pytest

from nats.errors import NoRespondersError

from intraday_dataflow.adapters import NatsClient, NatsDataRequester, Topics


def reply(body):
    raw = body if isinstance(body, bytes) else json.dumps(body).encode()
    return Mock(data=raw)


@pytest.fixture
def nats_client():
    client = Mock()
    client.request = AsyncMock(return_value=reply({"structuredContent": {"items": []}}))
    return client


@pytest.mark.asyncio
async def test_request_body_and_subject(nats_client):
    requester = NatsDataRequester(nats_client, "get-symbol-intraday-candlestick-data", timeout=5)

    result = await requester.request_data({"securityIdOrSymbol": "TEVA"})

    assert result == {"structuredContent": {"items": []}}
    subject, body = nats_client.request.call_args.args
    assert subject == Topics.tool_calls()
    assert json.loads(body) == {
        "name": "get-symbol-intraday-candlestick-data",
        "arguments": {"securityIdOrSymbol": "TEVA"},
    }
    assert nats_client.request.call_args.kwargs["timeout"] == 5


@pytest.mark.asyncio
async def test_no_args_sends_empty_arguments(nats_client):
    requester = NatsDataRequester(nats_client, "tool", subject="host.tools")

    await requester.request_data()

    subject, body = nats_client.request.call_args.args
    assert subject == "host.tools"
    assert json.loads(body)["arguments"] == {}


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [b"not json", [1, 2], {"isError": True, "content": "boom"}])
async def test_bad_replies_raise(nats_client, body):
    nats_client.request.return_value = reply(body)
    requester = NatsDataRequester(nats_client, "tool")

    with pytest.raises(RuntimeError):
        await requester.request_data()


@pytest.mark.asyncio
async def test_transport_errors_propagate(nats_client):
    nats_client.request.side_effect = TimeoutError("no responders")
    requester = NatsDataRequester(nats_client, "tool")

    with pytest.raises(TimeoutError):
        await requester.request_data()


def test_topics():
    assert Topics.tool_results("intraday chart") == "widgets.intraday_chart.tool_result"
    assert Topics.widget_state("intraday-candlestick") == "widgets.intraday-candlestick.state"


@pytest.fixture
def connected_client():
    client = NatsClient()
    client._nc = Mock(is_connected=True, publish=AsyncMock(), request=AsyncMock())
    client._connected = True
    return client


@pytest.mark.asyncio
async def test_publish_json_serializes(connected_client):
    await connected_client.publish_json("widgets.x.state", {"status": "loaded"})

    subject, data = connected_client._nc.publish.call_args.args
    assert subject == "widgets.x.state"
    assert json.loads(data) == {"status": "loaded"}


@pytest.mark.asyncio
async def test_client_request_maps_nats_errors(connected_client):
    connected_client._nc.request.side_effect = NoRespondersError()

    with pytest.raises(TimeoutError):
        await connected_client.request("tools.call", b"{}")


@pytest.mark.asyncio
async def test_client_requires_connection():
    with pytest.raises(RuntimeError):
        await NatsClient().request("tools.call", b"{}")
