from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.websockets import WebSocketState

from placehub.services.realtime_hub import ConnectionHub


def fake_socket(state=WebSocketState.CONNECTED, fail=False):
    ws = MagicMock()
    ws.client_state = state
    ws.accept = AsyncMock()
    ws.send_json = AsyncMock(side_effect=RuntimeError("socket gone") if fail else None)
    return ws


@pytest.mark.asyncio
async def test_broadcast_skips_and_drops_dead_sockets():
    hub = ConnectionHub()
    healthy, closing, broken = fake_socket(), fake_socket(), fake_socket()
    for ws in (healthy, closing, broken):
        await hub.connect(ws)
    assert hub.connection_count == 3
    closing.client_state = WebSocketState.DISCONNECTED
    for ws in (healthy, closing, broken):
        ws.send_json.reset_mock()
    broken.send_json.side_effect = RuntimeError("socket gone")

    delivered = await hub.broadcast({"type": "ANSWER_RECEIVED", "payload": {}})

    assert delivered == 1
    healthy.send_json.assert_awaited_once_with({"type": "ANSWER_RECEIVED", "payload": {}})
    closing.send_json.assert_not_called()
    broken.send_json.assert_awaited_with({"type": "ANSWER_RECEIVED", "payload": {}})
    assert hub.connection_count == 1


@pytest.mark.asyncio
async def test_disconnect_is_idempotent():
    hub = ConnectionHub()
    ws = fake_socket()
    await hub.connect(ws)

    hub.disconnect(ws)
    hub.disconnect(ws)

    assert hub.connection_count == 0


@pytest.mark.asyncio
async def test_store_errors_are_logged_not_raised(mocker):
    hub = ConnectionHub()
    ws = fake_socket()
    await hub.connect(ws)
    ws.send_json.reset_mock()
    mocker.patch(
        "placehub.services.realtime_hub.AnswerService.react",
        new=AsyncMock(side_effect=RuntimeError("db down")),
    )

    await hub.handle_message(ws, '{"type": "REACTION", "payload": {"answerId": "x", "reaction": "helpful"}}')

    ws.send_json.assert_not_called()
    assert hub.connection_count == 1


@pytest.mark.asyncio
async def test_greeting_failure_drops_socket():
    hub = ConnectionHub()
    ws = fake_socket(fail=True)

    await hub.connect(ws)

    assert hub.connection_count == 0


@pytest.mark.asyncio
async def test_ws_reaction_label_is_stripped(mocker):
    hub = ConnectionHub()
    ws = fake_socket()
    await hub.connect(ws)
    react = mocker.patch(
        "placehub.services.realtime_hub.AnswerService.react",
        new=AsyncMock(return_value=None),
    )

    await hub.handle_message(ws, '{"type": "REACTION", "payload": {"answerId": "a1", "reaction": "  helpful "}}')

    react.assert_awaited_once_with("a1", "helpful")
