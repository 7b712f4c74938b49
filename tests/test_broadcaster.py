import asyncio

import pytest
from fastapi import BackgroundTasks
from starlette.websockets import WebSocketState

from broadcaster import ConnectionRegistry, NEW_REPORT_EVENT, WELCOME_MESSAGE, on_report_created


class FakeConnection:
    def __init__(self, state=WebSocketState.CONNECTED, fail=False):
        self.client_state = state
        self.application_state = state
        self.fail = fail
        self.accepted = False
        self.sent = []

    async def accept(self):
        self.accepted = True
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("connection closed mid-send")
        self.sent.append(message)


def run(coro):
    return asyncio.run(coro)


def test_connect_sends_welcome():
    registry = ConnectionRegistry()
    connection = FakeConnection(state=WebSocketState.CONNECTING)

    run(registry.connect(connection))

    assert connection.accepted
    assert connection in registry
    assert connection.sent == [{"type": "connected", "message": WELCOME_MESSAGE}]


def test_broadcast_skips_closed_connections():
    registry = ConnectionRegistry()
    open_a, open_b = FakeConnection(), FakeConnection()
    closed = FakeConnection(state=WebSocketState.DISCONNECTED)
    for connection in (open_a, open_b, closed):
        registry._connections.add(connection)

    delivered = run(registry.broadcast("new_report", {"id": "r1"}))

    assert delivered == 2
    assert open_a.sent == [{"type": "new_report", "data": {"id": "r1"}}]
    assert open_b.sent == [{"type": "new_report", "data": {"id": "r1"}}]
    assert closed.sent == []


def test_failed_send_does_not_stop_the_others():
    registry = ConnectionRegistry()
    healthy = FakeConnection()
    broken = FakeConnection(fail=True)
    registry._connections.update({healthy, broken})

    delivered = run(registry.broadcast("new_report", {"id": "r2"}))

    assert delivered == 1
    assert healthy.sent == [{"type": "new_report", "data": {"id": "r2"}}]
    assert broken not in registry
    assert healthy in registry


def test_broadcast_with_no_subscribers():
    assert run(ConnectionRegistry().broadcast("new_report", {})) == 0


def test_disconnect_is_idempotent():
    registry = ConnectionRegistry()
    connection = FakeConnection()
    registry._connections.add(connection)

    registry.disconnect(connection)
    registry.disconnect(connection)

    assert len(registry) == 0


def test_connection_leaving_during_broadcast():
    registry = ConnectionRegistry()
    leaving = FakeConnection()
    staying = FakeConnection()

    async def send_then_leave(message):
        registry.disconnect(leaving)
        leaving.sent.append(message)

    leaving.send_json = send_then_leave
    registry._connections.update({leaving, staying})

    delivered = run(registry.broadcast("new_report", {"id": "r3"}))

    assert delivered == 2
    assert len(registry) == 1


def test_on_report_created_schedules_one_broadcast():
    registry = ConnectionRegistry()
    subscriber = FakeConnection()
    registry._connections.add(subscriber)
    tasks = BackgroundTasks()
    report = {"id": "r4", "created_at": "2026-03-18T12:00:00"}

    on_report_created(registry, report, tasks)

    assert subscriber.sent == []
    assert len(tasks.tasks) == 1
    run(tasks())
    assert subscriber.sent == [{"type": NEW_REPORT_EVENT, "data": report}]


def test_failed_welcome_leaves_no_connection_behind():
    registry = ConnectionRegistry()
    connection = FakeConnection(state=WebSocketState.CONNECTING, fail=True)

    with pytest.raises(RuntimeError):
        run(registry.connect(connection))

    assert connection not in registry
    assert len(registry) == 0
    assert run(registry.broadcast("new_report", {"id": "r5"})) == 0
