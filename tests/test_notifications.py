import asyncio

from models.user import UserRole
from routes.notifications import ConnectionManager, connection_manager, notify_recap_event


class FakeWebSocket:
    def __init__(self, fail=False):
        self.accepted = False
        self.sent = []
        self.fail = fail

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)


def test_broadcast_reaches_only_the_channel():
    manager = ConnectionManager()
    admin, manager_socket = FakeWebSocket(), FakeWebSocket()

    async def scenario():
        await manager.connect(admin, "admin")
        await manager.connect(manager_socket, "manager")
        await manager.broadcast({"event": "order_created"}, "admin")

    asyncio.run(scenario())

    assert admin.accepted
    assert admin.sent == [{"event": "order_created"}]
    assert manager_socket.sent == []


def test_failing_socket_does_not_stop_broadcast():
    manager = ConnectionManager()
    broken, healthy = FakeWebSocket(fail=True), FakeWebSocket()

    async def scenario():
        await manager.connect(broken, "admin")
        await manager.connect(healthy, "admin")
        await manager.broadcast({"event": "x"}, "admin")

    asyncio.run(scenario())

    assert healthy.sent == [{"event": "x"}]


def test_disconnect_removes_empty_channel():
    manager = ConnectionManager()
    socket = FakeWebSocket()
    asyncio.run(manager.connect(socket, "manager"))

    manager.disconnect(socket, "manager")

    assert "manager" not in manager.active_connections


def test_recap_events_go_to_both_roles():
    admin, manager_socket = FakeWebSocket(), FakeWebSocket()

    async def scenario():
        await connection_manager.connect(admin, UserRole.ADMIN.value)
        await connection_manager.connect(manager_socket, UserRole.MANAGER.value)
        await notify_recap_event("recap_requested", 5, "pending")

    try:
        asyncio.run(scenario())
    finally:
        connection_manager.disconnect(admin, UserRole.ADMIN.value)
        connection_manager.disconnect(manager_socket, UserRole.MANAGER.value)

    expected = {"event": "recap_requested", "recap_id": 5, "status": "pending"}
    assert admin.sent == [expected]
    assert manager_socket.sent == [expected]
