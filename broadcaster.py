"""
Live updates over WebSocket.

The transport layer owns the connection lifecycle and registers sockets in a
`ConnectionRegistry`; request handlers only get a reference to it and ask it
to fan events out. Delivery is best-effort: no queueing, no retries.
"""

import asyncio
import logging

from fastapi import BackgroundTasks, Request
from starlette.websockets import WebSocket, WebSocketState

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Connected to HushMap real-time updates"
NEW_REPORT_EVENT = "new_report"


def is_ready(connection) -> bool:
    return (
        connection.client_state == WebSocketState.CONNECTED
        and connection.application_state == WebSocketState.CONNECTED
    )


class ConnectionRegistry:
    """Set of open subscriber sockets."""

    def __init__(self):
        self._connections = set()

    def __len__(self):
        return len(self._connections)

    def __contains__(self, connection):
        return connection in self._connections

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self._connections.add(websocket)
        logger.info("WebSocket client connected (%d open)", len(self._connections))
        try:
            await websocket.send_json({"type": "connected", "message": WELCOME_MESSAGE})
        except Exception:
            self.disconnect(websocket)
            raise

    def disconnect(self, websocket: WebSocket):
        if websocket in self._connections:
            self._connections.discard(websocket)
            logger.info("WebSocket client disconnected (%d open)", len(self._connections))

    async def broadcast(self, event_type: str, data) -> int:
        """Send `{type, data}` to every ready connection; return how many got it.

        Works on a snapshot, so sockets may connect or disconnect meanwhile.
        A failed send drops that socket and never reaches the caller.
        """
        message = {"type": event_type, "data": data}
        targets = [connection for connection in list(self._connections) if is_ready(connection)]
        if not targets:
            return 0
        results = await asyncio.gather(*(self._send(connection, message) for connection in targets))
        delivered = sum(results)
        logger.debug("Broadcast %s to %d/%d connections", event_type, delivered, len(targets))
        return delivered

    async def _send(self, connection, message) -> bool:
        try:
            await connection.send_json(message)
            return True
        except Exception as e:
            logger.warning("Dropping WebSocket connection after failed send: %s", e)
            self._connections.discard(connection)
            return False


def get_connection_registry(request: Request) -> ConnectionRegistry:
    """Dependency returning the registry owned by the running app."""
    return request.app.state.connections


def on_report_created(registry: ConnectionRegistry, report: dict, background_tasks: BackgroundTasks):
    """Queue a `new_report` broadcast to run after the response is sent.

    Call only with a report that has already been committed.
    """
    background_tasks.add_task(registry.broadcast, NEW_REPORT_EVENT, report)
