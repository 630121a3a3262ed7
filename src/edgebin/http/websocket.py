"""Server side of an accepted ASGI WebSocket connection.

One ``WebSocket`` exists per upgrade and is owned by exactly one
session handler, which reads a message, reacts, and reads the next.
"""

from dataclasses import dataclass, field

from edgebin._internal.asgi import Receive, Scope, Send

# RFC 6455 close codes
NORMAL_CLOSURE = 1000
POLICY_VIOLATION = 1008


class WebSocketDisconnect(Exception):  # noqa: N818 - mirrors the ASGI event name
    """The client went away; carries its close code."""

    def __init__(self, code: int = NORMAL_CLOSURE) -> None:
        super().__init__(f"WebSocket disconnected with code {code}")
        self.code = code


@dataclass(slots=True)
class WebSocket:
    """A WebSocket connection speaking the ASGI websocket protocol.

    Usage::

        await ws.accept()
        while True:
            message = await ws.receive()
            await ws.send(message)
    """

    scope: Scope
    _receive: Receive
    _send: Send
    _state: dict[str, bool] = field(default_factory=lambda: {"closed": False}, repr=False)

    @property
    def closed(self) -> bool:
        return self._state["closed"]

    async def accept(self) -> None:
        """Complete the handshake (the 101 response)."""
        message = await self._receive()
        if message["type"] != "websocket.connect":
            msg = f"Expected websocket.connect, got {message['type']!r}"
            raise RuntimeError(msg)
        await self._send({"type": "websocket.accept"})

    async def receive(self) -> str | bytes:
        """Wait for the next text or binary message.

        Raises:
            WebSocketDisconnect: The client closed the connection.
        """
        message = await self._receive()
        if message["type"] == "websocket.disconnect":
            self._state["closed"] = True
            raise WebSocketDisconnect(message.get("code", NORMAL_CLOSURE))
        text = message.get("text")
        if text is not None:
            return text
        return message.get("bytes") or b""

    async def send(self, data: str | bytes) -> None:
        """Send a text frame for ``str``, a binary frame for ``bytes``."""
        if isinstance(data, str):
            await self._send({"type": "websocket.send", "text": data})
        else:
            await self._send({"type": "websocket.send", "bytes": data})

    async def close(self, code: int = NORMAL_CLOSURE, reason: str = "") -> None:
        """Close the connection; before ``accept()`` this rejects the upgrade."""
        if self.closed:
            return
        self._state["closed"] = True
        await self._send({"type": "websocket.close", "code": code, "reason": reason})
