"""WebSocket echo at ``/ws``.

Text commands: ``close`` ends the session, ``date`` answers the current
time in the client's timezone, ``ping`` answers ``pong``. Everything
else, text or binary, is echoed back.
"""

import logging

from edgebin.app import App
from edgebin.config import AppConfig
from edgebin.dates import format_date
from edgebin.errors import CustomError
from edgebin.http.request import Request
from edgebin.http.websocket import NORMAL_CLOSURE, WebSocket

logger = logging.getLogger("edgebin.routes")


async def session(websocket: WebSocket, request: Request, config: AppConfig) -> None:
    await websocket.accept()
    timezone = request.geo.timezone or config.default_timezone
    logger.debug("WebSocket session from %s (%s)", request.client_ip, timezone)

    while True:
        message = await websocket.receive()
        match message:
            case "close":
                await websocket.close(NORMAL_CLOSURE, "Normal Closure")
                return
            case "date":
                await websocket.send(str(format_date(timezone=timezone)))
            case "ping":
                await websocket.send("pong")
            case _:
                await websocket.send(message)


def not_upgraded() -> None:
    raise CustomError("Expected websocket", 400)


def register(app: App) -> None:
    app.websocket("/ws", name="ws")(session)
    app.route("/ws", name="ws")(not_upgraded)
