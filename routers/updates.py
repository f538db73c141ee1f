"""WebSocket stream of generated texts for one issue."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from dependencies import get_notification_hub
from models.schemas import SummaryNotification
from services.notifications import NotificationHub

logger = logging.getLogger(__name__)
router = APIRouter(tags=["updates"])


async def _forward(websocket: WebSocket, queue: asyncio.Queue[SummaryNotification]) -> None:
    while True:
        message = await queue.get()
        await websocket.send_json(message.model_dump())


async def _stop_forwarding(issue_id: int, forwarder: asyncio.Task[None]) -> None:
    forwarder.cancel()
    (outcome,) = await asyncio.gather(forwarder, return_exceptions=True)
    if isinstance(outcome, Exception):
        # Typically a send on a socket the client already closed
        logger.debug("Forwarding to issue %s subscriber ended: %r", issue_id, outcome)


@router.websocket("/ws/issues/{issue_id}")
async def issue_updates(
    websocket: WebSocket,
    issue_id: int,
    hub: NotificationHub = Depends(get_notification_hub),
) -> None:
    # Subscribe before accepting so nothing sent after the handshake is missed
    queue = hub.subscribe(issue_id)
    forwarder: asyncio.Task[None] | None = None
    try:
        await websocket.accept()
        logger.info("Subscriber connected to issue %s", issue_id)
        forwarder = asyncio.create_task(_forward(websocket, queue))
        # Incoming frames are ignored; reading detects the disconnect
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Subscriber disconnected from issue %s", issue_id)
    finally:
        hub.unsubscribe(issue_id, queue)
        if forwarder is not None:
            await _stop_forwarding(issue_id, forwarder)
