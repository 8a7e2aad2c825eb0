"""WebSocket API streaming lifecycle events of an account."""

import asyncio
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..utils.logger import get_app_logger
from . import deps

router = APIRouter(tags=["websocket"])
logger = get_app_logger("websocket")


async def _forward(websocket: WebSocket, queue: asyncio.Queue):
    """Send queued event frames until cancelled."""
    while True:
        frame = await queue.get()
        await websocket.send_json(frame)


@router.websocket("/ws/accounts/{account_id}")
async def account_events(websocket: WebSocket, account_id: int):
    """
    Stream event frames of an account.

    Frames are ``{"event": topic, "data": payload}``. Messages sent by the
    client are ignored; the connection stays open until it disconnects.

    Args:
        websocket: WebSocket connection
        account_id: Account whose events are streamed
    """
    await websocket.accept()
    logger.info(f"WebSocket connection accepted for account: {account_id}")

    if deps.container is None:
        await websocket.send_json({"type": "error", "content": "Services not initialized"})
        await websocket.close()
        return

    stream = deps.container.event_stream
    queue = stream.subscribe(account_id)
    sender = None

    try:
        await websocket.send_json({"type": "connected", "account_id": account_id})
        sender = asyncio.create_task(_forward(websocket, queue))

        while True:
            await websocket.receive_text()

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected for account: {account_id}")

    except Exception as e:
        logger.error(f"WebSocket error for account {account_id}: {e}")

    finally:
        if sender is not None:
            sender.cancel()
        stream.unsubscribe(account_id, queue)
        logger.info(f"WebSocket connection closed for account: {account_id}")
