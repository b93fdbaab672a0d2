import asyncio
import json
import logging
from typing import Any, Dict, Set

import anyio
from fastapi import APIRouter
from sse_starlette.sse import EventSourceResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])

# cola acotada: un cliente lento no debe acumular eventos sin límite
SUBSCRIBER_QUEUE_SIZE = 100

_subscribers: Set[asyncio.Queue] = set()


async def broadcast(event_type: str, payload: Dict[str, Any]) -> None:
    dead = []
    for q in _subscribers:
        try:
            q.put_nowait({"event": event_type, "data": payload})
        except asyncio.QueueFull:
            dead.append(q)

    for q in dead:
        logger.warning("Dropping slow SSE subscriber", extra={"event": event_type})
        _subscribers.discard(q)


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    """Broadcast from a sync endpoint (runs in the anyio worker thread pool)."""
    anyio.from_thread.run(broadcast, event_type, payload)


def subscriber_count() -> int:
    return len(_subscribers)


@router.get("/events")
async def sse_events():
    queue: asyncio.Queue = asyncio.Queue(maxsize=SUBSCRIBER_QUEUE_SIZE)
    _subscribers.add(queue)
    logger.debug("SSE subscriber connected", extra={"subscribers": subscriber_count()})

    async def generator():
        try:
            while True:
                msg = await queue.get()
                yield {
                    "event": msg["event"],
                    "data": json.dumps(msg["data"], ensure_ascii=False, default=str),
                }
        finally:
            _subscribers.discard(queue)

    return EventSourceResponse(generator())
