"""
Server-Sent-Events progress reporting for multi-step writes.

A service exposes a long operation as an async generator of plain dicts:

    async def create(...):
        yield progress("Creating artisan...")
        ...
        yield complete(status_code=201, id=new_id, message="...")

`event_stream` wraps that generator in a `StreamingResponse`. Each event is
sent as one `data: <json>\\n\\n` frame. Once the first byte is out the HTTP
status is already 200, so failures are reported in a terminal
`{"status": "error", "statusCode": ..., "message": ...}` frame instead.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response, StreamingResponse

from . import config

logger = logging.getLogger(__name__)

EVENT_STREAM_MEDIA_TYPE = "text/event-stream"
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    # GZipMiddleware leaves responses with an encoding alone, so frames are not buffered.
    "Content-Encoding": "identity",
    "X-Accel-Buffering": "no",
}


def sse_frame(payload: dict[str, Any]) -> str:
    return f"data: {json.dumps(payload, default=str)}\n\n"


def progress(message: str) -> dict[str, Any]:
    return {"status": "progress", "message": message}


def complete(*, status_code: int = 200, message: str, **extra: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {"status": "complete", "statusCode": status_code}
    payload.update(extra)
    payload["message"] = message
    return payload


def error(*, status_code: int, message: str) -> dict[str, Any]:
    return {"status": "error", "statusCode": status_code, "message": message}


def _error_from_exception(exc: Exception) -> dict[str, Any]:
    if isinstance(exc, HTTPException):
        return error(status_code=exc.status_code, message=str(exc.detail))
    message = "Internal server error" if config.is_production() else str(exc)
    return error(status_code=500, message=message)


async def _frames(events: AsyncIterator[dict[str, Any]], name: str) -> AsyncIterator[str]:
    try:
        async for event in events:
            yield sse_frame(event)
    except HTTPException as exc:
        logger.warning("%s failed: %s %s", name, exc.status_code, exc.detail)
        yield sse_frame(_error_from_exception(exc))
    except Exception as exc:
        logger.exception("%s failed", name)
        yield sse_frame(_error_from_exception(exc))


def event_stream(events: AsyncIterator[dict[str, Any]], *, name: str = "stream") -> StreamingResponse:
    return StreamingResponse(
        _frames(events, name),
        media_type=EVENT_STREAM_MEDIA_TYPE,
        headers=SSE_HEADERS,
    )


def wants_event_stream(request: Request) -> bool:
    return EVENT_STREAM_MEDIA_TYPE in (request.headers.get("accept") or "").lower()


def rejected(request: Request, *, message: str, errors: list[Any] | None = None) -> Response:
    """
    Answer a request that failed validation before any frame was sent.
    """
    if wants_event_stream(request):
        payload = error(status_code=400, message=message)
        if errors:
            payload["errors"] = jsonable_encoder(errors)
        return Response(
            content=sse_frame(payload),
            status_code=400,
            media_type=EVENT_STREAM_MEDIA_TYPE,
            headers=SSE_HEADERS,
        )

    body: dict[str, Any] = {"error": message}
    if errors:
        body["errors"] = jsonable_encoder(errors)
    return JSONResponse(status_code=400, content=body)
