"""ASGI generic adapter for the frame push endpoints.

This adapter provides a framework-agnostic ASGI application that can be used
with any ASGI server (uvicorn, hypercorn, daphne) without requiring FastAPI
as a dependency.
"""

import json
import logging
from collections.abc import Callable, Coroutine
from typing import Any
from urllib.parse import parse_qs

from lineframes.adapters.frameworks.query_params import _parse_name_param
from lineframes.core.encoding.frame_json import encode_frames
from lineframes.core.errors import ConversionError, ParseError, TypeConflictFault
from lineframes.core.ports import FrameConverterPort, FrameStoragePort

logger = logging.getLogger(__name__)

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]

NDJSON = "application/x-ndjson"

_ROUTES = {"/push": "POST", "/frames": "GET"}


def _parse_query_params(scope: Scope) -> dict[str, list[str]]:
    """Parse query string from ASGI scope into parameter dictionary.

    Args:
        scope: ASGI scope dictionary containing request metadata.

    Returns:
        Dictionary mapping parameter names to lists of values.
        Returns empty dict if query_string is missing or empty.
    """
    query_string = scope.get("query_string", b"").decode(errors="replace")
    return parse_qs(query_string)


async def _read_body(receive: Receive) -> bytes:
    """Read the full request body from ASGI receive messages."""
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            break
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


async def _send_response(send: Send, status: int, content_type: str, body: str) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        status: HTTP status code.
        content_type: Content-Type header value.
        body: Response body as string (will be encoded to bytes).
    """
    headers = [(b"content-type", content_type.encode())]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body.encode()})


def _error_body(message: str) -> str:
    return json.dumps({"error": message})


async def push_frames(
    converter: FrameConverterPort,
    frame_storage: FrameStoragePort,
    body: bytes,
) -> tuple[int, str, str]:
    """Convert a pushed batch, store the frames and build the response.

    Shared by the ASGI and FastAPI adapters.

    Args:
        converter: Converter turning the body into frames.
        frame_storage: Storage receiving every converted frame.
        body: Raw line-protocol request body.

    Returns:
        Tuple of (status code, content type, response body).
    """
    try:
        frames = converter.convert(body)
    except (ParseError, ConversionError) as e:
        logger.warning("Rejected metrics batch: %s", e)
        return 400, "application/json", _error_body(str(e))
    except TypeConflictFault as e:
        logger.error("Metrics batch has conflicting field types: %s", e)
        return 422, "application/json", _error_body(str(e))
    except Exception:
        logger.exception("Error converting metrics batch")
        return 500, "application/json", _error_body("Internal Server Error")

    for frame in frames:
        await frame_storage.write(frame)
    return 200, NDJSON, encode_frames(frames)


async def read_frames(frame_storage: FrameStoragePort, name: str | None) -> str:
    """Encode stored frames as NDJSON."""
    return encode_frames([frame async for frame in frame_storage.read(name=name)])


def create_asgi_app(
    converter: FrameConverterPort,
    frame_storage: FrameStoragePort,
) -> ASGIApp:
    """Create an ASGI app with /push and /frames endpoints.

    Args:
        converter: Converter used for pushed line-protocol batches.
        frame_storage: Storage adapter implementing FrameStoragePort.

    Returns:
        ASGI application callable.
    """

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        path = scope["path"]
        method = _ROUTES.get(path)
        if method is None:
            await _send_response(send, 404, "text/plain", "Not Found")
            return
        if scope["method"] != method:
            await _send_response(send, 405, "text/plain", "Method Not Allowed")
            return

        if path == "/push":
            body = await _read_body(receive)
            status, content_type, response = await push_frames(
                converter, frame_storage, body
            )
            await _send_response(send, status, content_type, response)
        else:
            name = _parse_name_param(_parse_query_params(scope))
            try:
                response = await read_frames(frame_storage, name)
            except Exception:
                logger.exception("Error encoding frames endpoint")
                await _send_response(
                    send, 500, "application/json", _error_body("Internal Server Error")
                )
                return
            await _send_response(send, 200, NDJSON, response)

    return app
