"""FastAPI adapter for the frame push endpoints."""

from fastapi import APIRouter, Query, Request, Response

from lineframes.adapters.frameworks.asgi import NDJSON, push_frames, read_frames
from lineframes.adapters.frameworks.query_params import _parse_name_param
from lineframes.core.ports import FrameConverterPort, FrameStoragePort


def create_frames_router(
    converter: FrameConverterPort,
    frame_storage: FrameStoragePort,
) -> APIRouter:
    """Create a FastAPI router with /push and /frames endpoints.

    Args:
        converter: Converter used for pushed line-protocol batches.
        frame_storage: Storage adapter implementing FrameStoragePort.

    Returns:
        APIRouter with /push and /frames endpoints configured.
    """
    router = APIRouter()

    @router.post("/push")
    async def push(request: Request) -> Response:
        """Convert a line-protocol body into frames and store them."""
        body = await request.body()
        status, content_type, content = await push_frames(
            converter, frame_storage, body
        )
        return Response(content=content, status_code=status, media_type=content_type)

    @router.get("/frames")
    async def get_frames(name: str | None = Query(default=None)) -> Response:
        """Return the latest stored frames in NDJSON format.

        Args:
            name: Only return the frame with this name.
        """
        params = {"name": [name]} if name is not None else {}
        body = await read_frames(frame_storage, _parse_name_param(params))
        return Response(content=body, media_type=NDJSON)

    return router
