"""Screenshot and brand snapshot API routes.

This module implements the capture endpoints. Every request is validated and
its URL normalized before the capture engine is touched; capture failures are
reported once as a JSON error body, never as a partial image.
"""

import logging
from typing import Any, Dict, Type, TypeVar

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ValidationError

from pagesnap.api.schemas import (
    BrandSnapshotResponse,
    ErrorResponse,
    ScreenshotRequest,
    SnapshotRequest,
)
from pagesnap.capture import CaptureEngine, InvalidInputError, get_capture_engine
from pagesnap.utils import normalize_url

logger = logging.getLogger(__name__)

NO_URL_MESSAGE = "No URL provided."
INVALID_BODY_MESSAGE = "Invalid request body."
SCREENSHOT_FILENAME = "pagesnap-capture.png"

ModelT = TypeVar('ModelT', bound=BaseModel)

router = APIRouter(
    tags=["Snapshots"],
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request"},
        500: {"model": ErrorResponse, "description": "Capture Failed"},
    }
)


def get_engine() -> CaptureEngine:
    """Dependency to provide the process-wide capture engine."""
    return get_capture_engine()


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the ``{"error": ...}`` body used by every failure."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


async def read_body(request: Request, model: Type[ModelT]) -> ModelT:
    """Parse a JSON or form-encoded body into ``model``.

    An empty or unparsable body yields a model with all fields unset.

    Raises:
        InvalidInputError: If fields are present but have invalid types
    """
    data: Dict[str, Any] = {}
    content_type = request.headers.get("content-type", "")

    try:
        if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
            form = await request.form()
            data = dict(form)
        else:
            raw = await request.body()
            if raw.strip():
                parsed = await request.json()
                if isinstance(parsed, dict):
                    data = parsed
    except ValueError as e:
        logger.debug(f"Ignoring unparsable request body: {e}")

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidInputError(INVALID_BODY_MESSAGE) from e


@router.post(
    "/screenshot",
    response_class=Response,
    summary="Capture a screenshot",
    description="""
    Render the page and return a PNG of the viewport.

    `format` values `portrait`, `vertical`, `phone` or `mobile`, or a `mobile`
    flag of `true`, `1` or `yes`, select the mobile profile (430px wide, touch
    and mobile user agent). Anything else selects the desktop profile.
    """,
    responses={
        200: {"content": {"image/png": {}}, "description": "PNG screenshot"},
    },
)
async def take_screenshot(request: Request, engine: CaptureEngine = Depends(get_engine)):
    """Capture a desktop or mobile screenshot."""
    try:
        body = await read_body(request, ScreenshotRequest)
    except InvalidInputError as e:
        return error_response(400, str(e))

    target_url = normalize_url(body.url)
    if not target_url:
        return error_response(400, NO_URL_MESSAGE)

    try:
        result = await engine.screenshot(
            target_url,
            format=body.format,
            mobile=body.mobile,
            full_page=body.full_page,
        )
    except InvalidInputError as e:
        return error_response(400, str(e))
    except Exception as e:
        logger.error(f"Screenshot error for URL: {target_url}: {e}")
        return error_response(500, f"Error taking screenshot: {e}")

    return Response(
        content=result.image,
        media_type=result.content_type,
        headers={"Content-Disposition": f'inline; filename="{SCREENSHOT_FILENAME}"'},
    )


@router.post(
    "/brand-snapshot",
    response_model=BrandSnapshotResponse,
    summary="Capture a brand snapshot",
    description="Screenshot plus title, description, favicon, colors and fonts.",
)
@router.post(
    "/snapshot",
    response_model=BrandSnapshotResponse,
    summary="Capture a brand snapshot (alias)",
    include_in_schema=False,
)
async def take_brand_snapshot(request: Request, engine: CaptureEngine = Depends(get_engine)):
    """Capture a screenshot and extract brand metadata."""
    try:
        body = await read_body(request, SnapshotRequest)
    except InvalidInputError as e:
        return error_response(400, str(e))

    target_url = normalize_url(body.url)
    if not target_url:
        return error_response(400, NO_URL_MESSAGE)

    try:
        snapshot = await engine.brand_snapshot(target_url)
    except InvalidInputError as e:
        return error_response(400, str(e))
    except Exception as e:
        logger.error(f"Brand snapshot error for URL: {target_url}: {e}")
        return error_response(500, f"Error creating brand snapshot: {e}")

    return BrandSnapshotResponse(**snapshot.model_dump())
