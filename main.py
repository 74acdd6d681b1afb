"""
FastAPI application for realistic <-> cartoon image conversion.
"""
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from clients import ConversionError, GeminiImageClient
from config import get_settings
from models import ConversionErrorResponse, ConversionRequest, ConversionResponse
from models.schemas import (
    DEFAULT_DIRECTION,
    PromptPreviewRequest,
    PromptPreviewResponse,
    StyleCatalogResponse,
)
from services import ConversionService, EncodingError, build_prompt
from services.conversion import guess_mime_type
from services.errors import describe_error, no_image_message
from services.styles import get_style_catalog

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp", ".bmp", ".gif", ".heic", ".heif"}


def get_provider() -> GeminiImageClient:
    settings = get_settings()
    return GeminiImageClient(
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_base_url,
        model=settings.gemini_model,
        timeout_seconds=settings.api_timeout_seconds,
    )


def get_service() -> ConversionService:
    return ConversionService(client=get_provider())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Toonshift service starting")
    s = get_settings()
    if not s.gemini_api_key:
        logger.warning("No Gemini API key configured (set GEMINI_API_KEY or API_KEY)")
    else:
        logger.info("Model: %s", s.gemini_model)
    yield
    logger.info("Toonshift service shutting down")


app = FastAPI(
    title="Toonshift – Image Style Conversion",
    description="Transform images between realistic photos and stylized cartoons",
    version="1.0.0",
    lifespan=lifespan,
)


def _error_response(status_code: int, detail: str, code: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ConversionErrorResponse(detail=detail, code=code).model_dump(),
    )


def _format_size(n: int) -> str:
    if n >= 1024 * 1024 and n % (1024 * 1024) == 0:
        return f"{n // (1024 * 1024)} MB"
    if n >= 1024:
        return f"{n / 1024:.0f} KB"
    return f"{n} bytes"


def _validation_detail(e: ValidationError) -> str:
    return "; ".join(err.get("msg", "") for err in e.errors()) or "Invalid request"


@app.get("/health")
async def health() -> JSONResponse:
    """Lightweight health endpoint for uptime checks."""
    return JSONResponse({"status": "ok"})


@app.get("/api/styles", response_model=StyleCatalogResponse)
async def list_styles() -> StyleCatalogResponse:
    return get_style_catalog()


@app.post("/api/prompt", response_model=PromptPreviewResponse)
async def preview_prompt(request: PromptPreviewRequest) -> PromptPreviewResponse:
    """Return the instruction that would be sent for a direction/style pair."""
    return PromptPreviewResponse(prompt=build_prompt(request.direction, request.style))


@app.post(
    "/api/convert",
    response_model=ConversionResponse,
    responses={400: {"model": ConversionErrorResponse}, 502: {"model": ConversionErrorResponse}},
)
async def convert_image(
    file: UploadFile = File(...),
    direction: str = Form(DEFAULT_DIRECTION.value),
    style: Optional[str] = Form(None),
    service: ConversionService = Depends(get_service),
):
    """Convert an uploaded image. A response without an image is reported as status=no_image."""
    if not file.filename:
        return _error_response(400, "No file provided", "invalid_upload")

    ext = Path(file.filename).suffix.lower()
    content_type = (file.content_type or "").lower()
    if ext not in IMAGE_EXTENSIONS and not content_type.startswith("image/"):
        return _error_response(400, f"Unsupported format: {ext or content_type}", "invalid_upload")

    try:
        content = await file.read()
    except (OSError, RuntimeError) as e:
        category, message = describe_error(f"Failed to read file: {e}")
        return _error_response(400, message, category.value)

    max_bytes = get_settings().max_upload_bytes
    if len(content) > max_bytes:
        return _error_response(
            400, f"File must be under {_format_size(max_bytes)}", "invalid_upload"
        )

    if not content_type.startswith("image/"):
        content_type = guess_mime_type(file.filename) or "application/octet-stream"

    try:
        request = ConversionRequest(
            image_bytes=content,
            mime_type=content_type,
            direction=direction,
            style=style,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=_validation_detail(e))

    logger.info("Image received: %s (%d bytes)", file.filename, len(content))
    try:
        result = await service.convert_request(request)
    except EncodingError as e:
        category, message = describe_error(str(e))
        return _error_response(400, message, category.value)
    except ConversionError as e:
        category, message = describe_error(str(e))
        return _error_response(502, message, category.value)

    if not result.has_image:
        return ConversionResponse(
            status="no_image",
            caption=result.caption,
            message=no_image_message(result.caption),
        )
    return ConversionResponse(
        status="succeeded",
        image_data_url=result.image_data_url,
        caption=result.caption,
    )


def run() -> None:
    import uvicorn
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8001,
        reload=True,
    )


if __name__ == "__main__":
    run()
