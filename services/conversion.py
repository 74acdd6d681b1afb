"""
Conversion pipeline – encodes the upload, builds the prompt, calls the model
and unwraps the image/text parts of the response.
"""
import asyncio
import base64
import logging
import mimetypes
from typing import Any, Dict, Optional, Union

from clients.gemini_client import ConversionError, GeminiImageClient
from models.schemas import (
    CartoonStyle,
    ConversionDirection,
    ConversionRequest,
    ConversionResult,
    InlineImage,
    RealisticStyle,
)
from services.prompt_builder import build_prompt

logger = logging.getLogger(__name__)

RESPONSE_MODALITIES = ("IMAGE", "TEXT")


class EncodingError(ConversionError):
    pass


def guess_mime_type(filename: Optional[str]) -> Optional[str]:
    if not filename:
        return None
    guessed, _ = mimetypes.guess_type(filename)
    return guessed


def encode_image(content: bytes, mime_type: Optional[str]) -> InlineImage:
    """Base64-encode raw image bytes. Raises EncodingError for empty or non-binary input."""
    if not isinstance(content, (bytes, bytearray)):
        raise EncodingError("Failed to read file as binary data.")
    if not content:
        raise EncodingError("Failed to read file: the uploaded file is empty.")
    data = base64.b64encode(bytes(content)).decode("ascii")
    return InlineImage(mime_type=mime_type or "application/octet-stream", data=data)


async def encode_upload(image: Any, mime_type: Optional[str] = None) -> InlineImage:
    """
    Turn raw bytes or an upload object (async `read()`, `content_type`,
    `filename`) into an InlineImage.
    """
    if isinstance(image, (bytes, bytearray)):
        return encode_image(image, mime_type)

    try:
        content = await image.read()
    except (OSError, RuntimeError, ValueError) as e:
        raise EncodingError(f"Failed to read file: {e}") from e
    mime_type = (
        mime_type
        or getattr(image, "content_type", None)
        or guess_mime_type(getattr(image, "filename", None))
    )
    return encode_image(content, mime_type)


def _get(d: Dict[str, Any], camel: str, snake: str) -> Any:
    value = d.get(camel)
    return value if value is not None else d.get(snake)


def parse_generation_response(payload: Dict[str, Any]) -> ConversionResult:
    """
    Read the first candidate's parts in order. The first inline-data part
    becomes the image (as a data URI), the first text part becomes the caption.
    """
    image_data_url: Optional[str] = None
    caption: Optional[str] = None

    feedback = _get(payload, "promptFeedback", "prompt_feedback") or {}
    block_reason = _get(feedback, "blockReason", "block_reason") if isinstance(feedback, dict) else None
    if block_reason:
        logger.warning("Model blocked the prompt: %s", block_reason)

    candidates = payload.get("candidates") or []
    if not candidates:
        return ConversionResult()

    content = candidates[0].get("content") or {}
    for part in content.get("parts") or []:
        if part.get("thought"):
            continue
        inline_data = _get(part, "inlineData", "inline_data")
        if inline_data and inline_data.get("data"):
            if image_data_url is None:
                mime = _get(inline_data, "mimeType", "mime_type") or "image/png"
                image_data_url = f"data:{mime};base64,{inline_data['data']}"
            continue
        text = part.get("text")
        if text and caption is None:
            caption = text

    finish_reason = _get(candidates[0], "finishReason", "finish_reason")
    if image_data_url is None and finish_reason and finish_reason != "STOP":
        logger.warning("Model finished without an image (finishReason=%s)", finish_reason)
    return ConversionResult(image_data_url=image_data_url, caption=caption)


class ConversionService:
    def __init__(self, client: GeminiImageClient):
        self.client = client

    def _generate_sync(self, image: InlineImage, prompt: str) -> Dict[str, Any]:
        """Blocking model call. Errors propagate with the raw upstream text."""
        parts = [image.as_part(), {"text": prompt}]
        return self.client.generate_content(parts, response_modalities=RESPONSE_MODALITIES)

    async def convert(
        self,
        image: Any,
        direction: Union[ConversionDirection, str],
        style: Union[CartoonStyle, RealisticStyle, str, None],
        mime_type: Optional[str] = None,
    ) -> ConversionResult:
        """Encode → prompt → model call (worker thread) → parse."""
        inline = await encode_upload(image, mime_type)
        prompt = build_prompt(direction, style)
        logger.info(
            "Conversion started",
            extra={
                "direction": getattr(direction, "value", direction),
                "style": getattr(style, "value", style),
                "mime_type": inline.mime_type,
                "encoded_chars": len(inline.data),
            },
        )
        payload = await asyncio.to_thread(self._generate_sync, inline, prompt)
        result = parse_generation_response(payload)
        logger.info(
            "Conversion completed",
            extra={"has_image": result.has_image, "has_caption": result.caption is not None},
        )
        return result

    async def convert_request(self, request: ConversionRequest) -> ConversionResult:
        return await self.convert(
            request.image_bytes, request.direction, request.style, mime_type=request.mime_type
        )
