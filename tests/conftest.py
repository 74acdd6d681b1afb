"""Shared pytest fixtures for Toonshift tests."""

from typing import Any, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

from config import get_settings
from services import ConversionService

# Smallest useful stand-ins; the service never decodes image content.
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01fake-jpeg-body\xff\xd9"
PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="


class StubGeminiClient:
    """Records generate_content calls and replays a canned payload or error."""

    def __init__(self, payload: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
        self.payload = payload if payload is not None else {}
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def generate_content(self, parts, response_modalities=("IMAGE", "TEXT")):
        self.calls.append({"parts": parts, "response_modalities": tuple(response_modalities)})
        if self.error is not None:
            raise self.error
        return self.payload


def make_payload(*parts: Dict[str, Any]) -> Dict[str, Any]:
    return {"candidates": [{"content": {"role": "model", "parts": list(parts)}, "finishReason": "STOP"}]}


def image_part(data: str = PNG_B64, mime_type: str = "image/png") -> Dict[str, Any]:
    return {"inlineData": {"mimeType": mime_type, "data": data}}


def text_part(text: str) -> Dict[str, Any]:
    return {"text": text}


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Settings are lru_cached; reset so monkeypatched env vars take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def anime_payload() -> Dict[str, Any]:
    return make_payload(image_part(), text_part("A cheerful anime portrait"))


@pytest.fixture
def stub_client(anime_payload) -> StubGeminiClient:
    return StubGeminiClient(payload=anime_payload)


@pytest.fixture
def service(stub_client) -> ConversionService:
    return ConversionService(client=stub_client)


@pytest.fixture
def api_client(stub_client) -> Generator[TestClient, None, None]:
    """TestClient with the conversion service wired to the stub client."""
    from main import app, get_service

    app.dependency_overrides[get_service] = lambda: ConversionService(client=stub_client)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

