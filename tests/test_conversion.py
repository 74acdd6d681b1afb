"""Tests for services.conversion — encoding, response parsing and the pipeline."""

import asyncio
import base64

import pytest

from clients import GeminiAPIError
from conftest import JPEG_BYTES, PNG_B64, StubGeminiClient, image_part, make_payload, text_part
from models.schemas import CartoonStyle, ConversionDirection, ConversionRequest, RealisticStyle
from services.conversion import (
    ConversionService,
    EncodingError,
    encode_image,
    encode_upload,
    parse_generation_response,
)
from services.prompt_builder import build_prompt


class FakeUpload:
    def __init__(self, content=b"", content_type=None, filename=None, error=None):
        self.content = content
        self.content_type = content_type
        self.filename = filename
        self.error = error

    async def read(self):
        if self.error is not None:
            raise self.error
        return self.content


class TestEncoding:
    def test_encode_bytes(self):
        inline = encode_image(JPEG_BYTES, "image/jpeg")
        assert inline.mime_type == "image/jpeg"
        assert base64.b64decode(inline.data) == JPEG_BYTES

    def test_empty_bytes_fail(self):
        with pytest.raises(EncodingError):
            encode_image(b"", "image/jpeg")

    def test_upload_uses_declared_content_type(self):
        upload = FakeUpload(JPEG_BYTES, content_type="image/jpeg", filename="me.png")
        inline = asyncio.run(encode_upload(upload))
        assert inline.mime_type == "image/jpeg"

    def test_upload_guesses_type_from_name(self):
        upload = FakeUpload(JPEG_BYTES, filename="me.png")
        inline = asyncio.run(encode_upload(upload))
        assert inline.mime_type == "image/png"

    def test_unreadable_upload(self):
        upload = FakeUpload(error=OSError("disk gone"))
        with pytest.raises(EncodingError, match="Failed to read file"):
            asyncio.run(encode_upload(upload))

    def test_as_part(self):
        part = encode_image(JPEG_BYTES, "image/jpeg").as_part()
        assert part["inlineData"]["mimeType"] == "image/jpeg"


class TestParseResponse:
    def test_image_then_text(self):
        result = parse_generation_response(make_payload(image_part(), text_part("hello")))
        assert result.image_data_url == f"data:image/png;base64,{PNG_B64}"
        assert result.caption == "hello"

    def test_text_then_image(self):
        result = parse_generation_response(make_payload(text_part("hello"), image_part()))
        assert result.image_data_url == f"data:image/png;base64,{PNG_B64}"
        assert result.caption == "hello"

    def test_text_only(self):
        result = parse_generation_response(make_payload(text_part("I can't do that.")))
        assert result.image_data_url is None
        assert result.caption == "I can't do that."
        assert not result.has_image

    def test_no_candidates(self):
        result = parse_generation_response({"candidates": []})
        assert result.image_data_url is None
        assert result.caption is None

    def test_blocked_prompt_without_candidates(self):
        result = parse_generation_response({"promptFeedback": {"blockReason": "SAFETY"}})
        assert result.image_data_url is None
        assert result.caption is None

    def test_candidate_with_empty_parts(self):
        result = parse_generation_response({"candidates": [{"content": {"parts": []}, "finishReason": "SAFETY"}]})
        assert result.image_data_url is None
        assert result.caption is None

    def test_candidate_with_only_thought_parts(self):
        payload = make_payload({"text": "thinking about it", "thought": True})
        result = parse_generation_response(payload)
        assert result.image_data_url is None
        assert result.caption is None

    def test_first_image_wins(self):
        payload = make_payload(image_part(data="Zmlyc3Q="), image_part(data="c2Vjb25k", mime_type="image/jpeg"))
        result = parse_generation_response(payload)
        assert result.image_data_url == "data:image/png;base64,Zmlyc3Q="

    def test_first_text_wins(self):
        result = parse_generation_response(make_payload(text_part("one"), text_part("two")))
        assert result.caption == "one"

    def test_snake_case_keys(self):
        payload = {
            "candidates": [
                {"content": {"parts": [{"inline_data": {"mime_type": "image/webp", "data": "AAAA"}}]}}
            ]
        }
        result = parse_generation_response(payload)
        assert result.image_data_url == "data:image/webp;base64,AAAA"

    def test_thought_parts_skipped(self):
        payload = make_payload({"text": "planning...", "thought": True}, text_part("done"))
        assert parse_generation_response(payload).caption == "done"

    def test_only_first_candidate_read(self):
        payload = {
            "candidates": [
                {"content": {"parts": [text_part("first")]}},
                {"content": {"parts": [image_part()]}},
            ]
        }
        result = parse_generation_response(payload)
        assert result.caption == "first"
        assert result.image_data_url is None


class TestConversionService:
    def test_end_to_end_anime(self, service, stub_client):
        result = asyncio.run(
            service.convert(JPEG_BYTES, ConversionDirection.REALISTIC_TO_CARTOON, CartoonStyle.ANIME, mime_type="image/jpeg")
        )
        assert result.image_data_url.startswith("data:image/png;base64,")
        assert result.caption == "A cheerful anime portrait"

        call = stub_client.calls[0]
        assert call["response_modalities"] == ("IMAGE", "TEXT")
        image, prompt = call["parts"]
        assert image["inlineData"]["mimeType"] == "image/jpeg"
        assert base64.b64decode(image["inlineData"]["data"]) == JPEG_BYTES
        assert prompt["text"] == build_prompt(ConversionDirection.REALISTIC_TO_CARTOON, CartoonStyle.ANIME)

    def test_convert_request(self, service, stub_client):
        request = ConversionRequest(
            image_bytes=JPEG_BYTES,
            mime_type="image/jpeg",
            direction="cartoonToRealistic",
            style="cinematic",
        )
        asyncio.run(service.convert_request(request))
        prompt = stub_client.calls[0]["parts"][1]["text"]
        assert "cinematic" in prompt

    def test_upstream_error_propagates_raw(self):
        client = StubGeminiClient(error=GeminiAPIError("Resource has been exhausted (quota)."))
        service = ConversionService(client=client)
        with pytest.raises(GeminiAPIError, match=r"Resource has been exhausted \(quota\)\."):
            asyncio.run(service.convert(JPEG_BYTES, "realisticToCartoon", "anime", mime_type="image/jpeg"))

    def test_encoding_failure_skips_model_call(self, service, stub_client):
        with pytest.raises(EncodingError):
            asyncio.run(service.convert(b"", "realisticToCartoon", "anime", mime_type="image/jpeg"))
        assert stub_client.calls == []


class TestConversionRequest:
    def test_default_style_for_direction(self):
        request = ConversionRequest(image_bytes=JPEG_BYTES, mime_type="image/jpeg", direction="cartoonToRealistic")
        assert request.style is RealisticStyle.PHOTOREALISTIC

    def test_style_must_match_direction(self):
        with pytest.raises(ValueError):
            ConversionRequest(
                image_bytes=JPEG_BYTES,
                mime_type="image/jpeg",
                direction="cartoonToRealistic",
                style="anime",
            )
