"""
Gemini generateContent REST client for image conversion.
Sends an inline image plus an instruction and asks for IMAGE and TEXT output.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_MODEL = "gemini-2.5-flash-image-preview"


class ConversionError(Exception):
    pass


class GeminiAPIError(ConversionError):
    """Raised for transport and API failures. The message is the raw upstream text."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _error_message(r: httpx.Response) -> str:
    """Pull error.message out of a Google API error body, falling back to the raw text."""
    try:
        body = r.json()
    except ValueError:
        return r.text[:500] or f"HTTP {r.status_code}"
    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    return r.text[:500]


class GeminiImageClient:
    """Client for POST /v1beta/models/{model}:generateContent."""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        timeout_seconds: int = 120,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    def _url(self) -> str:
        return f"{self.base_url}/v1beta/models/{self.model}:generateContent"

    def generate_content(
        self,
        parts: List[Dict[str, Any]],
        response_modalities: Sequence[str] = ("IMAGE", "TEXT"),
    ) -> Dict[str, Any]:
        """
        Send one user turn made of `parts`. Returns the decoded JSON response.
        Raises GeminiAPIError on network failure or any HTTP error status.
        """
        if not self.api_key:
            raise GeminiAPIError("API key not valid. No Gemini API key is configured.")

        payload = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {"responseModalities": list(response_modalities)},
        }
        try:
            with httpx.Client(timeout=self.timeout_seconds, transport=self.transport) as client:
                r = client.post(
                    self._url(),
                    params={"key": self.api_key},
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.RequestError as e:
            raise GeminiAPIError(f"Network error: {e}") from e

        if r.status_code >= 400:
            message = _error_message(r)
            logger.warning("Gemini generateContent error %s: %s", r.status_code, message)
            raise GeminiAPIError(message, status_code=r.status_code)

        try:
            data = r.json()
        except ValueError as e:
            raise GeminiAPIError(f"Invalid response from model: {r.text[:200]}") from e
        if not isinstance(data, dict):
            raise GeminiAPIError(f"Unexpected response format from model: {str(data)[:200]}")

        logger.info("Gemini generateContent completed (model=%s)", self.model)
        return data
