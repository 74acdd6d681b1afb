from .gemini_client import ConversionError, GeminiAPIError, GeminiImageClient

__all__ = ["ConversionError", "GeminiAPIError", "GeminiImageClient"]
