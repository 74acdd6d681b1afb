from .schemas import (
    CartoonStyle,
    ConversionDirection,
    ConversionErrorResponse,
    ConversionRequest,
    ConversionResponse,
    ConversionResult,
    InlineImage,
    RealisticStyle,
)

__all__ = [
    "CartoonStyle",
    "ConversionDirection",
    "ConversionErrorResponse",
    "ConversionRequest",
    "ConversionResponse",
    "ConversionResult",
    "InlineImage",
    "RealisticStyle",
]
