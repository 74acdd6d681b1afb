from .conversion import ConversionService, EncodingError
from .errors import ErrorCategory, classify_error
from .prompt_builder import build_prompt

__all__ = ["ConversionService", "EncodingError", "ErrorCategory", "build_prompt", "classify_error"]
