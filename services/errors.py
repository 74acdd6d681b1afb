"""
Maps raw upstream error text to user-facing categories and messages.

Upstream errors carry no stable code we can rely on, so classification is a
case-insensitive substring match in a fixed priority order (first match wins).
"""
import logging
from enum import Enum
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


class ErrorCategory(str, Enum):
    SAFETY_BLOCKED = "safety_blocked"
    INVALID_API_CONFIG = "invalid_api_config"
    QUOTA_EXCEEDED = "quota_exceeded"
    NETWORK_ERROR = "network_error"
    MODEL_OVERLOADED = "model_overloaded"
    UNKNOWN = "unknown"


# Order matters: "Resource has been exhausted (quota)" is a quota error.
_RULES: Tuple[Tuple[ErrorCategory, Tuple[str, ...]], ...] = (
    (ErrorCategory.SAFETY_BLOCKED, ("safety", "blocked")),
    (ErrorCategory.INVALID_API_CONFIG, ("api key not valid",)),
    (ErrorCategory.QUOTA_EXCEEDED, ("quota",)),
    (ErrorCategory.NETWORK_ERROR, ("network error", "fetch")),
    (ErrorCategory.MODEL_OVERLOADED, ("resource has been exhausted",)),
)

USER_MESSAGES = {
    ErrorCategory.SAFETY_BLOCKED: (
        "Request blocked due to safety policies. This can happen with images of people "
        "(especially children) or other restricted content. Please try a different image or style."
    ),
    ErrorCategory.INVALID_API_CONFIG: (
        "There's an issue with the application's API configuration. Please contact support."
    ),
    ErrorCategory.QUOTA_EXCEEDED: (
        "The application has exceeded its usage limit. Please try again later."
    ),
    ErrorCategory.NETWORK_ERROR: (
        "A network error occurred. Please check your internet connection and try again."
    ),
    ErrorCategory.MODEL_OVERLOADED: (
        "The AI model is currently overloaded with requests. Please try again in a moment."
    ),
    ErrorCategory.UNKNOWN: (
        "An unexpected error occurred during generation. The AI may be temporarily "
        "unavailable. Please try again."
    ),
}


def classify_error(raw: Optional[str]) -> ErrorCategory:
    text = (raw or "").lower()
    for category, needles in _RULES:
        if any(n in text for n in needles):
            return category
    return ErrorCategory.UNKNOWN


def user_message(category: ErrorCategory) -> str:
    return USER_MESSAGES[category]


def describe_error(raw: Optional[str]) -> Tuple[ErrorCategory, str]:
    """Classify a raw error and return (category, user message)."""
    category = classify_error(raw)
    logger.error("Conversion failed (%s): %s", category.value, raw)
    return category, user_message(category)


def no_image_message(caption: Optional[str] = None) -> str:
    """Message for a call that succeeded but produced no image (usually a refusal)."""
    base = (
        "The AI did not return an image. This can happen due to safety filters "
        "or if the request is unclear. "
    )
    if caption:
        return f'{base}The AI\'s response: "{caption}"'
    return f"{base}Try using a different image or a different style."
