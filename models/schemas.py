from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


class ConversionDirection(str, Enum):
    REALISTIC_TO_CARTOON = "realisticToCartoon"
    CARTOON_TO_REALISTIC = "cartoonToRealistic"


class CartoonStyle(str, Enum):
    ANIME = "anime"
    PIXAR = "pixar"
    COMIC_BOOK = "comicBook"
    CLASSIC_DISNEY = "classicDisney"


class RealisticStyle(str, Enum):
    PHOTOREALISTIC = "photorealistic"
    DIGITAL_PAINTING = "digitalPainting"
    CINEMATIC = "cinematic"


Style = Union[CartoonStyle, RealisticStyle]

STYLES_BY_DIRECTION = {
    ConversionDirection.REALISTIC_TO_CARTOON: CartoonStyle,
    ConversionDirection.CARTOON_TO_REALISTIC: RealisticStyle,
}

DEFAULT_DIRECTION = ConversionDirection.REALISTIC_TO_CARTOON
DEFAULT_STYLES = {
    ConversionDirection.REALISTIC_TO_CARTOON: CartoonStyle.ANIME,
    ConversionDirection.CARTOON_TO_REALISTIC: RealisticStyle.PHOTOREALISTIC,
}


def resolve_style(direction: ConversionDirection, style: Optional[str]) -> Style:
    """Map a raw style value onto the enum for `direction`. Empty means the direction's default."""
    if not style:
        return DEFAULT_STYLES[direction]
    style_enum = STYLES_BY_DIRECTION[direction]
    try:
        return style_enum(style)
    except ValueError:
        allowed = ", ".join(s.value for s in style_enum)
        raise ValueError(
            f"Style '{style}' is not valid for {direction.value} (expected one of: {allowed})"
        ) from None


class InlineImage(BaseModel):
    """Base64 image payload paired with its media type."""

    mime_type: str
    data: str

    def as_part(self) -> dict:
        return {"inlineData": {"mimeType": self.mime_type, "data": self.data}}


class ConversionRequest(BaseModel):
    model_config = {"extra": "ignore"}
    image_bytes: bytes = Field(..., repr=False, description="Raw uploaded image")
    mime_type: str = Field(..., description="Declared media type of the upload")
    direction: ConversionDirection = DEFAULT_DIRECTION
    style: Optional[str] = Field(default=None, description="Sub-style within the direction")

    @model_validator(mode="after")
    def _style_matches_direction(self) -> "ConversionRequest":
        self.style = resolve_style(self.direction, self.style)
        return self


class ConversionResult(BaseModel):
    image_data_url: Optional[str] = None
    caption: Optional[str] = None

    @property
    def has_image(self) -> bool:
        return bool(self.image_data_url)


class ConversionResponse(BaseModel):
    status: Literal["succeeded", "no_image"]
    image_data_url: Optional[str] = Field(None, description="data: URI of the converted image")
    caption: Optional[str] = Field(None, description="Text returned alongside the image")
    message: Optional[str] = Field(None, description="Explanation when no image was produced")


class ConversionErrorResponse(BaseModel):
    detail: str
    code: Optional[str] = None


class PromptPreviewRequest(BaseModel):
    model_config = {"extra": "ignore"}
    direction: ConversionDirection = DEFAULT_DIRECTION
    style: Optional[str] = None

    @model_validator(mode="after")
    def _style_matches_direction(self) -> "PromptPreviewRequest":
        self.style = resolve_style(self.direction, self.style)
        return self


class PromptPreviewResponse(BaseModel):
    prompt: str


class StyleOption(BaseModel):
    id: str
    name: str
    emoji: str


class DirectionOption(BaseModel):
    id: str
    name: str
    emoji: str
    default_style: str
    styles: list[StyleOption]


class StyleCatalogResponse(BaseModel):
    default_direction: str
    directions: list[DirectionOption]
