"""
Instruction text sent to the model alongside the uploaded image.
"""
from typing import Union

from models.schemas import CartoonStyle, ConversionDirection, RealisticStyle

BASE_PROMPT = (
    "Analyze the provided image and convert it. "
    "Maintain the core subject and composition, but reimagine it"
)

GENERIC_PROMPT = "Change the style of this image."

CARTOON_PROMPTS = {
    CartoonStyle.ANIME: (
        "in a vibrant, stylized Japanese anime/manga style, with characteristic features "
        "like large expressive eyes, bold lines, and dynamic shading."
    ),
    CartoonStyle.PIXAR: (
        "in the style of a 3D animated film, similar to those by Pixar. Focus on soft lighting, "
        "detailed textures, and characters with appealing, rounded features."
    ),
    CartoonStyle.COMIC_BOOK: (
        "into a classic American comic book style. Use halftone dots for shading, bold inks "
        "for outlines, and a dynamic, action-oriented composition."
    ),
    CartoonStyle.CLASSIC_DISNEY: (
        "into the style of a classic 2D Disney animation. Emphasize fluid lines, expressive "
        "faces, and a warm, storybook color palette."
    ),
}
CARTOON_FALLBACK = "into a vibrant, stylized cartoon."

REALISTIC_PROMPTS = {
    RealisticStyle.PHOTOREALISTIC: (
        "into a photorealistic style. Render the subjects with lifelike textures, accurate "
        "lighting and shadows, and fine details to make it look like a real-life photograph."
    ),
    RealisticStyle.DIGITAL_PAINTING: (
        "as a detailed digital painting. It should look realistic but with visible "
        "brushstrokes and an artistic, painterly quality."
    ),
    RealisticStyle.CINEMATIC: (
        "into a cinematic, photorealistic style. Give it dramatic lighting, a shallow depth "
        "of field, and a color grade that evokes a specific movie genre or mood."
    ),
}
REALISTIC_FALLBACK = "into a photorealistic style."


def _lookup(table: dict, style_enum, style: str):
    try:
        return table.get(style_enum(style))
    except ValueError:
        return None


def build_prompt(
    direction: Union[ConversionDirection, str],
    style: Union[CartoonStyle, RealisticStyle, str, None],
) -> str:
    """
    Return the fixed instruction for (direction, style).
    Unknown styles get the direction's fallback; unknown directions get a generic instruction.
    """
    try:
        direction = ConversionDirection(direction)
    except ValueError:
        return GENERIC_PROMPT

    style_value = style.value if isinstance(style, (CartoonStyle, RealisticStyle)) else style
    if direction is ConversionDirection.REALISTIC_TO_CARTOON:
        suffix = _lookup(CARTOON_PROMPTS, CartoonStyle, style_value) or CARTOON_FALLBACK
    else:
        suffix = _lookup(REALISTIC_PROMPTS, RealisticStyle, style_value) or REALISTIC_FALLBACK
    return f"{BASE_PROMPT} {suffix}"
