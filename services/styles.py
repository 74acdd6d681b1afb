"""
Catalogue of conversion directions and their styles, as offered to the UI.
"""
from models.schemas import (
    DEFAULT_DIRECTION,
    DEFAULT_STYLES,
    CartoonStyle,
    ConversionDirection,
    DirectionOption,
    RealisticStyle,
    STYLES_BY_DIRECTION,
    StyleCatalogResponse,
    StyleOption,
)

DIRECTION_LABELS = {
    ConversionDirection.REALISTIC_TO_CARTOON: ("Realistic to Cartoon", "📸 → 🎨"),
    ConversionDirection.CARTOON_TO_REALISTIC: ("Cartoon to Realistic", "🎨 → 🏞️"),
}

STYLE_LABELS = {
    CartoonStyle.ANIME: ("Anime / Manga", "🎌"),
    CartoonStyle.PIXAR: ("3D Pixar", "🧸"),
    CartoonStyle.COMIC_BOOK: ("Comic Book", "💥"),
    CartoonStyle.CLASSIC_DISNEY: ("Classic Disney", "🏰"),
    RealisticStyle.PHOTOREALISTIC: ("Photorealistic", "📷"),
    RealisticStyle.DIGITAL_PAINTING: ("Digital Painting", "🖼️"),
    RealisticStyle.CINEMATIC: ("Cinematic", "🎬"),
}


def get_style_catalog() -> StyleCatalogResponse:
    directions = []
    for direction, styles in STYLES_BY_DIRECTION.items():
        name, emoji = DIRECTION_LABELS[direction]
        directions.append(
            DirectionOption(
                id=direction.value,
                name=name,
                emoji=emoji,
                default_style=DEFAULT_STYLES[direction].value,
                styles=[
                    StyleOption(id=s.value, name=STYLE_LABELS[s][0], emoji=STYLE_LABELS[s][1])
                    for s in styles
                ],
            )
        )
    return StyleCatalogResponse(default_direction=DEFAULT_DIRECTION.value, directions=directions)
