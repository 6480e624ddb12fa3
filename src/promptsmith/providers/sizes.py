from __future__ import annotations

from promptsmith.domain.generation import ImageGenerationOptions

DEFAULT_IMAGE_SIZE = "1024x1024"

ASPECT_RATIO_SIZES: dict[str, str] = {
    "1:1": "1024x1024",
    "16:9": "1792x1024",
    "9:16": "1024x1792",
    "4:3": "1024x768",
    "3:2": "1024x683",
}


def size_for_aspect_ratio(aspect_ratio: str | None) -> str:
    if not aspect_ratio:
        return DEFAULT_IMAGE_SIZE
    return ASPECT_RATIO_SIZES.get(aspect_ratio.strip(), DEFAULT_IMAGE_SIZE)


def resolve_image_size(options: ImageGenerationOptions) -> str:
    """Explicit size wins; otherwise derive one from the aspect ratio."""
    if options.size:
        return options.size
    return size_for_aspect_ratio(options.aspect_ratio)
