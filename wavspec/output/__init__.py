"""Output layer - Export spectrograms.

This layer handles exporting a normalized transform map to:
- Image files (PNG, or anything Pillow can write)
"""

from .image import ImageRenderer, RenderConfig, hwb_to_rgb, COLORMAPS

__all__ = [
    "ImageRenderer",
    "RenderConfig",
    "hwb_to_rgb",
    "COLORMAPS",
]
