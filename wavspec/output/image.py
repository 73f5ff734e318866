"""Image export of a normalized transform map."""

from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image

from ..analysis import TransformMap
from ..core.constants import DISPLAY_MAX
from ..core.errors import InvalidParameter


COLORMAPS = ("hwb", "gray")

HUE_STEPS = 256


def hwb_to_rgb(hue: np.ndarray, white: np.ndarray, black: np.ndarray) -> np.ndarray:
    """
    Vectorized HWB -> RGB conversion.

    Args:
        hue: Hue as a fraction of a full turn, [0, 1)
        white: Whiteness in [0, 1]
        black: Blackness in [0, 1]

    Returns:
        Float RGB array with a trailing axis of 3, values in [0, 1]
    """
    total = white + black
    # Whiteness + blackness >= 1 collapses to a gray level
    scale = np.where(total > 1.0, total, 1.0)
    white = white / scale
    black = black / scale

    sector = (hue * 6.0)[..., None] + np.array([5.0, 3.0, 1.0])
    k = np.mod(sector, 6.0)
    pure = 1.0 - np.clip(np.minimum(k, 4.0 - k), 0.0, 1.0)

    return pure * (1.0 - white - black)[..., None] + white[..., None]


@dataclass
class RenderConfig:
    """Configuration for image rendering.

    Attributes:
        colormap: 'hwb' (hue/whiteness/blackness derived from the
            intensity, default) or 'gray' (plain intensity)
        flip: Put low frequencies at the bottom of the image (default: False)
    """

    colormap: str = "hwb"
    flip: bool = False

    def __post_init__(self):
        if self.colormap not in COLORMAPS:
            raise InvalidParameter(
                f"Unknown colormap '{self.colormap}'. Valid: {', '.join(COLORMAPS)}"
            )


class ImageRenderer:
    """Rasterize a TransformMap, one pixel per (window, bin) cell.

    x is the window index and y the frequency bin, bin 0 on the top row
    unless ``flip`` is set.
    """

    def __init__(self, config: RenderConfig = None):
        self.config = config or RenderConfig()

    def render(self, transform_map: TransformMap) -> Image.Image:
        """
        Build an image from a normalized map.

        Args:
            transform_map: Normalized TransformMap

        Returns:
            PIL image of size (width, height)
        """
        # [width, height] -> [rows = bins, cols = windows]
        intensity = transform_map.to_display(DISPLAY_MAX).T
        if self.config.flip:
            intensity = intensity[::-1]

        if self.config.colormap == "gray":
            return Image.fromarray(np.ascontiguousarray(intensity))

        n = intensity.astype(np.float64)
        half = np.floor(n / 2)
        # 8-bit hue wraps at 256, whiteness and blackness top out at 255
        rgb = hwb_to_rgb(half / HUE_STEPS, half / DISPLAY_MAX, n / DISPLAY_MAX)
        pixels = np.round(rgb * DISPLAY_MAX).astype(np.uint8)
        return Image.fromarray(np.ascontiguousarray(pixels))

    def save(self, transform_map: TransformMap, output_path: str) -> Path:
        """
        Render and write an image file (format from the extension).

        Returns:
            Path of the written file
        """
        output_path = Path(output_path)
        # Ensure output directory exists
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.render(transform_map).save(str(output_path))
        return output_path
