"""
Raster surface wrapping a color-coded evaluation image.
Only exposes what the evaluator needs: size, pixel colors and color masks.
"""

from typing import Optional

import numpy as np

from layouteval.config import BACKGROUND, TRUE_NEGATIVE_COLOR, Color
from layouteval.region import Region


def to_rgb(image: np.ndarray) -> np.ndarray:
    """
    Normalize an image array to H x W x 3.

    Args:
        image: Grayscale (H x W), RGB (H x W x 3) or RGBA (H x W x 4) array

    Returns:
        RGB image as uint8 array
    """
    if image.ndim == 2:
        return np.repeat(image[:, :, np.newaxis], 3, axis=2).astype(np.uint8)

    if image.ndim != 3:
        raise ValueError(f"Unexpected image shape: {image.shape}")

    if image.shape[2] == 3:
        return image.astype(np.uint8)
    elif image.shape[2] == 4:
        return image[:, :, :3].astype(np.uint8)
    else:
        raise ValueError(f"Unexpected number of channels: {image.shape[2]}")


class RasterSurface:
    """Read-only view of one color-coded page image."""

    def __init__(self, image: np.ndarray):
        self.pixels = to_rgb(np.asarray(image))

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def shape(self) -> tuple:
        """(height, width) of the surface."""
        return self.pixels.shape[:2]

    @property
    def bounds(self) -> Region:
        """Region covering the whole surface."""
        return Region(x=0, y=0, w=self.width, h=self.height)

    def color_at(self, x: int, y: int) -> Color:
        """RGB color of the pixel at (x, y)."""
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    def window(self, region: Region) -> np.ndarray:
        """Pixels inside the region (a view, not a copy)."""
        rows, cols = region.slices
        return self.pixels[rows, cols]

    def foreground_mask(self, region: Optional[Region] = None) -> np.ndarray:
        """
        Non-background pixels of the region (whole surface if None).

        Returns:
            Boolean array shaped like the region window
        """
        pixels = self.window(region) if region is not None else self.pixels
        return np.any(pixels != np.array(BACKGROUND, dtype=np.uint8), axis=2)

    def color_mask(self, color: Optional[Color],
                   region: Optional[Region] = None) -> np.ndarray:
        """
        Pixels of the region painted with the given color.

        With color=None every foreground color counts except the reserved
        true-negative orange.

        Args:
            color: RGB color, or None for any region color
            region: Window to test (whole surface if None)

        Returns:
            Boolean array shaped like the region window
        """
        pixels = self.window(region) if region is not None else self.pixels

        if color is None:
            orange = np.all(pixels == np.array(TRUE_NEGATIVE_COLOR, dtype=np.uint8), axis=2)
            return self.foreground_mask(region) & ~orange

        return np.all(pixels == np.array(color, dtype=np.uint8), axis=2)

    def __repr__(self) -> str:
        return f"RasterSurface(width={self.width}, height={self.height})"
