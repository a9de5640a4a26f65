"""
Pixel tracker overlay.
Records which pixels of an image were already attributed to a region so that
overlapping regions never count a pixel twice.
"""

from enum import IntEnum
from typing import Iterable, Optional

import cv2
import numpy as np

from layouteval.config import BACKGROUND, EVAL_CONFIG, TRACKER_COLORS, Color
from layouteval.region import Region


class Mark(IntEnum):
    """Code stored in the tracker for a claimed pixel (0 = unclaimed)."""

    COUNTED = 1
    TRUE_POSITIVE = 2
    FALSE_POSITIVE = 3
    FALSE_NEGATIVE = 4
    TRUE_NEGATIVE = 5


_MARK_COLOR_KEYS = {
    Mark.COUNTED: "counted",
    Mark.TRUE_POSITIVE: "true_positive",
    Mark.FALSE_POSITIVE: "false_positive",
    Mark.FALSE_NEGATIVE: "false_negative",
    Mark.TRUE_NEGATIVE: "true_negative",
}


class PixelTracker:
    """Per-image overlay of claimed pixels."""

    def __init__(self, width: int, height: int):
        self.codes = np.zeros((height, width), dtype=np.uint8)

    @classmethod
    def for_surface(cls, surface) -> 'PixelTracker':
        """Tracker sized to a RasterSurface."""
        return cls(surface.width, surface.height)

    @property
    def width(self) -> int:
        return self.codes.shape[1]

    @property
    def height(self) -> int:
        return self.codes.shape[0]

    def claimed(self, region: Region) -> np.ndarray:
        """Boolean window of pixels already claimed inside the region."""
        rows, cols = region.slices
        return self.codes[rows, cols] != 0

    def mark(self, region: Region, mask: np.ndarray, code: Mark = Mark.COUNTED) -> None:
        """
        Claim the masked pixels of a region.

        Args:
            region: Window the mask is laid over
            mask: Boolean array shaped like the region window
            code: Mark stored for the claimed pixels
        """
        rows, cols = region.slices
        window = self.codes[rows, cols]
        window[mask] = int(code)

    def count(self, code: Optional[Mark] = None) -> int:
        """Number of claimed pixels, optionally only those with a given code."""
        if code is None:
            return int(np.count_nonzero(self.codes))
        return int(np.count_nonzero(self.codes == int(code)))

    def to_rgb(self) -> np.ndarray:
        """
        Render the tracker as an RGB image.

        Unclaimed pixels are white; claimed ones use TRACKER_COLORS.

        Returns:
            H x W x 3 uint8 image
        """
        image = np.empty((self.height, self.width, 3), dtype=np.uint8)
        image[:] = BACKGROUND
        for code, key in _MARK_COLOR_KEYS.items():
            image[self.codes == int(code)] = TRACKER_COLORS[key]
        return image

    def draw_segmentations(self, regions: Iterable[Region],
                           color: Optional[Color] = None,
                           image: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Draw region outlines over the rendered tracker.

        Makes the segmentation viewable along with the pixel-accurate
        classification.

        Args:
            regions: Regions to outline
            color: Outline color (defaults to the configured box color)
            image: Rendered image to draw on (rendered fresh if None)

        Returns:
            RGB image with outlines drawn
        """
        if image is None:
            image = self.to_rgb()
        if color is None:
            color = EVAL_CONFIG["segmentation_box_color"]

        for region in regions:
            if region.area == 0:
                continue
            # cv2 rectangle corners are inclusive
            cv2.rectangle(image, (region.x, region.y),
                          (region.x2 - 1, region.y2 - 1), tuple(int(c) for c in color), 1)

        return image
