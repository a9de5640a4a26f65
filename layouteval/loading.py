"""
Loading utilities for page evaluation.
Handles color-coded image files and JSON box files.
"""

import json
import os
from typing import List

import cv2
import numpy as np

from layouteval.raster import to_rgb
from layouteval.region import Region


def load_image(image_path: str) -> np.ndarray:
    """
    Load a color-coded image from file.

    Args:
        image_path: Path to the image file

    Returns:
        Image as numpy array (RGB format)

    Raises:
        FileNotFoundError: If image file doesn't exist
        ValueError: If image cannot be loaded
    """
    if not os.path.exists(image_path):
        raise FileNotFoundError(image_path)

    image = cv2.imread(image_path, cv2.IMREAD_UNCHANGED)

    if image is None:
        raise ValueError(f"Failed to load image from {image_path}")

    if image.ndim == 2:
        return to_rgb(image)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGB)
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def save_image(image: np.ndarray, output_path: str) -> None:
    """
    Save an RGB image to file.

    Args:
        image: RGB image to save
        output_path: Output file path (PNG keeps the exact colors)
    """
    success = cv2.imwrite(output_path, cv2.cvtColor(to_rgb(image), cv2.COLOR_RGB2BGR))
    if not success:
        raise ValueError(f"Failed to save image to {output_path}")


def load_regions(boxes_path: str) -> List[Region]:
    """
    Load regions from a JSON box file.

    The file holds a list of {"x", "y", "w", "h", "label"} objects.

    Args:
        boxes_path: Path to the box file

    Returns:
        List of regions in file order
    """
    with open(boxes_path) as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError(f"Expected a list of boxes in {boxes_path}")

    return [Region.from_dict(r) for r in raw]


def save_regions(regions: List[Region], boxes_path: str) -> None:
    """Write regions to a JSON box file."""
    with open(boxes_path, 'w') as f:
        json.dump([r.to_dict() for r in regions], f, indent=2)
