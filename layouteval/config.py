"""Configuration settings for layout evaluation."""

from typing import Optional, Tuple

Color = Tuple[int, int, int]

# Palette (RGB)
BACKGROUND = (255, 255, 255)
TRUE_NEGATIVE_COLOR = (255, 165, 0)  # orange, reserved: never a region color

# Region-type colors used in the color-coded hypothesis/groundtruth images
REGION_COLORS = {
    "text": (0, 255, 0),    # Green
    "table": (0, 0, 255),   # Blue
    "figure": (255, 0, 0),  # Red
}

# Colors used when rendering a pixel tracker for debugging
TRACKER_COLORS = {
    "counted": (128, 128, 128),     # Gray
    "true_positive": (255, 0, 0),   # Red
    "false_positive": (0, 0, 255),  # Blue
    "false_negative": (0, 255, 0),  # Green
    "true_negative": TRUE_NEGATIVE_COLOR,
}

# Evaluation configuration
EVAL_CONFIG = {
    "coverage_threshold": 1.0,  # fraction of a gt region's fg pixels a match must cover
    "any_type": "any",  # region type meaning "any non-background color"
    "segmentation_box_color": (255, 255, 255),  # default outline on tracker images
    "hypothesis_box_color": (255, 0, 255),  # Magenta, hypothesis outlines on debug images
    "groundtruth_box_color": (0, 0, 0),  # Black, groundtruth outlines on debug images
}


def get_color_from_type(region_type: Optional[str]) -> Optional[Color]:
    """
    Look up the color a region type is painted with.

    Args:
        region_type: Key of REGION_COLORS, or the any-type key / None

    Returns:
        RGB color, or None when every non-background color counts

    Raises:
        ValueError: If the region type has no color
    """
    if region_type is None or region_type == EVAL_CONFIG["any_type"]:
        return None
    if region_type not in REGION_COLORS:
        raise ValueError(f"Unknown region type: {region_type!r} "
                         f"(expected one of {sorted(REGION_COLORS)} or "
                         f"{EVAL_CONFIG['any_type']!r})")
    return REGION_COLORS[region_type]
