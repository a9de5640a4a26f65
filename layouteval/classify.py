"""
Pixel classification primitives.
Counts color-coded pixels inside a region while claiming them in a tracker,
so that a pixel shared by overlapping regions is counted once and reported
as a duplicate afterwards.
"""

from typing import Optional, Sequence, Tuple

import numpy as np

from layouteval.config import Color
from layouteval.raster import RasterSurface
from layouteval.region import Region
from layouteval.tracker import Mark, PixelTracker


def regions_mask(regions: Sequence[Region], frame: Region) -> np.ndarray:
    """
    Pixels of a frame covered by at least one of the regions.

    Args:
        regions: Regions in page coordinates
        frame: Window the mask is computed for

    Returns:
        Boolean array shaped like the frame window
    """
    mask = np.zeros((frame.h, frame.w), dtype=bool)
    for region in regions:
        overlap = frame.intersection(region)
        if overlap is None:
            continue
        local = overlap.translate(-frame.x, -frame.y)
        rows, cols = local.slices
        mask[rows, cols] = True
    return mask


def classify(surface: RasterSurface, region: Region, color: Optional[Color],
             tracker: PixelTracker, exclude: Sequence[Region] = (),
             within: Optional[Sequence[Region]] = None,
             code: Mark = Mark.COUNTED) -> Tuple[int, int]:
    """
    Count the pixels of a region that have the given color.

    Pixels inside any excluded region are skipped. When `within` is given,
    only pixels inside at least one of those regions are considered. A
    matching pixel is counted and claimed if the tracker has not seen it yet,
    otherwise it is tallied as a duplicate.

    Args:
        surface: Color-coded image
        region: Region to scan
        color: Color to count, or None for any region color
        tracker: Overlay of already claimed pixels for this image
        exclude: Regions whose pixels are ignored
        within: Regions a pixel must fall in to be considered
        code: Mark recorded for newly claimed pixels

    Returns:
        Tuple of (count, duplicate_count)
    """
    if region.area == 0:
        return 0, 0

    matching = surface.color_mask(color, region)

    if exclude:
        matching &= ~regions_mask(exclude, region)

    if within is not None:
        matching &= regions_mask(within, region)

    claimed = tracker.claimed(region)
    fresh = matching & ~claimed
    duplicates = int(np.count_nonzero(matching & claimed))

    tracker.mark(region, fresh, code)

    return int(np.count_nonzero(fresh)), duplicates


def count_true_positives(hyp_surface: RasterSurface, hyp_region: Region,
                         gt_regions: Sequence[Region], color: Optional[Color],
                         tracker: PixelTracker) -> Tuple[int, int]:
    """
    Hypothesis pixels inside the hypothesis region that also lie inside a
    groundtruth region. Claimed as true positives (red when rendered).
    """
    return classify(hyp_surface, hyp_region, color, tracker,
                    within=gt_regions, code=Mark.TRUE_POSITIVE)


def count_false_positives(hyp_surface: RasterSurface, hyp_region: Region,
                          gt_regions: Sequence[Region], color: Optional[Color],
                          tracker: PixelTracker) -> Tuple[int, int]:
    """
    Hypothesis pixels inside the hypothesis region that are outside every
    groundtruth region. Claimed as false positives (blue when rendered).
    """
    return classify(hyp_surface, hyp_region, color, tracker,
                    exclude=gt_regions, code=Mark.FALSE_POSITIVE)


def count_false_negatives(gt_surface: RasterSurface, gt_region: Region,
                          hyp_regions: Sequence[Region], color: Optional[Color],
                          tracker: PixelTracker) -> Tuple[int, int]:
    """
    Groundtruth pixels inside the groundtruth region that are outside every
    hypothesis region. Claimed as false negatives (green when rendered).
    """
    return classify(gt_surface, gt_region, color, tracker,
                    exclude=hyp_regions, code=Mark.FALSE_NEGATIVE)


def count_true_negatives(gt_surface: RasterSurface, hyp_surface: RasterSurface,
                         gt_regions: Sequence[Region], hyp_regions: Sequence[Region],
                         color: Optional[Color], tracker: PixelTracker) -> int:
    """
    Count foreground pixels that are correctly left out by the hypothesis.

    A page foreground pixel (groundtruth image) is a true negative when it is
    neither a groundtruth positive (matching color inside a groundtruth
    region) nor detected by the hypothesis (matching color in the hypothesis
    image inside a hypothesis region). Unclaimed true negatives are marked
    orange in the tracker.

    Returns:
        Number of true negative pixels
    """
    page = gt_surface.bounds
    foreground = gt_surface.foreground_mask()

    positive = gt_surface.color_mask(color) & regions_mask(gt_regions, page)
    detected = hyp_surface.color_mask(color) & regions_mask(hyp_regions, page)

    negatives = foreground & ~positive & ~detected
    tracker.mark(page, negatives & ~tracker.claimed(page), Mark.TRUE_NEGATIVE)

    return int(np.count_nonzero(negatives))
