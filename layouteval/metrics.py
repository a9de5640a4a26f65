"""
Page-level metrics derived from a completed bipartite graph.

Rates follow the usual detection definitions, on foreground pixels:
    Recall (TPR) = TP / P        Fallout (FPR) = FP / N
    Precision    = TP / (TP+FP)  False discovery rate = FP / (TP+FP)
    Accuracy     = (TP+TN) / (P+N)
    Specificity  = TN / N        Negative predictive value = TN / (TN+FN)
Any ratio with a zero denominator is reported as 0.0.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from layouteval.classify import (count_false_negatives, count_false_positives,
                                 count_true_negatives, count_true_positives)
from layouteval.config import Color
from layouteval.raster import RasterSurface
from layouteval.region import Region
from layouteval.tracker import PixelTracker
from layouteval.vertex import Vertex


def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 when there is no data (zero denominator)."""
    if denominator == 0:
        return 0.0
    return float(numerator) / float(denominator)


@dataclass
class GTBoxDescription:
    fg_pix_ratio: float  # box foreground / all groundtruth foreground
    area_ratio: float  # box area / all groundtruth box area


@dataclass
class GroundTruthMetrics:
    segmentations: int = 0  # groundtruth regions overlapped by the hypothesis
    total_seg_fg_pixels: int = 0
    total_nonseg_fg_pixels: int = 0
    total_fg_pixels: int = 0
    fg_pixel_ratio: float = 0.0
    total_seg_area: int = 0
    total_area: int = 0  # image area
    total_box_area: int = 0
    area_ratio: float = 0.0
    descriptions: List[GTBoxDescription] = field(default_factory=list)


@dataclass
class RegionDescription:
    """Metrics for one hypothesis region."""

    index: int
    region: Region
    num_fg_pixels: int = 0
    num_fg_pixels_duplicate: int = 0
    area: int = 0
    recall: float = 0.0
    fallout: float = 0.0
    fallout_duplicate: float = 0.0
    precision: float = 0.0
    false_discovery: float = 0.0
    false_discovery_duplicate: float = 0.0
    true_positive_pix: int = 0
    true_positive_pix_duplicate: int = 0
    false_positive_pix: int = 0
    false_positive_pix_duplicate: int = 0
    false_negative_pix: int = 0  # missed pixels of the groundtruth regions it overlaps
    num_gt_overlap: int = 0


@dataclass
class OverlappingGTRegion:
    """Missed pixels of one groundtruth region."""

    index: int
    region: Region
    false_negative_pix: int = 0
    false_negative_pix_duplicate: int = 0
    num_edges: int = 0


@dataclass
class HypothesisMetrics:
    correct_segmentations: int = 0
    total_gt_regions: int = 0
    total_recall: float = 0.0
    total_fallout: float = 0.0
    total_precision: float = 0.0
    total_fdr: float = 0.0
    oversegmentations: int = 0
    avg_oversegmentations_perbox: float = 0.0
    undersegmentations: int = 0
    avg_undersegmentations_perbox: float = 0.0
    oversegmented_components: int = 0
    undersegmented_components: int = 0
    false_negatives: int = 0  # groundtruth regions missed entirely
    false_positives: int = 0  # hypothesis regions with no groundtruth overlap
    negative_predictive_val: float = 0.0
    specificity: float = 0.0
    accuracy: float = 0.0
    total_false_negative_pix: int = 0
    total_false_positive_pix: int = 0
    total_positive_fg_pix: int = 0  # TP + FP
    total_true_positive_fg_pix: int = 0
    total_true_negative_fg_pix: int = 0
    total_fg_pix: int = 0
    total_negative_fg_pix: int = 0  # total_fg_pix - total_positive_fg_pix
    boxes: List[RegionDescription] = field(default_factory=list)
    overlapping_gts: List[OverlappingGTRegion] = field(default_factory=list)
    res_type_name: str = ""


def compute_groundtruth_metrics(groundtruth: Sequence[Vertex],
                                image_area: int) -> GroundTruthMetrics:
    """
    Summarize the groundtruth side of the graph.

    Args:
        groundtruth: Groundtruth vertices with their edges
        image_area: width * height of the page

    Returns:
        GroundTruthMetrics
    """
    metrics = GroundTruthMetrics(total_area=image_area)

    for vertex in groundtruth:
        metrics.total_fg_pixels += vertex.fg_pixels
        metrics.total_box_area += vertex.area
        if vertex.degree > 0:
            metrics.segmentations += 1
            metrics.total_seg_fg_pixels += vertex.fg_pixels
            metrics.total_seg_area += vertex.area
        else:
            metrics.total_nonseg_fg_pixels += vertex.fg_pixels

    metrics.fg_pixel_ratio = safe_ratio(metrics.total_seg_fg_pixels,
                                        metrics.total_fg_pixels)
    metrics.area_ratio = safe_ratio(metrics.total_seg_area, metrics.total_area)

    metrics.descriptions = [
        GTBoxDescription(
            fg_pix_ratio=safe_ratio(vertex.fg_pixels, metrics.total_fg_pixels),
            area_ratio=safe_ratio(vertex.area, metrics.total_box_area))
        for vertex in groundtruth
    ]

    return metrics


def is_correct_segmentation(hyp: Vertex, groundtruth: Sequence[Vertex],
                            coverage_threshold: float = 1.0) -> bool:
    """
    A hypothesis region is correct when it overlaps exactly one groundtruth
    region and covers (at least the threshold fraction of) all of that
    region's foreground pixels. A groundtruth region without foreground
    pixels cannot be segmented correctly.
    """
    if hyp.degree != 1:
        return False
    edge = hyp.edges[0]
    gt = groundtruth[edge.other.index]
    if gt.fg_pixels == 0:
        return False
    required = math.ceil(coverage_threshold * gt.fg_pixels)
    return edge.intersecting_pixels >= required


def compute_hypothesis_metrics(hypothesis: Sequence[Vertex],
                               groundtruth: Sequence[Vertex],
                               hyp_surface: RasterSurface,
                               gt_surface: RasterSurface,
                               color: Optional[Color],
                               gt_metrics: GroundTruthMetrics,
                               hyp_tracker: PixelTracker,
                               gt_tracker: PixelTracker,
                               coverage_threshold: float = 1.0,
                               res_type_name: str = "") -> HypothesisMetrics:
    """
    Score the hypothesis against the groundtruth.

    Every pixel is attributed once: true/false positives are claimed in the
    hypothesis tracker, false negatives and true negatives in the groundtruth
    tracker. Page totals are the sums of the per-region records.

    Args:
        hypothesis: Hypothesis vertices with their edges
        groundtruth: Groundtruth vertices with their edges
        hyp_surface: Color-coded hypothesis image
        gt_surface: Color-coded groundtruth image
        color: Region color evaluated (None for any)
        gt_metrics: Already computed groundtruth summary
        hyp_tracker: Fresh tracker for the hypothesis image
        gt_tracker: Fresh tracker for the groundtruth image
        coverage_threshold: Fraction of a groundtruth region a correct
            segmentation must cover
        res_type_name: Region type name recorded in the result

    Returns:
        HypothesisMetrics
    """
    metrics = HypothesisMetrics(total_gt_regions=len(groundtruth),
                                res_type_name=res_type_name)

    hyp_regions = [v.region for v in hypothesis]
    gt_regions = [v.region for v in groundtruth]

    positives = gt_metrics.total_fg_pixels
    metrics.total_fg_pix = int(np.count_nonzero(gt_surface.foreground_mask()))
    negatives = metrics.total_fg_pix - positives

    # Groundtruth side: missed pixels and segmentation counts
    for gt in groundtruth:
        fn, fn_dup = count_false_negatives(gt_surface, gt.region, hyp_regions,
                                           color, gt_tracker)
        metrics.overlapping_gts.append(OverlappingGTRegion(
            index=gt.index,
            region=gt.region,
            false_negative_pix=fn,
            false_negative_pix_duplicate=fn_dup,
            num_edges=gt.degree))
        metrics.total_false_negative_pix += fn

        if gt.degree == 0:
            metrics.false_negatives += 1
        elif gt.degree > 1:
            metrics.oversegmented_components += 1
            metrics.oversegmentations += gt.degree

    # Hypothesis side: per-region rates
    for hyp in hypothesis:
        tp, tp_dup = count_true_positives(hyp_surface, hyp.region, gt_regions,
                                          color, hyp_tracker)
        fp, fp_dup = count_false_positives(hyp_surface, hyp.region, gt_regions,
                                           color, hyp_tracker)

        matched_gt_pixels = sum(groundtruth[e.other.index].fg_pixels for e in hyp.edges)
        missed = sum(metrics.overlapping_gts[e.other.index].false_negative_pix
                     for e in hyp.edges)

        box = RegionDescription(
            index=hyp.index,
            region=hyp.region,
            num_fg_pixels=hyp.fg_pixels,
            num_fg_pixels_duplicate=hyp.fg_pixels_duplicate,
            area=hyp.area,
            recall=safe_ratio(tp, matched_gt_pixels),
            fallout=safe_ratio(fp, negatives),
            fallout_duplicate=safe_ratio(fp_dup, negatives),
            precision=safe_ratio(tp, hyp.fg_pixels),
            false_discovery=safe_ratio(fp, hyp.fg_pixels),
            false_discovery_duplicate=safe_ratio(fp_dup, hyp.fg_pixels),
            true_positive_pix=tp,
            true_positive_pix_duplicate=tp_dup,
            false_positive_pix=fp,
            false_positive_pix_duplicate=fp_dup,
            false_negative_pix=missed,
            num_gt_overlap=hyp.degree)
        metrics.boxes.append(box)

        metrics.total_recall += box.recall
        metrics.total_fallout += box.fallout
        metrics.total_precision += box.precision
        metrics.total_fdr += box.false_discovery
        metrics.total_true_positive_fg_pix += tp
        metrics.total_false_positive_pix += fp

        if hyp.degree == 0:
            metrics.false_positives += 1
        elif hyp.degree > 1:
            metrics.undersegmented_components += 1
            metrics.undersegmentations += hyp.degree
        elif is_correct_segmentation(hyp, groundtruth, coverage_threshold):
            metrics.correct_segmentations += 1

    metrics.avg_oversegmentations_perbox = safe_ratio(
        metrics.oversegmentations, metrics.oversegmented_components)
    metrics.avg_undersegmentations_perbox = safe_ratio(
        metrics.undersegmentations, metrics.undersegmented_components)

    # Page-wide pixel rates
    metrics.total_true_negative_fg_pix = count_true_negatives(
        gt_surface, hyp_surface, gt_regions, hyp_regions, color, gt_tracker)
    metrics.total_positive_fg_pix = (metrics.total_true_positive_fg_pix +
                                     metrics.total_false_positive_pix)
    metrics.total_negative_fg_pix = metrics.total_fg_pix - metrics.total_positive_fg_pix

    tp_tn = metrics.total_true_positive_fg_pix + metrics.total_true_negative_fg_pix
    metrics.accuracy = safe_ratio(tp_tn, metrics.total_fg_pix)
    metrics.specificity = safe_ratio(metrics.total_true_negative_fg_pix, negatives)
    metrics.negative_predictive_val = safe_ratio(metrics.total_true_negative_fg_pix,
                                                 metrics.total_negative_fg_pix)

    return metrics
