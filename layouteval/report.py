"""
Human-readable reports of a page evaluation.
"""

import sys
from typing import TextIO

from layouteval.graph import BipartiteGraph
from layouteval.vertex import Side


def _write(stream: TextIO, text: str = "") -> None:
    print(text, file=stream)


def print_metrics(graph: BipartiteGraph, stream: TextIO = None) -> None:
    """
    Print the page-wide metrics.

    Args:
        graph: Built bipartite graph
        stream: Output stream (default: stdout)

    Raises:
        ValueError: If the graph was cleared
    """
    if graph.hyp_metrics is None:
        raise ValueError("graph has no metrics; rebuild it first")
    stream = stream or sys.stdout
    gt = graph.gt_metrics
    hyp = graph.hyp_metrics
    name = graph.input.name if graph.input and graph.input.name else "page"

    _write(stream, "=" * 60)
    _write(stream, f"LAYOUT EVALUATION: {name} (type: {hyp.res_type_name})")
    _write(stream, "=" * 60)

    _write(stream, "\nGroundtruth:")
    _write(stream, f"  Regions: {hyp.total_gt_regions}")
    _write(stream, f"  Segmented regions: {gt.segmentations}")
    _write(stream, f"  Foreground pixels: {gt.total_fg_pixels:,} "
                   f"(segmented {gt.total_seg_fg_pixels:,}, "
                   f"missed {gt.total_nonseg_fg_pixels:,})")
    _write(stream, f"  Segmented foreground ratio: {gt.fg_pixel_ratio:.4f}")
    _write(stream, f"  Segmented area ratio: {gt.area_ratio:.4f}")

    _write(stream, "\nRegions:")
    _write(stream, f"  Correct segmentations: {hyp.correct_segmentations}")
    _write(stream, f"  Oversegmented components: {hyp.oversegmented_components} "
                   f"({hyp.oversegmentations} regions, "
                   f"avg {hyp.avg_oversegmentations_perbox:.2f} per box)")
    _write(stream, f"  Undersegmented components: {hyp.undersegmented_components} "
                   f"({hyp.undersegmentations} regions, "
                   f"avg {hyp.avg_undersegmentations_perbox:.2f} per box)")
    _write(stream, f"  False positives: {hyp.false_positives}")
    _write(stream, f"  False negatives: {hyp.false_negatives}")

    _write(stream, "\nPixels:")
    _write(stream, f"  Foreground: {hyp.total_fg_pix:,}")
    _write(stream, f"  True positives: {hyp.total_true_positive_fg_pix:,}")
    _write(stream, f"  False positives: {hyp.total_false_positive_pix:,}")
    _write(stream, f"  False negatives: {hyp.total_false_negative_pix:,}")
    _write(stream, f"  True negatives: {hyp.total_true_negative_fg_pix:,}")

    _write(stream, "\nRates:")
    _write(stream, f"  Accuracy: {hyp.accuracy:.4f}")
    _write(stream, f"  Specificity: {hyp.specificity:.4f}")
    _write(stream, f"  Negative predictive value: {hyp.negative_predictive_val:.4f}")
    _write(stream, f"  Total recall: {hyp.total_recall:.4f}")
    _write(stream, f"  Total precision: {hyp.total_precision:.4f}")
    _write(stream, f"  Total fallout: {hyp.total_fallout:.4f}")
    _write(stream, f"  Total false discovery: {hyp.total_fdr:.4f}")


def print_metrics_verbose(graph: BipartiteGraph, stream: TextIO = None) -> None:
    """
    Print the page-wide metrics followed by every region's metrics.

    Args:
        graph: Built bipartite graph
        stream: Output stream (default: stdout)
    """
    stream = stream or sys.stdout
    print_metrics(graph, stream)
    hyp = graph.hyp_metrics

    _write(stream, "\n" + "-" * 60)
    _write(stream, "HYPOTHESIS REGIONS")
    _write(stream, "-" * 60)
    for box in hyp.boxes:
        r = box.region
        _write(stream, f"\nRegion {box.index}: ({r.x}, {r.y}) {r.w} x {r.h}")
        _write(stream, f"  Foreground pixels: {box.num_fg_pixels} "
                       f"(duplicates {box.num_fg_pixels_duplicate})")
        _write(stream, f"  Groundtruth overlaps: {box.num_gt_overlap}")
        _write(stream, f"  TP / FP / FN pixels: {box.true_positive_pix} / "
                       f"{box.false_positive_pix} / {box.false_negative_pix}")
        _write(stream, f"  Recall: {box.recall:.4f}  Precision: {box.precision:.4f}")
        _write(stream, f"  Fallout: {box.fallout:.4f}  False discovery: {box.false_discovery:.4f}")
        if box.false_positive_pix_duplicate:
            _write(stream, f"  Duplicate false positives: {box.false_positive_pix_duplicate} "
                           f"(fallout {box.fallout_duplicate:.4f}, "
                           f"false discovery {box.false_discovery_duplicate:.4f})")

    _write(stream, "\n" + "-" * 60)
    _write(stream, "GROUNDTRUTH REGIONS")
    _write(stream, "-" * 60)
    for gt, description in zip(hyp.overlapping_gts, graph.gt_metrics.descriptions):
        r = gt.region
        _write(stream, f"\nRegion {gt.index}: ({r.x}, {r.y}) {r.w} x {r.h}")
        _write(stream, f"  Hypothesis overlaps: {gt.num_edges}")
        _write(stream, f"  False negative pixels: {gt.false_negative_pix} "
                       f"(duplicates {gt.false_negative_pix_duplicate})")
        _write(stream, f"  Share of foreground: {description.fg_pix_ratio:.4f}  "
                       f"Share of area: {description.area_ratio:.4f}")


def print_set(graph: BipartiteGraph, side: Side, stream: TextIO = None) -> None:
    """
    Print one vertex set with its edges (debugging aid).

    Args:
        graph: Built bipartite graph
        side: Which set to print
        stream: Output stream (default: stdout)
    """
    stream = stream or sys.stdout
    vertices = graph.vertices(side)

    _write(stream, f"{side.value} set: {len(vertices)} vertices")
    for vertex in vertices:
        _write(stream, f"  {vertex!r}")
        for edge in vertex.edges:
            _write(stream, f"    -> {edge.other.side.value}[{edge.other.index}] "
                           f"pixels={edge.intersecting_pixels} area={edge.overlap_area}")
