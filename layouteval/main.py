"""
Evaluation pipeline for a single page.
Loads the color-coded images and box files, builds the bipartite graph and
reports the metrics.
"""

import argparse
import json
import os
from dataclasses import asdict
from typing import Optional

from layouteval.config import EVAL_CONFIG
from layouteval.graph import BipartiteGraph, GraphInput
from layouteval.loading import load_image, load_regions, save_image
from layouteval.report import print_metrics, print_metrics_verbose


def write_debug_images(graph: BipartiteGraph, debug_dir: str, name: str,
                       verbose: bool = True) -> None:
    """
    Save the rendered pixel trackers with both segmentations drawn on them.

    Args:
        graph: Built bipartite graph
        debug_dir: Output directory (created if missing)
        name: Base name of the page
        verbose: Print the written paths
    """
    os.makedirs(debug_dir, exist_ok=True)
    hyp_regions = [v.region for v in graph.hypothesis]
    gt_regions = [v.region for v in graph.groundtruth]

    for label, tracker in (("hyp", graph.hyp_tracker), ("gt", graph.gt_tracker)):
        image = tracker.draw_segmentations(hyp_regions, EVAL_CONFIG["hypothesis_box_color"])
        image = tracker.draw_segmentations(gt_regions, EVAL_CONFIG["groundtruth_box_color"], image)
        path = os.path.join(debug_dir, f"{name}_{graph.type_name}_{label}_tracker.png")
        save_image(image, path)
        if verbose:
            print(f"  Saved {path}")


def evaluate_page(hyp_image_path: str, gt_image_path: str,
                  hyp_boxes_path: str, gt_boxes_path: str,
                  region_type: Optional[str] = None,
                  coverage_threshold: Optional[float] = None,
                  debug_dir: Optional[str] = None,
                  verbose: bool = True) -> BipartiteGraph:
    """
    Complete single-page evaluation.

    Args:
        hyp_image_path: Color-coded hypothesis image
        gt_image_path: Color-coded groundtruth image
        hyp_boxes_path: JSON box file of the hypothesis
        gt_boxes_path: JSON box file of the groundtruth
        region_type: Region type to evaluate (None or "any" for all)
        coverage_threshold: Coverage needed for a correct segmentation
        debug_dir: If given, tracker images are written there
        verbose: Print progress

    Returns:
        Built BipartiteGraph holding the metrics
    """
    name = os.path.splitext(os.path.basename(gt_image_path))[0]

    if verbose:
        print(f"\n[Step 1/3] Loading {name}...")
    graph_input = GraphInput(
        hypothesis_image=load_image(hyp_image_path),
        groundtruth_image=load_image(gt_image_path),
        hypothesis_regions=load_regions(hyp_boxes_path),
        groundtruth_regions=load_regions(gt_boxes_path),
        region_type=region_type,
        name=name)

    if verbose:
        print("\n[Step 2/3] Building bipartite graph...")
    graph = BipartiteGraph(graph_input, coverage_threshold=coverage_threshold,
                           verbose=verbose)

    if debug_dir:
        if verbose:
            print("\n[Step 3/3] Writing debug images...")
        write_debug_images(graph, debug_dir, name, verbose)

    return graph


def main():
    parser = argparse.ArgumentParser(
        description="Pixel-accurate evaluation of a page's layout analysis")
    parser.add_argument("--hyp-image", type=str, required=True, help="color-coded hypothesis image")
    parser.add_argument("--gt-image", type=str, required=True, help="color-coded groundtruth image")
    parser.add_argument("--hyp-boxes", type=str, required=True, help="hypothesis json box file")
    parser.add_argument("--gt-boxes", type=str, required=True, help="groundtruth json box file")
    parser.add_argument("--type", type=str, default="any", help="region type to evaluate")
    parser.add_argument("--coverage", type=float, default=None,
                        help="fraction of a groundtruth region a correct segmentation covers")
    parser.add_argument("--debug-dir", type=str, default=None, help="directory for tracker images")
    parser.add_argument("--verbose-report", action="store_true", help="print per-region metrics")
    parser.add_argument("--json", action="store_true", help="print metrics as json")
    args = parser.parse_args()

    graph = evaluate_page(args.hyp_image, args.gt_image, args.hyp_boxes, args.gt_boxes,
                          region_type=args.type,
                          coverage_threshold=args.coverage,
                          debug_dir=args.debug_dir,
                          verbose=not args.json)

    if args.json:
        print(json.dumps({
            "groundtruth": asdict(graph.gt_metrics),
            "hypothesis": asdict(graph.hyp_metrics),
        }, indent=2))
    elif args.verbose_report:
        print_metrics_verbose(graph)
    else:
        print_metrics(graph)


if __name__ == "__main__":
    main()
