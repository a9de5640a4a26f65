"""
Bipartite graph used to evaluate layout analysis on a single page.

One vertex set holds the hypothesis regions, the other the groundtruth
regions; edges are only drawn between the two sets. Each vertex is a
rectangle of the page with an area and a foreground pixel count, and an edge
carries the number of foreground pixels in the overlap of its two
rectangles. From the vertices, the edges and their weights the graph derives:

1. Correct segmentations - hypothesis regions overlapping exactly one
   groundtruth region and covering all of its foreground pixels.
2. Oversegmentations - groundtruth regions split across several
   hypothesis regions (each of those hypothesis regions counts).
3. Undersegmentations - hypothesis regions spanning several groundtruth
   regions (each of those groundtruth regions counts).
4. Missed regions (false negatives) and false alarms (false positives) -
   vertices without any edge.

Pixel counts go through trackers so a pixel shared by overlapping regions
of the same side is only counted once.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from layouteval.classify import classify
from layouteval.config import EVAL_CONFIG, Color, get_color_from_type
from layouteval.errors import InputMismatchError
from layouteval.metrics import (GroundTruthMetrics, HypothesisMetrics,
                                compute_groundtruth_metrics,
                                compute_hypothesis_metrics)
from layouteval.raster import RasterSurface
from layouteval.region import Region, select_regions
from layouteval.tracker import PixelTracker
from layouteval.vertex import Edge, Side, Vertex, VertexRef

Image = Union[np.ndarray, RasterSurface]


@dataclass
class GraphInput:
    """Everything needed to evaluate one page for one region type."""

    hypothesis_image: Image
    groundtruth_image: Image
    hypothesis_regions: Sequence[Region]
    groundtruth_regions: Sequence[Region]
    region_type: Optional[str] = None  # None or "any": every region color
    name: str = ""  # page name, used in reports


def as_surface(image: Image) -> RasterSurface:
    if isinstance(image, RasterSurface):
        return image
    return RasterSurface(image)


def validate_input(hyp_surface: RasterSurface, gt_surface: RasterSurface,
                   hyp_regions: Sequence[Region],
                   gt_regions: Sequence[Region]) -> None:
    """
    Check that both images and all regions share one coordinate space.

    Raises:
        InputMismatchError: On differing image sizes or an out-of-bounds region
    """
    if hyp_surface.shape != gt_surface.shape:
        raise InputMismatchError(
            f"Hypothesis image is {hyp_surface.width}x{hyp_surface.height} but "
            f"groundtruth image is {gt_surface.width}x{gt_surface.height}")

    width, height = gt_surface.width, gt_surface.height
    for side, regions in ((Side.HYPOTHESIS, hyp_regions),
                          (Side.GROUNDTRUTH, gt_regions)):
        for i, region in enumerate(regions):
            if not region.within_bounds(width, height):
                raise InputMismatchError(
                    f"{side.value} region {i} {region!r} lies outside the "
                    f"{width}x{height} image")


def make_vertices(surface: RasterSurface, regions: Sequence[Region], side: Side,
                  color: Optional[Color], tracker: PixelTracker) -> List[Vertex]:
    """
    Create one vertex per region, in input order.

    Foreground pixels are attributed to the first region claiming them;
    later regions record them as duplicates.

    Args:
        surface: Image of this side
        regions: Regions of this side
        side: Which set the vertices belong to
        color: Region color evaluated (None for any)
        tracker: Fresh tracker for this side's image

    Returns:
        List of vertices
    """
    vertices = []
    for index, region in enumerate(regions):
        count, duplicates = classify(surface, region, color, tracker)
        vertices.append(Vertex(region=region, side=side, index=index,
                               fg_pixels=count, fg_pixels_duplicate=duplicates))
    return vertices


def make_edges(hypothesis: Sequence[Vertex], groundtruth: Sequence[Vertex],
               surface: RasterSurface, color: Optional[Color],
               tracker: PixelTracker) -> int:
    """
    Link every pair of hypothesis and groundtruth vertices whose rectangles
    intersect.

    The edge weight is the number of matching hypothesis pixels inside the
    intersection; pixels shared by several intersections count for the first
    pair only. Each edge is mirrored onto both endpoints.

    Args:
        hypothesis: Hypothesis vertices
        groundtruth: Groundtruth vertices
        surface: Hypothesis image
        color: Region color evaluated (None for any)
        tracker: Fresh tracker for the hypothesis image

    Returns:
        Number of edges created
    """
    num_edges = 0
    for hyp in hypothesis:
        for gt in groundtruth:
            overlap = hyp.region.intersection(gt.region)
            if overlap is None:
                continue
            count, _ = classify(surface, overlap, color, tracker)
            hyp.edges.append(Edge(other=gt.ref, intersecting_pixels=count,
                                  overlap_area=overlap.area))
            gt.edges.append(Edge(other=hyp.ref, intersecting_pixels=count,
                                 overlap_area=overlap.area))
            num_edges += 1
    return num_edges


class BipartiteGraph:
    """
    Evaluation of one page: hypothesis vs groundtruth.

    The graph is built on construction; `gt_metrics` and `hyp_metrics` hold
    the results. Use one instance per page.
    """

    def __init__(self, graph_input: GraphInput,
                 coverage_threshold: Optional[float] = None,
                 verbose: bool = False):
        if coverage_threshold is None:
            coverage_threshold = EVAL_CONFIG["coverage_threshold"]
        if not 0.0 < coverage_threshold <= 1.0:
            raise ValueError(f"coverage_threshold must be in (0, 1], got {coverage_threshold}")

        self.coverage_threshold = coverage_threshold
        self.verbose = verbose

        self.input: Optional[GraphInput] = None
        self.region_type: Optional[str] = None
        self.color: Optional[Color] = None
        self.hyp_surface: Optional[RasterSurface] = None
        self.gt_surface: Optional[RasterSurface] = None
        self.hypothesis: List[Vertex] = []
        self.groundtruth: List[Vertex] = []
        self.hyp_tracker: Optional[PixelTracker] = None
        self.gt_tracker: Optional[PixelTracker] = None
        self.gt_metrics: Optional[GroundTruthMetrics] = None
        self.hyp_metrics: Optional[HypothesisMetrics] = None

        self.build(graph_input)

    @property
    def type_name(self) -> str:
        return self.region_type or EVAL_CONFIG["any_type"]

    def build(self, graph_input: GraphInput) -> None:
        """
        Build both vertex sets, the edges and the metrics.

        Inputs are validated before any work starts; on failure the graph
        keeps its previous state.
        """
        region_type = graph_input.region_type
        if region_type == EVAL_CONFIG["any_type"]:
            region_type = None
        color = get_color_from_type(region_type)

        hyp_surface = as_surface(graph_input.hypothesis_image)
        gt_surface = as_surface(graph_input.groundtruth_image)
        hyp_regions = select_regions(graph_input.hypothesis_regions, region_type)
        gt_regions = select_regions(graph_input.groundtruth_regions, region_type)

        validate_input(hyp_surface, gt_surface, hyp_regions, gt_regions)

        if self.verbose:
            print(f"Evaluating {graph_input.name or 'page'} "
                  f"({gt_surface.width} x {gt_surface.height}, type: {region_type or 'any'})")
            print(f"  Hypothesis regions: {len(hyp_regions)}")
            print(f"  Groundtruth regions: {len(gt_regions)}")

        hypothesis = make_vertices(hyp_surface, hyp_regions, Side.HYPOTHESIS, color,
                                   PixelTracker.for_surface(hyp_surface))
        groundtruth = make_vertices(gt_surface, gt_regions, Side.GROUNDTRUTH, color,
                                    PixelTracker.for_surface(gt_surface))
        num_edges = make_edges(hypothesis, groundtruth, hyp_surface, color,
                               PixelTracker.for_surface(hyp_surface))

        hyp_tracker = PixelTracker.for_surface(hyp_surface)
        gt_tracker = PixelTracker.for_surface(gt_surface)
        gt_metrics = compute_groundtruth_metrics(groundtruth,
                                                 gt_surface.width * gt_surface.height)
        hyp_metrics = compute_hypothesis_metrics(
            hypothesis, groundtruth, hyp_surface, gt_surface, color, gt_metrics,
            hyp_tracker, gt_tracker,
            coverage_threshold=self.coverage_threshold,
            res_type_name=region_type or EVAL_CONFIG["any_type"])

        if self.verbose:
            print(f"  Edges: {num_edges}")
            print(f"  Correct segmentations: {hyp_metrics.correct_segmentations}")

        self.clear()
        self.input = graph_input
        self.region_type = region_type
        self.color = color
        self.hyp_surface = hyp_surface
        self.gt_surface = gt_surface
        self.hypothesis = hypothesis
        self.groundtruth = groundtruth
        self.hyp_tracker = hyp_tracker
        self.gt_tracker = gt_tracker
        self.gt_metrics = gt_metrics
        self.hyp_metrics = hyp_metrics

    def rebuild(self, graph_input: Optional[GraphInput] = None) -> None:
        """Recompute everything, from new inputs or the current ones."""
        if graph_input is None:
            graph_input = self.input
        if graph_input is None:
            raise ValueError("Graph was cleared; rebuild needs a GraphInput")
        self.build(graph_input)

    def clear(self) -> None:
        """Drop edges, vertices, trackers and metrics, in that order."""
        for vertex in self.hypothesis + self.groundtruth:
            vertex.edges.clear()
        self.hypothesis = []
        self.groundtruth = []
        self.hyp_tracker = None
        self.gt_tracker = None
        self.hyp_surface = None
        self.gt_surface = None
        self.gt_metrics = None
        self.hyp_metrics = None
        self.input = None

    def vertices(self, side: Side) -> List[Vertex]:
        if side is Side.HYPOTHESIS:
            return self.hypothesis
        return self.groundtruth

    def vertex(self, ref: VertexRef) -> Vertex:
        """Resolve a vertex handle."""
        return self.vertices(ref.side)[ref.index]

    def edges(self) -> Iterator[Tuple[Vertex, Vertex, Edge]]:
        """Each edge once, as (hypothesis vertex, groundtruth vertex, edge)."""
        for hyp in self.hypothesis:
            for edge in hyp.edges:
                yield hyp, self.vertex(edge.other), edge

    def __repr__(self) -> str:
        return (f"BipartiteGraph(type={self.type_name!r}, "
                f"hypothesis={len(self.hypothesis)}, groundtruth={len(self.groundtruth)})")
