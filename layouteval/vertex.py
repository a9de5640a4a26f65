"""
Vertices and edges of the hypothesis/groundtruth bipartite graph.

Vertices live in one list per side and are addressed by (side, index);
edges hold such handles instead of references to other vertices, so
dropping a side's list never leaves an edge pointing at a live object.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple

from layouteval.region import Region


class Side(Enum):
    HYPOTHESIS = "hypothesis"
    GROUNDTRUTH = "groundtruth"

    @property
    def opposite(self) -> 'Side':
        if self is Side.HYPOTHESIS:
            return Side.GROUNDTRUTH
        return Side.HYPOTHESIS


class VertexRef(NamedTuple):
    """Stable handle of a vertex: its side and its position in that side."""

    side: Side
    index: int


@dataclass
class Edge:
    """Pixel overlap between a vertex and one vertex of the opposite side."""

    other: VertexRef
    intersecting_pixels: int  # matching pixels inside the rectangle overlap
    overlap_area: int  # area of the rectangle overlap


@dataclass
class Vertex:
    """One detected or groundtruth region with its pixel statistics."""

    region: Region
    side: Side
    index: int
    fg_pixels: int = 0  # first-owner foreground pixels
    fg_pixels_duplicate: int = 0  # foreground already claimed by another vertex
    edges: List[Edge] = field(default_factory=list)

    @property
    def area(self) -> int:
        return self.region.area

    @property
    def ref(self) -> VertexRef:
        return VertexRef(self.side, self.index)

    @property
    def degree(self) -> int:
        """Number of opposite-side vertices this one overlaps."""
        return len(self.edges)

    def __repr__(self) -> str:
        return (f"Vertex({self.side.value}[{self.index}], {self.region!r}, "
                f"fg={self.fg_pixels}, dup={self.fg_pixels_duplicate}, "
                f"edges={self.degree})")
