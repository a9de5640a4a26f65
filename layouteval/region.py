"""
Region dataclass for layout evaluation.
Represents an immutable rectangular region in page coordinates.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional


@dataclass(frozen=True)
class Region:
    """A rectangular region of the page, half-open on the right and bottom."""

    x: int  # Top-left x coordinate
    y: int  # Top-left y coordinate
    w: int  # Width
    h: int  # Height
    label: Optional[str] = None  # region type, e.g. text, table, figure

    def __post_init__(self):
        """Reject negative dimensions; zero is a degenerate but legal region."""
        if self.w < 0 or self.h < 0:
            raise ValueError(f"Region has negative size: {self!r}")

    @property
    def x2(self) -> int:
        """Right edge x coordinate (exclusive)."""
        return self.x + self.w

    @property
    def y2(self) -> int:
        """Bottom edge y coordinate (exclusive)."""
        return self.y + self.h

    @property
    def area(self) -> int:
        """Area of the region."""
        return self.w * self.h

    @property
    def slices(self) -> tuple:
        """Numpy (row, column) slices selecting this region from an image."""
        return slice(self.y, self.y2), slice(self.x, self.x2)

    def contains_point(self, px: int, py: int) -> bool:
        """Check if a point is inside the region."""
        return self.x <= px < self.x2 and self.y <= py < self.y2

    def intersection(self, other: 'Region') -> Optional['Region']:
        """
        Geometric overlap of two regions.

        Args:
            other: Another region

        Returns:
            The overlapping region, or None if the overlap has no area
        """
        x_left = max(self.x, other.x)
        y_top = max(self.y, other.y)
        x_right = min(self.x2, other.x2)
        y_bottom = min(self.y2, other.y2)

        if x_right <= x_left or y_bottom <= y_top:
            return None

        return Region(x=x_left, y=y_top,
                      w=x_right - x_left, h=y_bottom - y_top)

    def overlaps(self, other: 'Region') -> bool:
        """Check if this region overlaps another by at least one pixel."""
        return self.intersection(other) is not None

    def within_bounds(self, width: int, height: int) -> bool:
        """Check that the region lies entirely inside a width x height image."""
        return (self.x >= 0 and self.y >= 0 and
                self.x2 <= width and self.y2 <= height)

    def translate(self, dx: int, dy: int) -> 'Region':
        """Region shifted by (dx, dy), used to move into window coordinates."""
        return Region(x=self.x + dx, y=self.y + dy, w=self.w, h=self.h,
                      label=self.label)

    def to_dict(self) -> dict:
        """Convert region to dictionary."""
        return {
            'x': self.x,
            'y': self.y,
            'w': self.w,
            'h': self.h,
            'label': self.label
        }

    @staticmethod
    def from_dict(data: dict) -> 'Region':
        """Build a region from a {x, y, w, h[, label]} dictionary."""
        return Region(x=int(data['x']), y=int(data['y']),
                      w=int(data['w']), h=int(data['h']),
                      label=data.get('label'))

    def __repr__(self) -> str:
        return f"Region(x={self.x}, y={self.y}, w={self.w}, h={self.h}, label={self.label!r})"


def select_regions(regions: Iterable[Region],
                   region_type: Optional[str]) -> List[Region]:
    """
    Keep the regions relevant to the region type under evaluation.

    Unlabeled regions always pass; labeled ones must match the type unless
    the type is unconstrained (None).

    Args:
        regions: Regions read for one side of the evaluation
        region_type: Type being evaluated, or None for any type

    Returns:
        List of selected regions in input order
    """
    if region_type is None:
        return list(regions)
    return [r for r in regions if r.label is None or r.label == region_type]
