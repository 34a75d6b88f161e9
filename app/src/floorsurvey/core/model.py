from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

# Fraction of the canvas the plan bounds occupy at the base transform.
DEFAULT_FIT_FRACTION = 0.92
# Added to the edge denominator so horizontal edges never divide by zero.
POLYGON_EPSILON = 1e-6


@dataclass(frozen=True)
class Point:
    """A coordinate in plan space (Y axis pointing up)."""

    x: float
    y: float


@dataclass(frozen=True)
class ScreenPoint:
    """A coordinate in canvas pixels (Y axis pointing down)."""

    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    @property
    def center(self) -> ScreenPoint:
        return ScreenPoint(self.width * 0.5, self.height * 0.5)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned bounding box in plan space."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) * 0.5, (self.min_y + self.max_y) * 0.5)

    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @classmethod
    def from_list(cls, values: Sequence[float]) -> Optional["Rect"]:
        """Build a Rect from ``[min_x, min_y, max_x, max_y]``; None if too short."""
        if len(values) < 4:
            return None
        return cls(float(values[0]), float(values[1]), float(values[2]), float(values[3]))


Polygon = Sequence[Point]


@dataclass(frozen=True)
class PlanTransform:
    """Uniform scale plus translation that fits plan bounds onto the canvas."""

    bounds: Rect
    scale: float
    offset_x: float
    offset_y: float


def compute_transform(bounds: Rect, target_size: Size, fit_fraction: float = DEFAULT_FIT_FRACTION) -> PlanTransform:
    """Fit *bounds* inside *target_size* at *fit_fraction*, centred.

    Degenerate bounds or an empty target produce an identity transform
    instead of raising, so a malformed level still renders something.
    """
    width = bounds.width
    height = bounds.height
    if width <= 0 or height <= 0 or target_size.width <= 0 or target_size.height <= 0:
        return PlanTransform(bounds=bounds, scale=1.0, offset_x=0.0, offset_y=0.0)
    scale = min(target_size.width / width, target_size.height / height) * fit_fraction
    offset_x = (target_size.width - width * scale) * 0.5
    offset_y = (target_size.height - height * scale) * 0.5
    return PlanTransform(bounds=bounds, scale=scale, offset_x=offset_x, offset_y=offset_y)


def to_screen(transform: PlanTransform, point: Point) -> ScreenPoint:
    b = transform.bounds
    x = (point.x - b.min_x) * transform.scale + transform.offset_x
    y = (b.max_y - point.y) * transform.scale + transform.offset_y
    return ScreenPoint(x, y)


def to_plan(transform: PlanTransform, point: ScreenPoint) -> Point:
    b = transform.bounds
    x = (point.x - transform.offset_x) / transform.scale + b.min_x
    y = b.max_y - (point.y - transform.offset_y) / transform.scale
    return Point(x, y)


def bounds_of(polygon: Polygon) -> Optional[Rect]:
    """Return the bounding box of *polygon*, or None when it has no points."""
    if not polygon:
        return None
    first = polygon[0]
    min_x = max_x = first.x
    min_y = max_y = first.y
    for p in polygon[1:]:
        min_x = min(min_x, p.x)
        min_y = min(min_y, p.y)
        max_x = max(max_x, p.x)
        max_y = max(max_y, p.y)
    return Rect(min_x, min_y, max_x, max_y)


def label_point(polygon: Polygon) -> Optional[Point]:
    """Centre of the polygon's bounding box, where the room badge is drawn."""
    bounds = bounds_of(polygon)
    if bounds is None:
        return None
    return bounds.center


def shoelace_area(polygon: Polygon) -> float:
    """Return the absolute area of a polygon using the shoelace formula."""
    if len(polygon) < 3:
        return 0.0
    area = 0.0
    n = len(polygon)
    for i in range(n):
        p1 = polygon[i]
        p2 = polygon[(i + 1) % n]
        area += p1.x * p2.y - p2.x * p1.y
    return abs(area) / 2.0


def point_in_polygon(pt: Point, polygon: Polygon, epsilon: float = POLYGON_EPSILON) -> bool:
    """Ray casting (even-odd) test, closing edge included."""
    n = len(polygon)
    if n < 3:
        return False
    inside = False
    j = n - 1
    for i in range(n):
        pi = polygon[i]
        pj = polygon[j]
        if (pi.y > pt.y) != (pj.y > pt.y):
            x_cross = (pj.x - pi.x) * (pt.y - pi.y) / (pj.y - pi.y + epsilon) + pi.x
            if pt.x < x_cross:
                inside = not inside
        j = i
    return inside


def compass_angle_degrees(start: Point, end: Point) -> float:
    """Clockwise angle from plan north (+Y) of the vector start -> end."""
    dx = end.x - start.x
    dy = end.y - start.y
    return math.degrees(math.atan2(dx, dy))
