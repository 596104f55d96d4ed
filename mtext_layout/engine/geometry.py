"""Geometry primitives and helpers for layout calculations."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

Point = Tuple[float, float]


@dataclass(slots=True)
class Vector3:
    x: float
    y: float
    z: float = 0.0


@dataclass(slots=True)
class BoundingBox:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> Optional["BoundingBox"]:
        xs = []
        ys = []
        for x, y in points:
            xs.append(x)
            ys.append(y)
        if not xs:
            return None
        return cls(min(xs), min(ys), max(xs), max(ys))

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def union(self, other: Optional["BoundingBox"]) -> "BoundingBox":
        """Calculate the bounding box that contains both boxes.

        Args:
            other: Another BoundingBox, ``None`` is treated as empty

        Returns:
            New BoundingBox that contains both boxes
        """
        if other is None:
            return BoundingBox(self.min_x, self.min_y, self.max_x, self.max_y)
        return BoundingBox(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )


def union_boxes(boxes: Iterable[Optional[BoundingBox]]) -> Optional[BoundingBox]:
    result: Optional[BoundingBox] = None
    for box in boxes:
        if box is None:
            continue
        result = box if result is None else result.union(box)
    return result


def rotate_point(point: Point, angle: float, origin: Point = (0.0, 0.0)) -> Point:
    """Rotate ``point`` counter-clockwise by ``angle`` radians about ``origin``."""
    if angle == 0:
        return point
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    dx = point[0] - origin[0]
    dy = point[1] - origin[1]
    return origin[0] + dx * cos_a - dy * sin_a, origin[1] + dx * sin_a + dy * cos_a


def shear_x(point: Point, angle_degrees: float) -> Point:
    """Slant a point to the right by ``angle_degrees`` (oblique text)."""
    if angle_degrees == 0:
        return point
    return point[0] + point[1] * math.tan(math.radians(angle_degrees)), point[1]
