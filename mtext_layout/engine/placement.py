"""
Entity placement - moving a laid out MText block into drawing coordinates.

The processor lays text out with the first line's top-left corner at the
origin. Placement shifts the block so that the attachment point lands on the
insertion position, then rotates it about that position.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..utils.enums import AttachmentPoint, FlowDirection, GeometryTag, ParagraphAlignment
from .geometry import BoundingBox, Point, Vector3, rotate_point
from .primitives import LayoutDiagnostics, LayoutResult, PositionedGlyph

logger = logging.getLogger(__name__)

# (width multiplier, height multiplier) per attachment point
ANCHOR_FACTORS: Dict[int, Tuple[float, float]] = {
    AttachmentPoint.TOP_LEFT: (0.0, 0.0),
    AttachmentPoint.TOP_CENTER: (-0.5, 0.0),
    AttachmentPoint.TOP_RIGHT: (-1.0, 0.0),
    AttachmentPoint.MIDDLE_LEFT: (0.0, 0.5),
    AttachmentPoint.MIDDLE_CENTER: (-0.5, 0.5),
    AttachmentPoint.MIDDLE_RIGHT: (-1.0, 0.5),
    AttachmentPoint.BOTTOM_LEFT: (0.0, 1.0),
    AttachmentPoint.BOTTOM_CENTER: (-0.5, 1.0),
    AttachmentPoint.BOTTOM_RIGHT: (-1.0, 1.0),
}


def calculate_anchor_point(
    width: float,
    height: float,
    attachment_point: Optional[int] = None,
    flow_direction: FlowDirection = FlowDirection.LEFT_TO_RIGHT,
) -> Point:
    """Offset that moves the attachment point of a ``width`` x ``height`` block to the origin."""
    fx, fy = ANCHOR_FACTORS.get(attachment_point or AttachmentPoint.TOP_LEFT, (0.0, 0.0))
    anchor_x = fx * width
    anchor_y = fy * height
    if flow_direction == FlowDirection.BOTTOM_TO_TOP:
        anchor_y -= height
    return anchor_x, anchor_y


def rotation_angle(rotation: float = 0.0, direction_vector: Optional[Vector3] = None) -> float:
    """Rotation in radians; an explicit direction vector wins over ``rotation``."""
    if direction_vector is not None and (direction_vector.x or direction_vector.y):
        return math.atan2(direction_vector.y, direction_vector.x)
    return rotation or 0.0


def alignment_for_attachment(width: float, attachment_point: Optional[int]) -> ParagraphAlignment:
    """Default paragraph alignment implied by the attachment column of a bounded entity."""
    if not width or not attachment_point:
        return ParagraphAlignment.LEFT
    column = (int(attachment_point) - 1) % 3
    return (ParagraphAlignment.LEFT, ParagraphAlignment.CENTER, ParagraphAlignment.RIGHT)[column]


@dataclass
class PlacedMText:
    """A layout moved into drawing coordinates."""

    layout: LayoutResult
    position: Point
    anchor: Point
    rotation: float
    bbox: Optional[BoundingBox]

    @property
    def total_height(self) -> float:
        return self.layout.total_height

    @property
    def diagnostics(self) -> LayoutDiagnostics:
        return self.layout.diagnostics

    def geometry_groups(self) -> Iterator[Tuple[GeometryTag, int, List[PositionedGlyph]]]:
        return self.layout.geometry_groups()


class EntityPlacement:
    """Applies anchor, insertion position and rotation to a LayoutResult in place."""

    def place(
        self,
        layout: LayoutResult,
        position: Point = (0.0, 0.0),
        width: float = 0.0,
        attachment_point: Optional[int] = None,
        flow_direction: FlowDirection = FlowDirection.LEFT_TO_RIGHT,
        rotation: float = 0.0,
        direction_vector: Optional[Vector3] = None,
    ) -> PlacedMText:
        if width <= 0:
            # Unbounded text: anchor on the laid out extent instead
            local_box = layout.bbox
            width = max(local_box.max_x, 0.0) if local_box is not None else 0.0

        anchor = calculate_anchor_point(width, layout.total_height, attachment_point, flow_direction)
        layout.translate(anchor[0] + position[0], anchor[1] + position[1])

        angle = rotation_angle(rotation, direction_vector)
        if angle:
            origin = (position[0], position[1])
            layout.transform(lambda p: rotate_point(p, angle, origin))

        bbox = layout.bbox
        logger.debug(f"Placed MText at {position} anchor={anchor} rotation={angle:.4f} bbox={bbox}")
        return PlacedMText(layout=layout, position=position, anchor=anchor, rotation=angle, bbox=bbox)
