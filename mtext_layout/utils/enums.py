"""Common enumerations used across the MText layout modules."""

from __future__ import annotations

from enum import Enum, IntEnum


class ParagraphAlignment(str, Enum):
    """Horizontal paragraph alignment set by ``\\pq`` codes or the entity."""

    DEFAULT = "default"
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    JUSTIFIED = "justified"
    DISTRIBUTED = "distributed"


class FlowDirection(IntEnum):
    """Drawing direction of an MText entity (DXF group code 72)."""

    LEFT_TO_RIGHT = 1
    RIGHT_TO_LEFT = 2
    TOP_TO_BOTTOM = 3
    BOTTOM_TO_TOP = 4
    BY_STYLE = 5


class AttachmentPoint(IntEnum):
    """Corner, edge or center of the text block aligned to the insertion point."""

    TOP_LEFT = 1
    TOP_CENTER = 2
    TOP_RIGHT = 3
    MIDDLE_LEFT = 4
    MIDDLE_CENTER = 5
    MIDDLE_RIGHT = 6
    BOTTOM_LEFT = 7
    BOTTOM_CENTER = 8
    BOTTOM_RIGHT = 9


class GeometryTag(str, Enum):
    """Render batch a piece of geometry belongs to."""

    FILL = "fill"
    STROKE = "stroke"
