"""Token types produced by the MText tokenizer and consumed by the layout engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, List, Optional, Tuple, Union

from ..utils.enums import ParagraphAlignment

# Non-breaking space (\~): advances like a blank but never splits a word
NBSP = "\u00a0"


class TokenType(IntEnum):
    NONE = 0
    WORD = 1
    STACK = 2
    SPACE = 3
    NEW_PARAGRAPH = 4
    PROPERTIES_CHANGED = 5


@dataclass(frozen=True)
class FactorValue:
    """Numeric code argument; ``is_relative`` marks the ``x`` suffix (``\\H2x;``)."""

    value: float
    is_relative: bool = False


@dataclass(frozen=True)
class FontFace:
    family: str
    bold: bool = False
    italic: bool = False


@dataclass(frozen=True)
class ParagraphProperties:
    """Values of one ``\\p...;`` code; ``None`` leaves the property untouched."""

    align: Optional[ParagraphAlignment] = None
    indent: Optional[float] = None
    left: Optional[float] = None
    right: Optional[float] = None


@dataclass(frozen=True)
class PropertyChange:
    """One inline formatting command and its typed payload."""

    command: str
    font_face: Optional[FontFace] = None
    aci: Optional[int] = None
    rgb: Optional[Tuple[int, int, int]] = None
    width_factor: Optional[FactorValue] = None
    cap_height: Optional[FactorValue] = None
    char_tracking_factor: Optional[FactorValue] = None
    oblique: Optional[float] = None
    underline: Optional[bool] = None
    overline: Optional[bool] = None
    strike_through: Optional[bool] = None
    paragraph: Optional[ParagraphProperties] = None


@dataclass(frozen=True)
class StackData:
    numerator: str
    denominator: str
    divider: str


TokenData = Union[str, List[str], PropertyChange, StackData, None]


@dataclass(frozen=True)
class Token:
    type: TokenType
    data: Any = None

    @classmethod
    def word(cls, text: Union[str, List[str]]) -> "Token":
        return cls(TokenType.WORD, text)

    @classmethod
    def space(cls) -> "Token":
        return cls(TokenType.SPACE)

    @classmethod
    def new_paragraph(cls) -> "Token":
        return cls(TokenType.NEW_PARAGRAPH)

    @classmethod
    def stack(cls, numerator: str, denominator: str, divider: str) -> "Token":
        return cls(TokenType.STACK, StackData(numerator, denominator, divider))

    @classmethod
    def properties(cls, change: PropertyChange) -> "Token":
        return cls(TokenType.PROPERTIES_CHANGED, change)
