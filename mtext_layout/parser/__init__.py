"""MText tokenizer and the token types it produces."""

from .tokenizer import MTextTokenizer, get_fonts, tokenize
from .tokens import (
    FactorValue,
    FontFace,
    ParagraphProperties,
    PropertyChange,
    StackData,
    Token,
    TokenType,
)

__all__ = [
    "MTextTokenizer",
    "get_fonts",
    "tokenize",
    "FactorValue",
    "FontFace",
    "ParagraphProperties",
    "PropertyChange",
    "StackData",
    "Token",
    "TokenType",
]
