"""
MText tokenizer.

Turns a raw MText string into the token stream consumed by
:class:`mtext_layout.engine.processor.MTextProcessor`. Only the inline codes
the layout engine interprets get typed payloads; any other code is passed on
as a bare :class:`PropertyChange` so the engine can ignore it. Malformed codes
never raise: an argument that cannot be parsed produces a command without
payload.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, List, Set

from ..exceptions import ParsingError
from ..utils.enums import ParagraphAlignment
from .tokens import (
    NBSP,
    FactorValue,
    FontFace,
    ParagraphProperties,
    PropertyChange,
    Token,
)

logger = logging.getLogger(__name__)

# Codes whose argument runs up to the next ';'
_ARGUMENT_CODES = set("CcfFHWTQAp")
_TOGGLE_CODES = {
    "L": ("underline", True),
    "l": ("underline", False),
    "O": ("overline", True),
    "o": ("overline", False),
    "K": ("strike_through", True),
    "k": ("strike_through", False),
}
_SPECIAL_CHARS = {"d": "\u00b0", "p": "\u00b1", "c": "\u00d8", "%": "%"}
_ALIGN_CODES = {
    "l": ParagraphAlignment.LEFT,
    "r": ParagraphAlignment.RIGHT,
    "c": ParagraphAlignment.CENTER,
    "j": ParagraphAlignment.JUSTIFIED,
    "d": ParagraphAlignment.DISTRIBUTED,
    "*": ParagraphAlignment.DEFAULT,
}
_STACK_DIVIDERS = "/#^"
_FONT_PATTERN = re.compile(r"\\[fF](.*?)[;|]")
_FONT_EXTENSION = re.compile(r"\.(ttf|otf|woff|shx)$", re.IGNORECASE)


class MTextTokenizer:
    """Single forward scan over an MText string."""

    def __init__(self, text: str) -> None:
        if not isinstance(text, str):
            raise ParsingError("MText content must be a string", type(text).__name__)
        self.text = text
        self._pos = 0
        self._word: List[str] = []

    def tokenize(self) -> Iterator[Token]:
        text = self.text
        length = len(text)
        while self._pos < length:
            char = text[self._pos]
            if char == "\\":
                yield from self._read_escape()
            elif char == "{":
                yield from self._flush_word()
                self._pos += 1
                yield Token.properties(PropertyChange(command="{"))
            elif char == "}":
                yield from self._flush_word()
                self._pos += 1
                yield Token.properties(PropertyChange(command="}"))
            elif char in " \t":
                yield from self._flush_word()
                self._pos += 1
                yield Token.space()
            elif char == "\n" or char == "\r":
                yield from self._flush_word()
                self._pos += 2 if text.startswith("\r\n", self._pos) else 1
                yield Token.new_paragraph()
            elif char == "%" and text.startswith("%%", self._pos) and self._pos + 2 < length:
                special = _SPECIAL_CHARS.get(text[self._pos + 2].lower())
                if special is not None:
                    self._word.append(special)
                    self._pos += 3
                else:
                    self._word.append(char)
                    self._pos += 1
            else:
                self._word.append(char)
                self._pos += 1
        yield from self._flush_word()

    __iter__ = tokenize

    # ------------------------------------------------------------------
    def _flush_word(self) -> Iterator[Token]:
        if self._word:
            yield Token.word("".join(self._word))
            self._word = []

    def _read_argument(self) -> str:
        end = self.text.find(";", self._pos)
        if end < 0:
            argument = self.text[self._pos:]
            self._pos = len(self.text)
        else:
            argument = self.text[self._pos:end]
            self._pos = end + 1
        return argument

    def _read_stack_argument(self) -> str:
        # Inside a stack '\;' and '\^' etc. are escaped literals.
        chars: List[str] = []
        text = self.text
        while self._pos < len(text):
            char = text[self._pos]
            if char == "\\" and self._pos + 1 < len(text):
                chars.append(text[self._pos:self._pos + 2])
                self._pos += 2
                continue
            self._pos += 1
            if char == ";":
                break
            chars.append(char)
        return "".join(chars)

    def _read_escape(self) -> Iterator[Token]:
        text = self.text
        if self._pos + 1 >= len(text):
            # Lone trailing backslash is literal text
            self._word.append("\\")
            self._pos += 1
            return
        code = text[self._pos + 1]
        self._pos += 2

        if code in "\\{}":
            self._word.append(code)
            return
        if code == "~":
            self._word.append(NBSP)
            return
        if code == "P":
            yield from self._flush_word()
            yield Token.new_paragraph()
            return
        if code == "N":
            # Column break: columns are not laid out, continue as a new paragraph
            yield from self._flush_word()
            yield Token.new_paragraph()
            return

        yield from self._flush_word()
        if code in _TOGGLE_CODES:
            field_name, value = _TOGGLE_CODES[code]
            yield Token.properties(PropertyChange(command=code, **{field_name: value}))
            return
        if code == "S":
            yield from self._stack(self._read_stack_argument())
            return
        if code in _ARGUMENT_CODES:
            argument = self._read_argument()
            yield Token.properties(self._parse_command(code, argument))
            return

        logger.debug(f"Unknown MText code \\{code}")
        yield Token.properties(PropertyChange(command=code))

    def _stack(self, argument: str) -> Iterator[Token]:
        index = _find_divider(argument)
        if index < 0:
            # Not a stack after all, keep the text
            yield Token.word(_unescape(argument))
            return
        numerator = _unescape(argument[:index])
        denominator = _unescape(argument[index + 1:])
        yield Token.stack(numerator, denominator, argument[index])

    def _parse_command(self, code: str, argument: str) -> PropertyChange:
        try:
            if code == "C":
                return PropertyChange(command=code, aci=int(argument.strip()))
            if code == "c":
                value = int(argument.strip()) & 0xFFFFFF
                # MText true colors are stored as BGR
                rgb = (value & 0xFF, (value >> 8) & 0xFF, (value >> 16) & 0xFF)
                return PropertyChange(command=code, rgb=rgb)
            if code in "fF":
                return PropertyChange(command=code, font_face=_parse_font_face(argument))
            if code == "H":
                return PropertyChange(command=code, cap_height=_parse_factor(argument))
            if code == "W":
                return PropertyChange(command=code, width_factor=_parse_factor(argument))
            if code == "T":
                return PropertyChange(command=code, char_tracking_factor=_parse_factor(argument))
            if code == "Q":
                return PropertyChange(command=code, oblique=float(argument.strip()))
            if code == "p":
                return PropertyChange(command=code, paragraph=_parse_paragraph(argument))
        except ValueError:
            logger.debug(f"Malformed argument for \\{code}: {argument!r}")
        return PropertyChange(command=code)


def _parse_factor(argument: str) -> FactorValue:
    argument = argument.strip()
    is_relative = argument.endswith(("x", "X"))
    if is_relative:
        argument = argument[:-1]
    return FactorValue(float(argument), is_relative)


def _parse_font_face(argument: str) -> FontFace:
    parts = argument.split("|")
    family = parts[0].strip()
    bold = italic = False
    for option in parts[1:]:
        option = option.strip()
        if option[:1] == "b":
            bold = option[1:] == "1"
        elif option[:1] == "i":
            italic = option[1:] == "1"
    return FontFace(family=family, bold=bold, italic=italic)


def _parse_paragraph(argument: str) -> ParagraphProperties:
    argument = argument.strip()
    if argument.startswith("x"):
        argument = argument[1:]
    values = {}
    for item in argument.split(","):
        item = item.strip()
        if not item:
            continue
        key, value = item[0], item[1:]
        if key == "q":
            align = _ALIGN_CODES.get(value[:1])
            if align is not None:
                values["align"] = align
        elif key == "i":
            values["indent"] = float(value)
        elif key == "l":
            values["left"] = float(value)
        elif key == "r":
            values["right"] = float(value)
    return ParagraphProperties(**values)


def _find_divider(argument: str) -> int:
    index = 0
    while index < len(argument):
        char = argument[index]
        if char == "\\":
            index += 2
            continue
        if char in _STACK_DIVIDERS:
            return index
        index += 1
    return -1


def _unescape(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value)


def tokenize(text: str) -> Iterator[Token]:
    """Convenience wrapper around :class:`MTextTokenizer`."""
    return MTextTokenizer(text).tokenize()


def get_fonts(text: str, remove_extension: bool = False) -> Set[str]:
    """Lower-case names of all fonts referenced by ``\\f`` / ``\\F`` codes."""
    fonts: Set[str] = set()
    for match in _FONT_PATTERN.finditer(text):
        name = match.group(1).strip().lower()
        if remove_extension:
            name = _FONT_EXTENSION.sub("", name)
        if name:
            fonts.add(name)
    return fonts
