"""A whitespace-separated token reader with ``#`` line comments."""

from __future__ import annotations

import io
import math
import re
from typing import IO, Sequence

_INT_PREFIX = re.compile(r"[+-]?\d*")
_INT_FULL = re.compile(r"[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"[+-]?\d*\.?\d*([eE][+-]?\d*)?")
_FLOAT_FULL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

_LENGTH_UNITS = ("m", "cm", "mm", "ft", "in")
_LENGTH_SCALES = (1.0, 0.01, 0.001, 0.3048, 0.0254)

_ANGLE_UNITS = ("rad", "deg")
_ANGLE_SCALES = (1.0, math.pi / 180.0)


class TokenizerError(ValueError):
    """Raised when the input does not hold the expected token."""


class SimpleTokenizer:
    """Reads words and numbers from a text stream, skipping ``#`` comments."""

    def __init__(self, stream: IO[str] | str) -> None:
        self.stream = io.StringIO(stream) if isinstance(stream, str) else stream
        self._pending = ""

    def _peek(self) -> str:
        if not self._pending:
            self._pending = self.stream.read(1)
        return self._pending

    def _get(self) -> str:
        c = self._peek()
        self._pending = ""
        return c

    def _skip_spaces(self) -> None:
        while (c := self._peek()) and c.isspace():
            self._get()

    def _read_word(self) -> str:
        self._skip_spaces()
        chars = []
        while (c := self._peek()) and not c.isspace():
            chars.append(self._get())
        return "".join(chars)

    def consume_whitespace_and_comments(self) -> None:
        """Skip whitespace and comments running from ``#`` to end of line."""
        in_comment = False
        while c := self._peek():
            if in_comment:
                self._get()
                if c == "\n":
                    in_comment = False
            elif c == "#":
                self._get()
                in_comment = True
            elif c.isspace():
                self._get()
            else:
                break

    def parse_literal(self, literal: str) -> None:
        """Read the next word and require it to equal ``literal``."""
        self.consume_whitespace_and_comments()
        if self._read_word() != literal:
            raise TokenizerError(f"expected {literal}")

    def parse_string(self, allow_eof: bool = False) -> str:
        """Read the next word; at end of input return "" if ``allow_eof``."""
        self.consume_whitespace_and_comments()
        word = self._read_word()
        if not word and not allow_eof:
            raise TokenizerError("unexpected EOF")
        return word

    def parse_number(self, kind: type = float) -> int | float:
        """Read the longest prefix that forms a number of type ``kind``."""
        self.consume_whitespace_and_comments()
        self._skip_spaces()
        if kind is int:
            prefix, full = _INT_PREFIX, _INT_FULL
        else:
            prefix, full = _FLOAT_PREFIX, _FLOAT_FULL
        text = ""
        while (c := self._peek()) and prefix.fullmatch(text + c):
            text += self._get()
        if not full.fullmatch(text):
            raise TokenizerError("error parsing number")
        return int(text) if kind is int else kind(text)

    def parse_from_list(self, choices: Sequence[str]) -> int:
        """Read a word and return its position among ``choices``."""
        self.consume_whitespace_and_comments()
        word = self.parse_string(False)
        try:
            return list(choices).index(word)
        except ValueError:
            raise TokenizerError(f"unrecognized item: {word}") from None

    def parse_length_to_meters(self) -> float:
        """Read a number and a unit (m, cm, mm, ft, in); return meters."""
        quantity = self.parse_number(float)
        return quantity * _LENGTH_SCALES[self.parse_from_list(_LENGTH_UNITS)]

    def parse_angle_to_radians(self) -> float:
        """Read a number and a unit (rad, deg); return radians."""
        quantity = self.parse_number(float)
        return quantity * _ANGLE_SCALES[self.parse_from_list(_ANGLE_UNITS)]