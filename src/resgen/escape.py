"""Escaping of raw payloads into OCaml string literals.

Payloads that look like text are rendered character by character, each
character being free to move to a continuation line (``\\`` + newline, the
reader skipping the leading blanks of the next line). Original line feeds
are kept as line boundaries when the literal does not fit on one line.
Anything else is rendered as a block of ``\\xHH`` escapes sized to the
available width.
"""

from __future__ import annotations

from typing import List, Optional

from .layout import (
    HARDLINE,
    Doc,
    column,
    concat,
    group,
    ifflat,
    separate,
    text,
)

__all__ = ["looks_like_text", "escape_bytes", "quote_name", "hex_escape"]

_HEX_DIGITS = "0123456789ABCDEF"

_TAB, _LF, _CR, _SPACE, _QUOTE, _BACKSLASH = 9, 10, 13, 32, 34, 92

# Control characters that do not disqualify a payload from text rendering.
_TEXT_CONTROLS = frozenset((_TAB, _LF, _CR))

_SIMPLE_ESCAPES = {
    _TAB: "\\t",
    _LF: "\\n",
    _CR: "\\r",
    _QUOTE: '\\"',
    _BACKSLASH: "\\\\",
}


def hex_escape(byte: int) -> str:
    return "\\x" + _HEX_DIGITS[byte >> 4] + _HEX_DIGITS[byte & 15]


_HEX = tuple(hex_escape(b) for b in range(256))


def looks_like_text(data: bytes) -> bool:
    """Tell whether ``data`` should be escaped character by character.

    Control bytes other than tab, line feed and carriage return rule text
    rendering out; up to 10% of bytes at or above 128 are tolerated.
    """
    soft = 0
    for byte in data:
        if byte < 32 and byte not in _TEXT_CONTROLS:
            return False
        if byte >= 128:
            soft += 1
    return soft <= len(data) // 10


def _char_escape(byte: int) -> str:
    simple = _SIMPLE_ESCAPES.get(byte)
    if simple is not None:
        return simple
    if byte < 32 or byte >= 128:
        return _HEX[byte]
    return chr(byte)


def _breakable(fmt: str) -> Doc:
    return group(ifflat(text(fmt), text("\\") + HARDLINE + text(" " + fmt)), reserve=1)


_UNITS = tuple(_breakable(_char_escape(b)) for b in range(256))
_SPACE_UNIT = group(ifflat(text(" "), text("\\") + HARDLINE + text("\\ ")), reserve=1)
_BARE_SPACE = text(" ")


def _line_boundary(byte: int, following: Optional[int]) -> Doc:
    # In broken layout the original line feed also ends the output line. A
    # space right after it must not be swallowed as a continuation blank, so
    # the continuation starts with the backslash that escapes it.
    lead = "\\" if following == _SPACE else " "
    return ifflat(
        text(_SIMPLE_ESCAPES[byte]),
        _UNITS[byte] + text("\\") + HARDLINE + text(lead),
    )


def _text_literal(data: bytes) -> Doc:
    units: List[Doc] = []
    last = len(data) - 1
    previous: Optional[int] = None
    for i, byte in enumerate(data):
        following = data[i + 1] if i < last else None
        if byte == _SPACE:
            if previous in (_LF, _CR):
                units.append(_BARE_SPACE)
            else:
                units.append(_SPACE_UNIT)
        elif byte == _CR and following == _LF:
            units.append(_UNITS[byte])
        elif byte in (_LF, _CR):
            units.append(_line_boundary(byte, following))
        else:
            units.append(_UNITS[byte])
        previous = byte
    return group(concat(text('"'), *units, text('"')))


def _hex_literal(data: bytes, width: int) -> Doc:
    def blobs(col: int) -> Doc:
        # Two columns go to the quote or continuation blank and to the
        # trailing backslash or closing quote.
        per_line = max(1, (width - col - 2) // 4)
        lines = []
        for ofs in range(0, len(data), per_line):
            blob = "".join(_HEX[b] for b in data[ofs : ofs + per_line])
            lines.append(text(blob if ofs == 0 else " " + blob))
        return text('"') + separate(text("\\") + HARDLINE, lines) + text('"')

    return column(blobs)


def escape_bytes(data: bytes, width: int) -> Doc:
    """Render ``data`` as a double-quoted literal laid out within ``width``."""
    if looks_like_text(data):
        return _text_literal(data)
    return _hex_literal(data, width)


def quote_name(name: str) -> str:
    """Flat OCaml string literal for a short name (UTF-8 bytes escaped)."""
    return '"' + "".join(_char_escape(b) for b in name.encode("utf-8")) + '"'
