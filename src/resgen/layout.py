"""Document model and pretty printer used by the output formats.

The vocabulary follows the classic Wadler/Leijen combinators as exposed by
OCaml's PPrint: documents are immutable trees built from text, hard line
breaks, nesting, groups and flat/broken alternatives. A :class:`Group` is
laid out flat when its own content fits on the current line, otherwise
its :func:`ifflat` alternatives take their broken branch.

Rendering never recurses: both the printer and the fitting check walk the
document with an explicit stack of iterators, so documents holding one node
per payload byte can be printed regardless of size.
"""

from __future__ import annotations

import io
import sys
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional, TextIO, Tuple, TypeVar

__all__ = [
    "Doc",
    "Text",
    "HardLine",
    "Concat",
    "Nest",
    "Group",
    "IfFlat",
    "Column",
    "EMPTY",
    "HARDLINE",
    "DEFAULT_RIBBON",
    "text",
    "concat",
    "nest",
    "group",
    "ifflat",
    "column",
    "break_",
    "separate",
    "separate_map",
    "pretty",
    "pretty_string",
]

DEFAULT_RIBBON = 0.8

T = TypeVar("T")


class Doc:
    __slots__ = ()

    def __add__(self, other: "Doc") -> "Doc":
        return concat(self, other)


@dataclass(frozen=True, slots=True)
class Text(Doc):
    # Must not contain line feeds; use HARDLINE instead.
    text: str


@dataclass(frozen=True, slots=True)
class HardLine(Doc):
    pass


@dataclass(frozen=True, slots=True)
class Concat(Doc):
    parts: Tuple[Doc, ...]


@dataclass(frozen=True, slots=True)
class Nest(Doc):
    indent: int
    doc: Doc


@dataclass(frozen=True, slots=True)
class Group(Doc):
    doc: Doc
    # Columns that must stay free after the group when it is laid out flat.
    reserve: int = 0


@dataclass(frozen=True, slots=True)
class IfFlat(Doc):
    flat: Doc
    broken: Doc


@dataclass(frozen=True, slots=True)
class Column(Doc):
    fn: Callable[[int], Doc]


EMPTY: Doc = Concat(())
HARDLINE: Doc = HardLine()


def text(s: str) -> Doc:
    return Text(s) if s else EMPTY


def concat(*docs: Doc) -> Doc:
    parts = tuple(d for d in docs if d is not EMPTY)
    if not parts:
        return EMPTY
    if len(parts) == 1:
        return parts[0]
    return Concat(parts)


def nest(indent: int, doc: Doc) -> Doc:
    return Nest(indent, doc)


def group(doc: Doc, reserve: int = 0) -> Doc:
    return Group(doc, reserve)


def ifflat(flat: Doc, broken: Doc) -> Doc:
    return IfFlat(flat, broken)


def column(fn: Callable[[int], Doc]) -> Doc:
    return Column(fn)


def break_(n: int) -> Doc:
    """``n`` blanks when flat, a line break when broken."""
    return IfFlat(text(" " * n), HARDLINE)


def separate(sep: Doc, docs: Iterable[Doc]) -> Doc:
    parts: List[Doc] = []
    for i, d in enumerate(docs):
        if i:
            parts.append(sep)
        parts.append(d)
    return concat(*parts)


def separate_map(sep: Doc, fn: Callable[[T], Doc], items: Iterable[T]) -> Doc:
    return separate(sep, (fn(item) for item in items))


class _Printer:
    def __init__(self, out: TextIO, width: int, ribbon: float) -> None:
        self.out = out
        self.width = width
        self.ribbon = max(0, min(width, int(ribbon * width)))
        self.column = 0
        self.line_indent = 0
        self._pending = 0

    def _emit(self, s: str) -> None:
        if self._pending:
            self.out.write(" " * self._pending)
            self._pending = 0
        self.out.write(s)
        self.column += len(s)

    def _newline(self, indent: int) -> None:
        self.out.write("\n")
        # Indentation is only written once something follows on the line.
        self._pending = indent
        self.column = indent
        self.line_indent = indent

    def _fits(self, node: Group) -> bool:
        limit = min(self.width, self.line_indent + self.ribbon) - node.reserve
        col = self.column
        stack: List[Iterator[Doc]] = [iter((node.doc,))]
        while stack:
            item = next(stack[-1], None)
            if item is None:
                stack.pop()
            elif isinstance(item, Text):
                col += len(item.text)
                if col > limit:
                    return False
            elif isinstance(item, Concat):
                stack.append(iter(item.parts))
            elif isinstance(item, HardLine):
                return False
            elif isinstance(item, (Nest, Group)):
                stack.append(iter((item.doc,)))
            elif isinstance(item, IfFlat):
                stack.append(iter((item.flat,)))
            elif isinstance(item, Column):
                stack.append(iter((item.fn(col),)))
        return True

    def run(self, doc: Doc) -> None:
        stack: List[Tuple[int, bool, Iterator[Doc]]] = [(0, False, iter((doc,)))]
        while stack:
            indent, flat, items = stack[-1]
            item = next(items, None)
            if item is None:
                stack.pop()
            elif isinstance(item, Text):
                self._emit(item.text)
            elif isinstance(item, Concat):
                stack.append((indent, flat, iter(item.parts)))
            elif isinstance(item, HardLine):
                self._newline(indent)
            elif isinstance(item, Nest):
                stack.append((indent + item.indent, flat, iter((item.doc,))))
            elif isinstance(item, Group):
                stack.append((indent, flat or self._fits(item), iter((item.doc,))))
            elif isinstance(item, IfFlat):
                chosen = item.flat if flat else item.broken
                stack.append((indent, flat, iter((chosen,))))
            elif isinstance(item, Column):
                stack.append((indent, flat, iter((item.fn(self.column),))))
            else:  # pragma: no cover
                raise TypeError(f"not a document: {item!r}")


def pretty(
    doc: Doc,
    width: int = 80,
    ribbon: float = DEFAULT_RIBBON,
    out: Optional[TextIO] = None,
) -> None:
    """Lay ``doc`` out within ``width`` columns and write it to ``out``."""
    _Printer(out if out is not None else sys.stdout, width, ribbon).run(doc)


def pretty_string(doc: Doc, width: int = 80, ribbon: float = DEFAULT_RIBBON) -> str:
    buf = io.StringIO()
    pretty(doc, width, ribbon, buf)
    return buf.getvalue()
