"""Sub-formats: structured decoders for leaves, selected by file extension.

A sub-format parses the bytes of a leaf into a value and renders that value
as an OCaml expression. The catalog (:data:`SUBFORMATS`) maps sub-format
names to plugins; a :class:`SubFormatRegistry` maps lower-cased extensions
to the plugins actually used for a run.

Decoding is tri-state (:class:`DecodeStatus`): no plugin for the leaf,
plugin failed to parse it, or plugin parsed it. The first two fall back to
raw bytes; callers decide how loudly a failure is reported.
"""

from __future__ import annotations

import json
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple

import yaml

from .errors import E_UNKNOWN_SUBFORMAT, config_error
from .escape import escape_bytes, quote_name
from .layout import Doc, break_, group, nest, separate, separate_map, text
from .model import extension
from .registry import Registry

__all__ = [
    "SubFormat",
    "RawSubFormat",
    "IntSubFormat",
    "LinesSubFormat",
    "JsonSubFormat",
    "YamlSubFormat",
    "DecodeStatus",
    "Decoded",
    "SubFormatRegistry",
    "SUBFORMATS",
    "DEFAULT_EXTENSIONS",
    "RAW",
    "build_registry",
]

# OCaml native ints are 63-bit.
_OCAML_MAX_INT = 2**62 - 1
_OCAML_MIN_INT = -(2**62)


class SubFormat(ABC):
    #: Tag used as constructor label in the single-literal output.
    name: str = ""
    #: OCaml type of the rendered value.
    type_name: str = ""
    info: str = ""

    @abstractmethod
    def parse(self, data: bytes) -> Any:
        """Decode ``data``; raise any exception when it is malformed."""

    @abstractmethod
    def render(self, value: Any, width: int) -> Doc:
        """Render a value previously returned by :meth:`parse`."""


def _int_literal(n: int) -> str:
    return f"({n})" if n < 0 else str(n)


class RawSubFormat(SubFormat):
    name = "raw"
    type_name = "string"
    info = "raw bytes as a string literal"

    def parse(self, data: bytes) -> bytes:
        return data

    def render(self, value: bytes, width: int) -> Doc:
        return escape_bytes(value, width)


class IntSubFormat(SubFormat):
    name = "int"
    type_name = "int"
    info = "a decimal integer"

    def parse(self, data: bytes) -> int:
        value = int(data.decode("ascii").strip())
        if not _OCAML_MIN_INT <= value <= _OCAML_MAX_INT:
            raise ValueError(f"{value} does not fit in an OCaml int")
        return value

    def render(self, value: int, width: int) -> Doc:
        return text(_int_literal(value))


class LinesSubFormat(SubFormat):
    name = "lines"
    type_name = "string list"
    info = "one string per line (a final line feed ends the last line)"

    def parse(self, data: bytes) -> list[bytes]:
        if not data:
            return []
        lines = data.split(b"\n")
        if not lines[-1]:
            lines.pop()
        return lines

    def render(self, value: list[bytes], width: int) -> Doc:
        items = separate_map(
            text(";") + break_(1), lambda line: escape_bytes(line, width), value
        )
        return group(text("[") + nest(2, break_(0) + items) + break_(0) + text("]"))


def _float_literal(x: float) -> str:
    if math.isnan(x):
        return "nan"
    if math.isinf(x):
        return "infinity" if x > 0 else "neg_infinity"
    literal = repr(x)
    if "." not in literal and "e" not in literal:
        literal += "."
    # -0.0 needs parentheses too.
    return f"({literal})" if math.copysign(1.0, x) < 0 else literal


def _yojson_scalar(value: Any, width: int) -> Doc:
    if value is None:
        return text("`Null")
    if isinstance(value, bool):
        return text("`Bool true" if value else "`Bool false")
    if isinstance(value, int):
        if _OCAML_MIN_INT <= value <= _OCAML_MAX_INT:
            return text("`Int " + _int_literal(value))
        return text("`Intlit " + quote_name(str(value)))
    if isinstance(value, float):
        return text("`Float " + _float_literal(value))
    if isinstance(value, str):
        return text("`String ") + escape_bytes(value.encode("utf-8"), width)
    if isinstance(value, (bytes, bytearray)):
        # YAML !!binary scalars.
        return text("`String ") + escape_bytes(bytes(value), width)
    # YAML timestamps and the like.
    return text("`String " + quote_name(str(value)))


_ITEM_SEP = text(";") + break_(1)


def _yojson_container(container: Any, items: List[Doc]) -> Doc:
    if isinstance(container, Mapping):
        fields = [
            group(text("(" + quote_name(str(key)) + ",") + nest(2, break_(1) + item) + text(")"))
            for key, item in zip(container.keys(), items)
        ]
        head, body = "`Assoc [", separate(_ITEM_SEP, fields)
    else:
        head, body = "`List [", separate(_ITEM_SEP, items)
    return group(text(head) + nest(2, break_(0) + body) + break_(0) + text("]"))


def _is_container(value: Any) -> bool:
    return isinstance(value, (list, tuple, Mapping))


_END = object()


def _children(container: Any) -> Iterable[Any]:
    return container.values() if isinstance(container, Mapping) else container


def _yojson(value: Any, width: int) -> Doc:
    """Render a decoded JSON-like value as a ``Yojson.Safe.t`` expression.

    Nesting depth is bounded only by the parser: containers are walked with
    an explicit stack and assembled once all of their items are rendered.
    """
    if not _is_container(value):
        return _yojson_scalar(value, width)
    result: List[Doc] = []
    # (container, pending children, rendered children)
    stack: List[Tuple[Any, Iterator[Any], List[Doc]]] = [
        (value, iter(_children(value)), [])
    ]
    while stack:
        container, children, rendered = stack[-1]
        child = next(children, _END)
        if child is _END:
            stack.pop()
            doc = _yojson_container(container, rendered)
            (stack[-1][2] if stack else result).append(doc)
        elif _is_container(child):
            stack.append((child, iter(_children(child)), []))
        else:
            rendered.append(_yojson_scalar(child, width))
    return result[0]



class JsonSubFormat(SubFormat):
    name = "json"
    type_name = "Yojson.Safe.t"
    info = "a JSON document as a Yojson value"

    def parse(self, data: bytes) -> Any:
        return json.loads(data)

    def render(self, value: Any, width: int) -> Doc:
        return _yojson(value, width)


class YamlSubFormat(JsonSubFormat):
    name = "yaml"
    info = "a YAML document as a Yojson value"

    def parse(self, data: bytes) -> Any:
        return yaml.safe_load(data)


class DecodeStatus(Enum):
    NOT_FOUND = auto()
    FAILED = auto()
    PARSED = auto()


@dataclass(frozen=True, slots=True)
class Decoded:
    status: DecodeStatus
    subformat: Optional[SubFormat] = None
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def parsed(self) -> bool:
        return self.status is DecodeStatus.PARSED

    @property
    def tag(self) -> str:
        return self.subformat.name if self.parsed else RAW.name  # type: ignore[union-attr]

    @property
    def type_name(self) -> str:
        return self.subformat.type_name if self.parsed else RAW.type_name  # type: ignore[union-attr]


class SubFormatRegistry(Registry[SubFormat]):
    """Extension -> sub-format mapping used while rendering."""

    def __init__(self) -> None:
        super().__init__("sub-format extension")

    def lookup(self, name: str) -> Optional[SubFormat]:
        ext = extension(name)
        return self.get(ext) if ext else None

    def decode(self, name: str, data: bytes) -> Decoded:
        plugin = self.lookup(name)
        if plugin is None:
            return Decoded(DecodeStatus.NOT_FOUND)
        try:
            value = plugin.parse(data)
        except Exception as exc:
            return Decoded(DecodeStatus.FAILED, plugin, error=exc)
        return Decoded(DecodeStatus.PARSED, plugin, value)


RAW = RawSubFormat()

SUBFORMATS: Registry[SubFormat] = Registry("sub-format")
for _plugin in (RAW, IntSubFormat(), LinesSubFormat(), JsonSubFormat(), YamlSubFormat()):
    SUBFORMATS.register(_plugin.name, _plugin)
del _plugin

DEFAULT_EXTENSIONS: Mapping[str, str] = {"json": "json", "yaml": "yaml", "yml": "yaml"}


def build_registry(overrides: Optional[Mapping[str, str]] = None) -> SubFormatRegistry:
    """Registry with the default mapping plus ``overrides`` (ext -> name)."""
    registry = SubFormatRegistry()
    mapping = dict(DEFAULT_EXTENSIONS)
    for ext, sub_name in (overrides or {}).items():
        mapping[ext.lower().lstrip(".")] = sub_name
    for ext, sub_name in mapping.items():
        if sub_name not in SUBFORMATS:
            raise config_error(
                E_UNKNOWN_SUBFORMAT,
                f"Unknown sub-format '{sub_name}' for extension '{ext}' "
                f"(available: {', '.join(SUBFORMATS)})",
                {"extension": ext, "subformat": sub_name},
            )
        registry.register(ext, SUBFORMATS.find(sub_name))
    return registry
