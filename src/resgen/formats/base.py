"""Output format plug-ins and their registry.

A format turns a complete resource tree into output: OCaml source on a text
stream, or files on disk. Formats are registered by name at import time;
registering a name twice replaces the earlier format.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, TextIO, Tuple

from ..errors import (
    E_SUBFORMAT_PARSE,
    E_UNKNOWN_FORMAT,
    SubFormatError,
    config_error,
)
from ..layout import DEFAULT_RIBBON, Doc, HARDLINE, pretty, text
from ..logging import get_logger
from ..model import Leaf, ResourceNode
from ..registry import Registry
from ..subformats import Decoded, DecodeStatus, SubFormatRegistry, build_registry

__all__ = [
    "FormatOption",
    "RenderContext",
    "Format",
    "FORMATS",
    "WIDTH_OPTION",
    "register",
    "find",
    "formats",
    "error_comment",
]

logger = get_logger("formats")


@dataclass(frozen=True, slots=True)
class FormatOption:
    """A format-specific command-line flag (argparse keyword arguments)."""

    flags: Tuple[str, ...]
    dest: str
    help: str
    kwargs: Dict[str, Any] = field(default_factory=dict)


WIDTH_OPTION = FormatOption(
    ("--width",),
    dest="width",
    help="set the maximum chars per line of generated code (default: 80)",
    kwargs={"type": int, "metavar": "N"},
)


@dataclass(slots=True)
class RenderContext:
    width: int = 80
    use_variants: bool = True
    output_dir: Path = Path(".")
    subformats: SubFormatRegistry = field(default_factory=build_registry)
    strict_subformats: bool = False
    out: Optional[TextIO] = None
    # Called once per leaf as it is rendered (progress reporting).
    on_leaf: Optional[Callable[[Leaf], None]] = None

    @property
    def stream(self) -> TextIO:
        return self.out if self.out is not None else sys.stdout

    def decode(self, leaf: Leaf) -> Decoded:
        """Decode ``leaf`` with its sub-format, if any.

        A parse failure falls back to raw bytes with a warning, or raises
        :class:`SubFormatError` in strict mode.
        """
        decoded = self.subformats.decode(leaf.name, leaf.payload)
        if decoded.status is DecodeStatus.FAILED:
            assert decoded.subformat is not None
            if self.strict_subformats:
                raise SubFormatError(
                    code=E_SUBFORMAT_PARSE,
                    message=f"sub-format '{decoded.subformat.name}' cannot parse "
                    f"'{leaf.name}': {decoded.error}",
                    context={"leaf": leaf.name, "subformat": decoded.subformat.name},
                ) from decoded.error
            logger.warning(
                "sub-format '%s' cannot parse '%s' (%s); embedding raw bytes",
                decoded.subformat.name,
                leaf.name,
                decoded.error,
            )
        return decoded

    def leaf_done(self, leaf: Leaf) -> None:
        if self.on_leaf is not None:
            self.on_leaf(leaf)

    def emit(self, doc: Doc) -> None:
        pretty(doc + HARDLINE, self.width, DEFAULT_RIBBON, self.stream)


class Format(ABC):
    name: str = ""
    #: One-line description for the help page.
    info: str = ""
    options: Tuple[FormatOption, ...] = ()

    @abstractmethod
    def output(self, roots: Sequence[ResourceNode], ctx: RenderContext) -> None:
        """Write the whole tree to the sink described by ``ctx``."""


FORMATS: Registry[Format] = Registry("format")


def register(fmt: Format) -> Format:
    FORMATS.register(fmt.name, fmt)
    return fmt


def find(name: str) -> Format:
    fmt = FORMATS.get(name)
    if fmt is None:
        raise config_error(
            E_UNKNOWN_FORMAT,
            f"Unknown output format '{name}' (available: {', '.join(FORMATS.keys())})",
            {"format": name},
        )
    return fmt


def formats() -> List[Tuple[str, str, Tuple[FormatOption, ...]]]:
    """(name, info, options) for every registered format."""
    return [(name, fmt.info, fmt.options) for name, fmt in FORMATS.entries()]


def error_comment(message: str) -> Doc:
    # OCaml lexes nested comments and string literals inside comments.
    body = (
        " ".join(message.split())
        .replace("(*", "( *")
        .replace("*)", "* )")
        .replace('"', "'")
    )
    return text(f"(* Error: {body} *)")
