"""Output formats.

Importing this package registers the built-in formats: ``static``,
``ocamlres`` and ``files``.
"""

from .base import (
    FORMATS,
    Format,
    FormatOption,
    RenderContext,
    find,
    formats,
    register,
)
from .static import StaticFormat
from .ocamlres import OCamlResFormat
from .files import FilesFormat

__all__ = [
    "FORMATS",
    "Format",
    "FormatOption",
    "RenderContext",
    "find",
    "formats",
    "register",
    "StaticFormat",
    "OCamlResFormat",
    "FilesFormat",
]
