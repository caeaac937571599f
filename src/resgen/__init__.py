"""ResGen package

Turns a tree of resource files into OCaml source: static bindings (one
module per directory, one value per file), a single ``OCamlRes`` tree
literal, or a plain copy of the files.

Prefer :mod:`resgen.api` for programmatic use and :mod:`resgen.cli` for the
command line.
"""

from ._version import __version__  # noqa: F401
from .model import Directory, Failure, Leaf, ResourceNode  # noqa: F401

__all__ = ["__version__", "Directory", "Failure", "Leaf", "ResourceNode"]
