"""Mangling of resource names into OCaml identifiers.

Both functions are pure: distinct names may map to the same identifier and
no attempt is made to disambiguate them here.
"""

from __future__ import annotations

import string

__all__ = ["VOID_VALUE", "VOID_MODULE", "mangle", "value_name", "module_name"]

VOID_VALUE = "void"
VOID_MODULE = "Void"

_IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "_")


def mangle(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_]`` with ``_``."""
    return "".join(c if c in _IDENT_CHARS else "_" for c in name)


def value_name(name: str) -> str:
    """Identifier usable in ``let <name> = ...``."""
    if not name:
        return VOID_VALUE
    res = mangle(name)
    first = res[0]
    if first in string.ascii_uppercase or first in string.digits:
        return "_" + res
    return res


def module_name(name: str) -> str:
    """Identifier usable in ``module <Name> = struct ... end``."""
    if not name:
        return VOID_MODULE
    res = mangle(name)
    first = res[0]
    if first in string.digits:
        return "M_" + res
    if first == "_":
        return "M" + res
    if first in string.ascii_lowercase:
        return first.upper() + res[1:]
    return res
