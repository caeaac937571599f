"""Resource tree models.

A resource tree is an ordered sequence of top-level nodes; each node is a
:class:`Directory`, a :class:`Leaf` holding raw bytes, or a :class:`Failure`
standing for an entry the scanner could not read.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence, Tuple, Union

__all__ = [
    "Directory",
    "Leaf",
    "Failure",
    "ResourceNode",
    "split_ext",
    "extension",
    "iter_leaves",
    "tree_stats",
]


@dataclass(frozen=True, slots=True)
class Directory:
    name: str
    children: Tuple["ResourceNode", ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))


@dataclass(frozen=True, slots=True)
class Leaf:
    name: str
    payload: bytes = b""


@dataclass(frozen=True, slots=True)
class Failure:
    message: str


ResourceNode = Union[Directory, Leaf, Failure]


def split_ext(name: str) -> Tuple[str, Optional[str]]:
    """Split ``name`` at its final dot: ``"a.b.txt" -> ("a.b", "txt")``."""
    stem, dot, ext = name.rpartition(".")
    if not dot:
        return name, None
    return stem, ext


def extension(name: str) -> Optional[str]:
    """Lower-cased extension of ``name``, or None when it has none."""
    ext = split_ext(name)[1]
    return ext.lower() if ext else None


def iter_leaves(nodes: Iterable[ResourceNode]) -> Iterator[Leaf]:
    stack = [iter(nodes)]
    while stack:
        node = next(stack[-1], None)
        if node is None:
            stack.pop()
        elif isinstance(node, Directory):
            stack.append(iter(node.children))
        elif isinstance(node, Leaf):
            yield node


def tree_stats(nodes: Sequence[ResourceNode]) -> dict[str, int]:
    """Count directories, leaves, failures and payload bytes."""
    stats = {"directories": 0, "leaves": 0, "failures": 0, "bytes": 0}
    stack = list(nodes)
    while stack:
        node = stack.pop()
        if isinstance(node, Directory):
            stats["directories"] += 1
            stack.extend(node.children)
        elif isinstance(node, Leaf):
            stats["leaves"] += 1
            stats["bytes"] += len(node.payload)
        else:
            stats["failures"] += 1
    return stats
