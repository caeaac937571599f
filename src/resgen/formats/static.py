"""Static bindings: one OCaml module per directory, one value per file."""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from ..escape import escape_bytes
from ..layout import Doc, break_, group, nest, separate_map, text
from ..logging import get_logger
from ..model import Directory, Failure, Leaf, ResourceNode, split_ext
from ..names import module_name, value_name
from .base import WIDTH_OPTION, Format, RenderContext, error_comment, register

logger = get_logger("formats.static")


def _identifier(node: ResourceNode) -> str | None:
    if isinstance(node, Directory):
        return module_name(node.name)
    if isinstance(node, Leaf):
        return value_name(split_ext(node.name)[0])
    return None


def _warn_collisions(nodes: Sequence[ResourceNode], where: str) -> None:
    counts = Counter(i for i in map(_identifier, nodes) if i is not None)
    for ident, n in counts.items():
        if n > 1:
            # Later definitions shadow earlier ones in the generated module.
            logger.warning(
                "%d entries in %s map to the identifier '%s'", n, where, ident
            )


class StaticFormat(Format):
    name = "static"
    info = "produces static ocaml bindings (modules for dirs, values for files)"
    options = (WIDTH_OPTION,)

    def output(self, roots: Sequence[ResourceNode], ctx: RenderContext) -> None:
        _warn_collisions(roots, "the top level")
        doc = separate_map(break_(1), lambda node: self._node(node, ctx, ""), roots)
        ctx.emit(doc)

    def _node(self, node: ResourceNode, ctx: RenderContext, path: str) -> Doc:
        if isinstance(node, Failure):
            return error_comment(node.message)
        if isinstance(node, Directory):
            return self._directory(node, ctx, f"{path}{node.name}/")
        return self._leaf(node, ctx)

    def _directory(self, node: Directory, ctx: RenderContext, path: str) -> Doc:
        _warn_collisions(node.children, f"'{path}'")
        header = text(f"module {module_name(node.name)} = struct")
        if not node.children:
            return group(header + break_(1) + text("end"))
        body = separate_map(
            break_(1), lambda child: self._node(child, ctx, path), node.children
        )
        return group(header + nest(2, break_(1) + body) + break_(1) + text("end"))

    def _leaf(self, leaf: Leaf, ctx: RenderContext) -> Doc:
        stem = split_ext(leaf.name)[0]
        decoded = ctx.decode(leaf)
        if decoded.parsed:
            assert decoded.subformat is not None
            value = decoded.subformat.render(decoded.value, ctx.width)
        else:
            value = escape_bytes(leaf.payload, ctx.width)
        ctx.leaf_done(leaf)
        return group(text(f"let {value_name(stem)} =") + nest(2, break_(1) + value))


register(StaticFormat())
