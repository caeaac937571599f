"""Single literal: the whole tree as one ``OCamlRes.Res`` value named ``root``.

When leaves of two or more kinds of content occur (raw bytes, JSON, ...),
every leaf content is wrapped in a constructor named after its sub-format:
a polymorphic variant by default, or a constructor of a generated
``content`` sum type when variants are disabled.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from ..escape import escape_bytes, quote_name
from ..layout import EMPTY, HARDLINE, Doc, break_, concat, group, nest, separate, text
from ..model import Directory, Failure, Leaf, ResourceNode, iter_leaves
from ..subformats import Decoded
from .base import (
    WIDTH_OPTION,
    Format,
    FormatOption,
    RenderContext,
    error_comment,
    register,
)


def _constructor(tag: str) -> str:
    return tag[:1].upper() + tag[1:]


class _Renderer:
    def __init__(self, ctx: RenderContext, decoded: Dict[int, Decoded], boxed: bool):
        self.ctx = ctx
        self.decoded = decoded
        self.boxed = boxed

    def prefix(self, tag: str) -> str:
        if not self.boxed:
            return ""
        mark = "`" if self.ctx.use_variants else ""
        return f"{mark}{_constructor(tag)} "

    def entries(self, nodes: Sequence[ResourceNode]) -> Doc:
        # Failures become comments attached to the next entry so that the
        # list separators stay balanced.
        docs: List[Doc] = []
        pending: List[Doc] = []
        for node in nodes:
            if isinstance(node, Failure):
                pending.append(error_comment(node.message))
                continue
            entry = self.node(node)
            docs.append(concat(*(c + break_(1) for c in pending), entry))
            pending = []
        if pending:
            if docs:
                docs[-1] = concat(docs[-1], *(break_(1) + c for c in pending))
            else:
                docs.append(separate(break_(1), pending))
        return separate(text(" ;") + break_(1), docs)

    def node(self, node: ResourceNode) -> Doc:
        if isinstance(node, Directory):
            items = self.entries(node.children)
            return group(
                text(f"Dir ({quote_name(node.name)}, [")
                + nest(2, break_(1) + items)
                + text("])")
            )
        assert isinstance(node, Leaf)
        decoded = self.decoded[id(node)]
        if decoded.parsed:
            assert decoded.subformat is not None
            value = decoded.subformat.render(decoded.value, self.ctx.width)
        else:
            value = escape_bytes(node.payload, self.ctx.width)
        contents = text(self.prefix(decoded.tag)) + value
        self.ctx.leaf_done(node)
        return group(
            text(f"File ({quote_name(node.name)},")
            + nest(2, break_(1) + contents + text(")"))
        )


class OCamlResFormat(Format):
    name = "ocamlres"
    info = "produces the OCaml source representation of the OCamlRes tree"
    options = (
        WIDTH_OPTION,
        FormatOption(
            ("--no-variants",),
            dest="use_variants",
            help="use a plain sum type instead of polymorphic variants",
            kwargs={"action": "store_const", "const": False},
        ),
    )

    def content_types(
        self, roots: Sequence[ResourceNode], ctx: RenderContext
    ) -> tuple[Dict[str, str], Dict[int, Decoded]]:
        """Collect the (tag -> OCaml type) pairs used by the whole tree."""
        tags: Dict[str, str] = {}
        decoded: Dict[int, Decoded] = {}
        for leaf in iter_leaves(roots):
            result = ctx.decode(leaf)
            decoded[id(leaf)] = result
            tags[result.tag] = result.type_name
        return dict(sorted(tags.items())), decoded

    def output(self, roots: Sequence[ResourceNode], ctx: RenderContext) -> None:
        tags, decoded = self.content_types(roots, ctx)
        boxed = len(tags) > 1
        declaration = EMPTY
        if boxed and not ctx.use_variants:
            cases = [text(f"| {_constructor(t)} of {ty}") for t, ty in tags.items()]
            declaration = (
                group(text("type content =") + nest(2, break_(1) + separate(break_(1), cases)))
                + HARDLINE
                + HARDLINE
            )
        items = _Renderer(ctx, decoded, boxed).entries(roots)
        root = text("let root = OCamlRes.Res.([") + nest(2, break_(1) + items) + text("])")
        ctx.emit(declaration + root)


register(OCamlResFormat())
