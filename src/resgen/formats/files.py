"""Reproduce the resource tree as real files under an output directory."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from ..errors import E_SINK_IO, SinkError
from ..logging import get_logger
from ..model import Directory, Failure, ResourceNode
from .base import Format, FormatOption, RenderContext, register

logger = get_logger("formats.files")

_DIR_MODE = 0o750


def safe_child(base: Path, name: str) -> Path:
    """``base / name``, refusing names that would leave ``base``."""
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise SinkError(
            code=E_SINK_IO,
            message=f"refusing to write entry named {name!r} under {base}",
            context={"path": str(base)},
        )
    return base / name


class FilesFormat(Format):
    name = "files"
    info = "reproduces the original files"
    options = (
        FormatOption(
            ("--output-dir",),
            dest="output_dir",
            help='set the base output directory (defaults to ".")',
            kwargs={"type": Path, "metavar": "DIR"},
        ),
    )

    def output(self, roots: Sequence[ResourceNode], ctx: RenderContext) -> None:
        base = Path(ctx.output_dir)
        try:
            if not base.exists():
                logger.info("Creating output directory %s", base)
            base.mkdir(mode=_DIR_MODE, parents=True, exist_ok=True)
            for node in roots:
                self._write(base, node, ctx)
        except OSError as exc:
            raise SinkError(
                code=E_SINK_IO,
                message=f"cannot reproduce files under {base}: {exc}",
                context={"path": str(exc.filename or base)},
            ) from exc

    def _write(self, base: Path, node: ResourceNode, ctx: RenderContext) -> None:
        if isinstance(node, Failure):
            logger.error("Error: %s", node.message)
            return
        target = safe_child(base, node.name)
        if isinstance(node, Directory):
            target.mkdir(mode=_DIR_MODE, exist_ok=True)
            for child in node.children:
                self._write(target, child, ctx)
            return
        logger.debug("Writing %s (%d bytes)", target, len(node.payload))
        target.write_bytes(node.payload)
        ctx.leaf_done(node)


register(FilesFormat())
