"""High-level API: resolve a configuration, scan inputs, render output."""

from __future__ import annotations

import io
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence, TextIO

from .config import RenderConfig
from .errors import E_SINK_IO, SinkError
from .formats import Format, RenderContext, find
from .logging import get_logger, step
from .model import ResourceNode, tree_stats
from .reporting import get_reporter, task
from .scanner import scan
from .subformats import build_registry

__all__ = [
    "RunResult",
    "prepare",
    "render",
    "render_to_string",
    "run",
]

logger = get_logger("api")


@dataclass(slots=True)
class RunResult:
    format: str
    directories: int
    leaves: int
    failures: int
    bytes: int
    output: Optional[Path]


def prepare(config: RenderConfig, out: Optional[TextIO] = None) -> tuple[Format, RenderContext]:
    """Validate ``config`` and resolve the format and sub-formats.

    Every configuration error surfaces here, before any output is written.
    """
    config.validate()
    fmt = find(config.format)
    ctx = RenderContext(
        width=config.width,
        use_variants=config.use_variants,
        output_dir=config.output_dir,
        subformats=build_registry(config.subformats),
        strict_subformats=config.strict_subformats,
        out=out,
    )
    return fmt, ctx


def _render(fmt: Format, ctx: RenderContext, roots: Sequence[ResourceNode]) -> None:
    stats = tree_stats(roots)
    rep = get_reporter()
    ctx.on_leaf = lambda leaf: rep.advance("render", current_item=leaf.name)
    with task("render", f"Render '{fmt.name}'", total=stats["leaves"]) as final:
        try:
            fmt.output(roots, ctx)
            if ctx.out is not None:
                ctx.out.flush()
        except OSError as exc:
            raise SinkError(
                code=E_SINK_IO,
                message=f"writing {fmt.name} output failed: {exc}",
                context={"format": fmt.name},
            ) from exc
        final.update(stats)


def render(
    roots: Sequence[ResourceNode],
    config: Optional[RenderConfig] = None,
    out: Optional[TextIO] = None,
) -> None:
    """Render an already built tree with the configured format."""
    fmt, ctx = prepare(config or RenderConfig(), out)
    _render(fmt, ctx, roots)


def render_to_string(
    roots: Sequence[ResourceNode], config: Optional[RenderConfig] = None
) -> str:
    buf = io.StringIO()
    render(roots, config, buf)
    return buf.getvalue()


def run(paths: Iterable[str | Path], config: RenderConfig) -> RunResult:
    """Scan ``paths`` and render them as described by ``config``."""
    rep = get_reporter()
    with ExitStack() as stack:
        fmt, ctx = prepare(config)
        step(f"format '{fmt.name}', width {ctx.width}")
        with task("scan", "Scan inputs") as final:
            roots = scan(
                paths, exclude=config.exclude, include_hidden=config.include_hidden
            )
            stats = tree_stats(roots)
            final.update(stats)
        if stats["failures"]:
            logger.warning("%d entries could not be read", stats["failures"])
        if config.output is not None and fmt.name != "files":
            try:
                ctx.out = stack.enter_context(
                    open(config.output, "w", encoding="utf-8", newline="\n")
                )
            except OSError as exc:
                raise SinkError(
                    code=E_SINK_IO,
                    message=f"cannot open {config.output}: {exc}",
                    context={"path": str(config.output)},
                ) from exc
        _render(fmt, ctx, roots)
    rep.status(
        f"Render summary: format={fmt.name} leaves={stats['leaves']} "
        f"directories={stats['directories']} failures={stats['failures']} bytes={stats['bytes']}"
    )
    return RunResult(
        format=fmt.name,
        directories=stats["directories"],
        leaves=stats["leaves"],
        failures=stats["failures"],
        bytes=stats["bytes"],
        output=config.output if fmt.name != "files" else config.output_dir,
    )
