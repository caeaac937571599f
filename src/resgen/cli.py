"""Command line interface for ResGen."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List

from ._version import __version__
from .api import run
from .config import RenderConfig, load_config, parse_subformat_spec
from .errors import ConfigurationError, ResgenError
from .formats import formats
from .logging import configure_logging
from .reporting import (
    REPORTER_CHOICES,
    get_reporter,
    make_reporter,
    set_reporter,
    set_verbosity,
)
from .subformats import DEFAULT_EXTENSIONS, SUBFORMATS

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="resgen",
        description="Embed files and directories into generated OCaml source",
    )
    p.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Files or directories to embed (directory entries become top-level items)",
    )
    p.add_argument(
        "-f",
        "--format",
        help="Output format (see --list-formats; default: static)",
    )
    p.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write generated code to this file instead of stdout",
    )
    p.add_argument(
        "-c",
        "--config",
        type=Path,
        help="YAML or JSON configuration file (command-line flags take precedence)",
    )
    p.add_argument(
        "-s",
        "--subformat",
        action="append",
        default=[],
        metavar="EXT=NAME",
        help="Decode files with extension EXT using sub-format NAME (repeatable)",
    )
    p.add_argument(
        "--strict-subformats",
        action="store_const",
        const=True,
        help="Fail when a sub-format cannot parse a file instead of embedding raw bytes",
    )
    p.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Skip entries matching this gitignore-style pattern (repeatable)",
    )
    p.add_argument(
        "--include-hidden",
        action="store_const",
        const=True,
        help="Also embed entries whose name starts with a dot",
    )
    p.add_argument(
        "--list-formats",
        action="store_true",
        help="List output formats and sub-formats, then exit",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=REPORTER_CHOICES,
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    p.add_argument("--version", action="version", version=f"resgen {__version__}")

    # Format specific options; shared flags (--width) are declared once.
    seen: set[str] = set()
    for name, info, options in formats():
        fresh = [o for o in options if o.dest not in seen]
        if not fresh:
            continue
        g = p.add_argument_group(f"{name} format options", info)
        for opt in fresh:
            seen.add(opt.dest)
            g.add_argument(*opt.flags, dest=opt.dest, default=None, help=opt.help, **opt.kwargs)
    return p


def _list_formats() -> None:
    out = sys.stdout
    out.write("Output formats:\n")
    for name, info, options in formats():
        out.write(f"  {name:<10} {info}\n")
        for opt in options:
            out.write(f"    {', '.join(opt.flags):<18} {opt.help}\n")
    out.write("Sub-formats:\n")
    defaults: Dict[str, List[str]] = {}
    for ext, sub in DEFAULT_EXTENSIONS.items():
        defaults.setdefault(sub, []).append(ext)
    for name, plugin in SUBFORMATS.entries():
        exts = ", ".join(f".{e}" for e in defaults.get(name, []))
        suffix = f" (default for {exts})" if exts else ""
        out.write(f"  {name:<10} {plugin.type_name}: {plugin.info}{suffix}\n")


def _config_from_args(args: argparse.Namespace) -> RenderConfig:
    config = load_config(args.config) if args.config else RenderConfig()
    subformats = dict(parse_subformat_spec(s) for s in args.subformat)
    return config.merged(
        format=args.format,
        width=args.width,
        use_variants=args.use_variants,
        output_dir=args.output_dir,
        output=args.output,
        subformats=subformats,
        strict_subformats=args.strict_subformats,
        exclude=args.exclude,
        include_hidden=args.include_hidden,
    ).validate()


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    set_reporter(make_reporter(args.reporter))
    set_verbosity(args.verbose)
    configure_logging(args.verbose)

    if args.list_formats:
        _list_formats()
        return EXIT_OK
    if not args.paths:
        parser.error("at least one input path is required")

    rep = get_reporter()
    try:
        config = _config_from_args(args)
        run(args.paths, config)
    except ConfigurationError as exc:
        rep.report_error(exc)
        return EXIT_CONFIG
    except ResgenError as exc:
        rep.report_error(exc)
        return EXIT_FAILURE
    finally:
        rep.flush()
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
