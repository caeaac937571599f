"""Build resource trees from the filesystem.

A directory given on the command line contributes its entries as top-level
nodes; a file contributes a single leaf. Entries are sorted by name so the
generated code is stable across platforms. Read errors are recorded as
:class:`~resgen.model.Failure` nodes instead of aborting the scan.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set

import pathspec

from .errors import E_MISSING_INPUT, config_error
from .logging import get_logger
from .model import Directory, Failure, Leaf, ResourceNode

logger = get_logger("scanner")

__all__ = ["Scanner", "scan"]


class Scanner:
    def __init__(
        self, excludes: Sequence[str] = (), include_hidden: bool = False
    ) -> None:
        self.excludes = list(excludes)
        self.include_hidden = include_hidden
        self._exclude_spec: Optional[pathspec.PathSpec] = None
        if self.excludes:
            self._exclude_spec = pathspec.PathSpec.from_lines(
                "gitwildmatch", self.excludes
            )
        self._visited: Set[Path] = set()

    def _excluded(self, rel: str, is_dir: bool) -> bool:
        if self._exclude_spec is None:
            return False
        # Trailing slash lets directory-only patterns ("build/") match.
        return self._exclude_spec.match_file(rel + "/" if is_dir else rel)

    def scan(self, paths: Iterable[str | Path]) -> List[ResourceNode]:
        roots: List[ResourceNode] = []
        for raw in paths:
            path = Path(raw)
            if not path.exists():
                raise config_error(
                    E_MISSING_INPUT,
                    f"Input path does not exist: {path}",
                    {"path": str(path)},
                )
            if path.is_dir():
                logger.info("Scanning directory %s", path)
                roots.extend(self._scan_dir(path, ""))
            else:
                roots.append(self._read_leaf(path, path.name))
        return roots

    def _scan_dir(self, directory: Path, rel: str) -> List[ResourceNode]:
        real = directory.resolve()
        if real in self._visited:
            return [Failure(f"directory cycle at {rel or directory}")]
        self._visited.add(real)
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            logger.warning("Cannot list %s: %s", directory, exc.strerror or exc)
            return [Failure(f"cannot list {rel or directory}: {exc.strerror or exc}")]
        nodes: List[ResourceNode] = []
        try:
            for entry in entries:
                if not self.include_hidden and entry.name.startswith("."):
                    continue
                entry_rel = f"{rel}/{entry.name}" if rel else entry.name
                is_dir = entry.is_dir()
                if self._excluded(entry_rel, is_dir):
                    logger.debug("Excluded %s", entry_rel)
                    continue
                if is_dir:
                    nodes.append(Directory(entry.name, self._scan_dir(entry, entry_rel)))
                else:
                    nodes.append(self._read_leaf(entry, entry_rel))
        finally:
            self._visited.discard(real)
        return nodes

    def _read_leaf(self, path: Path, rel: str) -> ResourceNode:
        try:
            payload = path.read_bytes()
        except OSError as exc:
            logger.warning("Cannot read %s: %s", rel, exc.strerror or exc)
            return Failure(f"cannot read {rel}: {exc.strerror or exc}")
        logger.debug("Read %s (%d bytes)", rel, len(payload))
        return Leaf(path.name, payload)


def scan(
    paths: Iterable[str | Path],
    *,
    exclude: Sequence[str] = (),
    include_hidden: bool = False,
) -> List[ResourceNode]:
    """Scan ``paths`` into an ordered list of top-level resource nodes."""
    return Scanner(exclude, include_hidden).scan(paths)
