"""Run configuration: defaults, optional YAML/JSON file, command-line overrides."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .errors import E_BAD_OPTION, E_CONFIG, config_error

__all__ = ["RenderConfig", "load_config", "parse_subformat_spec"]


@dataclass(slots=True)
class RenderConfig:
    format: str = "static"
    width: int = 80
    use_variants: bool = True
    output_dir: Path = Path(".")
    # extension -> sub-format name, on top of the built-in defaults
    subformats: Dict[str, str] = field(default_factory=dict)
    strict_subformats: bool = False
    exclude: List[str] = field(default_factory=list)
    include_hidden: bool = False
    # None writes generated code to stdout
    output: Optional[Path] = None

    def validate(self) -> "RenderConfig":
        if not isinstance(self.width, int) or isinstance(self.width, bool) or self.width < 1:
            raise config_error(
                E_BAD_OPTION,
                f"width must be a positive integer, got {self.width!r}",
                {"width": self.width},
            )
        return self

    def merged(self, **overrides: Any) -> "RenderConfig":
        """Copy with every override that is not None applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        subformats = changes.pop("subformats", None)
        exclude = changes.pop("exclude", None)
        res = dataclasses.replace(self, **changes)
        if subformats:
            res.subformats = {**self.subformats, **subformats}
        if exclude:
            res.exclude = [*self.exclude, *exclude]
        return res


_BOOL_KEYS = {"use_variants", "strict_subformats", "include_hidden"}
_PATH_KEYS = {"output_dir", "output"}


def _coerce(key: str, value: Any, source: Path) -> Any:
    def bad(expected: str) -> Exception:
        return config_error(
            E_CONFIG,
            f"{source}: '{key}' must be {expected}, got {value!r}",
            {"file": str(source), "key": key},
        )

    if key in _BOOL_KEYS:
        if not isinstance(value, bool):
            raise bad("a boolean")
        return value
    if key in _PATH_KEYS:
        if value is None and key == "output":
            return None
        if not isinstance(value, str):
            raise bad("a path string")
        return Path(value)
    if key == "width":
        if not isinstance(value, int) or isinstance(value, bool):
            raise bad("an integer")
        return value
    if key == "format":
        if not isinstance(value, str):
            raise bad("a string")
        return value
    if key == "subformats":
        if not isinstance(value, Mapping) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in value.items()
        ):
            raise bad("a mapping of extension to sub-format name")
        return {k.lower().lstrip("."): v for k, v in value.items()}
    if key == "exclude":
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise bad("a list of patterns")
        return list(value)
    raise bad("a known setting")  # pragma: no cover


def load_config(path: str | Path, base: Optional[RenderConfig] = None) -> RenderConfig:
    """Load a configuration file (YAML or JSON) on top of ``base``.

    Keys may use dashes or underscores (``output-dir`` or ``output_dir``).
    """
    p = Path(path)
    if not p.exists():
        raise config_error(E_CONFIG, f"Configuration file not found: {p}", {"file": str(p)})
    text = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() == ".json":
            data: Any = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise config_error(E_CONFIG, f"{p}: {exc}", {"file": str(p)}) from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise config_error(E_CONFIG, f"{p}: root must be a mapping", {"file": str(p)})

    known = {f.name for f in dataclasses.fields(RenderConfig)}
    values: Dict[str, Any] = {}
    for raw_key, value in data.items():
        key = str(raw_key).replace("-", "_")
        if key not in known:
            raise config_error(
                E_CONFIG, f"{p}: unknown setting '{raw_key}'", {"file": str(p), "key": raw_key}
            )
        values[key] = _coerce(key, value, p)
    config = dataclasses.replace(base or RenderConfig(), **values)
    return config.validate()


def parse_subformat_spec(spec: str) -> tuple[str, str]:
    """Parse ``EXT=NAME`` (``EXT:NAME`` accepted too) from the command line."""
    for sep in ("=", ":"):
        ext, found, name = spec.partition(sep)
        if found:
            ext = ext.strip().lower().lstrip(".")
            name = name.strip()
            if ext and name:
                return ext, name
    raise config_error(
        E_BAD_OPTION,
        f"invalid sub-format mapping '{spec}' (expected EXT=NAME)",
        {"value": spec},
    )
