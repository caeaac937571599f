"""Error definitions for ResGen."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

E_UNKNOWN_FORMAT = "E_UNKNOWN_FORMAT"
E_UNKNOWN_SUBFORMAT = "E_UNKNOWN_SUBFORMAT"
E_BAD_OPTION = "E_BAD_OPTION"
E_CONFIG = "E_CONFIG"
E_MISSING_INPUT = "E_MISSING_INPUT"
E_SUBFORMAT_PARSE = "E_SUBFORMAT_PARSE"
E_SINK_IO = "E_SINK_IO"


@dataclass
class ResgenError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class ConfigurationError(ResgenError):
    """Bad format name, option value or configuration file."""


class SubFormatError(ResgenError):
    """A sub-format rejected a payload while strict mode is enabled."""


class SinkError(ResgenError):
    """Writing generated output failed."""


def config_error(
    code: str, message: str, context: Optional[Dict[str, Any]] = None
) -> ConfigurationError:
    return ConfigurationError(code=code, message=message, context=context)


__all__ = [
    "ResgenError",
    "ConfigurationError",
    "SubFormatError",
    "SinkError",
    "config_error",
    "E_UNKNOWN_FORMAT",
    "E_UNKNOWN_SUBFORMAT",
    "E_BAD_OPTION",
    "E_CONFIG",
    "E_MISSING_INPUT",
    "E_SUBFORMAT_PARSE",
    "E_SINK_IO",
]
