"""Error types raised while parsing fixtures and filtering minicore."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Enumerates every way a fixture or minicore parse can fail."""

    MALFORMED_PATH = "malformed_path"
    INVALID_INDENTATION = "invalid_indentation"
    SUSPICIOUS_METADATA = "suspicious_metadata"
    UNKNOWN_SETTING = "unknown_setting"
    MALFORMED_SETTING = "malformed_setting"
    DUPLICATE_FLAG = "duplicate_flag"
    INVALID_FLAG = "invalid_flag"
    FORWARD_DEPENDENCY = "forward_dependency"
    MALFORMED_PREAMBLE = "malformed_preamble"
    UNBALANCED_REGION = "unbalanced_region"
    REGION_WHITESPACE = "region_whitespace"
    UNUSED_FLAG = "unused_flag"
    UNKNOWN_DEPENDENCY = "unknown_dependency"
    DUPLICATE_CRATE = "duplicate_crate"


class FixtureError(ValueError):
    """Raised when a fixture or reference resource is malformed.

    ``line_index`` and ``line`` locate the offending source line when one
    exists; ``name`` carries the offending flag, region or crate name.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        line_index: Optional[int] = None,
        line: Optional[str] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.line_index = line_index
        self.line = line
        self.name = name

    def __str__(self) -> str:
        message = super().__str__()
        if self.line_index is not None and self.line is not None:
            return f"{message} (line {self.line_index}: {self.line!r})"
        return message


__all__ = ["ErrorKind", "FixtureError"]
