"""Parsing of multi-file fixtures.

A fixture is a single string describing a small workspace. A fixture
without metadata is parsed into a single file at the default path::

    fn main() {
        println!("Hello World")
    }

Metadata follows a `//-` comment. The first component names the file,
which is also how several files are described in one fixture::

    //- /main.rs crate:a deps:b
    fn main() {
        b::foo();
    }
    //- /lib.rs crate:b
    pub fn foo() {}

Supported settings are `crate:name`, `deps:dep1,dep2`, `edition:2021`,
`cfg:atom,key=value`, `env:KEY=value` and the bare `new_source_root`.

A fixture may start with a `//- minicore: flag1, flag2` line, which
requests the matching subset of the bundled minicore.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config import DEFAULT_PATH, FixtureKitConfig
from .errors import ErrorKind, FixtureError
from .logging import get_logger
from .meta_line import ANNOTATION_MARKER, parse_meta_line
from .minicore import MINICORE_MARKER, MiniCore
from .models import FileDescriptor
from .text import lines_with_ends, trim_indent

logger = get_logger(__name__)

LINT_ERROR = "error"
LINT_WARN = "warn"
LINT_OFF = "off"


@dataclass
class FixtureResult:
    """Outcome of parsing a fixture: optional minicore request plus files."""

    minicore: Optional[MiniCore] = None
    files: List[FileDescriptor] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minicore": None if self.minicore is None else list(self.minicore.activated_flags),
            "files": [descriptor.to_dict() for descriptor in self.files],
        }


class FixtureAssembler:
    """Splits an annotated fixture into file descriptors."""

    def __init__(self, *, default_path: str = DEFAULT_PATH, metadata_lint: str = LINT_ERROR) -> None:
        self.default_path = default_path
        self.metadata_lint = metadata_lint

    @classmethod
    def from_config(cls, config: FixtureKitConfig) -> "FixtureAssembler":
        return cls(default_path=config.default_path, metadata_lint=config.metadata_lint)

    def parse(self, text: str) -> FixtureResult:
        fixture = trim_indent(text)
        result = FixtureResult()

        if fixture.startswith(MINICORE_MARKER):
            first_line = fixture.split("\n", 1)[0] + "\n"
            result.minicore = MiniCore.parse(first_line)
            fixture = fixture[len(first_line):]

        lines = lines_with_ends(fixture)
        if ANNOTATION_MARKER not in fixture:
            logger.debug("No metadata found, using implicit path %s", self.default_path)
            lines.insert(0, f"{ANNOTATION_MARKER} {self.default_path}")

        for index, line in enumerate(lines):
            if ANNOTATION_MARKER in line and not line.startswith(ANNOTATION_MARKER):
                raise FixtureError(
                    ErrorKind.INVALID_INDENTATION,
                    f"Metadata line {index} has invalid indentation. "
                    "All metadata lines need to have the same indentation.",
                    line_index=index,
                    line=line,
                )

            if line.startswith(ANNOTATION_MARKER):
                result.files.append(parse_meta_line(line, line_index=index))
                continue

            self._check_suspicious(line, index)
            if result.files:
                result.files[-1].text += line

        logger.debug("Parsed fixture into %d file(s)", len(result.files))
        return result

    def _check_suspicious(self, line: str, index: int) -> None:
        if self.metadata_lint == LINT_OFF or not looks_like_metadata(line):
            return
        if self.metadata_lint == LINT_WARN:
            logger.warning("Line %d looks like an unmarked metadata line: %r", index, line)
            return
        raise FixtureError(
            ErrorKind.SUSPICIOUS_METADATA,
            "looks like invalid metadata line, did you mean `//-`?",
            line_index=index,
            line=line,
        )


def looks_like_metadata(line: str) -> bool:
    """Best-effort check for a `// path key:value` line missing its `-`."""
    return (
        line.startswith("// ")
        and ":" in line
        and "::" not in line
        and not any(char.isupper() for char in line)
    )


def parse_fixture(text: str, *, config: Optional[FixtureKitConfig] = None) -> FixtureResult:
    """Parse ``text`` with default settings, or those of ``config``."""
    assembler = FixtureAssembler.from_config(config) if config is not None else FixtureAssembler()
    return assembler.parse(text)


__all__ = ["FixtureAssembler", "FixtureResult", "looks_like_metadata", "parse_fixture"]
