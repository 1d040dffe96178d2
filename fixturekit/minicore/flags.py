"""Flag declaration parsing, flag graph extraction and closure."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..errors import ErrorKind, FixtureError
from ..logging import get_logger
from ..models import FlagState
from ..text import lines_with_ends

MINICORE_MARKER = "//- minicore:"
DOC_MARKER = "//!"
FLAGS_SENTINEL = "Available flags:"

logger = get_logger(__name__)


@dataclass
class FlagGraph:
    """Flag universe and implication edges read from a resource preamble."""

    valid_flags: List[str]
    implications: List[Tuple[str, str]]
    body: List[str]
    body_start: int = 0


def parse_flag_declaration(line: str) -> List[str]:
    """Return the flags listed on a `//- minicore: a, b` line in order."""
    declared = line.strip()
    if declared.startswith(MINICORE_MARKER):
        declared = declared[len(MINICORE_MARKER):]
    declared = declared.strip()

    flags: List[str] = []
    for entry in declared.split(", "):
        if any(existing == entry for existing in flags):
            raise FixtureError(
                ErrorKind.DUPLICATE_FLAG,
                f"duplicate minicore flag: {entry!r}",
                line_index=0,
                line=line,
                name=entry,
            )
        flags.append(entry)
    return flags


def build_flag_graph(resource: str) -> FlagGraph:
    """Read the `//!` preamble of ``resource`` into a flag graph.

    Declarations follow the ``Available flags:`` sentinel, one per line, as
    ``flag`` or ``flag: dep1, dep2``. A dependency must be declared on an
    earlier line. The lines after the preamble are returned as ``body``.
    """
    lines = lines_with_ends(resource)
    declarations: List[Tuple[int, str, List[str]]] = []
    parsing_flags = False
    index = 0
    while index < len(lines):
        line = lines[index]
        if not line.startswith(DOC_MARKER):
            if line.strip():
                raise FixtureError(
                    ErrorKind.MALFORMED_PREAMBLE,
                    "the `//!` preamble must be followed by a blank line",
                    line_index=index,
                    line=line,
                )
            index += 1
            break
        content = line[len(DOC_MARKER):]
        if parsing_flags:
            flag, _, deps = content.partition(":")
            flag = flag.strip()
            if flag:
                dependencies = [dep.strip() for dep in deps.split(", ") if dep.strip()]
                declarations.append((index, flag, dependencies))
        if FLAGS_SENTINEL in content:
            parsing_flags = True
        index += 1

    declared_anywhere = {flag for _, flag, _ in declarations}
    valid_flags: List[str] = []
    implications: List[Tuple[str, str]] = []
    for line_index, flag, dependencies in declarations:
        valid_flags.append(flag)
        for dep in dependencies:
            if not any(existing == dep for existing in valid_flags):
                kind = ErrorKind.FORWARD_DEPENDENCY if dep in declared_anywhere else ErrorKind.INVALID_FLAG
                raise FixtureError(
                    kind,
                    f"flag {flag!r} depends on {dep!r}, which is not declared before it; "
                    f"valid flags: {valid_flags}",
                    line_index=line_index,
                    line=lines[line_index],
                    name=dep,
                )
            implications.append((flag, dep))

    return FlagGraph(
        valid_flags=valid_flags,
        implications=implications,
        body=lines[index:],
        body_start=index,
    )


def resolve_closure(state: FlagState) -> FlagState:
    """Activate every flag implied by an already active one, in place.

    Every initially activated flag must be valid. Edges are rescanned until
    a full pass adds nothing.
    """
    for flag in state.activated_flags:
        require_valid_flag(state, flag)

    added: List[str] = []
    changed = True
    while changed:
        changed = False
        for flag, dependency in state.implications:
            if state.has_flag(flag) and not state.has_flag(dependency):
                state.activated_flags.append(dependency)
                added.append(dependency)
                changed = True

    if added:
        logger.debug("Flags activated by implication: %s", ", ".join(added))
    return state


def require_valid_flag(
    state: FlagState,
    flag: str,
    *,
    line_index: Optional[int] = None,
    line: Optional[str] = None,
) -> None:
    if not state.is_valid(flag):
        raise FixtureError(
            ErrorKind.INVALID_FLAG,
            f"invalid flag: {flag!r}, valid flags: {state.valid_flags}",
            line_index=line_index,
            line=line,
            name=flag,
        )


def closed_flag_state(activated: Iterable[str], graph: FlagGraph) -> FlagState:
    state = FlagState(
        activated_flags=list(activated),
        valid_flags=list(graph.valid_flags),
        implications=list(graph.implications),
    )
    return resolve_closure(state)


__all__ = [
    "FlagGraph",
    "MINICORE_MARKER",
    "build_flag_graph",
    "closed_flag_state",
    "parse_flag_declaration",
    "require_valid_flag",
    "resolve_closure",
]
