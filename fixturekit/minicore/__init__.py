"""Flag-gated subset of `core` that fixtures can pull in with `//- minicore:`."""

from __future__ import annotations

from importlib import resources
from typing import List, Optional, Sequence

from ..logging import get_logger
from .flags import (
    MINICORE_MARKER,
    FlagGraph,
    build_flag_graph,
    closed_flag_state,
    parse_flag_declaration,
    resolve_closure,
)
from .regions import RegionFilter

logger = get_logger(__name__)

_RESOURCE_NAME = "minicore.rs"


def load_minicore_source() -> str:
    """Return the bundled minicore resource text."""
    return resources.files(__name__).joinpath(_RESOURCE_NAME).read_text(encoding="utf-8")


class MiniCore:
    """Flags requested by a fixture's `//- minicore:` line."""

    def __init__(self, activated_flags: Sequence[str]) -> None:
        self.activated_flags: List[str] = list(activated_flags)

    @classmethod
    def parse(cls, line: str) -> "MiniCore":
        return cls(parse_flag_declaration(line))

    def source_code(self, resource: Optional[str] = None) -> str:
        """Strip the parts of ``resource`` flagged by inactive flags.

        Uses the bundled minicore when ``resource`` is omitted. The flags on
        this object are left untouched; closure runs on a copy.
        """
        if resource is None:
            resource = load_minicore_source()
        graph = build_flag_graph(resource)
        state = closed_flag_state(self.activated_flags, graph)
        logger.debug(
            "minicore: %d valid flags, %d active after closure",
            len(state.valid_flags),
            len(state.activated_flags),
        )
        return RegionFilter(state).filter(graph.body, start=graph.body_start)

    def __repr__(self) -> str:
        return f"MiniCore(activated_flags={self.activated_flags!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MiniCore):
            return NotImplemented
        return self.activated_flags == other.activated_flags


__all__ = [
    "FlagGraph",
    "MINICORE_MARKER",
    "MiniCore",
    "RegionFilter",
    "build_flag_graph",
    "load_minicore_source",
    "parse_flag_declaration",
    "resolve_closure",
]
