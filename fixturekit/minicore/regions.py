"""Region-gated filtering of the minicore body."""

from __future__ import annotations

from typing import Iterable, List, Set

from ..errors import ErrorKind, FixtureError
from ..logging import get_logger
from ..models import FlagState
from .flags import require_valid_flag

REGION_START = "// region:"
REGION_END = "// endregion:"
INLINE_REGION = "// :"

logger = get_logger(__name__)


class RegionFilter:
    """Keeps body lines whose enclosing regions are all activated.

    Block regions are opened by ``// region:NAME`` and closed by
    ``// endregion:NAME``; ``// :NAME`` gates only the line it sits on.
    Marker lines themselves are never emitted.
    """

    def __init__(self, state: FlagState) -> None:
        self._state = state

    def filter(self, lines: Iterable[str], *, start: int = 0) -> str:
        """Return the kept lines joined; ``start`` offsets reported line indices."""
        stack: List[str] = []
        seen: Set[str] = set()
        output: List[str] = []
        dropped = 0

        for index, line in enumerate(lines, start):
            trimmed = line.strip()
            if trimmed.startswith(REGION_START):
                stack.append(trimmed[len(REGION_START):])
                continue
            if trimmed.startswith(REGION_END):
                self._close_region(stack, trimmed[len(REGION_END):], index, line)
                continue

            inline = trimmed.find(INLINE_REGION)
            if inline != -1:
                stack.append(trimmed[inline + len(INLINE_REGION):])

            keep = True
            for region in stack:
                self._check_region(region, index, line)
                seen.add(region)
                keep = keep and self._state.has_flag(region)

            if keep:
                output.append(line)
            else:
                dropped += 1
            if inline != -1:
                stack.pop()

        if stack:
            raise FixtureError(
                ErrorKind.UNBALANCED_REGION,
                f"regions left open at end of input: {stack}",
                name=stack[-1],
            )

        for flag in self._state.valid_flags:
            if flag not in seen:
                raise FixtureError(
                    ErrorKind.UNUSED_FLAG,
                    f"unused minicore flag: {flag!r}",
                    name=flag,
                )

        logger.debug("Region filter kept %d lines, dropped %d", len(output), dropped)
        return "".join(output)

    def _close_region(self, stack: List[str], region: str, index: int, line: str) -> None:
        if not stack:
            raise FixtureError(
                ErrorKind.UNBALANCED_REGION,
                f"endregion {region!r} has no matching region",
                line_index=index,
                line=line,
                name=region,
            )
        opened = stack.pop()
        if opened != region:
            raise FixtureError(
                ErrorKind.UNBALANCED_REGION,
                f"endregion {region!r} closes region {opened!r}",
                line_index=index,
                line=line,
                name=region,
            )

    def _check_region(self, region: str, index: int, line: str) -> None:
        if region[:1].isspace():
            raise FixtureError(
                ErrorKind.REGION_WHITESPACE,
                f"region marker starts with whitespace: {region!r}",
                line_index=index,
                line=line,
                name=region,
            )
        require_valid_flag(self._state, region, line_index=index, line=line)


__all__ = ["INLINE_REGION", "REGION_END", "REGION_START", "RegionFilter"]
