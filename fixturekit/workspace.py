"""Compilation-unit grouping and on-disk materialization of parsed fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import ErrorKind, FixtureError
from .fixture import FixtureResult
from .logging import get_logger
from .models import FileDescriptor

logger = get_logger(__name__)

CORE_CRATE = "core"
CORE_ROOT = "/core/lib.rs"


@dataclass
class CrateInfo:
    """A compilation unit assembled from one or more descriptors."""

    name: Optional[str]
    root_file: str
    deps: List[str] = field(default_factory=list)
    edition: Optional[str] = None
    cfg_atoms: List[str] = field(default_factory=list)
    cfg_key_values: List[Tuple[str, str]] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    files: List[str] = field(default_factory=list)


def crate_graph(files: Sequence[FileDescriptor], *, include_core: bool = False) -> List[CrateInfo]:
    """Group descriptors into compilation units in declaration order.

    A descriptor with `crate:` opens a unit rooted at that file; following
    descriptors without `crate:` join it. Descriptors before the first
    `crate:` form an unnamed unit. With ``include_core`` a `core` unit is
    appended and every other unit depends on it.
    """
    crates: List[CrateInfo] = []
    for descriptor in files:
        name = descriptor.compilation_unit_name
        if name is None and crates:
            crates[-1].files.append(descriptor.path)
            continue
        if name is not None and any(existing.name == name for existing in crates):
            raise FixtureError(
                ErrorKind.DUPLICATE_CRATE,
                f"crate {name!r} is declared more than once",
                name=name,
            )
        crates.append(
            CrateInfo(
                name=name,
                root_file=descriptor.path,
                deps=list(descriptor.dependencies),
                edition=descriptor.edition,
                cfg_atoms=list(descriptor.cfg_atoms),
                cfg_key_values=list(descriptor.cfg_key_values),
                env=dict(descriptor.env),
                files=[descriptor.path],
            )
        )

    declared = {crate.name for crate in crates if crate.name is not None}
    if include_core:
        declared.add(CORE_CRATE)
    for crate in crates:
        for dep in crate.deps:
            if dep not in declared:
                raise FixtureError(
                    ErrorKind.UNKNOWN_DEPENDENCY,
                    f"crate {crate.name!r} depends on undeclared crate {dep!r}",
                    name=dep,
                )

    if include_core:
        for crate in crates:
            if CORE_CRATE not in crate.deps:
                crate.deps.append(CORE_CRATE)
        crates.append(CrateInfo(name=CORE_CRATE, root_file=CORE_ROOT, files=[CORE_ROOT]))
    return crates


def materialize(
    result: FixtureResult,
    root: Path,
    *,
    minicore_resource: Optional[str] = None,
) -> List[Path]:
    """Write every file of ``result`` below ``root`` and return the paths.

    The filtered minicore, when requested, is written to `core/lib.rs`.
    """
    contents: List[Tuple[str, str]] = [(d.path, d.text) for d in result.files]
    if result.minicore is not None:
        contents.append((CORE_ROOT, result.minicore.source_code(minicore_resource)))

    resolved_root = root.resolve()
    written: List[Path] = []
    for relative, text in contents:
        target = root / relative.lstrip("/")
        if not target.resolve().is_relative_to(resolved_root):
            raise FixtureError(
                ErrorKind.MALFORMED_PATH,
                f"fixture path escapes the workspace root: {relative!r}",
                name=relative,
            )
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        written.append(target)
    logger.info("Materialized %d file(s) under %s", len(written), root)
    return written


__all__ = ["CORE_CRATE", "CORE_ROOT", "CrateInfo", "crate_graph", "materialize"]
