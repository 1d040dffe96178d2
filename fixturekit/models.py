"""Core data models shared across fixturekit components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class FileDescriptor:
    """One file of the synthesized workspace together with its settings."""

    path: str
    text: str = ""
    compilation_unit_name: Optional[str] = None
    dependencies: List[str] = field(default_factory=list)
    edition: Optional[str] = None
    cfg_atoms: List[str] = field(default_factory=list)
    cfg_key_values: List[Tuple[str, str]] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    introduces_new_source_root: bool = False

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["cfg_key_values"] = [list(pair) for pair in self.cfg_key_values]
        return payload


@dataclass
class FlagState:
    """Flag universe and activation state for one minicore inclusion."""

    activated_flags: List[str] = field(default_factory=list)
    valid_flags: List[str] = field(default_factory=list)
    implications: List[Tuple[str, str]] = field(default_factory=list)

    def has_flag(self, flag: str) -> bool:
        return any(existing == flag for existing in self.activated_flags)

    def is_valid(self, flag: str) -> bool:
        return any(existing == flag for existing in self.valid_flags)


__all__ = ["FileDescriptor", "FlagState"]
