"""Multi-file test fixtures described in a single annotated string."""

from .errors import ErrorKind, FixtureError
from .fixture import FixtureAssembler, FixtureResult, parse_fixture
from .meta_line import parse_meta_line
from .minicore import MiniCore, load_minicore_source
from .models import FileDescriptor, FlagState

__all__ = [
    "ErrorKind",
    "FileDescriptor",
    "FixtureAssembler",
    "FixtureError",
    "FixtureResult",
    "FlagState",
    "MiniCore",
    "load_minicore_source",
    "parse_fixture",
    "parse_meta_line",
]
