"""Parsing of `//-` annotation lines into file descriptors."""

from __future__ import annotations

from typing import Optional

from .errors import ErrorKind, FixtureError
from .models import FileDescriptor
from .text import split_once

ANNOTATION_MARKER = "//-"


def parse_meta_line(line: str, *, line_index: Optional[int] = None) -> FileDescriptor:
    """Parse one annotation line into a descriptor with an empty body.

    The line looks like::

        //- /lib.rs crate:foo deps:bar,baz cfg:foo=a,bar=b env:OUTDIR=path/to
    """
    if not line.startswith(ANNOTATION_MARKER):
        raise FixtureError(
            ErrorKind.MALFORMED_SETTING,
            "annotation line does not start with `//-`",
            line_index=line_index,
            line=line,
        )
    meta = line[len(ANNOTATION_MARKER):].strip()
    components = meta.split()

    path = components[0] if components else ""
    if not path.startswith("/"):
        raise FixtureError(
            ErrorKind.MALFORMED_PATH,
            f"fixture path does not start with `/`: {path!r}",
            line_index=line_index,
            line=line,
        )

    descriptor = FileDescriptor(path=path)
    for component in components[1:]:
        if component == "new_source_root":
            descriptor.introduces_new_source_root = True
            continue
        pair = split_once(component, ":")
        if pair is None:
            raise FixtureError(
                ErrorKind.MALFORMED_SETTING,
                f"invalid meta line component {component!r}, expected `key:value`",
                line_index=line_index,
                line=line,
            )
        key, value = pair
        _apply_setting(descriptor, key, value, component, line_index, line)
    return descriptor


def _apply_setting(
    descriptor: FileDescriptor,
    key: str,
    value: str,
    component: str,
    line_index: Optional[int],
    line: str,
) -> None:
    if key == "crate":
        descriptor.compilation_unit_name = value
    elif key == "deps":
        descriptor.dependencies = value.split(",")
    elif key == "edition":
        descriptor.edition = value
    elif key == "cfg":
        for entry in value.split(","):
            pair = split_once(entry, "=")
            if pair is None:
                descriptor.cfg_atoms.append(entry)
            else:
                descriptor.cfg_key_values.append(pair)
    elif key == "env":
        for entry in value.split(","):
            pair = split_once(entry, "=")
            # entries without `=` carry no value and are skipped
            if pair is not None:
                descriptor.env[pair[0]] = pair[1]
    elif key == "new_source_root":
        descriptor.introduces_new_source_root = True
    else:
        raise FixtureError(
            ErrorKind.UNKNOWN_SETTING,
            f"bad component: {component!r}",
            line_index=line_index,
            line=line,
            name=key,
        )


__all__ = ["ANNOTATION_MARKER", "parse_meta_line"]
