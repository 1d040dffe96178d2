"""Tests for fixturekit.workspace."""

from __future__ import annotations

from pathlib import Path

import pytest

from fixturekit.errors import ErrorKind, FixtureError
from fixturekit.fixture import parse_fixture
from fixturekit.workspace import CORE_CRATE, crate_graph, materialize


def test_crate_graph_groups_files_under_their_crate() -> None:
    result = parse_fixture(
        """
        //- /main.rs crate:a deps:b edition:2021
        mod foo;
        //- /foo.rs
        pub fn foo() {}
        //- /lib.rs crate:b cfg:test env:KEY=1
        pub fn b() {}
        """
    )

    crates = crate_graph(result.files)

    assert [crate.name for crate in crates] == ["a", "b"]
    a, b = crates
    assert a.root_file == "/main.rs"
    assert a.files == ["/main.rs", "/foo.rs"]
    assert a.deps == ["b"]
    assert a.edition == "2021"
    assert b.cfg_atoms == ["test"]
    assert b.env == {"KEY": "1"}


def test_files_before_first_crate_form_unnamed_unit() -> None:
    result = parse_fixture("//- /main.rs\n//- /other.rs\n")

    crates = crate_graph(result.files)

    assert len(crates) == 1
    assert crates[0].name is None
    assert crates[0].files == ["/main.rs", "/other.rs"]


def test_crate_graph_rejects_unknown_dependency() -> None:
    result = parse_fixture("//- /main.rs crate:a deps:missing\n")

    with pytest.raises(FixtureError) as excinfo:
        crate_graph(result.files)

    assert excinfo.value.kind is ErrorKind.UNKNOWN_DEPENDENCY
    assert excinfo.value.name == "missing"


def test_crate_graph_rejects_duplicate_crates() -> None:
    result = parse_fixture("//- /a.rs crate:a\n//- /b.rs crate:a\n")

    with pytest.raises(FixtureError) as excinfo:
        crate_graph(result.files)

    assert excinfo.value.kind is ErrorKind.DUPLICATE_CRATE


def test_crate_graph_with_core() -> None:
    result = parse_fixture("//- /main.rs crate:a deps:core\n//- /lib.rs crate:b\n")

    crates = crate_graph(result.files, include_core=True)

    assert [crate.name for crate in crates] == ["a", "b", CORE_CRATE]
    assert crates[0].deps == ["core"]
    assert crates[1].deps == ["core"]
    assert crates[2].root_file == "/core/lib.rs"


def test_materialize_writes_files_and_minicore(tmp_path: Path) -> None:
    result = parse_fixture(
        "//- minicore: option\n//- /main.rs\nfn main() {}\n//- /src/util.rs\npub fn u() {}\n"
    )

    written = materialize(result, tmp_path)

    assert written == [
        tmp_path / "main.rs",
        tmp_path / "src" / "util.rs",
        tmp_path / "core" / "lib.rs",
    ]
    assert (tmp_path / "src" / "util.rs").read_text(encoding="utf-8") == "pub fn u() {}\n"
    assert "pub enum Option" in (tmp_path / "core" / "lib.rs").read_text(encoding="utf-8")


def test_materialize_rejects_escaping_paths(tmp_path: Path) -> None:
    result = parse_fixture("//- /../outside.rs\nx\n")

    with pytest.raises(FixtureError) as excinfo:
        materialize(result, tmp_path / "root")

    assert excinfo.value.kind is ErrorKind.MALFORMED_PATH
