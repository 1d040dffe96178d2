"""Tests for fixturekit.fixture."""

from __future__ import annotations

import logging

import pytest

from fixturekit.config import FixtureKitConfig
from fixturekit.errors import ErrorKind, FixtureError
from fixturekit.fixture import FixtureAssembler, looks_like_metadata, parse_fixture
from fixturekit.minicore import MiniCore


def test_parse_two_crates_with_dependency() -> None:
    result = parse_fixture(
        "//- /main.rs crate:a deps:b\nfn main(){}\n//- /lib.rs crate:b\npub fn f(){}\n"
    )

    assert result.minicore is None
    assert [d.path for d in result.files] == ["/main.rs", "/lib.rs"]
    main, lib = result.files
    assert main.compilation_unit_name == "a"
    assert main.dependencies == ["b"]
    assert main.text == "fn main(){}\n"
    assert lib.compilation_unit_name == "b"
    assert lib.text == "pub fn f(){}\n"


def test_fixture_without_metadata_uses_default_path() -> None:
    result = parse_fixture("fn main() {}\n")

    assert len(result.files) == 1
    assert result.files[0].path == "/main.rs"
    assert result.files[0].text == "fn main() {}\n"


def test_fixture_without_metadata_is_dedented() -> None:
    result = parse_fixture(
        """
        fn main() {
            println!("Hello World")
        }
        """
    )

    assert result.files[0].text == 'fn main() {\n    println!("Hello World")\n}\n'


def test_configured_default_path(tmp_path) -> None:
    config = FixtureKitConfig(root=tmp_path, default_path="/src/lib.rs")

    result = parse_fixture("pub struct S;\n", config=config)

    assert result.files[0].path == "/src/lib.rs"


def test_parse_fixture_gets_full_meta() -> None:
    result = parse_fixture(
        """
//- minicore: coerce_unsized
//- /lib.rs crate:foo deps:bar,baz cfg:foo=a,bar=b,atom env:OUTDIR=path/to,OTHER=foo
mod m;
"""
    )

    assert result.minicore == MiniCore(["coerce_unsized"])
    assert len(result.files) == 1
    meta = result.files[0]
    assert meta.text == "mod m;\n"
    assert meta.compilation_unit_name == "foo"
    assert meta.path == "/lib.rs"
    assert meta.cfg_atoms == ["atom"]
    assert meta.cfg_key_values == [("foo", "a"), ("bar", "b")]
    assert len(meta.env) == 2


def test_minicore_line_with_marker_less_body() -> None:
    result = parse_fixture("//- minicore: option, result\nfn f() -> Option<()> { None }\n")

    assert result.minicore is not None
    assert result.minicore.activated_flags == ["option", "result"]
    assert [d.path for d in result.files] == ["/main.rs"]
    assert result.files[0].text == "fn f() -> Option<()> { None }\n"


def test_body_keeps_blank_lines() -> None:
    result = parse_fixture("//- /a.rs\n\nfn a() {}\n\n//- /b.rs\n")

    assert result.files[0].text == "\nfn a() {}\n\n"
    assert result.files[1].text == ""


def test_duplicate_paths_get_separate_entries() -> None:
    result = parse_fixture("//- /a.rs\none\n//- /a.rs\ntwo\n")

    assert [d.text for d in result.files] == ["one\n", "two\n"]


def test_further_indented_metadata_is_rejected() -> None:
    with pytest.raises(FixtureError) as excinfo:
        parse_fixture(
            """
        //- /lib.rs
          mod bar;

          fn foo() {}
          //- /bar.rs
          pub fn baz() {}
          """
        )

    error = excinfo.value
    assert error.kind is ErrorKind.INVALID_INDENTATION
    assert error.line_index == 4
    assert error.line == "  //- /bar.rs\n"
    assert "line 4" in str(error)


def test_unmarked_metadata_line_is_rejected() -> None:
    with pytest.raises(FixtureError) as excinfo:
        parse_fixture("//- /main.rs\nfn main() {}\n// /lib.rs crate:foo\n")

    assert excinfo.value.kind is ErrorKind.SUSPICIOUS_METADATA
    assert excinfo.value.line_index == 2


def test_ordinary_comments_pass_the_metadata_lint() -> None:
    result = parse_fixture(
        "//- /main.rs\n// Note: capitalised\n// see std::mem\n// plain comment\nfn main() {}\n"
    )

    assert result.files[0].text.count("\n") == 4


def test_metadata_lint_can_warn(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    assembler = FixtureAssembler(metadata_lint="warn")
    monkeypatch.setattr(logging.getLogger("fixturekit"), "propagate", True)

    with caplog.at_level(logging.WARNING, logger="fixturekit"):
        result = assembler.parse("//- /main.rs\n// key: value\n")

    assert result.files[0].text == "// key: value\n"
    assert "unmarked metadata" in caplog.text


def test_metadata_lint_can_be_disabled() -> None:
    result = FixtureAssembler(metadata_lint="off").parse("//- /main.rs\n// key: value\n")

    assert result.files[0].text == "// key: value\n"


def test_errors_from_annotation_lines_carry_line_index() -> None:
    with pytest.raises(FixtureError) as excinfo:
        parse_fixture("//- /main.rs\nfn main() {}\n//- /lib.rs bogus:1\n")

    assert excinfo.value.kind is ErrorKind.UNKNOWN_SETTING
    assert excinfo.value.line_index == 2


def test_duplicate_minicore_flag_is_rejected() -> None:
    with pytest.raises(FixtureError) as excinfo:
        parse_fixture("//- minicore: sized, sized\nfn main() {}\n")

    assert excinfo.value.kind is ErrorKind.DUPLICATE_FLAG
    assert excinfo.value.name == "sized"


def test_looks_like_metadata() -> None:
    assert looks_like_metadata("// /lib.rs crate:foo\n")
    assert not looks_like_metadata("// std::mem::swap\n")
    assert not looks_like_metadata("// TODO: fix\n")
    assert not looks_like_metadata("//comment: no space\n")


def test_to_dict_is_json_friendly() -> None:
    result = parse_fixture("//- minicore: option\n//- /lib.rs cfg:k=v\n")

    assert result.to_dict() == {
        "minicore": ["option"],
        "files": [
            {
                "path": "/lib.rs",
                "text": "",
                "compilation_unit_name": None,
                "dependencies": [],
                "edition": None,
                "cfg_atoms": [],
                "cfg_key_values": [["k", "v"]],
                "env": {},
                "introduces_new_source_root": False,
            }
        ],
    }
