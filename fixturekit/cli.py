"""CLI entrypoints for fixturekit commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .errors import FixtureError
from .fixture import FixtureAssembler
from .logging import configure_logging
from .minicore import MiniCore
from .workspace import crate_graph, materialize


def _add_verbose_option(parser: argparse.ArgumentParser, *, top_level: bool = True) -> None:
    # Subcommands must not reset a `-v` given before the command name.
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False if top_level else argparse.SUPPRESS,
        help="Log parser decisions at DEBUG level.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fixturekit",
        description="Parse multi-file test fixtures and render the minicore subset they request.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .fixturekit.yml or the directory holding it (defaults to current directory).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_parser = subparsers.add_parser(
        "parse",
        help="Print the files described by a fixture as JSON.",
    )
    _add_verbose_option(parse_parser, top_level=False)
    parse_parser.add_argument("fixture", help="Path to the fixture file, or `-` for stdin.")
    parse_parser.add_argument(
        "--crates",
        action="store_true",
        help="Include the compilation-unit graph in the output.",
    )

    minicore_parser = subparsers.add_parser(
        "minicore",
        help="Print the minicore subset enabled by the given flags.",
    )
    _add_verbose_option(minicore_parser, top_level=False)
    minicore_parser.add_argument("flags", nargs="+", help="Flags to activate.")
    minicore_parser.add_argument(
        "--resource",
        help="Reference resource to filter instead of the bundled minicore.",
    )

    materialize_parser = subparsers.add_parser(
        "materialize",
        help="Write the files described by a fixture into a directory.",
    )
    _add_verbose_option(materialize_parser, top_level=False)
    materialize_parser.add_argument("fixture", help="Path to the fixture file, or `-` for stdin.")
    materialize_parser.add_argument("output", help="Directory receiving the files.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for fixturekit commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    assembler = FixtureAssembler.from_config(config)
    try:
        if args.command == "parse":
            result = assembler.parse(_read_input(args.fixture))
            payload = result.to_dict()
            if args.crates:
                graph = crate_graph(result.files, include_core=result.minicore is not None)
                payload["crates"] = [
                    {"name": crate.name, "root_file": crate.root_file, "deps": crate.deps}
                    for crate in graph
                ]
            print(json.dumps(payload, indent=2))
        elif args.command == "minicore":
            resource = (
                Path(args.resource).read_text(encoding="utf-8")
                if args.resource
                else config.read_minicore()
            )
            sys.stdout.write(MiniCore.parse(", ".join(args.flags)).source_code(resource))
        elif args.command == "materialize":
            result = assembler.parse(_read_input(args.fixture))
            written = materialize(
                result, Path(args.output), minicore_resource=config.read_minicore()
            )
            for path in written:
                print(_relativize(path))
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except FixtureError as exc:
        parser.exit(1, f"fixturekit {args.command} failed: {exc}\n")
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
