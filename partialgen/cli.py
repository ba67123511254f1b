"""CLI entrypoints for partialgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .diagnostics import GenerationError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Snapshot file, C# file or project directory (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="partialgen",
        description="Generate partial-class members for annotated UI declarations.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs (including worker threads) to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate units for every candidate declaration.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_path_argument(generate_parser)
    generate_parser.add_argument(
        "--out",
        default=None,
        help="Directory for generated units (defaults to output.directory).",
    )
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print generated units instead of writing them.",
    )
    generate_parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Ignore and do not update the incremental cache.",
    )

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Show how each declaration is classified and resolved.",
    )
    _add_verbose_option(inspect_parser, suppress_default=True)
    _add_path_argument(inspect_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for partialgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    orchestrator = Orchestrator()

    if args.command == "generate":
        dry_run = bool(getattr(args, "dry_run", False))
        try:
            result = orchestrator.run(
                args.path,
                out=args.out,
                dry_run=dry_run,
                use_cache=not args.no_cache,
            )
        except ConfigError as exc:
            parser.exit(1, f"Invalid configuration: {exc}\n")
        except GenerationError as exc:
            parser.exit(1, f"partialgen generate failed: {exc}\nRun with --verbose for more details.\n")
        if dry_run:
            for unit in result.units:
                print(f"// ---- {unit.hint_name}")
                print(unit.text)
        elif result.written:
            location = _relativize(result.written[0].parent)
            print(f"Generated {len(result.written)} unit(s) in {location} ({result.cached} from cache)")
        else:
            print("No units generated")
        for diagnostic in result.diagnostics:
            print(diagnostic.format(), file=sys.stderr)
        if result.has_errors:
            parser.exit(1, "Generation finished with errors\n")
    elif args.command == "inspect":
        try:
            inspection = orchestrator.inspect_path(args.path)
        except ConfigError as exc:
            parser.exit(1, f"Invalid configuration: {exc}\n")
        except GenerationError as exc:
            parser.exit(1, f"partialgen inspect failed: {exc}\n")
        for descriptor in inspection.descriptors:
            flags = ", ".join(descriptor.flags.enabled()) or "plain"
            print(f"{descriptor.display_name}: {flags}")
            for member in descriptor.members:
                print(f"  member {member.public_name}: {member.declared_type}")
            for member in descriptor.view_members:
                print(f"  view {member.public_name}: {member.declared_type}")
            link = descriptor.model_link
            if link is not None and link.resolved is not None:
                print(f"  {link.kind} -> {link.resolved.qualified_name}")
        for diagnostic in inspection.diagnostics:
            print(diagnostic.format(), file=sys.stderr)
        if any(item.is_error for item in inspection.diagnostics):
            parser.exit(1)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
