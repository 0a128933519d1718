"""CLI entrypoints for specgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .errors import SpecgenError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_source_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    parser.add_argument(
        "--entry",
        help="File holding @GlobalTitle/@GlobalVersion/@GlobalDescription directives.",
    )
    parser.add_argument(
        "--model",
        action="append",
        default=[],
        metavar="MODULE:NAME",
        help="Register a model for schema generation (repeatable).",
    )
    parser.add_argument(
        "--no-inference",
        action="store_true",
        help="Only use explicit directives; do not infer metadata from handler bodies.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="specgen",
        description="Generate OpenAPI 3 specifications from annotated Python handlers.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Write the specification for a project.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_source_options(generate_parser)
    generate_parser.add_argument(
        "-o",
        "--output",
        help="JSON output file (defaults to openapi.json in the project root).",
    )
    generate_parser.add_argument(
        "--yaml",
        dest="yaml_output",
        help="Also write the specification as YAML to this file.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Generate the specification and serve it with a Swagger UI page.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_source_options(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8081, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for specgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    orchestrator = Orchestrator()
    infer = False if args.no_inference else None

    if args.command == "generate":
        try:
            outcome = orchestrator.run_generate(
                args.path,
                entry_file=args.entry,
                output=args.output,
                yaml_output=args.yaml_output,
                models=args.model,
                infer=infer,
            )
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except (SpecgenError, OSError) as exc:
            parser.exit(1, f"specgen generate failed: {exc}\nRun with --verbose for more details.\n")
        for output in outcome.outputs:
            print(f"OpenAPI specification written to {_relativize(output)}")
        if outcome.document.diagnostics:
            print(f"{len(outcome.document.diagnostics)} diagnostic(s); run with --verbose for details")
    elif args.command == "serve":
        from .service import run_service

        try:
            document = orchestrator.build_document(
                args.path, entry_file=args.entry, models=args.model, infer=infer
            )
        except (SpecgenError, OSError) as exc:
            parser.exit(1, f"specgen serve failed: {exc}\n")
        print(f"Serving Swagger UI at http://{args.host}:{args.port}/swagger")
        run_service(document, host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
