"""CLI entrypoints for modmanifest commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .artifact import module_to_dict, read_artifact
from .config import CONFIG_FILENAME, DEFAULT_OUTPUT, load_root_config
from .errors import ModManifestError
from .logging import configure_logging
from .manifest import ManifestGenerator


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


def _add_quiet_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=False,
        help="Only log warnings and errors.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modmanifest",
        description="Discover @module annotated classes and build a category manifest.",
    )
    _add_verbose_option(parser)
    _add_quiet_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Scan a source tree and write the module manifest artifact.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Root of the source tree to scan (defaults to current directory).",
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help=f"Artifact path; relative paths resolve against the root (default: {DEFAULT_OUTPUT}).",
    )
    generate_parser.add_argument(
        "--config",
        default=None,
        help=f"Configuration file (defaults to {CONFIG_FILENAME} in the root).",
    )

    show_parser = subparsers.add_parser(
        "show",
        help="List categories and modules from an existing artifact.",
    )
    _add_verbose_option(show_parser, suppress_default=True)
    show_parser.add_argument(
        "--artifact",
        default=str(DEFAULT_OUTPUT),
        help="Artifact to read.",
    )
    show_parser.add_argument(
        "--category",
        default=None,
        help="Only list modules registered under this category.",
    )
    show_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit machine readable JSON.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve manifest lookups over HTTP.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--artifact", default=str(DEFAULT_OUTPUT), help="Artifact to serve.")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for modmanifest commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))

    if args.command == "generate":
        root = Path(args.path)
        try:
            config = load_root_config(root, Path(args.config) if args.config else None)
            result = ManifestGenerator(config).dump(root, args.output)
        except ModManifestError as exc:
            parser.exit(1, f"modmanifest generate failed: {exc}\n")
        print(
            f"Manifest written to {_relativize(result.path)} "
            f"({result.module_count} modules, {len(result.index)} categories)"
        )
    elif args.command == "show":
        try:
            index = read_artifact(args.artifact)
        except ModManifestError as exc:
            parser.exit(1, f"{exc}\n")
        if args.category is not None:
            if args.category not in index:
                parser.exit(1, f"Unknown category: {args.category}\n")
            index = {args.category: index[args.category]}
        if args.json:
            payload = {
                name: [module_to_dict(module) for module in modules]
                for name, modules in index.items()
            }
            print(json.dumps(payload, indent=2))
        else:
            for name, modules in index.items():
                print(f"{name}:")
                for module in modules:
                    print(f"  {module.qualified_name}")
    elif args.command == "serve":  # pragma: no cover - integration path
        from .service import run_service

        run_service(args.artifact, host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
