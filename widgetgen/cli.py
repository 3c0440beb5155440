"""CLI entrypoints for widgetgen commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .codegen import Codegen
from .config import REGISTRY_PRESETS, ConfigOverrides
from .errors import CodegenError
from .logging import configure_logging


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    # Subcommands suppress defaults so flags given before the command survive.
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write timestamped log records to this file.",
    )


def _add_config_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--cwd",
        default=None,
        help="Directory used for config discovery and relative paths (defaults to current directory).",
    )
    parser.add_argument("--config", default=None, help="Explicit configuration file to load.")
    parser.add_argument("--components-dir", default=None, help="Directory holding one folder per component.")
    parser.add_argument("--output-file", default=None, help="Path of the generated registry module.")
    parser.add_argument(
        "--registry",
        choices=sorted(REGISTRY_PRESETS),
        default=None,
        help="Registry preset used for the generated import and registrations.",
    )
    parser.add_argument("--import-path", default=None, help="Override the registry import path.")
    parser.add_argument("--import-name", default=None, help="Override the registry binding name.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="widgetgen",
        description="Generate a component registry module from a directory of widgets.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Scan the components directory and write the registry module.",
    )
    _add_logging_options(generate_parser, suppress_default=True)
    _add_config_options(generate_parser)

    validate_parser = subparsers.add_parser(
        "validate",
        help="Scan the components directory and print a JSON validation report.",
    )
    _add_logging_options(validate_parser, suppress_default=True)
    _add_config_options(validate_parser)
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any component has warnings or errors.",
    )

    return parser


def _overrides_from_args(args: argparse.Namespace) -> ConfigOverrides:
    return ConfigOverrides(
        components_dir=args.components_dir,
        output_file=args.output_file,
        registry_type=args.registry,
        import_path=args.import_path,
        import_name=args.import_name,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for widgetgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    except OSError as exc:
        parser.error(f"cannot open log file {args.log_file}: {exc}")

    try:
        codegen = Codegen.create(
            args.cwd,
            config_path=args.config,
            overrides=_overrides_from_args(args),
        )
        if args.command == "generate":
            outcome = codegen.generate()
        else:
            report = codegen.validate()
    except CodegenError as exc:
        parser.exit(
            1,
            f"widgetgen {args.command} failed [{exc.kind.value}]: {exc}\n"
            "Run with --verbose for more details.\n",
        )

    if args.command == "generate":
        print(
            f"Component registry written to {_relativize(outcome.output_file)} "
            f"({len(outcome.scan_result.components)} components, "
            f"{len(outcome.scan_result.skipped_directory_names)} skipped)"
        )
        return

    print(json.dumps(report.to_dict(), indent=2))
    summary = report.summary
    if args.strict and (summary.with_warnings or summary.with_errors):
        parser.exit(1)


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
