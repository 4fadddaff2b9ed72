"""CLI entrypoints for gdnsgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import CONFIG_FILENAME, GeneratorOptions, load_config
from .errors import ConfigError, GenerateError, ScanError
from .generator import Generator
from .logging import configure_logging, get_logger
from .models import BuildMode
from .scanner import CrateScanner

logger = get_logger("cli")


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


def _add_exclude_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Gitignore-style pattern of sources to skip (repeatable).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gdnsgen",
        description="Generate Godot .gdnlib and .gdns resources for a GDNative crate.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only report warnings and errors (useful from cargo build scripts).",
    )
    parser.add_argument(
        "--cargo-warnings",
        action="store_true",
        help="Also print warnings as cargo:warning= lines so cargo shows them.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="List the types deriving NativeClass in a source tree.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_exclude_option(scan_parser)
    scan_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to scan (defaults to current directory).",
    )

    generate_parser = subparsers.add_parser(
        "generate",
        help="Scan a crate and write its resources into a Godot project.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_exclude_option(generate_parser)
    generate_parser.add_argument(
        "crate",
        nargs="?",
        default=".",
        help="Path to the crate root (defaults to current directory).",
    )
    generate_parser.add_argument(
        "--godot-project-dir", type=Path, help="Root of the Godot project."
    )
    generate_parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory receiving the resources (defaults to <godot project>/native).",
    )
    generate_parser.add_argument(
        "--target-dir", type=Path, help="Cargo target directory holding the libraries."
    )
    generate_parser.add_argument("--lib-name", help="Crate name used for library filenames.")
    generate_parser.add_argument(
        "--build-mode",
        choices=[mode.value for mode in BuildMode],
        help="Build profile the .gdnlib should point to.",
    )
    generate_parser.add_argument(
        "--source-dir",
        type=Path,
        help="Directory to scan for classes (defaults to <crate>/src).",
    )
    generate_parser.add_argument(
        "--config",
        type=Path,
        help=f"Configuration file (defaults to <crate>/{CONFIG_FILENAME}).",
    )
    generate_parser.add_argument(
        "--overwrite-manifest",
        action="store_true",
        help="Regenerate an existing .gdnlib instead of keeping it.",
    )

    return parser


def _options_from_args(args: argparse.Namespace) -> GeneratorOptions:
    return GeneratorOptions(
        godot_project_dir=args.godot_project_dir,
        resource_output_dir=args.output_dir,
        target_dir=args.target_dir,
        lib_name=args.lib_name,
        build_mode=BuildMode.parse(args.build_mode) if args.build_mode else None,
        overwrite_manifest=bool(args.overwrite_manifest),
        exclude_paths=list(args.exclude),
    )


def _run_scan(args: argparse.Namespace) -> None:
    classes = CrateScanner().scan(Path(args.path), exclude_paths=args.exclude)
    for name in sorted(classes):
        print(name)


def _run_generate(args: argparse.Namespace) -> None:
    crate_dir = Path(args.crate).expanduser()
    config = load_config(args.config or crate_dir)
    options = _options_from_args(args).merged_over(config)

    source_dir = args.source_dir
    if source_dir is None:
        source_dir = crate_dir / "src" if (crate_dir / "src").is_dir() else crate_dir

    classes = CrateScanner().scan(source_dir, exclude_paths=options.exclude_paths)
    if not classes:
        logger.warning("No type deriving NativeClass found under %s", source_dir)
    result = Generator.from_config(options).build(classes, crate_dir=crate_dir)

    for path in result.written:
        print(f"wrote {_relativize(path)}")
    if not result.written:
        print("Resources already up to date")


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for gdnsgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        cargo_warnings=bool(args.cargo_warnings),
    )

    try:
        if args.command == "scan":
            _run_scan(args)
        elif args.command == "generate":
            _run_generate(args)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except (ScanError, ConfigError, GenerateError) as exc:
        parser.exit(1, f"gdnsgen {args.command} failed: {exc}\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
