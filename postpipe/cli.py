"""CLI entrypoints for postpipe commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging
from .manifest import build_manifest, export_posts, write_manifest
from .pipeline import BuildReport, IngestionPipeline


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


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write detailed logs to this file.",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the content directory (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="postpipe",
        description="Ingest markdown articles with front matter into validated post records.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Ingest a content directory and write the manifest and post files.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_log_file_option(build_parser, suppress_default=True)
    _add_path_argument(build_parser)
    build_parser.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help="Write the JSON post manifest to this file.",
    )
    build_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write one markdown file per post into this directory.",
    )
    build_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker threads used to parse sources.",
    )
    build_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with an error when any article fails to ingest.",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Validate a content directory without writing anything.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_log_file_option(check_parser, suppress_default=True)
    _add_path_argument(check_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for postpipe commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    workers = getattr(args, "workers", None)
    if workers is not None and workers < 1:
        parser.exit(1, "--workers must be at least 1\n")

    try:
        config = load_config(Path(args.path))
        pipeline = IngestionPipeline.from_config(config, max_workers=workers)
        output_dirs = [args.output] if getattr(args, "output", None) is not None else []
        report = pipeline.run_directory(args.path, config, output_dirs=output_dirs)
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except ConfigError as exc:
        parser.exit(1, f"postpipe {args.command} failed: {exc}\n")

    _print_report(report)

    if args.command == "build":
        manifest_path = args.manifest or config.output.manifest
        posts_dir = args.output or config.output.posts_dir
        if manifest_path is not None:
            write_manifest(manifest_path, build_manifest(report.registry))
            print(f"Manifest written to {_relativize(manifest_path)}")
        if posts_dir is not None:
            written = export_posts(report.registry, posts_dir)
            print(f"{len(written)} posts written to {_relativize(posts_dir)}")
        if report.source_failures or (args.strict and report.failures):
            parser.exit(1)
    elif args.command == "check":
        if not report.ok:
            parser.exit(1)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _print_report(report: BuildReport) -> None:
    print(
        f"Ingested {len(report.registry)} posts from {len(report.sources)} sources "
        f"({len(report.failures)} failed segments)"
    )
    for source_failure in report.source_failures:
        print(f"  unreadable {source_failure.source_id}: {source_failure.error}")
    for failure in report.failures:
        print(f"  {failure.source_id}#{failure.ordinal}: {failure.error}")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
