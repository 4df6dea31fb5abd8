"""CLI entrypoint for indexgen."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from typing import List, NoReturn, Optional, Sequence

from .config import load_config, normalize_extensions, parse_bool, parse_comma_separated
from .generator import IndexGenerator
from .logging import configure_logging, get_logger
from .models import IndexGenConfig, OutcomeStatus, TargetOverrides
from .watcher import Watcher

MODE_HYBRID = "hybrid"
MODE_CLI_ONLY = "cli-only"
MODE_CONFIG_BASED = "config-based"

_EXAMPLES = """\
Examples:
  indexgen --paths=src/components/**
  indexgen --paths=src/components/**,src/**/ui/** --watch --exportStyle=named
  indexgen --paths=src/components/** --log=false --debug=true
  indexgen --watch
"""


@dataclass
class ParsedCliArgs:
    """Result of interpreting the command line."""

    mode: str
    overrides: TargetOverrides = field(default_factory=TargetOverrides)
    watch: bool = False
    dry_run: bool = False
    log: Optional[bool] = None
    debug: Optional[bool] = None

    @property
    def paths(self) -> List[str]:
        return list(self.overrides.paths or ())


class _IndexGenParser(argparse.ArgumentParser):
    """Reports malformed options the same way as unknown ones: help text and status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_help()
        self.exit(1, f"{self.prog}: error: {message}\n")


def _add_bool_option(parser: argparse.ArgumentParser, name: str, help_text: str) -> None:
    parser.add_argument(
        f"--{name}",
        nargs="?",
        const="true",
        default=None,
        metavar="true|false",
        help=help_text,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = _IndexGenParser(
        prog="indexgen",
        description="Scan folders and generate index.ts barrel files that re-export sibling modules.",
        epilog=_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--paths",
        metavar="<path1,path2>",
        help="Folder paths or glob patterns to process (comma separated).",
    )
    parser.add_argument(
        "--outputFile",
        metavar="<filename>",
        help="Name of the index file to generate (default: index.ts).",
    )
    parser.add_argument(
        "--fileExtensions",
        metavar="<ext1,ext2>",
        help="File extensions to include, e.g. .tsx,.ts",
    )
    parser.add_argument(
        "--excludes",
        metavar="<pattern1,pattern2>",
        help="File patterns to exclude, e.g. *.d.ts,*.png",
    )
    parser.add_argument(
        "--exportStyle",
        metavar="<style>",
        help="Export style: default, named, star, star-as, mixed, auto.",
    )
    parser.add_argument(
        "--namingConvention",
        metavar="<rule>",
        help="File name conversion: camelCase, original, PascalCase.",
    )
    _add_bool_option(
        parser, "fromWithExtension", "Keep the file extension in import paths (default: false)."
    )
    _add_bool_option(parser, "log", "Enable/disable log output (default: true).")
    _add_bool_option(parser, "debug", "Enable debug output (default: false).")
    parser.add_argument("--watch", action="store_true", help="Regenerate on file changes.")
    parser.add_argument(
        "--dryRun",
        action="store_true",
        help="Print generated index files instead of writing them.",
    )
    return parser


def parse_cli_args(
    argv: Sequence[str],
    config: Optional[IndexGenConfig],
    parser: argparse.ArgumentParser | None = None,
) -> ParsedCliArgs:
    """Interpret ``argv`` and derive the run mode against the loaded ``config``.

    Unknown ``--`` options print the help text and exit with status 1.
    """
    parser = parser or _build_parser()
    args, unknown = parser.parse_known_args(list(argv))
    if any(item.startswith("-") for item in unknown):
        parser.print_help()
        parser.exit(1)

    overrides = TargetOverrides()
    paths = parse_comma_separated(args.paths)
    if paths:
        overrides.paths = tuple(paths)
    if args.outputFile:
        overrides.output_file = args.outputFile.strip()
    extensions = parse_comma_separated(args.fileExtensions)
    if extensions:
        overrides.file_extensions = tuple(normalize_extensions(extensions))
    excludes = parse_comma_separated(args.excludes)
    if excludes:
        overrides.excludes = tuple(excludes)
    if args.exportStyle:
        overrides.export_style = args.exportStyle.strip()
    if args.namingConvention:
        overrides.naming_convention = args.namingConvention.strip()
    overrides.from_with_extension = parse_bool(args.fromWithExtension)

    has_other_options = any(
        value is not None
        for value in (
            args.outputFile,
            args.fileExtensions,
            args.excludes,
            args.exportStyle,
            args.namingConvention,
            args.fromWithExtension,
            args.log,
            args.debug,
        )
    )
    has_config_targets = bool(config and config.targets and config.targets[0].paths)
    has_paths = bool(overrides.paths)

    if has_config_targets and has_paths and has_other_options:
        mode = MODE_HYBRID
    elif not has_config_targets and has_paths:
        mode = MODE_CLI_ONLY
    elif has_config_targets:
        mode = MODE_CONFIG_BASED
    else:
        mode = MODE_CLI_ONLY

    return ParsedCliArgs(
        mode=mode,
        overrides=overrides,
        watch=bool(args.watch),
        dry_run=bool(args.dryRun),
        log=parse_bool(args.log),
        debug=parse_bool(args.debug),
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for indexgen."""
    argv = sys.argv[1:] if argv is None else argv
    parser = _build_parser()

    # Bootstrap logging from the flags alone so config loading problems are visible.
    bootstrap, _ = parser.parse_known_args(argv)
    configure_logging(
        enabled=parse_bool(bootstrap.log) is not False,
        debug=parse_bool(bootstrap.debug) is True,
    )
    config = load_config(logger=get_logger("config"))

    parsed = parse_cli_args(argv, config, parser)
    log_enabled = parsed.log if parsed.log is not None else (config.log if config else True)
    debug_enabled = parsed.debug if parsed.debug is not None else (config.debug if config else False)
    logger = configure_logging(enabled=log_enabled, debug=debug_enabled)
    logger.info("Applied mode: %s", parsed.mode)

    generator = IndexGenerator(config, dry_run=parsed.dry_run, logger=get_logger("generator"))

    if parsed.mode in (MODE_HYBRID, MODE_CLI_ONLY):
        if not parsed.paths:
            logger.error("Folder path must be specified in CLI-only mode.")
            return
        targets: Optional[List[str]] = parsed.paths
    else:
        targets = parsed.paths if parsed.paths and not parsed.watch else None

    if parsed.watch:
        watcher = Watcher(generator, parsed.overrides, logger=get_logger("watcher"))
        parser.exit(watcher.run_forever(targets))

    outcomes = []
    if targets:
        for path in targets:
            outcomes.extend(generator.generate(path, parsed.overrides))
    else:
        outcomes.extend(generator.generate(None, parsed.overrides))

    if parsed.dry_run:
        for outcome in outcomes:
            if outcome.status is OutcomeStatus.DRY_RUN:
                print(f"# {outcome.index_path}")
                print(outcome.content, end="")


if __name__ == "__main__":
    main(sys.argv[1:])
