"""
Command-line interface for tsrename.
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Iterator, Optional

from .config import Config, Settings
from .constants import PROGRAM, get_logger, setup_logging
from .core import FileVisitor
from .discovery import read_paths, walk_source
from .errors import ConfigurationError


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser.

    Single-dash long flags (``-output=DIR``) are accepted alongside the
    double-dash spellings.
    """
    parser = argparse.ArgumentParser(
        prog=PROGRAM,
        description="Organize photos and videos into a YYYY/YYYY_MM/YYYY_MM_DD/YYYY_MM_DD_HH tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {PROGRAM} ~/Photos                         copy into structure under ~/Photos
  {PROGRAM} ~/Photos -output=/srv/archive    copy into structure at /srv/archive
  {PROGRAM} ~/Photos -name=vacation          rename files to vacation_<timestamp>
  {PROGRAM} ~/Photos -del                    move instead of copy
  find . -name '*.jpg' | {PROGRAM} -exif     read paths from stdin

Destination paths are printed on stdout, one per line, so runs can be chained.
Lines read from stdin that begin with '[' are ignored.
        """
    )

    parser.add_argument(
        "source", nargs="?",
        help="Source directory to walk (default: read paths from stdin)"
    )
    parser.add_argument(
        "-source", "--source", dest="source_override", metavar="DIR",
        help="Source directory to walk"
    )
    parser.add_argument(
        "-output", "--output", "-o", dest="output", metavar="DIR",
        help="Destination directory (default: the source directory, or the current directory)"
    )
    parser.add_argument(
        "-name", "--name", dest="name", metavar="PREFIX",
        help="Rename files to PREFIX_YYYY_MM_DD_HH_MM_SS.ext"
    )
    parser.add_argument(
        "-del", "--del", dest="delete", action="store_true",
        help="Remove the source files (move instead of copy)"
    )
    parser.add_argument(
        "-exif", "--exif", dest="exif", action="store_true",
        help="Use EXIF data (or a .json sidecar) instead of timestamps in filenames"
    )
    parser.add_argument(
        "--dry-run", "-n", action="store_true",
        help="Print destinations without creating directories or transferring files"
    )
    parser.add_argument(
        "--config", type=Path, metavar="PATH",
        help=f"YAML file with default options (default: ~/.{PROGRAM}/config.yml)"
    )
    parser.add_argument(
        "--log-file", type=Path, metavar="PATH",
        help="Also write a detailed log to PATH"
    )
    parser.add_argument(
        "--summary", action="store_true",
        help="Print a summary table to stderr when done"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--version", "-V", action="store_true",
        help=f"Display the version number of {PROGRAM} and exit"
    )

    return parser


def build_settings(args: argparse.Namespace, config: Config) -> Settings:
    """Merge command-line flags over config file defaults."""
    return Settings.from_options(
        source=args.source_override or args.source,
        output=args.output or config.get_output(),
        name=args.name or config.get_name(),
        delete=args.delete or config.get_delete(),
        exif=args.exif or config.get_exif(),
        dry_run=args.dry_run,
    )


def stdin_is_interactive() -> bool:
    return sys.stdin is None or sys.stdin.isatty()


def stdin_lines() -> Iterator[str]:
    """Lines of standard input, decoded the way the OS decodes filenames.

    Bytes that are not valid in the filesystem encoding survive as surrogate
    escapes, so any path the OS accepts can be piped in.
    """
    for raw in sys.stdin.buffer:
        yield os.fsdecode(raw)


def main(config_path: Optional[Path] = None) -> int:
    """Main entry point.

    Args:
        config_path: Optional path to config file (for testing)
    """
    parser = create_parser()
    args = parser.parse_args()

    if args.version:
        from . import __version__
        print(__version__)
        return 0

    logger = setup_logging(verbose=args.verbose, log_file=args.log_file)
    config = Config(config_path=args.config or config_path)
    if config.get_verbose() and not args.verbose:
        logger = setup_logging(verbose=True, log_file=args.log_file)

    try:
        settings = build_settings(args, config)
        if settings.source_root is None and stdin_is_interactive():
            raise ConfigurationError("no <source> given and stdin is a terminal")
    except ConfigurationError as e:
        logger.error(e.log_message())
        return 1

    if not settings.dry_run and not settings.output_root.is_dir():
        logger.info(f"[path] creating <destination> {settings.output_root}")
        try:
            settings.output_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"[mkdir] {settings.output_root}: {e}")
            return 1

    visitor = FileVisitor(settings)
    if settings.source_root is not None:
        candidates = walk_source(settings.source_root)
    else:
        candidates = read_paths(stdin_lines())

    try:
        visitor.run(candidates)
    except KeyboardInterrupt:
        logger.error("[interrupt] operation cancelled by user")
        return 1

    if args.summary:
        visitor.print_summary()
    return 0


if __name__ == "__main__":
    sys.exit(main())
