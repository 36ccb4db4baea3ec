import argparse
import logging
import sys
from typing import List, Optional

from .core.config import get_settings
from .core.diagnostics.bridges import DiagnosticsProvider, TscBridge, TscOutputFile
from .core.exceptions import ProjectLoadError, RunTimeoutError
from .core.pipeline import AutoFixer


def setup_logging(log_level: str = "INFO") -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


logger = logging.getLogger(__name__)


def _read_build_log(path: Optional[str]) -> Optional[str]:
    """Build log text from a file, or from stdin when the path is "-"."""
    if path is None:
        return None
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def _select_provider(args, settings) -> Optional[DiagnosticsProvider]:
    if args.diagnostics_file:
        return TscOutputFile(args.diagnostics_file)
    if settings.tsc.enabled:
        return TscBridge(
            command=settings.tsc.command,
            tsconfig=settings.tsc.tsconfig,
            timeout=settings.timeout_seconds,
        )
    return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tsmend",
        description="tsmend - repair import/export mismatches in TypeScript projects",
    )
    parser.add_argument(
        "project",
        help="Project directory to repair"
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="Target files (relative to the project); all modules when omitted"
    )
    parser.add_argument(
        "--build-log",
        nargs="?",
        const="-",
        default=None,
        help="Build output to mine for export mismatches (reads stdin without a path)"
    )
    parser.add_argument(
        "--diagnostics-file",
        default=None,
        help="Saved 'tsc --noEmit --pretty false' output to use instead of running tsc"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a tsmend.yaml configuration file"
    )
    parser.add_argument(
        "--allow-list",
        nargs="+",
        default=None,
        help="Default-exporting modules to convert to named exports"
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--targeted",
        action="store_const",
        const="targeted",
        dest="index_mode",
        help="Index only the given files"
    )
    mode.add_argument(
        "--full",
        action="store_const",
        const="full",
        dest="index_mode",
        help="Index the whole source tree"
    )
    parser.add_argument(
        "--skip-preprocessing",
        action="store_true",
        default=None,
        help="Skip fence stripping and client-directive insertion"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Wall-clock budget for the run, in seconds"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for tsmend."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        settings = get_settings(
            args.config,
            index_mode=args.index_mode,
            timeout_seconds=args.timeout,
            skip_preprocessing=args.skip_preprocessing,
            named_export_allow_list=args.allow_list,
        )
        build_log = _read_build_log(args.build_log)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to start: {e}")
        return 1

    fixer = AutoFixer(settings, diagnostics_provider=_select_provider(args, settings))
    try:
        stats = fixer.fix_project(args.project, files=args.files, build_log=build_log)
    except ProjectLoadError as e:
        logger.error(f"Failed to load project: {e}")
        return 1
    except RunTimeoutError as e:
        logger.error(f"Auto-fix aborted: {e}")
        return 1

    logger.info("TypeScript auto-fix completed.")
    print("\nAuto-fix summary:")
    print(f"  Files processed:      {stats.files_processed}")
    print(f"  Imports fixed:        {stats.imports_fixed}")
    print(f"  Exports refactored:   {stats.exports_refactored}")
    print(f"  Diagnostics resolved: {stats.diagnostics_resolved}")
    for action in fixer.actions:
        print(f"  - TS{action.code} {action.file_path}: {action.description}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
