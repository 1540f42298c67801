import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .core.errors import ConfigurationError
from .core.loader import describe_rule_packs, load_rules
from .core.models import ScanResult, Severity
from .core.reporting import Reporter, TerminalReporter
from .core.scanner import DEFAULT_WORKERS, DirectoryScanner, SingleFileScanner, configure_logging
from .core.utils import DEFAULT_EXTENSIONS, normalize_extensions


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="riskscan",
        description="Scan source files for dangerous calls and hardcoded credentials.",
    )
    sub = p.add_subparsers(dest="mode", required=True)

    # dir mode
    d = sub.add_parser("dir", help="Scan a directory recursively.")
    d.add_argument("path", type=Path, help="Directory to scan recursively.")
    d.add_argument("--ext", default=",".join(sorted(DEFAULT_EXTENSIONS)), help="Comma-separated file extensions to scan (default: js,php).")
    d.add_argument("--workers", type=int, default=DEFAULT_WORKERS, help="Number of worker threads for scanning.")
    d.add_argument("--exclude", default="", help="Directory names to skip, comma-separated.")
    d.add_argument("--max-file-size", type=int, default=None, help="Skip files larger than this many bytes.")
    d.add_argument("--timeout", type=float, default=None, help="Stop dispatching new files after this many seconds.")
    d.add_argument("--no-progress", action="store_true", help="Disable the progress bar during directory scans.")
    _add_common_arguments(d)

    # file mode
    f = sub.add_parser("file", help="Scan a single file, whatever its extension.")
    f.add_argument("path", type=Path, help="File to scan.")
    _add_common_arguments(f)

    return p


def _add_common_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--rules", default="all", help=f"Comma-delimited rule packs to activate, 'all' or 'none'. Available: {describe_rule_packs()}.")
    p.add_argument("--rule", action="append", default=[], metavar="NAME:SEVERITY:PATTERN", help="Add a custom rule. May be repeated.")
    p.add_argument("--out", type=Path, default=None, help="Also write findings.json, findings.md and summary.json here.")
    p.add_argument("--fail-on", default=None, metavar="SEVERITY", help="Exit with status 1 if any finding is at or above this severity.")
    p.add_argument("--no-color", action="store_true", help="Disable colored output.")
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging output.")


def _finish(
    args: argparse.Namespace,
    terminal: TerminalReporter,
    result: ScanResult,
    fail_on: Optional[Severity],
) -> int:
    terminal.render(result)
    if args.out is not None:
        Reporter(args.out).write_all(result, root=str(args.path))
    worst = result.max_severity()
    if fail_on is not None and worst is not None and worst.rank >= fail_on.rank:
        return 1
    return 0


def run_dir(args: argparse.Namespace) -> int:
    rules = load_rules(args.rules, args.rule)
    fail_on = Severity.parse(args.fail_on) if args.fail_on else None
    extensions = normalize_extensions(args.ext)
    if not extensions:
        raise ConfigurationError("At least one file extension is required")

    terminal = TerminalReporter(color=False if args.no_color else None)
    terminal.banner(args.path)
    scanner = DirectoryScanner(
        root=args.path,
        rules=rules,
        extensions=extensions,
        exclude_dirs=[e.strip() for e in args.exclude.split(",") if e.strip()],
        max_file_size=args.max_file_size,
        workers=args.workers,
        timeout=args.timeout,
        logger=configure_logging(verbose=args.verbose),
        verbose=args.verbose,
        show_progress=not args.no_progress,
    )
    return _finish(args, terminal, scanner.scan(), fail_on)


def run_file(args: argparse.Namespace) -> int:
    rules = load_rules(args.rules, args.rule)
    fail_on = Severity.parse(args.fail_on) if args.fail_on else None

    terminal = TerminalReporter(color=False if args.no_color else None)
    terminal.banner(args.path)
    scanner = SingleFileScanner(
        file_path=args.path,
        rules=rules,
        logger=configure_logging(verbose=args.verbose),
        verbose=args.verbose,
    )
    return _finish(args, terminal, scanner.scan(), fail_on)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        if args.mode == "dir":
            return run_dir(args)
        elif args.mode == "file":
            return run_file(args)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
