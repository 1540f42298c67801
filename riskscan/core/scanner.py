from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Union

from tqdm import tqdm

from .aggregator import Aggregator
from .errors import ReadError, TraversalError
from .models import Finding, Rule, ScanResult
from .utils import has_eligible_extension, iter_lines, normalize_extensions, read_text_strict


DEFAULT_LOGGER_NAME = "riskscan"
DEFAULT_WORKERS = 8
SLOW_SCAN_THRESHOLD_SECONDS = 2.0
POLL_INTERVAL_SECONDS = 0.1

logger = logging.getLogger(DEFAULT_LOGGER_NAME)


def configure_logging(verbose: bool = False, logger_name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Configure and return the package logger.

    Diagnostics go to stderr so they never mix with the report on stdout. The
    level is WARNING by default, which keeps per-file read failures silent;
    ``verbose`` lowers it to INFO.
    """

    logger = logging.getLogger(logger_name)
    level = logging.INFO if verbose else logging.WARNING
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s - %(message)s")
        )
        logger.addHandler(handler)

    return logger


def scan_lines(file_path: str, lines: Iterable[str], rules: Sequence[Rule]) -> List[Finding]:
    findings: List[Finding] = []
    for line_number, line in enumerate(lines, start=1):
        for rule in rules:
            if rule.matches(line):
                findings.append(
                    Finding(
                        file_path=file_path,
                        line_number=line_number,
                        rule_name=rule.name,
                        severity=rule.severity,
                        code_snippet=line.strip(),
                    )
                )
    return findings


def scan_path(path: Path, rules: Sequence[Rule]) -> List[Finding]:
    """Like scan_file, but lets ReadError propagate."""
    content = read_text_strict(path)
    return scan_lines(str(path), iter_lines(content), rules)


def scan_file(file_path: Union[str, Path], rules: Sequence[Rule]) -> List[Finding]:
    """Return the findings for one file, or an empty list if it cannot be read."""
    path = Path(file_path)
    try:
        return scan_path(path, rules)
    except ReadError as exc:
        logger.info("Skipping %s: %s", path, exc.reason)
        return []


class DirectoryScanner:
    def __init__(
        self,
        root: Union[str, Path],
        rules: Sequence[Rule],
        extensions: Optional[Iterable[str]] = None,
        exclude_dirs: Iterable[str] = (),
        max_file_size: Optional[int] = None,
        workers: int = DEFAULT_WORKERS,
        *,
        timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
        verbose: bool = False,
        show_progress: bool = True,
        progress_desc: str = "Scanning files",
    ) -> None:
        self.root = Path(root)
        self.rules = tuple(rules)
        self.extensions: FrozenSet[str] = normalize_extensions(extensions)
        self.exclude_dirs = set(exclude_dirs)
        self.max_file_size = max_file_size
        self.workers = max(1, int(workers))
        self.timeout = timeout
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        self.verbose = verbose
        if verbose:
            self.logger.setLevel(logging.INFO)
        self.show_progress = bool(show_progress)
        self.progress_desc = progress_desc
        self.traversal_errors = 0
        self._cancel_event = threading.Event()
        self._slow_log_threshold = SLOW_SCAN_THRESHOLD_SECONDS

    def cancel(self) -> None:
        """Stop dispatching new files; files already being scanned still finish."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def _on_walk_error(self, exc: OSError) -> None:
        err = TraversalError(exc.filename or self.root, exc)
        self.traversal_errors += 1
        if exc.filename is not None and Path(exc.filename) == self.root:
            self.logger.warning("%s", err)
        else:
            self.logger.info("%s", err)

    def _is_candidate(self, path: Path) -> bool:
        if not has_eligible_extension(path, self.extensions):
            return False
        # is_file() follows symlinks; broken links and directories fall out here
        if not path.is_file():
            return False
        if self.max_file_size is not None:
            try:
                size = path.stat().st_size
            except OSError as exc:
                self._on_walk_error(exc)
                return False
            if size > self.max_file_size:
                self.logger.info("Skipping %s: %d bytes exceeds max file size", path, size)
                return False
        return True

    def iter_files(self) -> Iterator[Path]:
        if self.root.is_file():
            if self._is_candidate(self.root):
                yield self.root
            return

        for dirpath, dirnames, filenames in os.walk(self.root, onerror=self._on_walk_error):
            dirnames[:] = sorted(d for d in dirnames if d not in self.exclude_dirs)
            for filename in sorted(filenames):
                path = Path(dirpath, filename)
                if self._is_candidate(path):
                    yield path

    def scan(self) -> ScanResult:
        files = list(self.iter_files())
        total_files = len(files)

        if self.verbose:
            self.logger.info("Discovered %d file(s) to scan under %s", total_files, self.root)

        result = ScanResult()
        if not total_files:
            return result

        aggregator = Aggregator()
        progress_bar = None
        if self.show_progress:
            progress_bar = tqdm(total=total_files, desc=self.progress_desc, unit="file")

        deadline = time.monotonic() + self.timeout if self.timeout is not None else None
        executor = ThreadPoolExecutor(max_workers=self.workers)
        try:
            futures: Dict[Future, Path] = {executor.submit(self._scan_file, path): path for path in files}
            pending = set(futures)
            while pending:
                done, pending = wait(pending, timeout=POLL_INTERVAL_SECONDS, return_when=FIRST_COMPLETED)
                for future in done:
                    self._collect(future, futures[future], aggregator, result)
                    if progress_bar is not None:
                        progress_bar.update(1)
                if pending and self._should_stop(deadline):
                    result.cancelled = True
                    for future in pending:
                        future.cancel()
                    # cancelled futures are done at once; running ones are waited for
                    done, _ = wait(pending)
                    for future in done:
                        if not future.cancelled():
                            self._collect(future, futures[future], aggregator, result)
                    self.logger.warning(
                        "Scan stopped early; %d of %d file(s) scanned",
                        result.files_scanned + result.files_unreadable,
                        total_files,
                    )
                    break
        except KeyboardInterrupt:
            if self.verbose:
                self.logger.info("Scan interrupted by user; shutting down workers")
            raise
        finally:
            executor.shutdown(wait=True, cancel_futures=True)
            if progress_bar is not None:
                progress_bar.close()

        result.findings = aggregator.results()
        return result

    def _should_stop(self, deadline: Optional[float]) -> bool:
        if self._cancel_event.is_set():
            return True
        if deadline is not None and time.monotonic() >= deadline:
            self.logger.warning("Scan timeout of %.1fs reached", self.timeout)
            self._cancel_event.set()
            return True
        return False

    def _collect(self, future: Future, path: Path, aggregator: Aggregator, result: ScanResult) -> None:
        try:
            findings = future.result()
        except ReadError as exc:
            result.files_unreadable += 1
            self.logger.info("Skipping %s: %s", path, exc.reason)
            return
        except Exception as exc:
            result.files_unreadable += 1
            if self.verbose:
                self.logger.exception("Error scanning %s", path)
            else:
                self.logger.warning("Error scanning %s: %s", path, exc)
            return
        result.files_scanned += 1
        aggregator.add(str(path), findings)

    def _scan_file(self, path: Path) -> List[Finding]:
        start_time = time.perf_counter()
        try:
            return scan_path(path, self.rules)
        finally:
            duration = time.perf_counter() - start_time
            self._maybe_log_slow_file(path, duration)

    def _format_display_path(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.root))
        except ValueError:
            return str(path)

    def _maybe_log_slow_file(self, path: Path, duration: float) -> None:
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        if duration < self._slow_log_threshold:
            return
        try:
            size_str = f"{path.stat().st_size:,} bytes"
        except OSError:
            size_str = "unknown size"
        self.logger.debug(
            "Slow scan for %s took %.2fs (size=%s, rules=%d)",
            self._format_display_path(path),
            duration,
            size_str,
            len(self.rules),
        )


class SingleFileScanner:
    """Scan one explicitly named file. The extension allow-list does not apply."""

    def __init__(
        self,
        file_path: Union[str, Path],
        rules: Sequence[Rule],
        *,
        logger: Optional[logging.Logger] = None,
        verbose: bool = False,
    ) -> None:
        self.file_path = Path(file_path)
        self.rules = tuple(rules)
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        self.verbose = verbose
        if verbose:
            self.logger.setLevel(logging.INFO)

    def scan(self) -> ScanResult:
        result = ScanResult()
        try:
            findings = scan_path(self.file_path, self.rules)
        except ReadError as exc:
            self.logger.info("Skipping %s: %s", self.file_path, exc.reason)
            result.files_unreadable = 1
            return result
        result.files_scanned = 1
        result.findings = findings
        return result
