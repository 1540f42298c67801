from __future__ import annotations

import threading
from typing import Dict, Iterable, List

from .models import Finding


class Aggregator:
    """Collect per-file findings and hand them back in a reproducible order.

    Each file's sequence is stored whole, so results from different files never
    interleave. ``results()`` groups files by sorted path and keeps each group in
    the (line, rule) order the scanner produced it in, which makes the output
    independent of the order in which concurrent scans complete.
    """

    def __init__(self) -> None:
        self._by_file: Dict[str, List[Finding]] = {}
        self._lock = threading.Lock()

    def add(self, file_path: str, findings: Iterable[Finding]) -> None:
        batch = list(findings)
        with self._lock:
            if file_path in self._by_file:
                raise ValueError(f"Findings for {file_path} were already collected")
            self._by_file[file_path] = batch

    def __len__(self) -> int:
        with self._lock:
            return sum(len(batch) for batch in self._by_file.values())

    @property
    def files(self) -> List[str]:
        with self._lock:
            return sorted(self._by_file)

    def results(self) -> List[Finding]:
        with self._lock:
            return [f for path in sorted(self._by_file) for f in self._by_file[path]]
