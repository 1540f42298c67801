from __future__ import annotations
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional, TextIO

from .models import Finding, ScanResult, Severity

SEPARATOR = "-" * 50
RESET = "\033[0m"
BOLD_BLUE = "\033[1;34m"
SEVERITY_STYLES = {
    Severity.CRITICAL: "\033[1;31m",
    Severity.HIGH: "\033[31m",
    Severity.MEDIUM: "\033[33m",
    Severity.LOW: "\033[36m",
}


def _stream_supports_color(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # closed stream
        return False


class TerminalReporter:
    """Render a scan result as colored text, one block per finding."""

    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.color = _stream_supports_color(self.stream) if color is None else color

    def _style(self, text: str, style: str) -> str:
        if not self.color:
            return text
        return f"{style}{text}{RESET}"

    def _write(self, line: str = "") -> None:
        print(line, file=self.stream)

    def banner(self, path) -> None:
        self._write(self._style(f"Starting scan on: {path}", BOLD_BLUE))

    def finding(self, finding: Finding) -> None:
        label = self._style(finding.severity.value, SEVERITY_STYLES[finding.severity])
        self._write(SEPARATOR)
        self._write(f"{label} Found: {finding.rule_name}")
        self._write(f"File: {finding.file_path}:{finding.line_number}")
        self._write(f"Code: {finding.code_snippet}")

    def summary(self, result: ScanResult) -> None:
        if not result.findings:
            self._write("No findings.")
        else:
            self._write_counts(result)
        if result.cancelled:
            self._write("Scan stopped early; results are incomplete.")

    def _write_counts(self, result: ScanResult) -> None:
        self._write(SEPARATOR)
        parts = [
            f"{self._style(severity.value, SEVERITY_STYLES[severity])}: {count}"
            for severity, count in result.counts_by_severity().items()
            if count
        ]
        files = len({f.file_path for f in result.findings})
        self._write(
            f"{len(result.findings)} finding(s) in {files} file(s) ({', '.join(parts)})"
        )

    def render(self, result: ScanResult) -> None:
        for finding in result.findings:
            self.finding(finding)
        self.summary(result)


class Reporter:
    """Write findings.json, findings.md and summary.json into ``out_dir``."""

    def __init__(self, out_dir: Path) -> None:
        self.out_dir = out_dir

    def write_all(self, result: ScanResult, root: Optional[str] = None) -> Dict[str, str]:
        self.out_dir.mkdir(parents=True, exist_ok=True)

        findings_json = self.out_dir / "findings.json"
        findings_md = self.out_dir / "findings.md"
        summary_json = self.out_dir / "summary.json"

        data = [f.to_dict() for f in result.findings]
        findings_json.write_text(json.dumps(data, indent=2), encoding="utf-8")
        findings_md.write_text(self._markdown(result.findings), encoding="utf-8")

        summary = {
            "root": root,
            "findings": len(result.findings),
            "by_severity": {s.value: n for s, n in result.counts_by_severity().items()},
            "files_scanned": result.files_scanned,
            "files_unreadable": result.files_unreadable,
            "cancelled": result.cancelled,
        }
        summary_json.write_text(json.dumps(summary, indent=2), encoding="utf-8")

        return {
            "findings": str(findings_json),
            "markdown": str(findings_md),
            "summary": str(summary_json),
        }

    @staticmethod
    def _markdown(findings: List[Finding]) -> str:
        lines = ["# Scan Findings", ""]
        if not findings:
            lines.append("No findings.")
        for f in findings:
            lines.append(f"- **rule**: {f.rule_name}  ")
            lines.append(f"  **severity**: {f.severity.value}  ")
            lines.append(f"  **file**: {f.file_path}  ")
            lines.append(f"  **line**: {f.line_number}  ")
            lines.append(f"  **code**: `{f.code_snippet}`  ")
            lines.append("")
        return "\n".join(lines)
