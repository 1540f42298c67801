from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .errors import ConfigurationError


class Severity(str, Enum):
    """Severity tiers, ordered CRITICAL > HIGH > MEDIUM > LOW."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @classmethod
    def parse(cls, value: Union[str, "Severity"]) -> "Severity":
        if isinstance(value, Severity):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise ConfigurationError(f"Unknown severity {value!r} (expected one of: {allowed})") from None


_RANKS = {
    Severity.CRITICAL: 3,
    Severity.HIGH: 2,
    Severity.MEDIUM: 1,
    Severity.LOW: 0,
}


@dataclass(frozen=True)
class Rule:
    name: str
    pattern: "re.Pattern[str]"
    severity: Severity

    @classmethod
    def from_source(cls, name: str, pattern_source: str, severity: Union[str, Severity]) -> "Rule":
        """Compile a rule, raising ConfigurationError for a bad name, pattern or severity."""

        name = (name or "").strip()
        if not name:
            raise ConfigurationError("Rule name must not be empty")
        try:
            compiled = re.compile(pattern_source)
        except (re.error, TypeError) as exc:
            raise ConfigurationError(f"Invalid pattern for rule {name!r}: {exc}") from exc
        return cls(name=name, pattern=compiled, severity=Severity.parse(severity))

    def matches(self, line: str) -> bool:
        return self.pattern.search(line) is not None


@dataclass(frozen=True)
class Finding:
    file_path: str
    line_number: int
    rule_name: str
    severity: Severity
    code_snippet: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_path": self.file_path,
            "line_number": self.line_number,
            "rule_name": self.rule_name,
            "severity": self.severity.value,
            "code_snippet": self.code_snippet,
        }


@dataclass
class ScanResult:
    findings: List[Finding] = field(default_factory=list)
    files_scanned: int = 0
    files_unreadable: int = 0
    cancelled: bool = False

    def counts_by_severity(self) -> Dict[Severity, int]:
        counts = {severity: 0 for severity in sorted(Severity, key=lambda s: s.rank, reverse=True)}
        for finding in self.findings:
            counts[finding.severity] += 1
        return counts

    def max_severity(self) -> Optional[Severity]:
        if not self.findings:
            return None
        return max((f.severity for f in self.findings), key=lambda s: s.rank)
