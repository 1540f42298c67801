"""Static scanner for dangerous calls and hardcoded credentials in source trees."""

from .core.aggregator import Aggregator
from .core.errors import ConfigurationError, ReadError, RiskscanError, TraversalError
from .core.loader import build_rules, default_rules, load_rules
from .core.models import Finding, Rule, ScanResult, Severity
from .core.reporting import Reporter, TerminalReporter
from .core.scanner import DirectoryScanner, SingleFileScanner, scan_file

__version__ = "0.1.0"

__all__ = [
    "Aggregator",
    "ConfigurationError",
    "DirectoryScanner",
    "Finding",
    "ReadError",
    "Reporter",
    "RiskscanError",
    "Rule",
    "ScanResult",
    "Severity",
    "SingleFileScanner",
    "TerminalReporter",
    "TraversalError",
    "build_rules",
    "default_rules",
    "load_rules",
    "scan_file",
]
