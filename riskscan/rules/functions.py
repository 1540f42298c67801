from __future__ import annotations

from .base import RulePack


class DangerousFunctionsPack(RulePack):
    NAME = "functions"
    ORDER = 10
    DESCRIPTION = "Calls that evaluate code or spawn shell commands."
    RULES = [
        ("Dangerous Eval", r"eval\(", "HIGH"),
        ("Dangerous Exec", r"exec\(", "HIGH"),
        ("System Command", r"system\(", "HIGH"),
    ]
