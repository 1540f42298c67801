from __future__ import annotations

from .base import RulePack


class SecretsPack(RulePack):
    # Simplified patterns; quoted values only
    NAME = "secrets"
    ORDER = 20
    DESCRIPTION = "Hardcoded credentials and cloud access keys."
    RULES = [
        ("AWS Access Key", r"AKIA[0-9A-Z]{16}", "CRITICAL"),
        ("Generic API Key", r"""api_key\s*=\s*['"][a-zA-Z0-9]{20,}['"]""", "HIGH"),
        ("Hardcoded Password", r"""password\s*=\s*['"][a-zA-Z0-9@#$%]{6,}['"]""", "MEDIUM"),
    ]
