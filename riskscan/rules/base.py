from __future__ import annotations

from typing import List, Tuple

RuleTriple = Tuple[str, str, str]


class RulePack:
    """
    Base class for built-in rule packs. Subclasses set NAME, ORDER, DESCRIPTION
    and a RULES table of (name, pattern source, severity) triples at the top.
    Packs are combined in ascending ORDER; rules keep their table order within
    a pack. Compilation happens in the loader, never here.
    """
    NAME: str = "base"
    ORDER: int = 100
    DESCRIPTION: str = ""
    RULES: List[RuleTriple] = []

    def triples(self) -> List[RuleTriple]:
        return list(self.RULES)
