from __future__ import annotations
import importlib
import pkgutil
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Type

from .errors import ConfigurationError
from .models import Rule, Severity
from ..rules.base import RulePack


def _discover_package_classes(pkg, base_cls) -> Dict[str, Type]:
    discovered: Dict[str, Type] = {}
    for m in pkgutil.iter_modules(pkg.__path__, pkg.__name__ + "."):
        module = importlib.import_module(m.name)
        for attr_name in dir(module):
            obj = getattr(module, attr_name)
            if isinstance(obj, type) and issubclass(obj, base_cls) and obj is not base_cls:
                name = getattr(obj, "NAME", obj.__name__).lower()
                discovered[name] = obj
    return discovered


def discover_rule_packs() -> Dict[str, RulePack]:
    """Instantiate every built-in pack, ordered by ORDER then NAME."""
    from .. import rules as rules_pkg  # lazy import
    classes = _discover_package_classes(rules_pkg, RulePack)
    ordered = sorted(classes.items(), key=lambda item: (item[1].ORDER, item[0]))
    return {name: cls() for name, cls in ordered}


def select_rule_packs(all_packs: Dict[str, RulePack], selector: str) -> Dict[str, RulePack]:
    selector = (selector or "").strip().lower()
    if selector == "all" or selector == "*":
        return dict(all_packs)
    wanted = {t.strip() for t in selector.split(",") if t.strip()}
    # keep discovery order regardless of the order names were given in
    return {name: pack for name, pack in all_packs.items() if name in wanted}


def build_rules(triples: Iterable[Tuple[str, str, str]]) -> List[Rule]:
    """Compile ``(name, pattern source, severity)`` triples.

    The first invalid entry raises ConfigurationError, so a bad rule set never
    reaches the scanner.
    """
    rules: List[Rule] = []
    for index, item in enumerate(triples, start=1):
        try:
            name, pattern, severity = item
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"Rule #{index} must be a (name, pattern, severity) triple, got {item!r}"
            ) from None
        rules.append(Rule.from_source(name, pattern, severity))
    return rules


def rules_from_packs(packs: Dict[str, RulePack]) -> List[Rule]:
    triples: List[Tuple[str, str, str]] = []
    for pack in packs.values():
        triples.extend(pack.triples())
    return build_rules(triples)


def default_rules() -> List[Rule]:
    return rules_from_packs(discover_rule_packs())


def parse_rule_spec(spec: str) -> Tuple[str, str, str]:
    """Split ``NAME:SEVERITY:PATTERN``. The pattern may itself contain colons."""
    parts = (spec or "").split(":", 2)
    if len(parts) != 3 or not parts[0].strip() or not parts[2]:
        raise ConfigurationError(
            f"Invalid rule {spec!r}; expected NAME:SEVERITY:PATTERN"
        )
    name, severity, pattern = parts
    try:
        Severity.parse(severity)
    except ConfigurationError as exc:
        raise ConfigurationError(f"Invalid rule {spec!r}: {exc}") from None
    return name.strip(), pattern, severity.strip()


def load_rules(selector: str = "all", extra: Sequence[str] = ()) -> List[Rule]:
    """Rules from the selected packs followed by ``NAME:SEVERITY:PATTERN`` extras."""
    selector = (selector or "").strip().lower()
    packs = {} if selector == "none" else select_rule_packs(discover_rule_packs(), selector)
    rules = rules_from_packs(packs)
    rules.extend(build_rules(parse_rule_spec(spec) for spec in extra))
    if not rules:
        raise ConfigurationError(f"No rules selected by {selector!r}")
    return rules


def describe_rule_packs(packs: Optional[Dict[str, RulePack]] = None) -> str:
    """One ``name (description)`` entry per pack, for help text."""
    if packs is None:
        packs = discover_rule_packs()
    entries = []
    for name, pack in packs.items():
        entries.append(f"{name} ({pack.DESCRIPTION})" if pack.DESCRIPTION else name)
    return "; ".join(entries)
