import pytest

from riskscan.core.errors import ConfigurationError
from riskscan.core.loader import (
    build_rules,
    default_rules,
    describe_rule_packs,
    discover_rule_packs,
    load_rules,
    parse_rule_spec,
    rules_from_packs,
    select_rule_packs,
)
from riskscan.rules.base import RulePack
from riskscan.core.models import Severity


def test_default_rules_keep_reference_order():
    rules = default_rules()
    assert [(r.name, r.severity) for r in rules] == [
        ("Dangerous Eval", Severity.HIGH),
        ("Dangerous Exec", Severity.HIGH),
        ("System Command", Severity.HIGH),
        ("AWS Access Key", Severity.CRITICAL),
        ("Generic API Key", Severity.HIGH),
        ("Hardcoded Password", Severity.MEDIUM),
    ]


def test_discover_rule_packs():
    packs = discover_rule_packs()
    assert list(packs) == ["functions", "secrets"]


def test_select_rule_packs():
    packs = discover_rule_packs()
    assert list(select_rule_packs(packs, "all")) == ["functions", "secrets"]
    assert list(select_rule_packs(packs, "secrets, functions")) == ["functions", "secrets"]
    assert select_rule_packs(packs, "nope") == {}


def test_build_rules_rejects_bad_entries():
    with pytest.raises(ConfigurationError):
        build_rules([("Ok", "ok", "LOW"), ("Bad", "[unclosed", "HIGH")])
    with pytest.raises(ConfigurationError):
        build_rules([("Missing severity", "x")])


def test_parse_rule_spec_keeps_colons_in_pattern():
    assert parse_rule_spec("Port:LOW:localhost:\\d+") == ("Port", "localhost:\\d+", "LOW")


@pytest.mark.parametrize("spec", ["", "NoParts", "Name:HIGH", ":HIGH:x", "Name:NOPE:x"])
def test_parse_rule_spec_rejects_malformed(spec):
    with pytest.raises(ConfigurationError):
        parse_rule_spec(spec)


def test_load_rules_with_extras():
    rules = load_rules("functions", ["Console:LOW:console\\.log\\("])
    assert [r.name for r in rules] == ["Dangerous Eval", "Dangerous Exec", "System Command", "Console"]


def test_load_rules_empty_selection_is_an_error():
    with pytest.raises(ConfigurationError):
        load_rules("none", [])


def test_malformed_pack_entry_fails_through_build_rules():
    class BrokenPack(RulePack):
        NAME = "broken"
        RULES = [("Dangerous Eval", r"eval\(", "HIGH"), ("Half a rule", "x")]

    with pytest.raises(ConfigurationError) as excinfo:
        rules_from_packs({"broken": BrokenPack()})
    assert "Rule #2" in str(excinfo.value)


def test_describe_rule_packs():
    assert describe_rule_packs() == (
        "functions (Calls that evaluate code or spawn shell commands.); "
        "secrets (Hardcoded credentials and cloud access keys.)"
    )

    class Bare(RulePack):
        NAME = "bare"

    assert describe_rule_packs({"bare": Bare()}) == "bare"
