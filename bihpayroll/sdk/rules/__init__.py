"""rules - Time-versioned tax rule resolution.

Scope:
- Rule lookup by (jurisdiction, rule code, as-of date)
- Batch lookup of every code a calculator needs
- Loading rule tables from YAML (bundled table or configured file)

Constraints:
- Read-only - rule CRUD belongs to the surrounding service
- A missing rule is never replaced by a default rate

Usage:
    from bihpayroll.sdk.rules import load_rule_store

    store = load_rule_store()
    rule = store.resolve(Jurisdiction.FBIH, "PIO_FROM", date(2024, 1, 1))
"""

from .store import (
    RuleStore,
    InMemoryRuleStore,
    require_rule,
    parse_rules,
    load_rule_store,
)

__all__ = [
    "RuleStore",
    "InMemoryRuleStore",
    "require_rule",
    "parse_rules",
    "load_rule_store",
]
