"""Time-versioned tax rule storage and lookup.

A rule store answers one question: which version of (jurisdiction, rule_code)
is valid on a given date. Versions of the same rule must not overlap; if
they do, the first match in store order wins so results stay deterministic.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

import yaml
from pydantic import ValidationError

from ..config import get_rules_path
from ..errors import MissingRuleError, RulesFileError
from ..schemas import Jurisdiction, TaxRule, parse_jurisdiction

logger = logging.getLogger(__name__)


class RuleStore(Protocol):
    """Read-only rule lookup contract consumed by the engine."""

    def resolve(self, jurisdiction: Jurisdiction, rule_code: str, as_of: date) -> Optional[TaxRule]:
        ...

    def resolve_many(
        self, jurisdiction: Jurisdiction, rule_codes: Sequence[str], as_of: date
    ) -> Dict[str, TaxRule]:
        ...

    def list_rules(self, jurisdiction: Optional[Jurisdiction] = None) -> List[TaxRule]:
        ...


class InMemoryRuleStore:
    """Rule store backed by a list of TaxRule objects."""

    def __init__(self, rules: Iterable[TaxRule] = ()):
        self._rules = list(rules)

    def __len__(self) -> int:
        return len(self._rules)

    def add(self, rule: TaxRule) -> None:
        self._rules.append(rule)

    def resolve(self, jurisdiction: Jurisdiction, rule_code: str, as_of: date) -> Optional[TaxRule]:
        """Return the rule version valid on as_of, or None."""
        jurisdiction = parse_jurisdiction(jurisdiction)
        for rule in self._rules:
            if (
                rule.jurisdiction == jurisdiction
                and rule.rule_code == rule_code
                and rule.is_valid_on(as_of)
            ):
                logger.debug(
                    f"resolved {jurisdiction.value}/{rule_code} @ {as_of}: "
                    f"{rule.rate_value} (from {rule.valid_from})"
                )
                return rule
        logger.debug(f"no rule for {jurisdiction.value}/{rule_code} @ {as_of}")
        return None

    def resolve_many(
        self, jurisdiction: Jurisdiction, rule_codes: Sequence[str], as_of: date
    ) -> Dict[str, TaxRule]:
        """Resolve every code in one call.

        Raises:
            MissingRuleError: For the first code with no valid version
        """
        jurisdiction = parse_jurisdiction(jurisdiction)
        resolved = {}
        for code in rule_codes:
            rule = self.resolve(jurisdiction, code, as_of)
            if rule is None:
                raise MissingRuleError(jurisdiction.value, code, as_of)
            resolved[code] = rule
        return resolved

    def list_rules(self, jurisdiction: Optional[Jurisdiction] = None) -> List[TaxRule]:
        """All rules, newest valid_from first, optionally for one jurisdiction."""
        rules = self._rules
        if jurisdiction is not None:
            jurisdiction = parse_jurisdiction(jurisdiction)
            rules = [r for r in rules if r.jurisdiction == jurisdiction]
        return sorted(rules, key=lambda r: r.valid_from, reverse=True)


def require_rule(store: RuleStore, jurisdiction: Jurisdiction, rule_code: str, as_of: date) -> TaxRule:
    """Resolve a rule the calculation cannot proceed without.

    Raises:
        MissingRuleError: If no version is valid on as_of
    """
    rule = store.resolve(jurisdiction, rule_code, as_of)
    if rule is None:
        raise MissingRuleError(parse_jurisdiction(jurisdiction).value, rule_code, as_of)
    return rule


def parse_rules(data: dict, source: str = "<dict>") -> List[TaxRule]:
    """Validate a parsed rules document ({'rules': [...]}).

    Raises:
        RulesFileError: If the document shape or any rule is invalid
    """
    if not isinstance(data, dict) or not isinstance(data.get("rules"), list):
        raise RulesFileError(f"{source}: expected a top-level 'rules' list")

    rules = []
    for index, entry in enumerate(data["rules"]):
        try:
            rules.append(TaxRule.model_validate(entry))
        except ValidationError as e:
            raise RulesFileError(f"{source}: rule #{index + 1} is invalid: {e}") from e
    return rules


def load_rule_store(path: Optional[Path] = None) -> InMemoryRuleStore:
    """Load a rule store from YAML.

    Args:
        path: Rules file. Defaults to the configured or bundled table.

    Raises:
        RulesFileError: If the file is missing or invalid
    """
    rules_path = get_rules_path(path)
    if not rules_path.exists():
        raise RulesFileError(f"Tax rules file not found: {rules_path}")

    with open(rules_path, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RulesFileError(f"{rules_path}: invalid YAML: {e}") from e

    rules = parse_rules(data, source=str(rules_path))
    logger.debug(f"loaded {len(rules)} tax rules from {rules_path}")
    return InMemoryRuleStore(rules)
