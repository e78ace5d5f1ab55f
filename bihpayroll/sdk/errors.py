"""Exception hierarchy for payroll calculations.

Every failure the engine raises derives from PayrollError so callers (CLI,
MCP server, batch runners) can catch a single type. None of these are retried
internally - retry policy belongs to the caller.
"""

from datetime import date


class PayrollError(Exception):
    """Base class for payroll engine errors."""
    pass


class UnknownJurisdictionError(PayrollError):
    """Raised when a jurisdiction tag is outside FBIH, RS, BD."""

    def __init__(self, jurisdiction):
        self.jurisdiction = jurisdiction
        super().__init__(f"Unknown jurisdiction: {jurisdiction}")


class MissingRuleError(PayrollError):
    """Raised when a required tax rule has no version valid on the given date."""

    def __init__(self, jurisdiction: str, rule_code: str, as_of: date):
        self.jurisdiction = jurisdiction
        self.rule_code = rule_code
        self.as_of = as_of
        super().__init__(
            f"Missing tax rule {jurisdiction}/{rule_code} for {as_of.isoformat()}"
        )


class MissingPensionChoiceError(PayrollError):
    """Raised for BD calculations without a pension fund choice."""

    def __init__(self):
        super().__init__("Pension fund choice is required for BD jurisdiction")


class PeriodNotFoundError(PayrollError):
    """Raised when a payroll period cannot be found."""

    def __init__(self, period_id):
        self.period_id = period_id
        super().__init__(f"Payroll period not found: {period_id}")


class OrganizationNotFoundError(PayrollError):
    """Raised when a tenant (organization) cannot be found."""

    def __init__(self, tenant_id):
        self.tenant_id = tenant_id
        super().__init__(f"Tenant not found: {tenant_id}")


class RulesFileError(PayrollError):
    """Raised when a rules or directory YAML file is missing or invalid."""
    pass
