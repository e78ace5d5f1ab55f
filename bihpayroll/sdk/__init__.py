"""bih-payroll SDK - Core payroll calculation functionality."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_rules_path,
    get_directory_path,
    get_default_tax_factor,
    get_data_path,
    ConfigNotFoundError,
    KNOWN_SETTINGS,
)

from .errors import (
    PayrollError,
    UnknownJurisdictionError,
    MissingRuleError,
    MissingPensionChoiceError,
    PeriodNotFoundError,
    OrganizationNotFoundError,
    RulesFileError,
)

from .schemas import (
    Jurisdiction,
    RuleType,
    PensionFundChoice,
    TaxRule,
    CalculationInput,
    CalculationResult,
    NetToGrossResult,
    parse_jurisdiction,
)

from .rules import InMemoryRuleStore, load_rule_store, require_rule

from .engine import (
    calculate_payroll,
    solve_net_to_gross,
    solve_gross_for_net,
)

from .payroll import (
    load_directory,
    process_period,
    seniority_hundredths,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_rules_path",
    "get_directory_path",
    "get_default_tax_factor",
    "get_data_path",
    "ConfigNotFoundError",
    "KNOWN_SETTINGS",
    # Errors
    "PayrollError",
    "UnknownJurisdictionError",
    "MissingRuleError",
    "MissingPensionChoiceError",
    "PeriodNotFoundError",
    "OrganizationNotFoundError",
    "RulesFileError",
    # Schemas
    "Jurisdiction",
    "RuleType",
    "PensionFundChoice",
    "TaxRule",
    "CalculationInput",
    "CalculationResult",
    "NetToGrossResult",
    "parse_jurisdiction",
    # Rules
    "InMemoryRuleStore",
    "load_rule_store",
    "require_rule",
    # Engine
    "calculate_payroll",
    "solve_net_to_gross",
    "solve_gross_for_net",
    # Payroll runs
    "load_directory",
    "process_period",
    "seniority_hundredths",
]
