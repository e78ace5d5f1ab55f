"""Employee directory: read access to tenants, employees, contracts, periods.

The directory is the batch processor's view of the surrounding service's
records. InMemoryDirectory is the default implementation; load_directory()
builds one from a YAML file with 'tenants', 'employees', 'contracts' and
'periods' lists.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Protocol

import yaml
from pydantic import ValidationError

from ..config import get_directory_path
from ..errors import RulesFileError
from .schemas import Contract, Employee, PayrollPeriod, Tenant

logger = logging.getLogger(__name__)


class PayrollDirectory(Protocol):
    """Read contract consumed by process_period."""

    def get_tenant(self, tenant_id: int) -> Optional[Tenant]:
        ...

    def get_period(self, period_id: int) -> Optional[PayrollPeriod]:
        ...

    def list_active_employees(self, tenant_id: int) -> List[Employee]:
        ...

    def get_active_contract(self, employee_id: int) -> Optional[Contract]:
        ...


class InMemoryDirectory:
    """Directory held in plain lists."""

    def __init__(
        self,
        tenants: Iterable[Tenant] = (),
        employees: Iterable[Employee] = (),
        contracts: Iterable[Contract] = (),
        periods: Iterable[PayrollPeriod] = (),
    ):
        self.tenants = list(tenants)
        self.employees = list(employees)
        self.contracts = list(contracts)
        self.periods = list(periods)

    def get_tenant(self, tenant_id: int) -> Optional[Tenant]:
        return next((t for t in self.tenants if t.id == tenant_id), None)

    def get_period(self, period_id: int) -> Optional[PayrollPeriod]:
        return next((p for p in self.periods if p.id == period_id), None)

    def list_active_employees(self, tenant_id: int) -> List[Employee]:
        return [e for e in self.employees if e.tenant_id == tenant_id and e.is_active]

    def get_active_contract(self, employee_id: int) -> Optional[Contract]:
        """First active contract for the employee, in directory order."""
        return next(
            (c for c in self.contracts if c.employee_id == employee_id and c.is_active),
            None,
        )


_SECTIONS = (
    ("tenants", Tenant),
    ("employees", Employee),
    ("contracts", Contract),
    ("periods", PayrollPeriod),
)


def parse_directory(data: dict, source: str = "<dict>") -> InMemoryDirectory:
    """Validate a parsed directory document.

    Raises:
        RulesFileError: If a section is not a list or an entry is invalid
    """
    if not isinstance(data, dict):
        raise RulesFileError(f"{source}: expected a mapping at top level")

    sections = {}
    for key, model in _SECTIONS:
        entries = data.get(key) or []
        if not isinstance(entries, list):
            raise RulesFileError(f"{source}: '{key}' must be a list")
        parsed = []
        for index, entry in enumerate(entries):
            try:
                parsed.append(model.model_validate(entry))
            except ValidationError as e:
                raise RulesFileError(f"{source}: {key} #{index + 1} is invalid: {e}") from e
        sections[key] = parsed

    return InMemoryDirectory(**sections)


def load_directory(path: Optional[Path] = None) -> InMemoryDirectory:
    """Load the employee directory from YAML.

    Args:
        path: Directory file; defaults to settings 'directory_file'

    Raises:
        ConfigNotFoundError: No path given or configured
        RulesFileError: File missing or invalid
    """
    directory_path = get_directory_path(path)
    if not directory_path.exists():
        raise RulesFileError(f"Directory file not found: {directory_path}")

    with open(directory_path, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RulesFileError(f"{directory_path}: invalid YAML: {e}") from e

    directory = parse_directory(data or {}, source=str(directory_path))
    logger.debug(
        f"loaded directory {directory_path}: {len(directory.tenants)} tenant(s), "
        f"{len(directory.employees)} employee(s), {len(directory.contracts)} contract(s)"
    )
    return directory
