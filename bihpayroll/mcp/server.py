"""bih-payroll MCP Server - FastMCP implementation for payroll tools."""

import logging
from datetime import date
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from bihpayroll.sdk import (
    CalculationInput,
    PayrollError,
    calculate_payroll,
    load_rule_store,
    solve_net_to_gross,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("bih-payroll")


# --- Tools ---

@mcp.tool()
async def calculate(
    jurisdiction: str = Field(description="Jurisdiction: 'FBIH', 'RS' or 'BD'"),
    gross_amount: int = Field(description="Gross salary in pfenig (200000 = 2000.00 KM)"),
    effective_date: str = Field(description="Date for rule resolution (YYYY-MM-DD)"),
    tax_factor: int = Field(default=100, description="Personal deduction factor x100 (100 = 1.0)"),
    seniority_hundredths: int = Field(default=0, description="Seniority in hundredths of a year"),
    work_days: int = Field(default=22, description="Work days in the period"),
    pension_fund_choice: str | None = Field(
        default=None, description="'FBIH_FUND' or 'RS_FUND' (required for BD)"
    ),
) -> dict[str, Any]:
    """Calculate contributions, income tax, net pay and employer cost from a gross salary."""
    try:
        calc_input = CalculationInput(
            jurisdiction=jurisdiction,
            gross_amount=gross_amount,
            work_days=work_days,
            seniority_hundredths=seniority_hundredths,
            tax_factor=tax_factor,
            effective_date=date.fromisoformat(effective_date),
            pension_fund_choice=pension_fund_choice,
        )
        result = calculate_payroll(calc_input, load_rule_store())
        return {"result": result.to_dict()}

    except (PayrollError, ValueError) as e:
        logger.error(f"Error calculating payroll: {e}")
        return {"error": str(e), "result": None}


@mcp.tool()
async def net_to_gross(
    jurisdiction: str = Field(description="Jurisdiction: 'FBIH', 'RS' or 'BD'"),
    target_net: int = Field(description="Desired net salary in pfenig"),
    effective_date: str = Field(description="Date for rule resolution (YYYY-MM-DD)"),
    tax_factor: int = Field(default=100, description="Personal deduction factor x100"),
    pension_fund_choice: str | None = Field(
        default=None, description="'FBIH_FUND' or 'RS_FUND' (required for BD)"
    ),
) -> dict[str, Any]:
    """Find the gross salary that yields a target net. 'converged': false means approximate."""
    try:
        solved = solve_net_to_gross(
            target_net,
            jurisdiction,
            tax_factor,
            date.fromisoformat(effective_date),
            pension_fund_choice=pension_fund_choice,
            store=load_rule_store(),
        )
        return {
            "gross_amount": solved.gross_amount,
            "converged": solved.converged,
            "iterations": solved.iterations,
            "result": solved.result.to_dict(),
        }

    except (PayrollError, ValueError) as e:
        logger.error(f"Error solving net to gross: {e}")
        return {"error": str(e), "gross_amount": None}


@mcp.tool()
async def list_tax_rules(
    jurisdiction: str | None = Field(default=None, description="Filter by jurisdiction"),
    as_of: str | None = Field(
        default=None, description="Only rules valid on this date (YYYY-MM-DD)"
    ),
) -> dict[str, Any]:
    """List tax rule versions, newest first. Rates are percent x100; deductions/limits are pfenig."""
    try:
        rules = load_rule_store().list_rules(jurisdiction)
        if as_of:
            as_of_date = date.fromisoformat(as_of)
            rules = [r for r in rules if r.is_valid_on(as_of_date)]

        return {
            "rules": [r.model_dump(mode="json") for r in rules],
            "count": len(rules),
        }

    except (PayrollError, ValueError) as e:
        logger.error(f"Error listing tax rules: {e}")
        return {"error": str(e), "rules": [], "count": 0}


def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
