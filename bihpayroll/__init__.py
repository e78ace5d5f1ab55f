"""bih-payroll - Payroll calculation engine for FBiH, RS and Brcko District."""

__version__ = "0.1.0"
