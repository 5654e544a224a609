"""Pay Plan - paycheck-level payroll and cash-flow projections."""

__version__ = "0.3.0"
