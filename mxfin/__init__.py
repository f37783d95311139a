"""mx-fin - Mexican payroll tax and personal savings projection tools."""

__version__ = "0.3.0"
