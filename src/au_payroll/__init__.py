"""Australian payroll compliance core: awards, super, leave and STP events."""

__version__ = "0.1.0"
