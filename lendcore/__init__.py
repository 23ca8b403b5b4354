"""Accrual and risk-accounting core of a collateralized lending pool."""

__version__ = "0.1.0"
