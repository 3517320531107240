"""Lender position and pool statistics reconciliation for a lending pool."""

__version__ = "0.1.0"
