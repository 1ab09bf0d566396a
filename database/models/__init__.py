"""
Database models package.
Export all models for easy importing.
"""

# Company (MUST be imported first - payments reference it)
from .company import (
    Company,
)

# Payment ledger
from .payment import (
    Payment,
)


__all__ = [
    'Company',
    'Payment',
]
