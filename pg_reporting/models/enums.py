"""
Database enums for the reporting domain.
"""

import enum


class PgType(str, enum.Enum):
    """Tenant segment every PG belongs to."""
    MENS = "mens"
    WOMENS = "womens"


class ReportType(str, enum.Enum):
    """Reporting period granularity."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class PaymentStatus(str, enum.Enum):
    """Collection outcome of a payment."""
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class ApprovalStatus(str, enum.Enum):
    """Administrative review outcome of a payment; terminal once decided."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EntryType(str, enum.Enum):
    """Expense ledger direction."""
    CASH_IN = "cash_in"
    CASH_OUT = "cash_out"


class LeavingRequestStatus(str, enum.Enum):
    """Member departure request lifecycle."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"
