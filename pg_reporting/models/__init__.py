"""ORM models; importing this package registers every table on Base.metadata."""

from pg_reporting.models.enums import (
    ApprovalStatus,
    EntryType,
    LeavingRequestStatus,
    PaymentStatus,
    PgType,
    ReportType,
)
from pg_reporting.models.pg import PG
from pg_reporting.models.room import Room
from pg_reporting.models.member import Member
from pg_reporting.models.payment import Payment
from pg_reporting.models.expense import Expense
from pg_reporting.models.leaving_request import LeavingRequest
from pg_reporting.models.cached_report import CachedReport

__all__ = [
    "ApprovalStatus",
    "EntryType",
    "LeavingRequestStatus",
    "PaymentStatus",
    "PgType",
    "ReportType",
    "PG",
    "Room",
    "Member",
    "Payment",
    "Expense",
    "LeavingRequest",
    "CachedReport",
]
