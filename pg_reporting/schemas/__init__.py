from pg_reporting.schemas.report import (
    CardMetrics,
    CashFlowStatus,
    CompleteReport,
    FinancialSummaryRow,
    PaymentAnalyticsRow,
    PeriodWindow,
    PGPerformanceRow,
    ReportCards,
    ReportTable,
    ReportTables,
    RoomUtilizationRow,
)

__all__ = [
    "CardMetrics",
    "CashFlowStatus",
    "CompleteReport",
    "FinancialSummaryRow",
    "PaymentAnalyticsRow",
    "PeriodWindow",
    "PGPerformanceRow",
    "ReportCards",
    "ReportTable",
    "ReportTables",
    "RoomUtilizationRow",
]
