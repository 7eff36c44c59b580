"""
Data Models Package

This package contains all Pydantic models used in Cashbook.
Rows read from and written to the data platform conform to these schemas.
"""

from cashbook.models.ledger import (
    NewTransaction,
    Transaction,
    TransactionType,
)
from cashbook.models.payroll import (
    Employee,
    NewEmployee,
    NewPayslip,
    Payslip,
    PayslipAdjustments,
    PayslipTotals,
)
from cashbook.models.receipt import UploadedReceipt
from cashbook.models.session import Session
from cashbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "NewTransaction",
    "Transaction",
    "TransactionType",
    # Payroll models
    "Employee",
    "NewEmployee",
    "NewPayslip",
    "Payslip",
    "PayslipAdjustments",
    "PayslipTotals",
    # Receipts and session
    "UploadedReceipt",
    "Session",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
