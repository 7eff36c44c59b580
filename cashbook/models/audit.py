"""
Audit Models for Cashbook

Significant actions (entries recorded, payslips issued, receipts uploaded,
sign-ins) produce an AuditEvent that is written to the structured log.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger
    TRANSACTION_RECORDED = "transaction_recorded"
    
    # Payroll
    EMPLOYEE_ADDED = "employee_added"
    PAYSLIP_ISSUED = "payslip_issued"
    PAYSLIPS_GENERATED = "payslips_generated"
    
    # Receipts
    RECEIPT_UPLOADED = "receipt_uploaded"
    RECEIPT_UPLOAD_FAILED = "receipt_upload_failed"
    
    # Session
    SIGN_IN_SUCCEEDED = "sign_in_succeeded"
    SIGN_IN_FAILED = "sign_in_failed"
    
    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""
    
    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO
    
    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'payslip', 'receipt')"
    )
    entity_id: Optional[str] = None
    
    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    is_user_action: bool = False
    
    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.
    
    Usage:
        event = AuditEventBuilder.transaction_recorded(transaction)
        event = AuditEventBuilder.sign_in_failed(email, message)
    """
    
    @staticmethod
    def transaction_recorded(
        transaction_id: str,
        type_: str,
        amount: str,
        has_receipt: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_RECORDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction recorded: {type_} {amount}",
            details={
                "type": type_,
                "amount": amount,
                "has_receipt": has_receipt,
            },
            is_user_action=True,
        )
    
    @staticmethod
    def employee_added(employee_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EMPLOYEE_ADDED,
            entity_type="employee",
            entity_id=employee_id,
            description=f"Employee added: {name}",
            is_user_action=True,
        )
    
    @staticmethod
    def payslip_issued(
        payslip_id: str,
        employee_id: str,
        net_salary: str,
        transaction_id: Optional[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYSLIP_ISSUED,
            entity_type="payslip",
            entity_id=payslip_id,
            description=f"Payslip issued: net {net_salary}",
            details={
                "employee_id": employee_id,
                "net_salary": net_salary,
                "transaction_id": transaction_id,
            },
            is_user_action=True,
        )
    
    @staticmethod
    def payslips_generated(count: int, period_start: str, period_end: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYSLIPS_GENERATED,
            entity_type="payslip",
            description=f"{count} payslips generated for {period_start} to {period_end}",
            details={
                "count": count,
                "period_start": period_start,
                "period_end": period_end,
            },
            is_user_action=True,
        )
    
    @staticmethod
    def receipt_uploaded(key: str, size: int, public_url: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECEIPT_UPLOADED,
            entity_type="receipt",
            entity_id=key,
            description=f"Receipt stored: {key}",
            details={
                "file_size_bytes": size,
                "public_url": public_url,
            },
        )
    
    @staticmethod
    def receipt_upload_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECEIPT_UPLOAD_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="receipt",
            entity_id=key,
            description=f"Receipt upload failed: {key}",
            error_message=error_message,
        )
    
    @staticmethod
    def sign_in_succeeded(user_id: str, email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIGN_IN_SUCCEEDED,
            entity_type="session",
            entity_id=user_id,
            description=f"Signed in: {email}",
            is_user_action=True,
        )
    
    @staticmethod
    def sign_in_failed(email: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIGN_IN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="session",
            description=f"Sign-in failed: {email}",
            error_message=error_message,
            is_user_action=True,
        )
    
    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
