"""
Audit Logger

Every significant action is written to the structured log as an AuditEvent.
The relay and the UI call configure_logging() once at startup; modules then
use structlog.get_logger() directly.
"""

import logging
from typing import Optional

import structlog

from cashbook.models.audit import AuditEvent, AuditEventBuilder


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """Configure stdlib logging and structlog for this process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
    )
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """Central audit logging service."""
    
    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or structlog.get_logger("cashbook.audit")
    
    def log(self, event: AuditEvent) -> None:
        """Log an audit event at its own severity."""
        log_dict = event.to_log_dict()
        severity = event.severity.value
        
        if severity == "error":
            self._logger.error("audit_event", **log_dict)
        elif severity == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif severity == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)
    
    def log_transaction_recorded(
        self,
        transaction_id: str,
        type_: str,
        amount: str,
        has_receipt: bool,
    ) -> None:
        self.log(AuditEventBuilder.transaction_recorded(
            transaction_id=transaction_id,
            type_=type_,
            amount=amount,
            has_receipt=has_receipt,
        ))
    
    def log_employee_added(self, employee_id: str, name: str) -> None:
        self.log(AuditEventBuilder.employee_added(employee_id, name))
    
    def log_payslip_issued(
        self,
        payslip_id: str,
        employee_id: str,
        net_salary: str,
        transaction_id: Optional[str],
    ) -> None:
        self.log(AuditEventBuilder.payslip_issued(
            payslip_id=payslip_id,
            employee_id=employee_id,
            net_salary=net_salary,
            transaction_id=transaction_id,
        ))
    
    def log_payslips_generated(
        self,
        count: int,
        period_start: str,
        period_end: str,
    ) -> None:
        self.log(AuditEventBuilder.payslips_generated(count, period_start, period_end))
    
    def log_receipt_uploaded(self, key: str, size: int, public_url: str) -> None:
        self.log(AuditEventBuilder.receipt_uploaded(key, size, public_url))
    
    def log_receipt_upload_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.receipt_upload_failed(key, error_message))
    
    def log_sign_in_succeeded(self, user_id: str, email: str) -> None:
        self.log(AuditEventBuilder.sign_in_succeeded(user_id, email))
    
    def log_sign_in_failed(self, email: str, error_message: str) -> None:
        self.log(AuditEventBuilder.sign_in_failed(email, error_message))
    
    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
