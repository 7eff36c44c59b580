"""
Application Wiring

Builds one configured data platform client and the services, forms and
gate that share it. The client is constructed once per UI session and passed
by reference; nothing else constructs platform clients.
"""

from dataclasses import dataclass
from typing import Optional

from cashbook.audit import AuditLogger
from cashbook.config import AppSettings, Settings, get_settings
from cashbook.forms import EmployeeForm, SessionGate, TransactionEntryForm
from cashbook.ledger import LedgerService
from cashbook.payroll import PayrollService
from cashbook.services.platform.interface import DataPlatform
from cashbook.services.receipts import build_receipt_uploader


@dataclass
class AppComponents:
    """Everything the UI needs, built around a single platform client."""
    
    platform: DataPlatform
    app_settings: AppSettings
    audit_logger: AuditLogger
    ledger: LedgerService
    payroll: PayrollService
    entry_form: TransactionEntryForm
    employee_form: EmployeeForm
    session_gate: SessionGate


def create_app_components(
    platform: Optional[DataPlatform] = None,
    settings: Optional[Settings] = None,
) -> AppComponents:
    """
    Factory function to create all application components.
    
    Args:
        platform: Data platform client. Built from SUPABASE_* settings
            when omitted.
        settings: Settings to use instead of the cached ones.
    
    Raises:
        pydantic.ValidationError: If required platform settings are missing
            or malformed
        PlatformConfigurationError: If the platform SDK rejects them
    """
    settings = settings or get_settings()
    app_settings = settings.app
    
    if platform is None:
        from cashbook.services.platform.supabase_client import SupabasePlatform
        
        platform = SupabasePlatform.from_settings(settings.supabase)
    
    audit_logger = AuditLogger()
    ledger = LedgerService(platform)
    payroll = PayrollService(platform, ledger, audit_logger)
    uploader = build_receipt_uploader(
        app_settings.upload_proxy_url,
        platform,
        bucket=app_settings.receipts_bucket,
        audit_logger=audit_logger,
    )
    
    return AppComponents(
        platform=platform,
        app_settings=app_settings,
        audit_logger=audit_logger,
        ledger=ledger,
        payroll=payroll,
        entry_form=TransactionEntryForm(ledger, uploader, audit_logger),
        employee_form=EmployeeForm(payroll),
        session_gate=SessionGate(platform, audit_logger),
    )
