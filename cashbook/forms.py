"""
Entry Forms and Session Gate

Each form keeps its state in an explicit object that lives as long as the
form. A submission validates locally first; nothing reaches the network
unless validation passes. Errors are written to ``state.error`` for inline
display: validation messages as worded here, platform messages verbatim.
State is reset only after the platform confirms the insert.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from cashbook.audit import AuditLogger
from cashbook.ledger import LedgerService
from cashbook.models.ledger import NewTransaction, Transaction, TransactionType
from cashbook.models.payroll import Employee, NewEmployee
from cashbook.models.receipt import UploadedReceipt
from cashbook.models.session import Session
from cashbook.payroll import PayrollService
from cashbook.services.platform.interface import (
    AuthInterface,
    AuthenticationError,
    PlatformError,
)
from cashbook.services.receipts import ReceiptUploadError, ReceiptUploader
from cashbook.validation import (
    FormValidationError,
    parse_amount,
    parse_optional_money,
    require_credentials,
    require_name,
)


LOGIN_FAILED = "Failed to login"
RECEIPTS_DISABLED = "Receipt uploads are not configured"


def _first_error(error: ValidationError) -> str:
    return error.errors()[0]["msg"].removeprefix("Value error, ")


# =============================================================================
# TRANSACTION ENTRY
# =============================================================================

class TransactionFormState(BaseModel):
    """Field values and flags of the transaction entry form."""
    
    date: dt.date = Field(default_factory=dt.date.today)
    type: TransactionType = TransactionType.CASH_IN
    amount: str = ""
    category: str = ""
    note: str = ""
    receipt: Optional[UploadedReceipt] = None
    error: Optional[str] = None
    loading: bool = False
    
    def reset(self) -> None:
        """Clear entered values; date and type are kept for the next entry."""
        self.amount = ""
        self.category = ""
        self.note = ""
        self.receipt = None
        self.error = None
        self.loading = False


class TransactionEntryForm:
    """Validates and submits one transaction."""
    
    def __init__(
        self,
        ledger: LedgerService,
        uploader: Optional[ReceiptUploader] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._ledger = ledger
        self._uploader = uploader
        self._audit_logger = audit_logger
    
    def submit(self, state: TransactionFormState) -> Optional[Transaction]:
        """
        Submit the form.
        
        Returns the stored transaction, or None with ``state.error`` set.
        """
        state.error = None
        try:
            amount = parse_amount(state.amount)
            payload = NewTransaction(
                date=state.date,
                type=state.type,
                amount=amount,
                category=state.category,
                note=state.note,
            )
        except FormValidationError as e:
            state.error = e.message
            return None
        except ValidationError as e:
            state.error = _first_error(e)
            return None
        
        state.loading = True
        try:
            if state.receipt is not None:
                if self._uploader is None:
                    raise ReceiptUploadError(RECEIPTS_DISABLED)
                receipt_url = self._uploader.upload(state.receipt)
                payload = payload.model_copy(update={"receipt_url": receipt_url})
            transaction = self._ledger.record(payload)
        except (ReceiptUploadError, PlatformError) as e:
            state.error = e.message
            return None
        finally:
            state.loading = False
        
        if self._audit_logger:
            self._audit_logger.log_transaction_recorded(
                transaction_id=transaction.id,
                type_=transaction.type.value,
                amount=str(transaction.amount),
                has_receipt=transaction.receipt_url is not None,
            )
        state.reset()
        return transaction


# =============================================================================
# EMPLOYEES
# =============================================================================

class EmployeeFormState(BaseModel):
    name: str = ""
    position: str = ""
    base_salary: str = ""
    error: Optional[str] = None
    
    def reset(self) -> None:
        self.name = ""
        self.position = ""
        self.base_salary = ""
        self.error = None


class EmployeeForm:
    """Validates and submits a new employee."""
    
    def __init__(self, payroll: PayrollService):
        self._payroll = payroll
    
    def submit(self, state: EmployeeFormState) -> Optional[Employee]:
        state.error = None
        try:
            payload = NewEmployee(
                name=require_name(state.name),
                position=state.position.strip() or None,
                base_salary=parse_optional_money(state.base_salary, "base_salary"),
            )
        except FormValidationError as e:
            state.error = e.message
            return None
        except ValidationError as e:
            state.error = _first_error(e)
            return None
        
        try:
            employee = self._payroll.add_employee(payload)
        except PlatformError as e:
            state.error = e.message
            return None
        
        state.reset()
        return employee


# =============================================================================
# SESSION GATE
# =============================================================================

class SessionGate:
    """
    Requests an authenticated session; the rest of the UI stays locked
    until one exists.
    """
    
    def __init__(
        self,
        auth: AuthInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._auth = auth
        self._audit_logger = audit_logger
        self.session: Optional[Session] = None
        self.error: Optional[str] = None
        self.loading = False
    
    @property
    def is_authenticated(self) -> bool:
        return self.session is not None
    
    def sign_in(self, email: str, password: str) -> Optional[Session]:
        self.error = None
        try:
            email, password = require_credentials(email, password)
        except FormValidationError as e:
            self.error = e.message
            return None
        
        self.loading = True
        try:
            session = self._auth.authenticate(email, password)
        except AuthenticationError as e:
            self.error = e.message or LOGIN_FAILED
            if self._audit_logger:
                self._audit_logger.log_sign_in_failed(email, self.error)
            return None
        finally:
            self.loading = False
        
        self.session = session
        if self._audit_logger:
            self._audit_logger.log_sign_in_succeeded(session.user_id, email)
        return session
    
    def sign_out(self) -> None:
        self.session = None
        self.error = None
