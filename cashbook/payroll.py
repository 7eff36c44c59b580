"""
Payroll Service

Employees and payslips. Issuing a payslip also writes the disbursement to
the ledger as a 'Payroll' expense and links the two: the expense row is
inserted first, then the payslip is inserted carrying its id, so a failed
expense insert leaves no payslip behind.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

import structlog
from pydantic import ValidationError

from cashbook.audit import AuditLogger
from cashbook.ledger import LedgerService
from cashbook.models.ledger import NewTransaction, TransactionType
from cashbook.models.payroll import Employee, NewEmployee, NewPayslip, Payslip
from cashbook.services.platform.interface import RecordError, RecordStoreInterface
from cashbook.validation import FormValidationError


logger = structlog.get_logger(__name__)

EMPLOYEES = "employees"
PAYSLIPS = "payslips"
PAYROLL_CATEGORY = "Payroll"
NEWEST_FIRST = (("created_at", True),)

NO_EMPLOYEES_SELECTED = "Please select at least one employee"


def payroll_note(employee_name: str, period_start: date, period_end: date) -> str:
    return f"Payroll: {employee_name} ({period_start.isoformat()} to {period_end.isoformat()})"


def _parse_rows(rows: list[dict], model, collection: str) -> list:
    parsed = []
    for row in rows:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning(f"{collection}_row_skipped", row_id=row.get("id"), error=str(e))
    return parsed


class PayrollService:
    """Employees and payslips on the data platform."""
    
    def __init__(
        self,
        records: RecordStoreInterface,
        ledger: Optional[LedgerService] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._records = records
        self._ledger = ledger or LedgerService(records)
        self._audit_logger = audit_logger
    
    # ------------------------------------------------------------------
    # Employees
    # ------------------------------------------------------------------
    
    def list_employees(self) -> list[Employee]:
        rows = self._records.query(EMPLOYEES, order=NEWEST_FIRST)
        return _parse_rows(rows, Employee, EMPLOYEES)
    
    def add_employee(self, employee: NewEmployee) -> Employee:
        row = self._records.insert(EMPLOYEES, employee.to_record())
        stored = Employee.model_validate(row)
        if self._audit_logger:
            self._audit_logger.log_employee_added(stored.id, stored.name)
        return stored
    
    # ------------------------------------------------------------------
    # Payslips
    # ------------------------------------------------------------------
    
    def list_payslips(self, employee_id: Optional[str] = None) -> list[Payslip]:
        """All payslips, or one employee's salary history."""
        filters = [("employee_id", "eq", employee_id)] if employee_id else None
        rows = self._records.query(PAYSLIPS, filters=filters, order=NEWEST_FIRST)
        return _parse_rows(rows, Payslip, PAYSLIPS)
    
    def issue_payslip(self, payslip: NewPayslip, employee_name: str) -> Payslip:
        """
        Store a payslip and its linked ledger expense.
        
        A payslip with zero net salary disburses nothing and gets no
        ledger entry.
        
        Raises:
            RecordError: If either insert is rejected
        """
        net = payslip.net_salary
        transaction_id = None
        
        if net > 0:
            expense = self._ledger.record(NewTransaction(
                date=payslip.date_issued,
                type=TransactionType.EXPENSE,
                amount=net,
                category=PAYROLL_CATEGORY,
                note=payroll_note(employee_name, payslip.period_start, payslip.period_end),
            ))
            transaction_id = expense.id
        
        linked = payslip.model_copy(update={"transaction_id": transaction_id})
        row = self._records.insert(PAYSLIPS, linked.to_record())
        try:
            stored = Payslip.model_validate(row)
        except ValidationError as e:
            raise RecordError(f"Unexpected payslip row returned: {e.errors()[0]['msg']}")
        
        if self._audit_logger:
            self._audit_logger.log_payslip_issued(
                payslip_id=stored.id,
                employee_id=stored.employee_id,
                net_salary=str(stored.net_salary),
                transaction_id=transaction_id,
            )
        return stored
    
    def bulk_generate(
        self,
        employees: Sequence[Employee],
        period_start: date,
        period_end: date,
        date_issued: Optional[date] = None,
    ) -> list[Payslip]:
        """
        One base-salary payslip per employee for a period.
        
        Generated payslips carry no adjustments and no ledger link; they
        are meant to be reviewed before payment.
        
        Raises:
            FormValidationError: If no employees are selected
            RecordError: If the platform rejects the insert
        """
        if not employees:
            raise FormValidationError(NO_EMPLOYEES_SELECTED)
        
        issued = date_issued or date.today()
        try:
            payslips = [
                NewPayslip(
                    employee_id=employee.id,
                    period_start=period_start,
                    period_end=period_end,
                    date_issued=issued,
                    gross_salary=employee.base_salary or Decimal("0"),
                )
                for employee in employees
            ]
        except ValidationError as e:
            raise FormValidationError(e.errors()[0]["msg"].removeprefix("Value error, "))
        
        rows = self._records.insert_many(PAYSLIPS, [p.to_record() for p in payslips])
        stored = _parse_rows(rows, Payslip, PAYSLIPS)
        
        if self._audit_logger:
            self._audit_logger.log_payslips_generated(
                count=len(stored),
                period_start=period_start.isoformat(),
                period_end=period_end.isoformat(),
            )
        return stored
