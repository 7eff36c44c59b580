"""
Payroll Models

Employees and the payslips issued to them. A payslip's net salary is always
derived from its gross salary and adjustments; it is never taken as input.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)


Money = Annotated[Decimal, Field(ge=0)]

ADDITION_FIELDS = ("bonuses", "allowances")
DEDUCTION_FIELDS = (
    "sss",
    "pagibig",
    "philhealth",
    "tax",
    "cash_advance",
    "other_deductions",
)


class NewEmployee(BaseModel):
    """Insert payload for an employee."""
    
    model_config = ConfigDict(str_strip_whitespace=True)
    
    name: str = Field(..., min_length=1, max_length=200)
    position: Optional[str] = Field(default=None, max_length=100)
    base_salary: Optional[Money] = None
    
    def to_record(self) -> dict:
        record = self.model_dump(mode="json")
        record["position"] = record["position"] or None
        return record


class Employee(BaseModel):
    """A stored employee."""
    
    id: str
    created_at: datetime
    name: str
    position: Optional[str] = None
    base_salary: Optional[Decimal] = None


class PayslipTotals(BaseModel):
    """Derived payslip totals."""
    
    additions: Decimal
    deductions: Decimal
    net: Decimal


class PayslipAdjustments(BaseModel):
    """
    Optional deductions and additions on a payslip.
    
    Statutory deductions (SSS, Pag-IBIG, PhilHealth, withholding tax),
    cash advances and other deductions reduce the net salary; bonuses and
    allowances increase it. Missing values count as zero.
    """
    
    sss: Optional[Money] = None
    pagibig: Optional[Money] = None
    philhealth: Optional[Money] = None
    tax: Optional[Money] = None
    cash_advance: Optional[Money] = None
    bonuses: Optional[Money] = None
    allowances: Optional[Money] = None
    other_deductions: Optional[Money] = None
    
    def totals(self, gross_salary: Decimal) -> PayslipTotals:
        additions = sum(
            (getattr(self, name) or Decimal("0") for name in ADDITION_FIELDS),
            Decimal("0"),
        )
        deductions = sum(
            (getattr(self, name) or Decimal("0") for name in DEDUCTION_FIELDS),
            Decimal("0"),
        )
        return PayslipTotals(
            additions=additions,
            deductions=deductions,
            net=gross_salary + additions - deductions,
        )


class NewPayslip(PayslipAdjustments):
    """Insert payload for a payslip."""
    
    model_config = ConfigDict(str_strip_whitespace=True)
    
    employee_id: str = Field(..., min_length=1)
    period_start: date
    period_end: date
    date_issued: date
    gross_salary: Money
    notes: Optional[str] = Field(default=None, max_length=1000)
    transaction_id: Optional[str] = None
    
    @model_validator(mode="after")
    def validate_period_and_net(self) -> "NewPayslip":
        if self.period_end < self.period_start:
            raise ValueError("Pay period end cannot be before start")
        if self.totals(self.gross_salary).net < 0:
            raise ValueError("Deductions cannot exceed gross salary plus additions")
        return self
    
    @computed_field
    @property
    def net_salary(self) -> Decimal:
        return self.totals(self.gross_salary).net
    
    def to_record(self) -> dict:
        record = self.model_dump(mode="json")
        record["notes"] = record["notes"] or None
        return record


class Payslip(PayslipAdjustments):
    """A stored payslip."""
    
    id: str
    created_at: datetime
    employee_id: str
    period_start: date
    period_end: date
    date_issued: date
    gross_salary: Decimal
    net_salary: Decimal
    notes: Optional[str] = None
    transaction_id: Optional[str] = None
