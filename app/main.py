"""
Streamlit Frontend for Cashbook

Single-page bookkeeping UI:
- Sign-in gate (nothing else renders without a session)
- Dashboard: balance cards, quick entry form, transaction list
- Reports: the same summary for a month, a three-month period or a year
- Payroll: employees, payslips, bulk generation, salary history

All reads and writes go through the components built in
cashbook.orchestrator; this module only composes widgets.
"""

import calendar
from datetime import date
from decimal import Decimal

import streamlit as st
import structlog
from pydantic import ValidationError

from cashbook.audit import configure_logging
from cashbook.config import get_settings
from cashbook.forms import EmployeeFormState, TransactionFormState
from cashbook.models import NewPayslip, TransactionType, UploadedReceipt
from cashbook.models.payroll import PayslipAdjustments
from cashbook.orchestrator import AppComponents, create_app_components
from cashbook.reports import (
    aggregate,
    current_month,
    current_quarter_start,
    format_money,
    month_bounds,
    quarter_bounds,
    year_bounds,
)
from cashbook.services.platform.interface import (
    PlatformConfigurationError,
    PlatformError,
)
from cashbook.validation import FormValidationError


logger = structlog.get_logger("cashbook.ui")

GENERIC_ERROR = "Something went wrong. Please try again."


# Page configuration
st.set_page_config(
    page_title="Cashbook",
    page_icon="📒",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    div[data-testid="stMetricValue"] {
        font-size: 1.8em;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def setup_logging() -> None:
    """Configure logging once per server process."""
    app_settings = get_settings().app
    configure_logging(app_settings.log_level, app_settings.log_json)


def get_components() -> AppComponents:
    """
    Get this browser session's components.

    Each session gets its own platform client so that authenticated
    sessions never leak between users.
    """
    if "components" not in st.session_state:
        try:
            st.session_state.components = create_app_components()
        except (ValidationError, PlatformConfigurationError) as e:
            logger.error("ui_config_invalid", error=str(e))
            st.error(
                "The app is not configured. Set SUPABASE_URL and "
                "SUPABASE_ANON_KEY in the environment or .env file."
            )
            st.stop()
    return st.session_state.components


def money(components: AppComponents, value) -> str:
    return format_money(value, components.app_settings.currency_symbol)


def main():
    """Main application entry point."""
    setup_logging()
    components = get_components()

    if not components.session_gate.is_authenticated:
        render_login_page(components)
        return

    st.sidebar.title("📒 Cashbook")
    session = components.session_gate.session
    st.sidebar.caption(f"Signed in as {session.email or session.user_id}")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏠 Dashboard", "📅 Reports", "👥 Payroll"],
        index=0,
    )

    st.sidebar.markdown("---")
    if st.sidebar.button("Sign out"):
        components.session_gate.sign_out()
        st.rerun()

    try:
        if page == "🏠 Dashboard":
            render_dashboard_page(components)
        elif page == "📅 Reports":
            render_reports_page(components)
        elif page == "👥 Payroll":
            render_payroll_page(components)
    except PlatformError as e:
        st.error(e.message)
    except Exception as e:
        logger.exception("ui_page_failed", page=page)
        components.audit_logger.log_error(type(e).__name__, str(e), {"page": page})
        st.error(GENERIC_ERROR)


# =============================================================================
# SIGN-IN
# =============================================================================

def render_login_page(components: AppComponents):
    gate = components.session_gate

    st.title("📒 Cashbook")
    st.markdown("Sign in to access your account.")

    with st.form("login_form"):
        email = st.text_input("Email Address", placeholder="you@company.com")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign In", type="primary")

    if submitted:
        with st.spinner("Signing in..."):
            session = gate.sign_in(email, password)
        if session is not None:
            st.rerun()

    if gate.error:
        st.error(gate.error)


# =============================================================================
# DASHBOARD
# =============================================================================

def render_summary_cards(components: AppComponents, transactions):
    summary = aggregate(transactions)

    col1, col2, col3, col4 = st.columns(4)
    for column, type_ in zip((col1, col2, col3), TransactionType):
        with column:
            st.metric(
                type_.label if type_ != TransactionType.EXPENSE else "Expenses",
                money(components, summary.total(type_)),
            )
            st.caption(f"{summary.count(type_)} transactions")
    with col4:
        st.metric("Balance", money(components, summary.balance))


def _form_state() -> TransactionFormState:
    if "tx_form" not in st.session_state:
        st.session_state.tx_form = TransactionFormState()
        st.session_state.tx_form_generation = 0
    return st.session_state.tx_form


def render_transaction_form(components: AppComponents):
    state = _form_state()
    generation = st.session_state.tx_form_generation

    st.subheader("Add Transaction")
    with st.form("transaction_form"):
        col1, col2, col3 = st.columns(3)
        with col1:
            entry_date = st.date_input("Date", value=state.date)
            entry_type = st.selectbox(
                "Type",
                options=list(TransactionType),
                index=list(TransactionType).index(state.type),
                format_func=lambda t: t.label,
            )
        with col2:
            amount = st.text_input(
                f"Amount ({components.app_settings.currency_symbol})",
                value=state.amount,
                placeholder="0.00",
                key=f"tx_amount_{generation}",
            )
            category = st.text_input(
                "Category",
                value=state.category,
                placeholder="e.g. Salary, Supplies",
                key=f"tx_category_{generation}",
            )
        with col3:
            note = st.text_input(
                "Note",
                value=state.note,
                placeholder="Optional",
                key=f"tx_note_{generation}",
            )
            receipt_file = st.file_uploader(
                "Receipt (photo)",
                type=["jpg", "jpeg", "png", "webp", "heic"],
                key=f"tx_receipt_{generation}",
            )
        submitted = st.form_submit_button("Add Transaction", type="primary")

    if submitted:
        state.date = entry_date
        state.type = entry_type
        state.amount = amount
        state.category = category
        state.note = note
        state.receipt = None
        if receipt_file is not None:
            if receipt_file.size > components.app_settings.max_upload_size_bytes:
                state.error = (
                    f"Receipt is larger than "
                    f"{components.app_settings.max_upload_size_mb} MB"
                )
                st.error(state.error)
                return
            state.receipt = UploadedReceipt(
                filename=receipt_file.name,
                data=receipt_file.getvalue(),
                content_type=receipt_file.type,
            )

        with st.spinner("Saving..."):
            transaction = components.entry_form.submit(state)
        if transaction is not None:
            st.session_state.tx_form_generation += 1
            st.toast("Transaction added")
            st.rerun()

    if state.error:
        st.error(state.error)


def render_transaction_table(components: AppComponents, transactions):
    if not transactions:
        st.info("No transactions yet.")
        return

    rows = [
        {
            "Date": t.date.isoformat(),
            "Type": t.type.label,
            "Amount": money(components, t.amount),
            "Category": t.category or "",
            "Note": t.note or "",
            "Receipt": t.receipt_url or "",
        }
        for t in transactions
    ]
    st.dataframe(
        rows,
        use_container_width=True,
        hide_index=True,
        column_config={
            "Receipt": st.column_config.LinkColumn("Receipt", display_text="View"),
        },
    )


def render_dashboard_page(components: AppComponents):
    st.title("🏠 Dashboard")
    st.markdown("Track cash in, cash out, expenses and the running balance.")

    transactions = components.ledger.list_transactions()
    render_summary_cards(components, transactions)
    st.markdown("---")
    render_transaction_form(components)
    st.markdown("---")
    st.subheader("Transactions")
    render_transaction_table(components, transactions)


# =============================================================================
# REPORTS
# =============================================================================

REPORT_PERIODS = ["Monthly", "Quarterly", "Yearly"]


def select_report_period():
    """Period selector; returns (first, last) or None after showing an error."""
    mode = st.radio("Period", REPORT_PERIODS, horizontal=True)
    today = date.today()

    if mode == "Monthly":
        month = st.text_input("Month (YYYY-MM)", value=current_month(today))
        try:
            return month_bounds(month)
        except ValueError as e:
            st.error(str(e))
            return None

    col1, col2 = st.columns(2)
    with col1:
        year = st.number_input(
            "Year", min_value=2000, max_value=2100, value=today.year, step=1
        )
    if mode == "Yearly":
        return year_bounds(int(year))

    with col2:
        start_month = st.selectbox(
            "Starting month",
            options=list(range(1, 13)),
            index=current_quarter_start(today) - 1,
            format_func=lambda m: calendar.month_name[m],
        )
    return quarter_bounds(int(year), start_month)


def render_reports_page(components: AppComponents):
    st.title("📅 Reports")

    bounds = select_report_period()
    if bounds is None:
        return
    first, last = bounds

    st.caption(f"{first.strftime('%d %B %Y')} to {last.strftime('%d %B %Y')}")
    transactions = components.ledger.list_transactions(first, last)
    summary = aggregate(transactions)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Credit (Cash In)", money(components, summary.cash_in))
    with col2:
        st.metric(
            "Debit (Cash Out + Expenses)",
            money(components, summary.cash_out + summary.expense),
        )
    with col3:
        st.metric("Remaining", money(components, summary.balance))

    st.markdown("---")
    render_transaction_table(components, transactions)


# =============================================================================
# PAYROLL
# =============================================================================

def render_employee_section(components: AppComponents, employees):
    st.subheader("Employees")

    if "employee_form" not in st.session_state:
        st.session_state.employee_form = EmployeeFormState()
    state: EmployeeFormState = st.session_state.employee_form

    with st.form("employee_form"):
        col1, col2, col3 = st.columns(3)
        with col1:
            name = st.text_input("Name *", value=state.name)
        with col2:
            position = st.text_input("Position", value=state.position)
        with col3:
            base_salary = st.text_input("Base salary", value=state.base_salary)
        submitted = st.form_submit_button("Add Employee")

    if submitted:
        state.name, state.position, state.base_salary = name, position, base_salary
        if components.employee_form.submit(state) is not None:
            st.toast("Employee added")
            st.rerun()
    if state.error:
        st.error(state.error)

    if employees:
        st.dataframe(
            [
                {
                    "Name": e.name,
                    "Position": e.position or "",
                    "Base salary": money(components, e.base_salary or 0),
                }
                for e in employees
            ],
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info("No employees yet.")


def _adjustment_inputs() -> dict:
    col1, col2 = st.columns(2)
    values = {}
    with col1:
        st.markdown("**Deductions**")
        for field, label in (
            ("sss", "SSS"),
            ("pagibig", "Pag-IBIG"),
            ("philhealth", "PhilHealth"),
            ("tax", "Withholding tax"),
            ("cash_advance", "Cash advance"),
            ("other_deductions", "Other deductions"),
        ):
            values[field] = st.number_input(label, min_value=0.0, step=0.01, format="%.2f")
    with col2:
        st.markdown("**Additions**")
        for field, label in (("bonuses", "Bonuses"), ("allowances", "Allowances")):
            values[field] = st.number_input(label, min_value=0.0, step=0.01, format="%.2f")
    return {k: Decimal(str(v)) for k, v in values.items()}


def render_payslip_section(components: AppComponents, employees):
    st.subheader("Issue Payslip")
    if not employees:
        st.info("Add an employee first.")
        return

    employee = st.selectbox("Employee", options=employees, format_func=lambda e: e.name)
    col1, col2, col3 = st.columns(3)
    with col1:
        period_start = st.date_input("Period start", value=date.today().replace(day=1))
    with col2:
        period_end = st.date_input("Period end", value=date.today())
    with col3:
        date_issued = st.date_input("Date issued", value=date.today())

    gross = st.number_input(
        "Gross salary",
        min_value=0.0,
        step=0.01,
        format="%.2f",
        value=float(employee.base_salary or 0),
        key=f"gross_{employee.id}",
    )
    adjustments = _adjustment_inputs()
    notes = st.text_area("Notes", placeholder="Optional")

    gross_salary = Decimal(str(gross))
    totals = PayslipAdjustments(**adjustments).totals(gross_salary)
    col1, col2, col3 = st.columns(3)
    col1.metric("Additions", money(components, totals.additions))
    col2.metric("Deductions", money(components, totals.deductions))
    col3.metric("Net salary", money(components, totals.net))

    if st.button("Save Payslip", type="primary"):
        try:
            payslip = NewPayslip(
                employee_id=employee.id,
                period_start=period_start,
                period_end=period_end,
                date_issued=date_issued,
                gross_salary=gross_salary,
                notes=notes or None,
                **adjustments,
            )
        except ValidationError as e:
            st.error(e.errors()[0]["msg"].removeprefix("Value error, "))
            return

        try:
            components.payroll.issue_payslip(payslip, employee.name)
        except PlatformError as e:
            st.error(e.message)
            return
        st.success(f"Payslip saved for {employee.name}")


def render_bulk_section(components: AppComponents, employees):
    st.subheader("Bulk Generate Payslips")
    if not employees:
        return

    with st.form("bulk_form"):
        col1, col2 = st.columns(2)
        with col1:
            period_start = st.date_input("Period start", value=date.today().replace(day=1), key="bulk_start")
        with col2:
            period_end = st.date_input("Period end", value=date.today(), key="bulk_end")
        selected = st.multiselect(
            "Employees",
            options=employees,
            format_func=lambda e: e.name,
        )
        submitted = st.form_submit_button("Generate")

    if submitted:
        try:
            generated = components.payroll.bulk_generate(selected, period_start, period_end)
        except FormValidationError as e:
            st.error(e.message)
            return
        except PlatformError as e:
            st.error(e.message)
            return
        st.success(f"{len(generated)} payslips generated successfully!")


def render_history_section(components: AppComponents, employees):
    st.subheader("Salary History")
    if not employees:
        return

    employee = st.selectbox(
        "Show history for",
        options=employees,
        format_func=lambda e: e.name,
        key="history_employee",
    )
    payslips = components.payroll.list_payslips(employee.id)
    if not payslips:
        st.info("No payslips for this employee.")
        return

    st.dataframe(
        [
            {
                "Issued": p.date_issued.isoformat(),
                "Period": f"{p.period_start.isoformat()} to {p.period_end.isoformat()}",
                "Gross": money(components, p.gross_salary),
                "Net": money(components, p.net_salary),
                "In ledger": "Yes" if p.transaction_id else "No",
            }
            for p in payslips
        ],
        use_container_width=True,
        hide_index=True,
    )


def render_payroll_page(components: AppComponents):
    st.title("👥 Payroll")

    employees = components.payroll.list_employees()

    tab_employees, tab_payslip, tab_bulk, tab_history = st.tabs(
        ["Employees", "Payslip", "Bulk", "History"]
    )
    with tab_employees:
        render_employee_section(components, employees)
    with tab_payslip:
        render_payslip_section(components, employees)
    with tab_bulk:
        render_bulk_section(components, employees)
    with tab_history:
        render_history_section(components, employees)


if __name__ == "__main__":
    main()
