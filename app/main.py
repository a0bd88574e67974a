"""
Streamlit Frontend for PayRank

The vendor payables screen: cash balance, priority weights, intake,
and the waterline splitting bills the cash can cover from the ones
held back.

The UI never decides a status itself. It shows what the allocator
returns and sends manual toggles back to the desk.
"""

from decimal import Decimal

import streamlit as st

from payrank.audit import configure_logging
from payrank.config import get_settings
from payrank.intake import CsvImportError, new_invoice
from payrank.models.invoice import (
    Importance,
    InvoiceCategory,
    InvoiceStatus,
    WaterlineRow,
    WeightConfig,
)
from payrank.orchestrator import PayablesDesk, create_app_components
from payrank.services.storage import DuplicateError, StorageError


# Page configuration
st.set_page_config(
    page_title="PayRank",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)


def format_currency(amount: Decimal) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    configure_logging(get_settings().app.log_level)
    return create_app_components(load_saved=True)


def main():
    """Main application entry point."""
    desk, audit_storage = get_components()

    st.sidebar.title("💸 PayRank")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🌊 Vendor Payables", "➕ Add Invoices", "⚙️ Priority Settings", "📜 History"],
        index=0,
    )

    if page == "🌊 Vendor Payables":
        render_payables_page(desk)
    elif page == "➕ Add Invoices":
        render_intake_page(desk)
    elif page == "⚙️ Priority Settings":
        render_settings_page(desk)
    elif page == "📜 History":
        render_history_page(audit_storage)


def render_payables_page(desk: PayablesDesk):
    """Render the waterline."""
    st.title("🌊 Vendor Payables")

    cash = st.number_input(
        "Available cash",
        value=float(desk.storage.get_cash_balance()),
        step=100.0,
    )
    if Decimal(str(cash)) != desk.storage.get_cash_balance():
        desk.set_cash_balance(cash)

    rows, summary = desk.waterline()

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Cash Position", format_currency(summary.available_cash))
    col2.metric(
        "Approved",
        format_currency(summary.approved_total),
        f"{summary.utilization_pct:.0f}% of cash",
        delta_color="inverse" if summary.is_over_budget else "normal",
    )
    col3.metric("Critical Debt", format_currency(summary.critical_total))
    col4.metric("Net Position", format_currency(summary.net_position))

    approved_rows = [r for r in rows if r.invoice.status == InvoiceStatus.APPROVED]
    hold_rows = [r for r in rows if r.invoice.status == InvoiceStatus.HOLD]

    st.subheader(f"✅ Approved ({summary.approved_count})")
    for row in approved_rows:
        render_row(desk, row)

    st.markdown("#### 〰️ CASH LIMIT CUT-OFF 〰️")

    st.subheader(f"⏸️ On Hold ({summary.hold_count})")
    if not hold_rows:
        st.info("Everything fits within the available cash.")
    for row in hold_rows:
        render_row(desk, row)

    st.markdown("---")
    if st.button("💾 Save snapshot"):
        try:
            desk.export_snapshot()
            st.success(f"Saved to {get_settings().app.snapshot_path}")
        except StorageError as e:
            st.error(str(e))


def render_row(desk: PayablesDesk, row: WaterlineRow):
    invoice = row.invoice
    cols = st.columns([1, 4, 2, 2, 2, 1])
    cols[0].markdown(f"**{round((invoice.score or 0) * 100)}**")

    badge = " 🔒 manual" if invoice.is_manual_override else ""
    cols[1].markdown(
        f"**{invoice.vendor_name}** · {invoice.category.value} · "
        f"{invoice.importance.value}{badge}  \n"
        f"Due: {invoice.due_date.isoformat()} · {invoice.age_days} days old"
    )
    cols[2].markdown(format_currency(invoice.amount))
    if invoice.status == InvoiceStatus.APPROVED:
        label = format_currency(row.running_total)
        cols[3].markdown(f"🔴 {label}" if row.over_budget else label)
    cols[4].caption(invoice.id)

    action = "⬇️" if invoice.status == InvoiceStatus.APPROVED else "⬆️"
    if cols[5].button(action, key=f"toggle-{invoice.id}"):
        desk.toggle_status(invoice.id)
        st.rerun()


def render_intake_page(desk: PayablesDesk):
    """Render manual entry and CSV import."""
    st.title("➕ Add Invoices")

    with st.form("new_invoice"):
        vendor = st.text_input("Vendor")
        amount = st.number_input("Amount", min_value=0.0, step=10.0)
        category = st.selectbox("Category", list(InvoiceCategory), format_func=lambda c: c.value)
        importance = st.selectbox(
            "Importance",
            list(Importance),
            index=2,
            format_func=lambda i: i.value,
        )
        invoice_date = st.date_input("Invoice date")
        due_date = st.date_input("Due date")
        submitted = st.form_submit_button("Add invoice", type="primary")

    if submitted:
        if not vendor.strip():
            st.error("Vendor is required.")
        else:
            try:
                invoice = desk.add_invoice(new_invoice(
                    vendor_name=vendor,
                    amount=amount,
                    category=category,
                    importance=importance,
                    invoice_date=invoice_date,
                    due_date=due_date,
                ))
                st.success(f"Added {invoice.id}. It starts on hold until ranked.")
            except DuplicateError as e:
                st.error(str(e))

    st.markdown("---")
    st.subheader("Import CSV")
    st.caption("Columns: vendor, category, amount, invoiceDate, dueDate, importance")

    uploaded = st.file_uploader("CSV file", type=["csv"])
    if uploaded and st.button("Import"):
        try:
            result = desk.import_csv_text(
                uploaded.getvalue().decode("utf-8-sig"),
                source=uploaded.name,
            )
        except (CsvImportError, UnicodeDecodeError) as e:
            st.error(f"Could not read the file: {e}")
            return

        st.success(f"Imported {len(result.invoices)} of {result.rows_seen} rows.")
        for issue in result.issues:
            message = f"Row {issue.row_number} · {issue.field}: {issue.message}"
            if issue.severity == "error":
                st.error(message)
            else:
                st.warning(message)


def render_settings_page(desk: PayablesDesk):
    """Render the priority weights."""
    st.title("⚙️ Priority Algorithm")
    st.markdown("Configure how vendor invoices are ranked for payment.")

    current = desk.storage.get_weights()
    importance = st.slider("Vendor Importance", 0, 100, int(current.importance),
                           help="Weight of Critical/High tags")
    age = st.slider("Invoice Age", 0, 100, int(current.age),
                    help="Prioritize older bills")
    amount = st.slider("Amount Impact", 0, 100, int(current.amount),
                       help="Prioritize larger bills")

    total = importance + age + amount
    if total != 100:
        st.caption(f"Weights add up to {total}. Each one is applied on its own.")

    if st.button("Save Configuration", type="primary"):
        desk.update_weights(WeightConfig(importance=importance, age=age, amount=amount))
        st.success("Weights saved. The waterline is re-ranked on the next view.")


def render_history_page(audit_storage):
    """Render recent audit events."""
    st.title("📜 History")
    events = audit_storage.get_recent_events(limit=50)
    if not events:
        st.info("Nothing has happened yet.")
        return
    for event in events:
        if event.severity.value == "debug":
            continue
        st.markdown(
            f"`{event.timestamp:%Y-%m-%d %H:%M:%S}` · {event.description}"
        )


if __name__ == "__main__":
    main()
