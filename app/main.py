"""
Streamlit Frontend for Finance Tracker

One page, three columns:
1. Assets      - cash and bank accounts
2. Cashflow    - income and fixed expenses
3. Allocation  - remainder and spending jars

Amounts are typed as free text and cleaned with parse_typed_input, so
separators and stray characters never cause an error. Nothing is written
to storage until the user presses Save.
"""

import asyncio

import streamlit as st

from finance_tracker.config import validate_all_settings
from finance_tracker.formatting import format_currency, format_grouped, parse_typed_input
from finance_tracker.models.finance import Jar, ListField, ScalarField
from finance_tracker.orchestrator import FinanceSession, create_app_components
from finance_tracker.sync import FetchFailure, SyncError


# Page configuration
st.set_page_config(
    page_title="Finance Tracker",
    page_icon="💰",
    layout="wide",
)

st.markdown("""
<style>
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
    }
    .positive { color: #28a745; }
    .negative { color: #dc3545; }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def record_failure(failure: SyncError) -> None:
    """Keep load failures around so the page can show them; save failures are shown inline."""
    if isinstance(failure, FetchFailure):
        st.session_state.setdefault("sync_failures", []).append(str(failure))


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components(use_storage=True, on_failure=record_failure)


def reset_inputs() -> None:
    """Drop widget values so inputs re-render from a freshly loaded state."""
    for key in list(st.session_state.keys()):
        if key not in ("loaded", "sync_failures"):
            del st.session_state[key]


def amount_input(label: str, value: int, key: str) -> int:
    """Text input that accepts grouped digits while typing."""
    raw = st.text_input(label, value=format_grouped(value), key=key)
    return parse_typed_input(raw)


def render_item_list(session: FinanceSession, list_field: ListField, add_label: str):
    """Render editable name/amount rows for one list."""
    for item in session.state.items(list_field):
        col_name, col_amount, col_remove = st.columns([3, 4, 1])
        with col_name:
            name = st.text_input(
                "Name",
                value=item.name,
                key=f"{list_field.value}-{item.id}-name",
                label_visibility="collapsed",
            )
        with col_amount:
            raw = st.text_input(
                "Amount",
                value=format_grouped(item.amount),
                key=f"{list_field.value}-{item.id}-amount",
                label_visibility="collapsed",
            )
        with col_remove:
            if st.button("🗑️", key=f"{list_field.value}-{item.id}-remove"):
                session.remove_item(list_field, item.id)
                st.rerun()

        if name != item.name:
            session.update_item(list_field, item.id, "name", name)
        amount = parse_typed_input(raw)
        if amount != item.amount:
            session.update_item(list_field, item.id, "amount", amount)

    if st.button(f"➕ {add_label}", key=f"add-{list_field.value}"):
        session.add_item(list_field)
        st.rerun()


def render_header():
    """Draw the title and the action buttons; returns (refresh_clicked, save_clicked, status)."""
    title_col, refresh_col, save_col = st.columns([6, 1, 1])
    with title_col:
        st.title("💰 Finance Dashboard")
        st.caption("Personal cashflow planner")
    with refresh_col:
        refresh_clicked = st.button("🔄 Refresh", key="refresh")
    with save_col:
        save_clicked = st.button("💾 Save", type="primary", key="save")
    return refresh_clicked, save_clicked, st.empty()


def handle_actions(session: FinanceSession, refresh_clicked: bool, save_clicked: bool, status) -> None:
    """Run Refresh / Save after the panels have applied this run's edits."""
    if save_clicked:
        with st.spinner("Saving..."):
            result = run_async(session.save())
        if result.success:
            st.toast("Saved")
        else:
            status.error(f"Save failed: {result.error_message}")

    if refresh_clicked:
        with st.spinner("Loading..."):
            run_async(session.load())
        reset_inputs()
        st.rerun()


def render_assets(session: FinanceSession):
    summary = session.summary()
    st.subheader(f"👛 Assets · {format_currency(summary.total_assets)}")
    cash = amount_input("Cash", session.state.cash, key="cash")
    if cash != session.state.cash:
        session.set_field(ScalarField.CASH, cash)

    st.markdown("**Bank accounts**")
    render_item_list(session, ListField.BANK_ACCOUNTS, "Add bank")


def render_cashflow(session: FinanceSession):
    summary = session.summary()
    st.subheader(f"📈 Income · {format_currency(summary.total_income)}")
    col_salary, col_other = st.columns(2)
    with col_salary:
        salary = amount_input("Salary", session.state.salary, key="salary")
    with col_other:
        other = amount_input("Other income", session.state.other_income, key="other_income")
    if salary != session.state.salary:
        session.set_field(ScalarField.SALARY, salary)
    if other != session.state.other_income:
        session.set_field(ScalarField.OTHER_INCOME, other)

    st.subheader(f"🧾 Fixed expenses · {format_currency(session.summary().total_expense)}")
    render_item_list(session, ListField.FIXED_EXPENSES, "Add expense")


def render_allocation(session: FinanceSession):
    summary = session.summary()
    css_class = "positive" if summary.remaining >= 0 else "negative"
    st.markdown("**NET CASHFLOW**")
    st.markdown(
        f'<div class="big-number {css_class}">{format_currency(summary.remaining)}</div>',
        unsafe_allow_html=True,
    )
    st.progress(summary.cashflow_ratio)
    st.caption("Fixed expenses already deducted; ready to allocate.")

    st.subheader("🫙 Allocation plan")
    for jar in Jar:
        col_label, col_percent, col_amount = st.columns([3, 2, 3])
        with col_label:
            st.write(jar.label)
        with col_percent:
            percent = st.number_input(
                "%",
                value=session.state.allocation_settings.percent(jar),
                step=1,
                key=f"jar-{jar.value}",
                label_visibility="collapsed",
            )
        if percent != session.state.allocation_settings.percent(jar):
            session.set_allocation(jar, percent)
        with col_amount:
            st.write(format_currency(session.summary().jar_amount(jar)))

    summary = session.summary()
    if not summary.allocation_balanced:
        st.warning(f"Jar percentages add up to {summary.total_percent}%, not 100%.")


def render_sidebar(sheets_client) -> None:
    """Show where the record is kept."""
    st.sidebar.title("💰 Finance Tracker")
    st.sidebar.markdown("---")
    st.sidebar.markdown("### Storage")

    status = validate_all_settings()
    if sheets_client is not None and status.get("google_sheets", False):
        st.sidebar.success("✅ Google Sheets (Storage) - Configured")
    else:
        error = status.get("google_sheets_error", "Not configured")
        st.sidebar.warning(f"⚠️ Google Sheets not available, edits are kept in memory only. {error}")


def main():
    """Main application entry point."""
    session, sheets_client = get_components()
    render_sidebar(sheets_client)

    if not st.session_state.get("loaded"):
        run_async(session.load())
        st.session_state.loaded = True

    for message in st.session_state.pop("sync_failures", []):
        st.error(message)

    refresh_clicked, save_clicked, status = render_header()

    col_assets, col_cashflow, col_allocation = st.columns(3)
    with col_assets:
        render_assets(session)
    with col_cashflow:
        render_cashflow(session)
    with col_allocation:
        render_allocation(session)

    handle_actions(session, refresh_clicked, save_clicked, status)


if __name__ == "__main__":
    main()
