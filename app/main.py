"""
Streamlit Frontend for Household Ledger

This is the interface the household uses day to day.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Explicit confirmation before anything is deleted
3. Clear error messages in simple language
4. Visual feedback for all operations

The UI only talks to the orchestrator flows. Every rule
(minor income, category purpose, orphan cleanup) lives there.
"""

import asyncio
from decimal import Decimal

import streamlit as st

from household_ledger.config import get_settings
from household_ledger.errors import LedgerError
from household_ledger.models.ledger import (
    AdmissionDecision,
    CategoryPurpose,
    TransactionKind,
)
from household_ledger.observability import configure_logging, create_correlation_id
from household_ledger.orchestrator import LedgerComponents, create_app_components


# Page configuration
st.set_page_config(
    page_title="Household Ledger",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components() -> LedgerComponents:
    """Get or create application components (cached)."""
    configure_logging(get_settings().app.log_level)
    return create_app_components(use_storage=True)


def money(value: Decimal) -> str:
    symbol = get_settings().app.currency_symbol
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol} {abs(value):,.2f}"


def label(value: str) -> str:
    return value.replace("_", " ").title()


def main():
    """Main application entry point."""
    components = get_components()

    # Sidebar navigation
    st.sidebar.title("💰 Household Ledger")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["👥 People", "🏷️ Categories", "💸 Transactions", "📊 Reports", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **Rules:**
        - People under 18 can only record expenses
        - Categories only accept matching transaction types
        - Deleting a person removes their transactions and any
          category left without transactions
        """
    )

    # Route to appropriate page
    if page == "👥 People":
        render_people_page(components)
    elif page == "🏷️ Categories":
        render_categories_page(components)
    elif page == "💸 Transactions":
        render_transactions_page(components)
    elif page == "📊 Reports":
        render_reports_page(components)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_people_page(components: LedgerComponents):
    """Render the people page."""
    st.title("👥 People")

    with st.form("new_person", clear_on_submit=True):
        col1, col2 = st.columns([3, 1])
        with col1:
            name = st.text_input("Name *", max_chars=200)
        with col2:
            age = st.number_input("Age *", min_value=0, max_value=150, step=1)
        submitted = st.form_submit_button("➕ Add Person", type="primary")

    if submitted:
        try:
            person = run_async(components.people.create_person(name=name, age=int(age)))
            st.success(f"✅ {person.name} added")
        except LedgerError as e:
            st.error(e.message)

    people = run_async(components.people.list_people())
    if not people:
        st.info("No people yet. Add the first member of the household above.")
        return

    st.markdown("---")
    for person in people:
        col1, col2, col3 = st.columns([4, 1, 1])
        col1.markdown(f"**{person.name}**")
        col2.markdown(f"{person.age} years" + (" · minor" if person.is_minor() else ""))
        if col3.button("🗑️ Delete", key=f"delete_{person.id}"):
            st.session_state.pending_delete = person.id

    pending = st.session_state.get("pending_delete")
    if pending:
        st.warning(
            "Deleting this person also deletes all of their transactions. "
            "Categories left without transactions are removed too. This cannot be undone."
        )
        col1, col2 = st.columns(2)
        if col1.button("✅ Confirm Delete", type="primary"):
            try:
                result = run_async(
                    components.people.delete_person(
                        pending, correlation_id=create_correlation_id()
                    )
                )
                st.success(result.message)
            except LedgerError as e:
                st.error(e.message)
            st.session_state.pending_delete = None
        if col2.button("❌ Cancel"):
            st.session_state.pending_delete = None
            st.rerun()


def render_categories_page(components: LedgerComponents):
    """Render the categories page."""
    st.title("🏷️ Categories")

    with st.form("new_category", clear_on_submit=True):
        col1, col2 = st.columns([3, 1])
        with col1:
            description = st.text_input("Description *", max_chars=100)
        with col2:
            purpose = st.selectbox(
                "Purpose *",
                options=list(CategoryPurpose),
                format_func=lambda p: label(p.value),
            )
        submitted = st.form_submit_button("➕ Add Category", type="primary")

    if submitted:
        try:
            category = run_async(
                components.categories.create_category(description=description, purpose=purpose)
            )
            st.success(f"✅ {category.description} added")
        except LedgerError as e:
            st.error(e.message)

    categories = run_async(components.categories.list_categories())
    if not categories:
        st.info("No categories yet.")
        return

    st.dataframe(
        [
            {"Description": c.description, "Purpose": label(c.purpose.value)}
            for c in categories
        ],
        use_container_width=True,
        hide_index=True,
    )


def render_transactions_page(components: LedgerComponents):
    """Render the transactions page."""
    st.title("💸 Transactions")

    people = run_async(components.people.list_people())
    categories = run_async(components.categories.list_categories())

    if not people or not categories:
        st.info("Add at least one person and one category before recording transactions.")
    else:
        with st.form("new_transaction", clear_on_submit=True):
            description = st.text_input("Description *", max_chars=200)
            col1, col2 = st.columns(2)
            with col1:
                amount = st.number_input(
                    f"Amount ({get_settings().app.currency_symbol}) *",
                    min_value=0.0,
                    step=0.01,
                    format="%.2f",
                )
                kind = st.selectbox(
                    "Type *",
                    options=list(TransactionKind),
                    format_func=lambda k: label(k.value),
                )
            with col2:
                person = st.selectbox("Person *", options=people, format_func=lambda p: p.name)
                category = st.selectbox(
                    "Category *",
                    options=categories,
                    format_func=lambda c: f"{c.description} ({label(c.purpose.value)})",
                )
            submitted = st.form_submit_button("💾 Record", type="primary")

        if submitted:
            checker = components.transactions.checker
            try:
                run_async(
                    components.transactions.create_transaction(
                        description=description,
                        amount=Decimal(str(amount)).quantize(Decimal("0.01")),
                        kind=kind,
                        person_id=person.id,
                        category_id=category.id,
                        correlation_id=create_correlation_id(),
                    )
                )
                st.success(checker.get_user_friendly_summary(AdmissionDecision.accept()))
            except LedgerError as e:
                st.error(checker.get_user_friendly_summary(AdmissionDecision.reject(e)))

    transactions = run_async(components.transactions.list_transactions())
    if not transactions:
        return

    names = {p.id: p.name for p in people}
    descriptions = {c.id: c.description for c in categories}
    st.markdown("---")
    st.dataframe(
        [
            {
                "Description": tx.description,
                "Amount": money(tx.amount),
                "Type": label(tx.kind.value),
                "Person": names.get(tx.person_id, "?"),
                "Category": descriptions.get(tx.category_id, "?"),
            }
            for tx in transactions
        ],
        use_container_width=True,
        hide_index=True,
    )


def render_grand_total(grand_total) -> None:
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Income", money(grand_total.total_income))
    col2.metric("Total Expense", money(grand_total.total_expense))
    col3.metric("Net Balance", money(grand_total.balance))


def render_reports_page(components: LedgerComponents):
    """Render the totals reports."""
    st.title("📊 Reports")

    by_person_tab, by_category_tab = st.tabs(["By Person", "By Category"])

    with by_person_tab:
        report = run_async(components.reports.get_totals_by_person())
        st.dataframe(
            [
                {
                    "Name": row.name,
                    "Age": row.age,
                    "Income": money(row.total_income),
                    "Expense": money(row.total_expense),
                    "Balance": money(row.balance),
                }
                for row in report.people
            ],
            use_container_width=True,
            hide_index=True,
        )
        render_grand_total(report.grand_total)

    with by_category_tab:
        report = run_async(components.reports.get_totals_by_category())
        st.dataframe(
            [
                {
                    "Category": row.description,
                    "Purpose": label(row.purpose.value),
                    "Income": money(row.total_income),
                    "Expense": money(row.total_expense),
                    "Balance": money(row.balance),
                }
                for row in report.categories
            ],
            use_container_width=True,
            hide_index=True,
        )
        render_grand_total(report.grand_total)


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    from household_ledger.config import validate_all_settings

    status = validate_all_settings()
    app_settings = get_settings().app

    st.markdown(f"**Storage backend:** {label(app_settings.storage_backend)}")

    services = [("Application", "app")]
    if app_settings.uses_google_sheets:
        services.append(("Google Sheets (Storage)", "google_sheets"))

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "Set `STORAGE_BACKEND=google_sheets` together with `GOOGLE_SHEETS_CREDENTIALS_PATH` "
        "and `GOOGLE_SHEETS_SPREADSHEET_ID` to keep data in Google Sheets."
    )


if __name__ == "__main__":
    main()
