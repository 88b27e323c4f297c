"""
Streamlit Frontend for the Expense Tracker

This is the screen the user interacts with daily.

DESIGN PRINCIPLES:
1. Everything shown is recomputed from the stores on each rerun
2. Every change is saved immediately, there is no "Save all" button
3. Invalid input is explained next to the form, never half-saved
4. Only the current month is summarized

Run with:
    streamlit run app/main.py
"""

from decimal import Decimal
from typing import Optional

import plotly.express as px
import streamlit as st

from expense_tracker.config import get_settings, validate_all_settings
from expense_tracker.models.category import (
    ALL_CATEGORIES,
    CATEGORIES,
    category_ids,
    get_category,
)
from expense_tracker.models.expense import Expense
from expense_tracker.models.summary import BudgetStatus, MonthlySummary
from expense_tracker.orchestrator import ExpenseTracker, create_app_components
from expense_tracker.services.export import CSV_MIME_TYPE


# Page configuration
st.set_page_config(
    page_title="Monthly Expenses",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="collapsed",
)

st.markdown("""
<style>
    .warning-box {
        padding: 12px 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        text-align: center;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_tracker() -> ExpenseTracker:
    """Get or create the tracker (cached for the server's lifetime)."""
    return create_app_components()


def fmt(amount: Decimal) -> str:
    symbol = get_settings().app.currency_symbol
    return f"{symbol}{amount:,.2f}"


def category_label(category_id: str) -> str:
    category = get_category(category_id)
    return f"{category.emoji} {category.name}"


def main():
    """Main application entry point."""
    tracker = get_tracker()

    if "editing_id" not in st.session_state:
        st.session_state.editing_id = None

    render_header(tracker)
    render_settings_sidebar()

    summary = tracker.summary(
        search_term=st.session_state.get("search_term", ""),
        category_filter=st.session_state.get("category_filter", ALL_CATEGORIES),
    )

    render_overview(tracker, summary)

    expenses_tab, categories_tab, analytics_tab = st.tabs(
        ["💳 Expenses", "🗂️ Categories", "📊 Analytics"]
    )
    with expenses_tab:
        render_expenses_tab(tracker, summary)
    with categories_tab:
        render_categories_tab(tracker, summary)
    with analytics_tab:
        render_analytics_tab(summary)


def render_header(tracker: ExpenseTracker):
    """Title, CSV export and the add/edit form."""
    col1, col2 = st.columns([4, 1])

    with col1:
        st.title("💰 Monthly Expenses")
        st.markdown("Track and manage your monthly spending")

    with col2:
        st.download_button(
            "⬇️ Export CSV",
            data=tracker.export_csv(),
            file_name=get_settings().app.export_filename,
            mime=CSV_MIME_TYPE,
        )

    editing = None
    if st.session_state.editing_id:
        editing = tracker.expense_store.get(st.session_state.editing_id)
        if editing is None:
            st.session_state.editing_id = None

    title = "✏️ Edit Expense" if editing else "➕ Add New Expense"
    with st.expander(title, expanded=editing is not None):
        render_expense_form(tracker, editing)


def render_expense_form(tracker: ExpenseTracker, editing: Optional[Expense] = None):
    """Form used for both adding and editing an expense."""
    ids = category_ids()
    form_key = f"expense_form_{editing.id if editing else 'new'}"

    with st.form(form_key, clear_on_submit=editing is None):
        amount = st.text_input(
            f"Amount ({get_settings().app.currency_symbol})",
            value=str(editing.amount) if editing else "",
            placeholder="0",
        )
        category = st.selectbox(
            "Category",
            options=[""] + ids,
            index=ids.index(editing.category) + 1 if editing and editing.category in ids else 0,
            format_func=lambda x: "Select category" if not x else category_label(x),
        )
        description = st.text_area(
            "Description",
            value=editing.description if editing else "",
            placeholder="What did you spend on?",
        )
        expense_date = st.date_input(
            "Date",
            value=editing.date if editing else tracker.now().date(),
        )

        col1, col2 = st.columns(2)
        with col1:
            submitted = st.form_submit_button(
                "Save Changes" if editing else "Add Expense",
                type="primary",
            )
        with col2:
            cancelled = st.form_submit_button("Cancel")

    if cancelled:
        st.session_state.editing_id = None
        st.rerun()

    if not submitted:
        return

    validation = tracker.validate_expense(amount, category, description, expense_date)
    if not validation.is_valid:
        for message in validation.messages:
            st.error(message)
        return

    if editing:
        tracker.edit_expense(editing.id, amount, category, description, expense_date)
        st.session_state.editing_id = None
    else:
        tracker.add_expense(amount, category, description, expense_date)
    st.rerun()


def render_overview(tracker: ExpenseTracker, summary: MonthlySummary):
    """Budget, total spent and remaining cards."""
    col1, col2, col3 = st.columns(3)

    with col1:
        st.subheader("Monthly Budget")
        st.caption("Your spending limit")
        st.markdown(f"## {fmt(summary.budget_total)}")
        st.progress(min(summary.budget_used_percent, 100) / 100)
        st.caption(f"{summary.budget_used_percent:.1f}% used")

        with st.popover("Edit"):
            new_total = st.text_input(
                "Enter monthly budget",
                value=f"{summary.budget_total:f}",
                key="budget_total_input",
            )
            if st.button("Save budget"):
                if tracker.set_total_budget(new_total):
                    st.rerun()
                else:
                    st.error("Please enter a number")

    with col2:
        st.subheader("Total Spent")
        st.caption("This month")
        st.markdown(f"## {fmt(summary.total_spent)}")
        if summary.is_over_budget:
            st.markdown(":red[📈 Over budget]")
        else:
            st.markdown(":green[📉 Within budget]")

    with col3:
        st.subheader("Remaining")
        st.caption("Available to spend")
        st.markdown(f"## {fmt(summary.remaining)}")
        st.caption(f"{summary.transaction_count} transactions")


def render_expenses_tab(tracker: ExpenseTracker, summary: MonthlySummary):
    """Search, filter and the current month's expense list."""
    col1, col2 = st.columns([3, 1])
    with col1:
        st.text_input("🔍 Search expenses...", key="search_term")
    with col2:
        st.selectbox(
            "Category",
            options=[ALL_CATEGORIES] + category_ids(),
            format_func=lambda x: "All Categories" if x == ALL_CATEGORIES else category_label(x),
            key="category_filter",
        )

    if not summary.filtered:
        st.info("No expenses found")
        if st.session_state.get("search_term") or st.session_state.get("category_filter", ALL_CATEGORIES) != ALL_CATEGORIES:
            st.caption("Try adjusting your search or filters")
        else:
            st.caption("Start by adding your first expense")
        return

    for expense in summary.filtered:
        category = get_category(expense.category)
        with st.container(border=True):
            col1, col2, col3, col4 = st.columns([6, 2, 1, 1])
            with col1:
                st.markdown(f"**{category.emoji} {expense.description}**")
                st.caption(f"{category.name} · {expense.date.strftime('%d %b %Y')}")
            with col2:
                st.markdown(f"**{fmt(expense.amount)}**")
            with col3:
                if st.button("✏️", key=f"edit_{expense.id}", help="Edit"):
                    st.session_state.editing_id = expense.id
                    st.rerun()
            with col4:
                if st.button("🗑️", key=f"delete_{expense.id}", help="Delete"):
                    tracker.delete_expense(expense.id)
                    if st.session_state.editing_id == expense.id:
                        st.session_state.editing_id = None
                    st.rerun()


def render_categories_tab(tracker: ExpenseTracker, summary: MonthlySummary):
    """Per-category spending against optional category limits."""
    columns = st.columns(3)

    for index, item in enumerate(summary.categories):
        category = item.category
        with columns[index % 3]:
            with st.container(border=True):
                st.markdown(f"### {category.emoji} {category.name}")
                st.caption(f"{item.share_of_total:.1f}% of total")

                st.markdown(f"Spent: **{fmt(item.spent)}**")
                st.progress(min(item.share_of_total, 100) / 100)

                limit_text = fmt(item.limit) if item.limit is not None else "—"
                st.markdown(f"Category Budget: **{limit_text}**")
                if item.has_limit:
                    st.progress(item.limit_used_percent / 100)
                    st.caption(f"{fmt(item.remaining)} remaining")

                with st.popover("Set Budget"):
                    value = st.text_input(
                        f"Monthly budget for {category.name}",
                        value=f"{item.limit:f}" if item.limit is not None else "",
                        key=f"limit_input_{category.id}",
                    )
                    col1, col2 = st.columns(2)
                    with col1:
                        if st.button("Save", key=f"limit_save_{category.id}"):
                            if tracker.set_category_budget(category.id, value):
                                st.rerun()
                            else:
                                st.error("Enter a number of 0 or more")
                    with col2:
                        if st.button("Clear", key=f"limit_clear_{category.id}"):
                            tracker.clear_category_budget(category.id)
                            st.rerun()


def render_analytics_tab(summary: MonthlySummary):
    """Spending breakdown and budget health."""
    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Spending Summary")
        st.caption("Your monthly expense breakdown")

        metric1, metric2 = st.columns(2)
        metric1.metric("Transactions", summary.transaction_count)
        metric2.metric(
            "Avg per transaction",
            fmt(summary.average_per_transaction),
        )

        chart_items = [item for item in summary.categories if item.spent > 0]
        if chart_items:
            fig = px.pie(
                names=[item.category.name for item in chart_items],
                values=[float(item.spent) for item in chart_items],
                color=[item.category.name for item in chart_items],
                color_discrete_map={c.name: c.color for c in CATEGORIES},
            )
            fig.update_traces(textposition="inside", textinfo="percent+label")
            fig.update_layout(height=300, showlegend=False)
            st.plotly_chart(fig, use_container_width=True)

        st.markdown("#### Top Categories")
        for category_id, amount in summary.top_categories:
            pct = amount / summary.total_spent * 100 if summary.total_spent > 0 else 0
            left, right = st.columns([3, 1])
            left.markdown(category_label(category_id))
            right.markdown(f"**{fmt(amount)}**  \n{pct:.1f}%")

    with col2:
        st.subheader("Budget Health")
        st.caption("How you're tracking against your budget")

        color = "#ef4444" if summary.is_over_budget else "#10b981"
        st.markdown(
            f'<div class="big-number" style="color: {color}">'
            f"{summary.budget_used_percent:.0f}%</div>",
            unsafe_allow_html=True,
        )
        st.progress(min(summary.budget_used_percent, 100) / 100)

        left, right = st.columns(2)
        left.metric("Remaining", fmt(summary.remaining))
        right.metric("Days left", summary.days_left)

        if summary.status == BudgetStatus.OVER:
            st.markdown(
                '<div class="warning-box">⚠️ You\'ve exceeded your monthly budget!</div>',
                unsafe_allow_html=True,
            )
        elif summary.status == BudgetStatus.NEARING:
            st.markdown(
                '<div class="warning-box">⚠️ You\'re nearing your budget limit. '
                "Consider reducing spending.</div>",
                unsafe_allow_html=True,
            )


def render_settings_sidebar():
    """Configuration status, read from the environment and .env."""
    with st.sidebar:
        st.markdown("### ⚙️ Settings")

        status = validate_all_settings()
        groups = [
            ("Storage", "storage"),
            ("Budget defaults", "budget"),
            ("Application", "app"),
        ]
        for name, key in groups:
            if status.get(key, False):
                st.success(f"✅ {name}")
            else:
                st.error(f"❌ {name} - {status.get(f'{key}_error', 'Invalid')}")

        if status.get("storage"):
            storage = get_settings().storage
            location = "in memory" if storage.backend == "memory" else f"`{storage.data_dir}`"
            st.caption(f"Data is saved {location}")

        st.caption("See `.env.example` for the available variables.")


if __name__ == "__main__":
    main()
