"""
Streamlit Frontend for FinSight

The dashboard freelancers, entrepreneurs, salaried professionals and
small business owners use to record transactions and read the analytics.

DESIGN PRINCIPLES:
1. Pick a profile first; categories follow the profile
2. Every change goes through the store, never around it
3. Derived numbers are always recomputed, never edited
4. Clear error messages for anything the store rejects
"""

from datetime import date, datetime, time

import streamlit as st
from pydantic import ValidationError

from finsight.config import get_settings, validate_all_settings
from finsight.models import (
    PROFILE_CONFIG,
    CASH_FLOW_TYPES,
    GroupBy,
    Impact,
    ReportCriteria,
    TransactionType,
    UserProfile,
)
from finsight.orchestrator import FinanceDashboard, create_dashboard
from finsight.reports import (
    cash_flow_report,
    category_report,
    custom_report,
    export_all_json,
    format_amount,
    monthly_report,
    profit_loss_report,
    report_filename,
    report_to_text,
    summary_to_text,
    tax_report,
    transactions_to_csv,
)
from finsight.services.backup import BackupFormatError, create_backup, restore_backup
from finsight.services.storage import StorageError
from finsight.store import StoreError
from finsight.validation import TransactionValidator


# Page configuration
st.set_page_config(
    page_title="FinSight",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .warning-box {
        padding: 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .info-box {
        padding: 20px;
        background-color: #cce5ff;
        border-radius: 10px;
        border-left: 5px solid #004085;
        margin: 10px 0;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
</style>
""", unsafe_allow_html=True)


IMPACT_BOX = {
    Impact.HIGH: "warning-box",
    Impact.MEDIUM: "info-box",
    Impact.LOW: "success-box",
}


@st.cache_resource
def get_dashboard() -> FinanceDashboard:
    """Get or create the dashboard (cached)."""
    return create_dashboard()


def money(value: float) -> str:
    return format_amount(value, get_settings().app.currency_symbol)


def main():
    """Main application entry point."""
    dashboard = get_dashboard()
    store = dashboard.store

    if store.user_type is None:
        render_profile_picker(dashboard)
        return

    profile = PROFILE_CONFIG[store.user_type]

    # Sidebar navigation
    st.sidebar.title("💰 FinSight")
    st.sidebar.markdown(f"**{profile.title}**  \n{profile.description}")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "🧾 Transactions", "🤖 AI Insights", "📑 Reports", "⚙️ Data & Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    if st.sidebar.button("🔄 Switch Profile"):
        store.set_user_type(None)
        st.rerun()

    # Route to appropriate page
    if page == "📊 Dashboard":
        render_dashboard_page(dashboard)
    elif page == "🧾 Transactions":
        render_transactions_page(dashboard)
    elif page == "🤖 AI Insights":
        render_insights_page(dashboard)
    elif page == "📑 Reports":
        render_reports_page(dashboard)
    elif page == "⚙️ Data & Settings":
        render_settings_page(dashboard)


def render_profile_picker(dashboard: FinanceDashboard):
    """Ask which kind of user this is before showing anything else."""
    st.title("💰 Welcome to FinSight")
    st.markdown("Choose the profile that fits you best. You can switch later.")

    columns = st.columns(len(UserProfile))
    for column, user_type in zip(columns, UserProfile):
        config = PROFILE_CONFIG[user_type]
        with column:
            st.subheader(config.title)
            st.caption(config.description)
            for metric in config.metrics:
                st.markdown(f"- {metric}")
            if st.button(f"Continue as {config.title}", key=f"profile-{user_type.value}"):
                dashboard.store.set_user_type(user_type)
                st.rerun()


def render_dashboard_page(dashboard: FinanceDashboard):
    """Headline metrics and the latest transactions."""
    state = dashboard.state
    summary = state.summary

    st.title("📊 Dashboard")

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Revenue", money(summary.total_revenue))
    col2.metric("Costs", money(summary.total_costs))
    col3.metric("Net Profit", money(summary.net_profit), f"{summary.monthly_growth:.1f}% MoM")
    col4.metric("Profit Margin", f"{summary.profit_margin:.1f}%")

    st.markdown("---")
    st.subheader("Recent Transactions")
    recent = sorted(state.transactions, key=lambda t: t.date, reverse=True)[:10]
    if not recent:
        st.info("No transactions yet. Use the 'Transactions' page to add your first one.")
        return
    st.dataframe(
        [
            {
                "Date": t.date.date().isoformat(),
                "Type": t.type.value,
                "Category": t.category,
                "Description": t.description,
                "Amount": t.amount,
            }
            for t in recent
        ],
        use_container_width=True,
    )


def _transaction_form(key: str, defaults: dict) -> dict:
    """Render the transaction fields and return the entered values."""
    profile = PROFILE_CONFIG[get_dashboard().store.user_type]

    col1, col2 = st.columns(2)
    with col1:
        types = list(TransactionType)
        type_ = st.selectbox(
            "Type *",
            options=types,
            index=types.index(defaults.get("type", TransactionType.EXPENSE)),
            format_func=lambda x: x.value.title(),
            key=f"{key}-type",
        )
        suggestions = profile.categories.get(type_, [])
        category = st.text_input(
            "Category *",
            value=defaults.get("category", suggestions[0] if suggestions else ""),
            help=", ".join(suggestions) if suggestions else None,
            key=f"{key}-category",
        )
        amount = st.number_input(
            "Amount *",
            value=float(defaults.get("amount", 0.0)),
            min_value=0.0,
            step=0.01,
            format="%.2f",
            key=f"{key}-amount",
        )
    with col2:
        when = st.date_input(
            "Date *",
            value=defaults.get("date", date.today()),
            key=f"{key}-date",
        )
        payment_method = st.text_input(
            "Payment Method",
            value=defaults.get("payment_method", ""),
            key=f"{key}-payment",
        )
        tax_deductible = st.checkbox(
            "Tax deductible",
            value=defaults.get("tax_deductible", False),
            key=f"{key}-tax",
        )

    description = st.text_area(
        "Description",
        value=defaults.get("description", ""),
        key=f"{key}-description",
    )

    return {
        "type": type_,
        "category": category,
        "amount": amount,
        "date": when,
        "payment_method": payment_method,
        "tax_deductible": tax_deductible,
        "description": description,
        "currency": get_settings().app.default_currency,
    }


def render_transactions_page(dashboard: FinanceDashboard):
    """Add, edit and delete transactions."""
    store = dashboard.store
    validator = TransactionValidator()

    st.title("🧾 Transactions")

    with st.expander("➕ Add Transaction", expanded=not len(store)):
        values = _transaction_form("new", {})
        if st.button("Save Transaction", type="primary"):
            result = validator.validate(values)
            for issue in result.issues:
                if issue.severity == "error":
                    st.error(f"{issue.field}: {issue.message}")
                elif issue.severity == "warning":
                    st.warning(issue.message)
            if result.is_valid:
                try:
                    store.add(values)
                    st.success("Transaction saved")
                    st.rerun()
                except (StoreError, StorageError) as e:
                    st.error(f"Failed to save: {e}")

    st.markdown("---")

    for t in sorted(store.transactions, key=lambda t: t.date, reverse=True):
        label = f"{t.date.date().isoformat()} · {t.type.value.title()} · {t.category} · {money(t.amount)}"
        with st.expander(label):
            values = _transaction_form(t.id, t.model_dump())
            col1, col2 = st.columns(2)
            with col1:
                if st.button("💾 Update", key=f"{t.id}-update"):
                    try:
                        store.update(t.id, values)
                        st.rerun()
                    except ValidationError as e:
                        st.error(f"Invalid transaction: {e.error_count()} problem(s)")
                    except (StoreError, StorageError) as e:
                        st.error(f"Failed to update: {e}")
            with col2:
                if st.button("🗑️ Delete", key=f"{t.id}-delete"):
                    try:
                        store.delete(t.id)
                        st.rerun()
                    except (StoreError, StorageError) as e:
                        st.error(f"Failed to delete: {e}")


def render_insights_page(dashboard: FinanceDashboard):
    """Insights, patterns and the weekly forecast."""
    state = dashboard.state

    st.title("🤖 AI Insights")
    st.metric("Financial Risk", f"{state.risk_score * 100:.0f}%")

    st.subheader("Insights")
    if not state.insights:
        st.info("Not enough activity for insights yet.")
    for insight in state.insights:
        st.markdown(f"""
        <div class="{IMPACT_BOX[insight.impact]}">
            <h4>{insight.title}</h4>
            <p>{insight.description}</p>
            <p><small>{insight.category} · {insight.impact.value} impact · {insight.confidence:.0f}% confidence</small></p>
        </div>
        """, unsafe_allow_html=True)

    st.subheader("Patterns")
    if state.patterns:
        st.dataframe(
            [
                {
                    "Category": p.pattern,
                    "Every (days)": round(p.frequency, 1),
                    "Average": p.average_amount,
                    "Trend": p.trend.value,
                    "Next": p.predicted_next,
                }
                for p in state.patterns
            ],
            use_container_width=True,
        )
    else:
        st.info("Patterns appear once a category has at least three transactions.")

    st.subheader("Cash Flow Forecast")
    if state.predictions:
        st.line_chart(
            {
                "Inflow": [p.predicted_inflow for p in state.predictions],
                "Outflow": [p.predicted_outflow for p in state.predictions],
            }
        )
        with st.expander("Forecast details"):
            for p in state.predictions:
                st.markdown(
                    f"**{p.date.date().isoformat()}**: net {money(p.net)} "
                    f"({p.confidence:.0f}% confidence) · {' · '.join(p.factors)}"
                )
    else:
        st.info("Forecasts need at least five transactions.")


def render_reports_page(dashboard: FinanceDashboard):
    """Standard reports, a custom report and downloads."""
    transactions = dashboard.state.transactions

    st.title("📑 Reports")

    builders = {
        "Profit & Loss Statement": profit_loss_report,
        "Cash Flow Statement": cash_flow_report,
        "Tax Report": tax_report,
        "Monthly Report": monthly_report,
        "Category Report": category_report,
    }
    title = st.selectbox("Report", options=list(builders))
    report = builders[title](transactions)
    st.json(report.model_dump(mode="json"))
    st.download_button(
        "⬇️ Download report",
        data=report_to_text(title, report),
        file_name=report_filename(title),
    )

    st.markdown("---")
    st.subheader("Custom Report")
    col1, col2, col3 = st.columns(3)
    with col1:
        types = st.multiselect("Types", options=list(CASH_FLOW_TYPES), format_func=lambda x: x.value.title())
    with col2:
        date_range = st.date_input("Date Range", value=[])
    with col3:
        group_by = st.selectbox("Group by", options=list(GroupBy), format_func=lambda x: x.value)

    if st.button("Generate", type="primary"):
        try:
            criteria = ReportCriteria(
                types=types,
                date_from=datetime.combine(date_range[0], time.min) if len(date_range) > 0 else None,
                date_to=datetime.combine(date_range[1], time.max) if len(date_range) > 1 else None,
                group_by=group_by,
            )
        except ValidationError as e:
            st.error(e.errors()[0]["msg"])
        else:
            st.json(custom_report(transactions, criteria).model_dump(mode="json"))

    st.markdown("---")
    st.subheader("Downloads")
    col1, col2, col3 = st.columns(3)
    with col1:
        st.download_button(
            "⬇️ Transactions (CSV)",
            data=transactions_to_csv(transactions),
            file_name=f"transactions-{date.today().isoformat()}.csv",
            mime="text/csv",
        )
    with col2:
        st.download_button(
            "⬇️ Summary (TXT)",
            data=summary_to_text(
                dashboard.state.summary,
                transactions,
                currency_symbol=get_settings().app.currency_symbol,
            ),
            file_name=f"financial-summary-{date.today().isoformat()}.txt",
        )
    with col3:
        st.download_button(
            "⬇️ Everything (JSON)",
            data=export_all_json(dashboard.state.summary, transactions, dashboard.store.user_type),
            file_name=f"finsight-export-{date.today().isoformat()}.json",
            mime="application/json",
        )


def render_settings_page(dashboard: FinanceDashboard):
    """Backup, restore, clear, and configuration status."""
    store = dashboard.store

    st.title("⚙️ Data & Settings")

    st.markdown("### Backup")
    st.download_button(
        "⬇️ Download backup",
        data=create_backup(store.transactions, store.user_type, datetime.now()),
        file_name=f"accounting-backup-{date.today().isoformat()}.json",
        mime="application/json",
    )

    uploaded = st.file_uploader("Restore from backup", type=["json"])
    if uploaded and st.button("♻️ Restore", type="primary"):
        try:
            backup = restore_backup(store, uploaded.read().decode("utf-8"))
            st.success(f"Restored {len(backup.transactions)} transactions")
        except (BackupFormatError, UnicodeDecodeError) as e:
            st.error(f"Invalid backup file: {e}")
        except (StoreError, StorageError) as e:
            st.error(f"Restore failed: {e}")

    st.markdown("---")
    st.markdown("### Danger Zone")
    confirm = st.checkbox("I understand this deletes every transaction")
    if st.button("🗑️ Clear all data", disabled=not confirm):
        try:
            store.clear()
        except StorageError as e:
            st.error(f"Clear failed: {e}")
        else:
            st.rerun()

    st.markdown("---")
    st.markdown("### Configuration")
    status = validate_all_settings()
    for name in ("storage", "analytics", "app"):
        if status.get(name, False):
            st.success(f"✅ {name.title()} settings loaded")
        else:
            st.error(f"❌ {name.title()} settings - {status.get(f'{name}_error', 'invalid')}")


if __name__ == "__main__":
    main()
