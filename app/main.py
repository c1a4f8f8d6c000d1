"""
Streamlit Frontend for Price Ledger

The interactive shell around the ledger. Every action is a single call
into `PriceLedger`; this module only collects input, asks for
confirmation, and shows results.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Explicit confirmation before export and delete
3. Clear error messages, and the page stays usable after one
4. No hidden actions
"""

import streamlit as st

from price_ledger.orchestrator import PriceLedger, create_app_components, format_record
from price_ledger.services.storage import RecordIndexError, StorageError
from price_ledger.validation import RecordValidationError


# Page configuration
st.set_page_config(
    page_title="Price Ledger",
    page_icon="🏷️",
    layout="wide",
    initial_sidebar_state="expanded",
)

ALL_CATEGORIES = "All categories"


@st.cache_resource
def get_components() -> PriceLedger:
    """Get or create application components (cached)."""
    return create_app_components()


def records_table(records) -> list[dict]:
    """Rows for st.dataframe, numbered from 1 like the delete picker."""
    return [
        {
            "#": position,
            "Product": r.product,
            "Category": r.category,
            "Price": r.display_price,
            "URL": r.url,
            "Timestamp": r.timestamp,
        }
        for position, r in enumerate(records, start=1)
    ]


def category_picker(ledger: PriceLedger, label: str, key: str) -> str:
    """Select box over known categories; returns "" for all."""
    options = [ALL_CATEGORIES] + ledger.list_categories()
    choice = st.selectbox(label, options=options, key=key)
    return "" if choice == ALL_CATEGORIES else choice


def main():
    """Main application entry point."""
    try:
        ledger = get_components()
    except StorageError as e:
        st.error(f"Failed to open the price store: {e}")
        st.stop()

    # Sidebar navigation
    st.sidebar.title("🏷️ Price Ledger")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        [
            "➕ Add Price",
            "📋 All Prices",
            "💸 Cheapest Option",
            "📤 Export",
            "🗑️ Delete",
            "⚙️ Settings",
        ],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.caption(f"Store: `{ledger.store.path}`")

    # Route to appropriate page
    try:
        if page == "➕ Add Price":
            render_add_page(ledger)
        elif page == "📋 All Prices":
            render_list_page(ledger)
        elif page == "💸 Cheapest Option":
            render_cheapest_page(ledger)
        elif page == "📤 Export":
            render_export_page(ledger)
        elif page == "🗑️ Delete":
            render_delete_page(ledger)
        elif page == "⚙️ Settings":
            render_settings_page()
    except StorageError as e:
        ledger.report_error(e)
        st.error(f"Storage error: {e}")


def render_add_page(ledger: PriceLedger):
    """Render the add-price form."""
    st.title("➕ Add Product Price")

    with st.form("add_price", clear_on_submit=False):
        product = st.text_input("Product name")
        category = st.text_input("Category")
        price_text = st.text_input("Price", help="Use . or , as the decimal separator")
        url = st.text_input("Product link (URL)")
        submitted = st.form_submit_button("Save", type="primary")

    if not submitted:
        return

    try:
        record = ledger.add_record(
            product=product.strip(),
            category=category.strip(),
            price_text=price_text.strip(),
            url=url.strip(),
        )
    except RecordValidationError as e:
        for issue in e.issues:
            st.error(issue.message)
            if issue.suggested_fix:
                st.caption(issue.suggested_fix)
        return

    st.success("Saved.")
    st.code(format_record(record), language=None)


def render_list_page(ledger: PriceLedger):
    """Render every stored record."""
    st.title("📋 All Prices")

    records = ledger.list_all()
    if not records:
        st.info("No entries.")
        return

    st.dataframe(records_table(records), hide_index=True, use_container_width=True)


def render_cheapest_page(ledger: PriceLedger):
    """Render the cheapest option, optionally within one category."""
    st.title("💸 Cheapest Option")

    if not ledger.list_all():
        st.info("No entries.")
        return

    category = category_picker(ledger, "Category to search", key="cheapest_category")
    best = ledger.cheapest_in_category(category)

    if best is None:
        st.warning("No entries for that category.")
        return

    st.subheader("Cheapest option:")
    st.metric(best.product, best.display_price)
    st.code(format_record(best), language=None)


def render_export_page(ledger: PriceLedger):
    """Render the export form."""
    st.title("📤 Export Data to CSV")

    destination = st.text_input("Filename", value=ledger.default_export_path)
    category = category_picker(ledger, "Category to export", key="export_category")
    confirmed = st.checkbox("Yes, export (overwrites an existing file)")

    if st.button("Export", type="primary", disabled=not confirmed):
        target = destination.strip() or ledger.default_export_path
        count = ledger.export_filtered(target, category)
        st.success(f"Exported {count} rows to {target}")


def render_delete_page(ledger: PriceLedger):
    """Render the delete picker."""
    st.title("🗑️ Delete a Product")

    # Set by the previous run, just before st.rerun()
    flash = st.session_state.pop("delete_flash", None)
    if flash:
        st.success(flash)

    records = ledger.list_all()
    if not records:
        st.info("No entries.")
        return

    number = st.selectbox(
        "Entry to delete",
        options=list(range(1, len(records) + 1)),
        format_func=lambda n: f"{n}: {records[n - 1].product} | {records[n - 1].display_price}",
    )
    choice = records[number - 1]
    confirmed = st.checkbox(f"Delete '{choice.product}' ({choice.display_price})?")

    if st.button("Delete", type="primary", disabled=not confirmed):
        try:
            removed = ledger.delete_at(number - 1)
        except RecordIndexError:
            # The file changed since this page was drawn
            st.error("Out of range.")
            return
        st.session_state["delete_flash"] = f"Deleted {removed.product}."
        st.rerun()


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    from price_ledger.config import get_settings, validate_all_settings

    status = validate_all_settings()

    sections = [
        ("Store", "store"),
        ("Application", "app"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    if status.get("store", False):
        store_settings = get_settings().store
        st.markdown(f"- Store file: `{store_settings.store_path}`")
        st.markdown(f"- Default export file: `{store_settings.export_path}`")
        st.markdown(f"- Atomic writes: `{store_settings.atomic_writes}`")

    st.markdown("---")
    st.markdown(
        "Settings are read from environment variables or a `.env` file, "
        "e.g. `PRICE_LEDGER_STORE_PATH=data/prices.csv`."
    )


if __name__ == "__main__":
    main()
