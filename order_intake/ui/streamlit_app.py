"""
Streamlit UI for the Order Intake application

Two pages:
- Dashboard: lists submitted orders
- Upload Order: PDF preview next to the Extract / Match / Finalize views

All workflow state lives in an OrderWorkflow kept in st.session_state.
This module only renders it and forwards user actions.
"""

# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import streamlit as st
import pandas as pd

from order_intake.config import get_config
from order_intake.errors import FileValidationError
from order_intake.schemas.file import CandidateFile
from order_intake.schemas.order import DraftStatus
from order_intake.state import ViewMode
from order_intake.workflow import OrderWorkflow
from order_intake.ui.ui_utils import (
    VIEW_LABELS,
    format_file_size,
    format_item_summary,
    format_match_score,
    format_price,
    orders_to_rows,
    submit_button_label,
)


config = get_config()


# ============================================================================
# PAGE CONFIGURATION
# ============================================================================

st.set_page_config(
    page_title=config.UI_PAGE_TITLE,
    page_icon="📦",
    layout="wide",
    initial_sidebar_state="expanded"
)


# ============================================================================
# SESSION STATE
# ============================================================================

if "workflow" not in st.session_state:
    st.session_state.workflow = OrderWorkflow()
    st.session_state.file_signature = None
    st.session_state.uploader_key = 0

workflow: OrderWorkflow = st.session_state.workflow
state = workflow.state


# ============================================================================
# SIDEBAR - NAVIGATION & INFO
# ============================================================================

with st.sidebar:
    st.header("📦 Order Intake")
    page = st.radio("Navigation", ["Dashboard", "Upload Order"], label_visibility="collapsed")

    with st.expander("Backend", expanded=False):
        st.info(f"""
        **URL**: {workflow.client.base_url}
        **Timeout**: {workflow.client.timeout:.0f}s
        **Max upload**: {format_file_size(config.MAX_UPLOAD_BYTES)}
        """)

    with st.expander("Session", expanded=False):
        st.json(state.get_summary())

    with st.expander("Activity Log", expanded=False):
        st.code(state.get_activity_text(), language=None)


# ============================================================================
# DASHBOARD
# ============================================================================

def render_dashboard() -> None:
    """Table of all orders known to the backend."""
    st.header("Orders")
    st.caption("A list of all orders in the system.")

    if st.button("🔄 Refresh", key="refresh_orders") or state.orders_stale:
        workflow.load_orders()

    if state.orders_error:
        st.error(f"Error fetching orders: {state.orders_error}")

    if state.orders:
        st.dataframe(pd.DataFrame(orders_to_rows(state.orders)), width='stretch', hide_index=True)
    else:
        st.info("No orders yet.")


# ============================================================================
# FILE INTAKE
# ============================================================================

def handle_upload(uploaded) -> None:
    """Forward a changed uploader value to file intake."""
    if uploaded is None:
        signature = None
    else:
        signature = getattr(uploaded, "file_id", None) or (uploaded.name, uploaded.size)

    if signature == st.session_state.file_signature:
        return
    st.session_state.file_signature = signature

    candidate = CandidateFile.from_uploaded(uploaded) if uploaded is not None else None
    try:
        workflow.select_file(candidate)
    except FileValidationError:
        # Reported below through state.file_error
        return


def remove_file() -> None:
    workflow.select_file(None)
    st.session_state.file_signature = None
    st.session_state.uploader_key += 1


def render_preview() -> None:
    """Left column: the selected PDF."""
    active = state.active_file
    header_cols = st.columns([4, 1])
    with header_cols[0]:
        st.markdown(f"**{active.name}** ({format_file_size(active.size)})")
    with header_cols[1]:
        st.button("Remove file", key="remove_file", on_click=remove_file)

    preview = workflow.preview
    if preview is not None:
        st.pdf(preview.read_bytes(), height=600)


# ============================================================================
# EXTRACT VIEW
# ============================================================================

def render_extract() -> None:
    label = "Extracting..." if state.is_extracting else "🔍 Extract Data"
    if st.button(
        label,
        key="extract_button",
        disabled=state.is_extracting or state.active_file is None,
        width='stretch',
    ):
        with st.spinner("Extracting..."):
            workflow.extract()
        st.rerun()

    if state.extraction_error:
        st.error(state.extraction_error)

    if state.extracted_at is None:
        return

    items = workflow.extracted_order.items
    st.subheader("Extracted Items")
    if not items:
        st.info("No items found in the document.")
    for item in items:
        st.markdown(f"**{item.name or '(unnamed)'}**")
        st.caption(format_item_summary(item))


# ============================================================================
# MATCH VIEW
# ============================================================================

def render_match() -> None:
    items = workflow.extracted_order.items
    if not items:
        st.info("No items found in the extracted data.")
        return

    if state.is_matching:
        st.info("Matching...")
        return

    if state.match_error:
        st.error(state.match_error)
        if st.button("Retry matching", key="retry_match"):
            workflow.match()
            st.rerun()
        return

    if state.match_results is None:
        if st.button("Find matches", key="find_matches"):
            with st.spinner("Matching..."):
                workflow.match()
            st.rerun()
        return

    if st.button(
        "Submit Match Selections",
        key="apply_selections",
        disabled=not state.selections,
        width='stretch',
    ):
        workflow.apply_selections()
        st.rerun()

    for q_idx, (query, candidates) in enumerate(state.match_results.results.items()):
        with st.container(border=True):
            st.markdown(f"**{query}**")
            if not candidates:
                st.caption("No catalog candidates")
            for c_idx, candidate in enumerate(candidates):
                selected = state.selections.get(query) == candidate.match
                marker = "✅ " if selected else ""
                if st.button(
                    f"{marker}{candidate.match} · {format_match_score(candidate.score)}",
                    key=f"candidate_{q_idx}_{c_idx}",
                    type="primary" if selected else "secondary",
                    width='stretch',
                ):
                    workflow.confirm_selection(query, candidate.match)
                    st.rerun()


# ============================================================================
# FINALIZE VIEW
# ============================================================================

def _on_customer_change(field: str, key: str) -> None:
    if field == "name":
        workflow.set_customer(customer_name=st.session_state[key])
    else:
        workflow.set_customer(customer_id=st.session_state[key])


def _on_item_change(index: int, field: str, key: str) -> None:
    workflow.edit_field(index, field, st.session_state[key])


def render_finalize() -> None:
    draft = workflow.ensure_draft()
    if not draft.items:
        st.info("No items found to finalize.")
        return

    locked = draft.status == DraftStatus.SUBMITTED
    rev = state.draft_revision

    if st.button(
        submit_button_label(draft, state.is_submitting),
        key="submit_order",
        disabled=locked or state.is_submitting,
        type="primary",
        width='stretch',
    ):
        with st.spinner("Submitting..."):
            workflow.submit()
        st.rerun()

    if state.submit_error:
        st.error(state.submit_error)
    if locked:
        st.success("✅ Order submitted")

    with st.container(border=True):
        st.subheader("Customer")
        name_key = f"customer_name_{rev}"
        st.text_input(
            "Customer Name",
            value=draft.customer_name,
            key=name_key,
            disabled=locked,
            on_change=_on_customer_change,
            args=("name", name_key),
        )
        id_key = f"customer_id_{rev}"
        st.text_input(
            "Customer ID",
            value=draft.customer_id,
            key=id_key,
            disabled=locked,
            on_change=_on_customer_change,
            args=("id", id_key),
        )

    st.subheader("Items")
    for idx, item in enumerate(draft.items):
        with st.container(border=True):
            name_key = f"item_{rev}_{idx}_name"
            st.text_input(
                "Product Name",
                value=item.name,
                key=name_key,
                disabled=locked,
                on_change=_on_item_change,
                args=(idx, "name", name_key),
            )
            cols = st.columns(3)
            with cols[0]:
                qty_key = f"item_{rev}_{idx}_quantity"
                st.text_input(
                    "Quantity",
                    value=f"{item.quantity:g}",
                    key=qty_key,
                    disabled=locked,
                    on_change=_on_item_change,
                    args=(idx, "quantity", qty_key),
                )
            with cols[1]:
                price_key = f"item_{rev}_{idx}_price"
                st.text_input(
                    "Price",
                    value=f"{item.price:.2f}",
                    key=price_key,
                    disabled=locked,
                    on_change=_on_item_change,
                    args=(idx, "price", price_key),
                )
            with cols[2]:
                st.text_input(
                    "Total",
                    value=f"{item.total:.2f}",
                    key=f"item_{rev}_{idx}_total_{item.total}",
                    disabled=True,
                )

    st.metric("Order Total", format_price(draft.grand_total()))


# ============================================================================
# UPLOAD PAGE
# ============================================================================

def render_upload() -> None:
    st.header("Upload New Order")
    st.caption("Upload a PDF file containing the order details.")

    if state.active_file is None:
        uploaded = st.file_uploader(
            "Upload a file or drag and drop",
            type=["pdf"],
            key=f"uploader_{st.session_state.uploader_key}",
            help="PDF up to 10MB",
        )
        handle_upload(uploaded)

    if state.file_error:
        st.error(f"❌ {state.file_error}")

    if state.active_file is None:
        return

    left, right = st.columns([3, 2])

    with left:
        render_preview()

    with right:
        views = list(ViewMode)
        choice = st.radio(
            "View",
            views,
            index=views.index(state.view_mode),
            format_func=lambda mode: VIEW_LABELS[mode],
            horizontal=True,
            label_visibility="collapsed",
        )
        workflow.set_view(choice)

        if state.view_mode == ViewMode.EXTRACT:
            render_extract()
        elif state.view_mode == ViewMode.MATCH:
            render_match()
        else:
            render_finalize()


# ============================================================================
# MAIN EXECUTION
# ============================================================================

if page == "Dashboard":
    render_dashboard()
else:
    render_upload()
