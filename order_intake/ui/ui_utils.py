"""
UI Utility Functions

Helper functions for Streamlit rendering.
These are purely for presentation - no workflow logic.
"""

import math
from typing import Dict, List, Any, Optional

from order_intake.schemas.order import LineItem, OrderDraft, OrderRecord, DraftStatus
from order_intake.state import ViewMode


VIEW_LABELS = {
    ViewMode.EXTRACT: "Extract",
    ViewMode.MATCH: "Match",
    ViewMode.FINALIZE: "Finalize",
}


def format_price(value: float) -> str:
    """Format a money amount, e.g. 5 -> "$5.00"."""
    return f"${value:.2f}"


def format_quantity(value: float) -> str:
    """Drop the trailing .0 on whole quantities."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def format_item_summary(item: LineItem) -> str:
    """Secondary line under an extracted item, e.g. "Qty: 2 × $5.00"."""
    return f"Qty: {format_quantity(item.quantity)} × {format_price(item.price)}"


def format_match_score(score: float) -> str:
    """Score rounded half-up to a whole percent, e.g. 87.5 -> "88% match"."""
    return f"{int(math.floor(score + 0.5))}% match"


def submit_button_label(draft: Optional[OrderDraft], is_submitting: bool) -> str:
    """Label for the finalize submit button."""
    if draft is not None and draft.status == DraftStatus.SUBMITTED:
        return "Order Submitted"
    if is_submitting:
        return "Submitting..."
    return "Submit Order"


def format_file_size(size: int) -> str:
    """Human-readable byte count."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def orders_to_rows(orders: List[OrderRecord]) -> List[Dict[str, Any]]:
    """
    Format persisted orders for the dashboard table.

    Args:
        orders: Orders returned by the backend

    Returns:
        One dict per order with display column names
    """
    return [
        {
            "Order ID": order.id,
            "Customer": order.customer_name,
            "Product": order.name,
            "Quantity": order.quantity,
            "Price": format_price(order.price),
            "Total": format_price(order.total),
        }
        for order in orders
    ]
