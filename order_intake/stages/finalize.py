"""
Finalize stage.
Holds the editable order draft, keeps row totals derived on edit and
submits the finished order.

Draft lifecycle: EDITABLE -> SUBMITTED on success; a failed submit stays
EDITABLE so it can be retried. SUBMITTED is terminal.
"""

from typing import List, Optional

from order_intake.client import BackendClient
from order_intake.errors import RequestError, DraftLockedError
from order_intake.schemas.order import DraftStatus, LineItem, OrderDraft
from order_intake.state import WorkflowState, SUBMIT
from order_intake.utils import parse_number
from order_intake.utils.logging import setup_logging, log_stage_action, log_request_failure


logger = setup_logging(__name__)

STAGE = "Finalize"

EDITABLE_FIELDS = ("name", "quantity", "price", "total")


def seed_draft(items: List[LineItem]) -> OrderDraft:
    """One-time copy of the items into a new draft; no live binding."""
    return OrderDraft(items=[item.model_copy() for item in items])


def _ensure_editable(draft: OrderDraft) -> None:
    if draft.status == DraftStatus.SUBMITTED:
        raise DraftLockedError("Order was already submitted")


def edit_field(draft: OrderDraft, index: int, field: str, raw_value: str) -> LineItem:
    """
    Apply a form edit to one row.

    quantity and price are parsed leniently (0 on failure) and the row total
    is recomputed. total is stored as parsed without touching quantity or
    price, so it can disagree with quantity * price. name is replaced as-is.

    Raises:
        IndexError: index is outside the draft's items
        ValueError: unknown field
        DraftLockedError: the draft was already submitted
    """
    _ensure_editable(draft)

    if field not in EDITABLE_FIELDS:
        raise ValueError(f"Unknown line item field: {field}")
    if not 0 <= index < len(draft.items):
        raise IndexError(f"Line item {index} out of range (draft has {len(draft.items)})")

    item = draft.items[index]
    if field == "name":
        item.name = raw_value
    else:
        setattr(item, field, parse_number(raw_value))
        if field in ("quantity", "price"):
            item.recompute_total()

    return item


def set_customer(
    draft: OrderDraft,
    customer_name: Optional[str] = None,
    customer_id: Optional[str] = None,
) -> None:
    """Update the customer identity fields that were given."""
    _ensure_editable(draft)
    if customer_name is not None:
        draft.customer_name = customer_name
    if customer_id is not None:
        draft.customer_id = customer_id


def carry_over_names(draft: OrderDraft, previous: List[str], current: List[str]) -> int:
    """
    Follow a rename of the shared items into an editable draft.

    A draft row takes the new name only while it still carries the old one,
    so names typed by the user win. Quantities, prices, totals and customer
    fields are never touched. Nothing happens when the draft, the previous
    names and the current names differ in length.

    Returns:
        Number of draft rows renamed
    """
    if draft.status == DraftStatus.SUBMITTED:
        return 0
    if not len(draft.items) == len(previous) == len(current):
        logger.debug(f"[{STAGE}] Row count changed, draft names left as they are")
        return 0

    renamed = 0
    for item, old, new in zip(draft.items, previous, current):
        if new != old and item.name == old:
            item.name = new
            renamed += 1
    return renamed


def submit_draft(state: WorkflowState, client: BackendClient) -> WorkflowState:
    """
    Finalize stage node.

    Updates state:
    - draft.status and draft.confirmation (on success)
    - submit_error

    A submitted draft is never sent again.
    """
    draft = state.draft
    if draft is None:
        state.submit_error = "No order to submit"
        logger.error(f"[{STAGE}] Submit requested without a draft")
        return state

    if draft.status == DraftStatus.SUBMITTED:
        logger.info(f"[{STAGE}] Order already submitted, ignoring request")
        return state

    if state.is_submitting:
        logger.info(f"[{STAGE}] Submission already in progress, ignoring request")
        return state

    if not draft.items:
        state.submit_error = "No items to submit"
        logger.warning(f"[{STAGE}] Submit requested for an empty order")
        return state

    token = state.next_token(SUBMIT)
    state.is_submitting = True
    state.submit_error = None

    log_stage_action(
        logger,
        STAGE,
        "Submitting order",
        {"customer_id": draft.customer_id, "items": len(draft.items)},
    )

    try:
        confirmation = client.finalize(draft.to_payload())
    except RequestError as e:
        if state.is_current(SUBMIT, token):
            state.submit_error = str(e)
            state.add_event(STAGE, f"Submission failed: {e}")
        log_request_failure(logger, STAGE, e.status, str(e))
        return state
    finally:
        if state.is_current(SUBMIT, token):
            state.is_submitting = False

    if not state.is_current(SUBMIT, token):
        logger.info(f"[{STAGE}] Discarding stale submission response")
        return state

    draft.status = DraftStatus.SUBMITTED
    draft.confirmation = confirmation if isinstance(confirmation, dict) else {"response": confirmation}

    log_stage_action(logger, STAGE, "Order submitted", {"customer_id": draft.customer_id})
    state.add_event(
        STAGE,
        f"Order for {draft.customer_name or 'unnamed customer'} submitted "
        f"({len(draft.items)} items, total {draft.grand_total():.2f})",
    )

    return state
