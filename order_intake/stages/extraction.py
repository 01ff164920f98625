"""
Extraction stage.
Sends the active file to the extraction service and normalizes its records
into line items.
"""

from typing import Any, Dict, List
from datetime import datetime, timezone

from order_intake.client import BackendClient
from order_intake.errors import RequestError
from order_intake.schemas.order import BackendItem, LineItem
from order_intake.state import WorkflowState, EXTRACT
from order_intake.utils import parse_number
from order_intake.utils.logging import setup_logging, log_stage_action, log_request_failure


logger = setup_logging(__name__)

STAGE = "Extraction"


def _lenient_number(value: Any, field: str) -> float:
    number = parse_number(value, default=None)
    if number is None:
        if value is not None:
            logger.debug(f"[{STAGE}] Unparsable {field} {value!r}, using 0")
        return 0.0
    return number


def normalize_backend_item(record: Dict[str, Any]) -> LineItem:
    """
    Map one extraction record to a LineItem.

    Missing or unparsable numbers become 0 and a missing name becomes "".
    The extracted Total is kept as given, even when it disagrees with
    Amount * Unit_Price.
    """
    raw = BackendItem.model_validate(record) if isinstance(record, dict) else BackendItem()

    return LineItem(
        name=str(raw.Request_Item) if raw.Request_Item is not None else "",
        quantity=_lenient_number(raw.Amount, "Amount"),
        price=_lenient_number(raw.Unit_Price, "Unit_Price"),
        total=_lenient_number(raw.Total, "Total"),
    )


def normalize_backend_items(records: List[Dict[str, Any]]) -> List[LineItem]:
    """Normalize a full extraction response."""
    return [normalize_backend_item(record) for record in records]


def run_extraction(state: WorkflowState, client: BackendClient) -> WorkflowState:
    """
    Extraction stage node.

    Updates state:
    - extracted_order items (replaced wholesale on success)
    - extracted_at
    - extraction_error

    A response that arrives after the file changed is discarded.
    """
    if state.is_extracting:
        logger.info(f"[{STAGE}] Extraction already in progress, ignoring request")
        return state

    if state.active_file is None:
        state.extraction_error = "No file selected"
        logger.error(f"[{STAGE}] No file selected")
        return state

    active_file = state.active_file
    token = state.next_token(EXTRACT)
    state.is_extracting = True
    state.extraction_error = None

    log_stage_action(logger, STAGE, "Extraction started", {"filename": active_file.name})

    try:
        records = client.extract(active_file.name, active_file.data, active_file.content_type)
    except RequestError as e:
        if state.is_current(EXTRACT, token):
            state.extraction_error = str(e)
            state.add_event(STAGE, f"Extraction failed: {e}")
        log_request_failure(logger, STAGE, e.status, str(e))
        return state
    finally:
        if state.is_current(EXTRACT, token):
            state.is_extracting = False

    if not state.is_current(EXTRACT, token):
        logger.info(f"[{STAGE}] Discarding stale extraction response for {active_file.name}")
        return state

    items = normalize_backend_items(records)
    state.replace_items(items)
    state.extracted_at = datetime.now(timezone.utc)

    log_stage_action(logger, STAGE, "Extraction completed", {"items": len(items)})
    state.add_event(STAGE, f"Extracted {len(items)} line items from {active_file.name}")

    return state
