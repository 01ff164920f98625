"""
Orders dashboard stage.
"""

from typing import List

from pydantic import ValidationError

from order_intake.client import BackendClient
from order_intake.errors import RequestError
from order_intake.schemas.order import OrderRecord
from order_intake.state import WorkflowState
from order_intake.utils.logging import setup_logging, log_request_failure


logger = setup_logging(__name__)

STAGE = "Orders"


def load_orders(state: WorkflowState, client: BackendClient) -> List[OrderRecord]:
    """
    Fetch submitted orders for the dashboard.

    On failure the error is recorded and an empty list is shown.
    """
    state.orders_error = None
    state.orders_stale = False

    try:
        records = client.list_orders()
        orders = [OrderRecord.model_validate(record) for record in records]
    except RequestError as e:
        log_request_failure(logger, STAGE, e.status, str(e))
        state.orders_error = str(e)
        state.orders = []
        return state.orders
    except ValidationError as e:
        logger.error(f"[{STAGE}] Malformed order record: {e}")
        state.orders_error = "Unexpected orders response from backend"
        state.orders = []
        return state.orders

    state.orders = orders
    logger.info(f"[{STAGE}] Loaded {len(orders)} orders")
    return orders
