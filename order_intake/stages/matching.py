"""
Matching stage.
Looks up catalog candidates for extracted item names and tracks which
candidate the user confirmed for each name.
"""

from typing import Dict, List, Optional

from pydantic import ValidationError

from order_intake.client import BackendClient
from order_intake.errors import RequestError
from order_intake.schemas.match import MatchCandidate, MatchResponse
from order_intake.schemas.order import LineItem
from order_intake.state import WorkflowState, MATCH
from order_intake.utils.logging import setup_logging, log_stage_action, log_request_failure


logger = setup_logging(__name__)

STAGE = "Matching"


def run_matching(
    state: WorkflowState,
    client: BackendClient,
    queries: Optional[List[str]] = None,
) -> Optional[Dict[str, List[MatchCandidate]]]:
    """
    Matching stage node.

    Args:
        state: Shared workflow state
        client: Backend client
        queries: Names to match; defaults to the current item names

    Returns:
        Candidates per query, {} when there was nothing to match, or None
        when the request failed, was already in flight, or went stale.

    Updates state:
    - match_results and selections (replaced together on success)
    - match_error
    """
    if queries is None:
        queries = state.extracted_order.item_names()

    if not queries:
        logger.debug(f"[{STAGE}] No item names to match")
        return {}

    if state.is_matching:
        logger.info(f"[{STAGE}] Matching already in progress, ignoring request")
        return None

    token = state.next_token(MATCH)
    state.is_matching = True
    state.match_error = None

    log_stage_action(logger, STAGE, "Matching started", {"queries": len(queries)})

    try:
        payload = client.match(queries)
        response = MatchResponse.model_validate(payload)
    except RequestError as e:
        if state.is_current(MATCH, token):
            state.match_error = str(e)
            state.add_event(STAGE, f"Matching failed: {e}")
        log_request_failure(logger, STAGE, e.status, str(e))
        return None
    except ValidationError as e:
        if state.is_current(MATCH, token):
            state.match_error = "Unexpected match response from backend"
            state.add_event(STAGE, "Matching failed: malformed response")
        logger.error(f"[{STAGE}] Malformed match response: {e}")
        return None
    finally:
        if state.is_current(MATCH, token):
            state.is_matching = False

    if not state.is_current(MATCH, token):
        logger.info(f"[{STAGE}] Discarding stale match response")
        return None

    state.match_results = response
    state.selections = response.default_selections()

    log_stage_action(
        logger,
        STAGE,
        "Matching completed",
        {"queries": len(response.results), "auto_selected": len(state.selections)},
    )
    state.add_event(
        STAGE,
        f"Received candidates for {len(response.results)} names, "
        f"auto-selected {len(state.selections)}",
    )

    return response.results


def confirm_selection(state: WorkflowState, query: str, chosen: str) -> None:
    """Record the user's choice for query; chosen is not checked against the candidates."""
    state.selections[query] = chosen
    logger.debug(f"[{STAGE}] Selected {chosen!r} for {query!r}")


def apply_selections(items: List[LineItem], selections: Dict[str, str]) -> List[LineItem]:
    """
    Rename items according to the selection map.

    Each item whose current name has a selection is returned as a renamed
    copy; the others are returned unchanged. The input list and its items
    are not modified.
    """
    renamed = []
    for item in items:
        chosen = selections.get(item.name)
        if chosen:
            renamed.append(item.model_copy(update={"name": chosen}))
        else:
            renamed.append(item)
    return renamed
