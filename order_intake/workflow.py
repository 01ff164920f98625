"""
Orchestration of the upload -> extract -> match -> finalize workflow.

OrderWorkflow owns the shared state and hands the same extracted order to
whichever stage is active. It also reacts to item replacement: every time
the shared items are replaced, matching is re-run for the new names and an
editable draft picks up renamed items without losing the user's edits.
"""

from typing import Dict, List, Optional

from order_intake.client import BackendClient
from order_intake.schemas.file import CandidateFile
from order_intake.schemas.match import MatchCandidate
from order_intake.schemas.order import DraftStatus, ExtractedOrder, LineItem, OrderDraft, OrderRecord
from order_intake.stages import extraction, finalize, matching, orders
from order_intake.stages.file_intake import FileIntake, PreviewHandle, PreviewStore
from order_intake.state import ViewMode, WorkflowState
from order_intake.utils.logging import setup_logging


logger = setup_logging(__name__)

STAGE = "Workflow"


class OrderWorkflow:
    """A single upload-to-order session."""

    def __init__(
        self,
        client: Optional[BackendClient] = None,
        preview_store: Optional[PreviewStore] = None,
        state: Optional[WorkflowState] = None,
    ):
        self.client = client or BackendClient()
        self.state = state or WorkflowState()
        self.intake = FileIntake(self.state, preview_store)
        self._seen_revision = self.state.items_revision
        self._seen_names = self.extracted_order.item_names()

    def __enter__(self) -> "OrderWorkflow":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def extracted_order(self) -> ExtractedOrder:
        return self.state.extracted_order

    @property
    def preview(self) -> Optional[PreviewHandle]:
        return self.intake.preview

    @property
    def view(self) -> ViewMode:
        return self.state.view_mode

    def set_view(self, mode: ViewMode) -> None:
        """Switch the visible stage; state in other stages is kept."""
        mode = ViewMode(mode)
        if mode == self.state.view_mode:
            return
        self.state.view_mode = mode
        logger.debug(f"[{STAGE}] View switched to {mode.value}")
        if mode == ViewMode.FINALIZE:
            self.ensure_draft()

    def _sync_items(self) -> None:
        """React to the shared items having been replaced since last seen."""
        if self.state.items_revision == self._seen_revision:
            return
        self._seen_revision = self.state.items_revision
        previous, self._seen_names = self._seen_names, self.extracted_order.item_names()

        draft = self.state.draft
        if draft is not None and draft.status == DraftStatus.EDITABLE:
            renamed = finalize.carry_over_names(draft, previous, self._seen_names)
            if renamed:
                self.state.draft_revision += 1
                logger.debug(f"[{STAGE}] Items changed, {renamed} draft rows renamed")

        matching.run_matching(self.state, self.client)

        if self.state.view_mode == ViewMode.FINALIZE:
            self.ensure_draft()

    # File intake

    def select_file(self, candidate: Optional[CandidateFile]) -> Optional[CandidateFile]:
        """Select, replace or remove (None) the active file. May raise FileValidationError."""
        try:
            return self.intake.select_file(candidate)
        finally:
            self._sync_items()

    # Extraction

    def extract(self) -> List[LineItem]:
        extraction.run_extraction(self.state, self.client)
        self._sync_items()
        return self.extracted_order.items

    # Matching

    def match(self, queries: Optional[List[str]] = None) -> Optional[Dict[str, List[MatchCandidate]]]:
        return matching.run_matching(self.state, self.client, queries)

    def confirm_selection(self, query: str, chosen: str) -> None:
        matching.confirm_selection(self.state, query, chosen)

    def apply_selections(self) -> List[LineItem]:
        """Write the confirmed names back into the shared order."""
        if not self.state.selections:
            return self.extracted_order.items

        items = matching.apply_selections(self.extracted_order.items, self.state.selections)
        self.state.replace_items(items)
        self.state.add_event(matching.STAGE, f"Applied {len(self.state.selections)} match selections")
        self._sync_items()
        return self.extracted_order.items

    # Finalize

    def ensure_draft(self) -> OrderDraft:
        """Seed the draft from the shared items unless one already exists."""
        if self.state.draft is None:
            self.state.draft = finalize.seed_draft(self.extracted_order.items)
            self.state.draft_revision += 1
            self.state.submit_error = None
            logger.debug(f"[{STAGE}] Draft seeded with {len(self.state.draft.items)} items")
        return self.state.draft

    def edit_field(self, index: int, field: str, raw_value: str) -> LineItem:
        return finalize.edit_field(self.ensure_draft(), index, field, raw_value)

    def set_customer(self, customer_name: Optional[str] = None, customer_id: Optional[str] = None) -> None:
        finalize.set_customer(self.ensure_draft(), customer_name, customer_id)

    def submit(self) -> bool:
        """Submit the draft; True once the order is submitted."""
        finalize.submit_draft(self.state, self.client)
        draft = self.state.draft
        submitted = draft is not None and draft.status == DraftStatus.SUBMITTED
        if submitted:
            # Dashboard refetches on next visit
            self.state.orders_stale = True
        return submitted

    # Dashboard

    def load_orders(self) -> List[OrderRecord]:
        return orders.load_orders(self.state, self.client)

    def close(self) -> None:
        """Release the preview resource."""
        self.intake.close()
