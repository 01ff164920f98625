"""
Shared state object for the order intake workflow.
All stages read/write this state; the orchestrator owns the single instance.
"""

from typing import Optional, List, Dict, Any
from enum import Enum
from pydantic import BaseModel, Field
from datetime import datetime, timezone
from order_intake.schemas.order import LineItem, ExtractedOrder, OrderDraft, OrderRecord
from order_intake.schemas.match import MatchResponse
from order_intake.schemas.file import CandidateFile


EXTRACT = "extract"
MATCH = "match"
SUBMIT = "submit"

_IN_FLIGHT_FLAGS = {
    EXTRACT: "is_extracting",
    MATCH: "is_matching",
    SUBMIT: "is_submitting",
}


class ViewMode(str, Enum):
    """Which workflow stage is on screen."""
    EXTRACT = "extract"
    MATCH = "match"
    FINALIZE = "finalize"


class ActivityLogEntry(BaseModel):
    """A single entry in the workflow activity log."""
    timestamp: datetime
    stage: str
    message: str


class WorkflowState(BaseModel):
    """
    Shared mutable state for one upload-to-order workflow.

    The extracted order is a single container passed by reference to every
    stage. Stages replace its items through replace_items() so the
    orchestrator can react to the change via items_revision.
    """

    view_mode: ViewMode = ViewMode.EXTRACT

    # File intake
    active_file: Optional[CandidateFile] = None
    file_error: Optional[str] = None

    # Extraction
    extracted_order: ExtractedOrder = Field(default_factory=ExtractedOrder)
    extracted_at: Optional[datetime] = None
    items_revision: int = 0
    extraction_error: Optional[str] = None
    is_extracting: bool = False

    # Matching
    match_results: Optional[MatchResponse] = None
    selections: Dict[str, str] = Field(default_factory=dict)
    match_error: Optional[str] = None
    is_matching: bool = False

    # Finalize
    draft: Optional[OrderDraft] = None
    draft_revision: int = 0
    submit_error: Optional[str] = None
    is_submitting: bool = False

    # Orders dashboard
    orders: List[OrderRecord] = Field(default_factory=list)
    orders_error: Optional[str] = None
    orders_stale: bool = True

    # Latest issued request token per adapter
    request_tokens: Dict[str, int] = Field(default_factory=dict)

    activity_log: List[ActivityLogEntry] = Field(default_factory=list)

    def add_event(self, stage: str, message: str) -> None:
        """Add an entry to the activity log."""
        self.activity_log.append(
            ActivityLogEntry(
                timestamp=datetime.now(timezone.utc),
                stage=stage,
                message=message,
            )
        )

    def get_activity_text(self) -> str:
        """Human-readable activity log."""
        if not self.activity_log:
            return "No activity yet."
        return "\n".join(
            f"{entry.timestamp:%H:%M:%S} [{entry.stage}] {entry.message}"
            for entry in self.activity_log
        )

    def replace_items(self, items: List[LineItem]) -> None:
        """Replace the shared line items wholesale (same container instance)."""
        self.extracted_order.items = list(items)
        self.items_revision += 1

    def next_token(self, adapter: str) -> int:
        """Issue a new request token, superseding any outstanding one."""
        token = self.request_tokens.get(adapter, 0) + 1
        self.request_tokens[adapter] = token
        return token

    def is_current(self, adapter: str, token: int) -> bool:
        """True if no newer request was issued (or invalidated) since token."""
        return self.request_tokens.get(adapter, 0) == token

    def invalidate(self, *adapters: str) -> None:
        """Abandon outstanding requests; their responses will be discarded."""
        for adapter in adapters:
            self.next_token(adapter)
            setattr(self, _IN_FLIGHT_FLAGS[adapter], False)

    def clear_derived(self) -> None:
        """Drop everything derived from the active file."""
        self.invalidate(EXTRACT, MATCH, SUBMIT)
        self.replace_items([])
        self.extracted_at = None
        self.extraction_error = None
        self.match_results = None
        self.selections = {}
        self.match_error = None
        self.draft = None
        self.submit_error = None

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of the current state."""
        return {
            "file": self.active_file.name if self.active_file else None,
            "view": self.view_mode.value,
            "items": len(self.extracted_order.items),
            "matched_queries": len(self.match_results.results) if self.match_results else 0,
            "selections": len(self.selections),
            "draft_status": self.draft.status.value if self.draft else None,
        }
