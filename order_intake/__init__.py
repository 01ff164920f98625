"""
Order Intake: PDF purchase order upload, catalog matching and order finalization.
"""

__version__ = "1.0.0"
__description__ = "Upload, match and finalize purchase orders against an order backend"

from order_intake.workflow import OrderWorkflow
from order_intake.state import WorkflowState, ViewMode
from order_intake.client import BackendClient

__all__ = [
    "OrderWorkflow",
    "WorkflowState",
    "ViewMode",
    "BackendClient",
]
