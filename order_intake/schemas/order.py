"""
Order schemas and data models.
Represents extracted line items, the editable draft and persisted orders.
"""

from typing import Optional, List, Dict, Any, Union
from enum import Enum
from pydantic import BaseModel, Field


class LineItem(BaseModel):
    """
    A single product row of an order.

    total equals quantity * price only right after quantity or price is
    edited. Extracted totals and direct total edits are kept as given.
    """
    name: str = ""
    quantity: float = 0.0
    price: float = 0.0
    total: float = 0.0

    def recompute_total(self) -> None:
        """Derive total from quantity and unit price."""
        self.total = self.quantity * self.price


class ExtractedOrder(BaseModel):
    """Line items extracted from the uploaded purchase order."""
    items: List[LineItem] = Field(default_factory=list)

    def item_names(self) -> List[str]:
        """Names of all items, in order."""
        return [item.name for item in self.items]


class BackendItem(BaseModel):
    """A raw record returned by the extraction service (all fields text)."""
    Request_Item: Optional[Any] = None
    Amount: Optional[Any] = None
    Unit_Price: Optional[Any] = None
    Total: Optional[Any] = None


class DraftStatus(str, Enum):
    """Lifecycle of an order draft."""
    EDITABLE = "editable"
    SUBMITTED = "submitted"


class OrderDraft(BaseModel):
    """The user-editable, not yet submitted order."""
    customer_name: str = ""
    customer_id: str = ""
    items: List[LineItem] = Field(default_factory=list)
    status: DraftStatus = DraftStatus.EDITABLE
    confirmation: Optional[Dict[str, Any]] = None

    def grand_total(self) -> float:
        """Sum of all item totals as currently stored."""
        return sum(item.total for item in self.items)

    def to_payload(self) -> Dict[str, Any]:
        """Wire format expected by the finalize endpoint."""
        return {
            "customerName": self.customer_name,
            "customerId": self.customer_id,
            "items": [item.model_dump() for item in self.items],
        }


class OrderRecord(BaseModel):
    """A persisted order row as listed by the orders endpoint."""
    id: Union[int, str]
    customer_name: str = ""
    name: str = ""
    quantity: float = 0.0
    price: float = 0.0
    total: float = 0.0
