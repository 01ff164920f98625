"""
Shared fixtures for the order intake tests.
"""

import os

# Must be set before order_intake modules read their configuration
os.environ["ENV"] = "test"
os.environ.setdefault("LOG_FILE", os.devnull)

import pytest
from unittest.mock import Mock

from order_intake.client import BackendClient
from order_intake.schemas.file import CandidateFile
from order_intake.schemas.order import LineItem
from order_intake.stages.file_intake import PreviewStore
from order_intake.state import WorkflowState
from order_intake.workflow import OrderWorkflow


PDF_BYTES = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\n%%EOF\n"


def make_pdf(name: str = "order.pdf", size: int = None, content_type: str = "application/pdf") -> CandidateFile:
    """Build a candidate file; size may be declared larger than the data."""
    return CandidateFile(
        name=name,
        content_type=content_type,
        size=len(PDF_BYTES) if size is None else size,
        data=PDF_BYTES,
    )


@pytest.fixture
def pdf_file():
    return make_pdf()


@pytest.fixture
def mock_client():
    """Backend client with every endpoint mocked out."""
    client = Mock(spec=BackendClient)
    client.extract.return_value = []
    client.match.return_value = {"results": {}}
    client.finalize.return_value = {"status": "ok", "order_id": 1}
    client.list_orders.return_value = []
    return client


@pytest.fixture
def preview_store(tmp_path):
    return PreviewStore(directory=str(tmp_path))


@pytest.fixture
def state():
    return WorkflowState()


@pytest.fixture
def workflow(mock_client, preview_store):
    wf = OrderWorkflow(client=mock_client, preview_store=preview_store)
    yield wf
    wf.close()


@pytest.fixture
def sample_items():
    return [
        LineItem(name="Widget", quantity=2, price=5.0, total=10.0),
        LineItem(name="Gadget", quantity=1, price=3.5, total=3.5),
    ]


@pytest.fixture
def extract_records():
    """Raw extraction response for two items."""
    return [
        {"Request_Item": "Widget", "Amount": "2", "Unit_Price": "5", "Total": "10"},
        {"Request_Item": "Gadget", "Amount": "1", "Unit_Price": "3.5", "Total": "3.5"},
    ]
