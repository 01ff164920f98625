"""
Tests for the order draft editor and submission.
"""

import pytest

from order_intake.errors import DraftLockedError, RequestError
from order_intake.schemas.order import DraftStatus, LineItem
from order_intake.stages.finalize import carry_over_names, edit_field, seed_draft, set_customer, submit_draft


@pytest.fixture
def draft(sample_items):
    return seed_draft(sample_items)


def test_seed_copies_items(sample_items):
    draft = seed_draft(sample_items)

    draft.items[0].name = "Changed"

    assert sample_items[0].name == "Widget"
    assert draft.status == DraftStatus.EDITABLE
    assert draft.customer_name == ""


def test_quantity_and_price_recompute_total(draft):
    draft.items[0].total = 123.0

    edit_field(draft, 0, "quantity", "3")
    edit_field(draft, 0, "price", "2.5")

    assert draft.items[0].total == 7.5


def test_unparsable_quantity_becomes_zero(draft):
    edit_field(draft, 0, "quantity", "lots")

    assert draft.items[0].quantity == 0
    assert draft.items[0].total == 0


def test_total_edit_leaves_quantity_and_price(draft):
    edit_field(draft, 0, "total", "42")

    item = draft.items[0]
    assert item.total == 42
    assert item.quantity == 2
    assert item.price == 5


def test_total_edit_can_disagree_with_product(draft):
    edit_field(draft, 1, "total", "1000")
    assert draft.items[1].total != draft.items[1].quantity * draft.items[1].price


def test_unparsable_total_becomes_zero(draft):
    edit_field(draft, 0, "total", "")
    assert draft.items[0].total == 0


def test_name_edit_does_not_recompute(draft):
    draft.items[0].total = 99.0

    edit_field(draft, 0, "name", "Widget Deluxe")

    assert draft.items[0].name == "Widget Deluxe"
    assert draft.items[0].total == 99.0


@pytest.mark.parametrize("index", [-1, 2, 10])
def test_out_of_range_index_fails_fast(draft, index):
    with pytest.raises(IndexError):
        edit_field(draft, index, "name", "x")


def test_unknown_field_rejected(draft):
    with pytest.raises(ValueError, match="Unknown line item field"):
        edit_field(draft, 0, "discount", "5")


def test_set_customer(draft):
    set_customer(draft, customer_name="ACME Ltd")
    set_customer(draft, customer_id="C-42")

    assert draft.customer_name == "ACME Ltd"
    assert draft.customer_id == "C-42"


def test_payload_shape(draft):
    set_customer(draft, customer_name="ACME Ltd", customer_id="C-42")

    assert draft.to_payload() == {
        "customerName": "ACME Ltd",
        "customerId": "C-42",
        "items": [
            {"name": "Widget", "quantity": 2.0, "price": 5.0, "total": 10.0},
            {"name": "Gadget", "quantity": 1.0, "price": 3.5, "total": 3.5},
        ],
    }


def test_grand_total(draft):
    assert draft.grand_total() == 13.5


def test_carry_over_names_renames_untouched_rows(draft):
    draft.customer_name = "ACME Ltd"
    edit_field(draft, 0, "quantity", "9")

    renamed = carry_over_names(draft, ["Widget", "Gadget"], ["Widget Pro", "Gadget XL"])

    assert renamed == 2
    assert [item.name for item in draft.items] == ["Widget Pro", "Gadget XL"]
    assert draft.items[0].quantity == 9
    assert draft.customer_name == "ACME Ltd"


def test_carry_over_names_keeps_user_names(draft):
    edit_field(draft, 1, "name", "My Gadget")

    assert carry_over_names(draft, ["Widget", "Gadget"], ["Widget Pro", "Gadget XL"]) == 1
    assert [item.name for item in draft.items] == ["Widget Pro", "My Gadget"]


def test_carry_over_names_ignores_row_count_change(draft):
    assert carry_over_names(draft, ["Widget", "Gadget"], ["Widget Pro"]) == 0
    assert [item.name for item in draft.items] == ["Widget", "Gadget"]


def test_carry_over_names_skips_submitted(draft):
    draft.status = DraftStatus.SUBMITTED

    assert carry_over_names(draft, ["Widget", "Gadget"], ["Widget Pro", "Gadget XL"]) == 0
    assert draft.items[0].name == "Widget"


class TestSubmit:
    """Draft submission state machine."""

    def test_success_moves_to_submitted(self, state, mock_client, draft):
        state.draft = draft
        set_customer(draft, customer_name="ACME Ltd", customer_id="C-42")

        submit_draft(state, mock_client)

        mock_client.finalize.assert_called_once_with(draft.to_payload())
        assert draft.status == DraftStatus.SUBMITTED
        assert draft.confirmation == {"status": "ok", "order_id": 1}
        assert state.submit_error is None
        assert state.is_submitting is False

    def test_second_submit_sends_nothing(self, state, mock_client, draft):
        state.draft = draft

        submit_draft(state, mock_client)
        submit_draft(state, mock_client)

        assert mock_client.finalize.call_count == 1
        assert draft.status == DraftStatus.SUBMITTED

    def test_failure_stays_editable_and_allows_retry(self, state, mock_client, draft):
        state.draft = draft
        mock_client.finalize.side_effect = [RequestError(500), {"status": "ok"}]

        submit_draft(state, mock_client)

        assert draft.status == DraftStatus.EDITABLE
        assert state.submit_error == "HTTP error! status: 500"
        assert state.is_submitting is False

        submit_draft(state, mock_client)

        assert draft.status == DraftStatus.SUBMITTED
        assert state.submit_error is None
        assert mock_client.finalize.call_count == 2

    def test_transport_failure_reported(self, state, mock_client, draft):
        state.draft = draft
        mock_client.finalize.side_effect = RequestError(None, "Request to /finalize failed: timed out")

        submit_draft(state, mock_client)

        assert draft.status == DraftStatus.EDITABLE
        assert "timed out" in state.submit_error

    def test_rejected_while_in_flight(self, state, mock_client, draft):
        state.draft = draft
        state.is_submitting = True

        submit_draft(state, mock_client)

        mock_client.finalize.assert_not_called()

    def test_without_draft(self, state, mock_client):
        submit_draft(state, mock_client)

        mock_client.finalize.assert_not_called()
        assert state.submit_error == "No order to submit"

    def test_empty_draft_not_sent(self, state, mock_client):
        state.draft = seed_draft([])

        submit_draft(state, mock_client)

        mock_client.finalize.assert_not_called()
        assert state.submit_error == "No items to submit"

    def test_submitted_draft_is_locked(self, state, mock_client, draft):
        state.draft = draft
        submit_draft(state, mock_client)

        with pytest.raises(DraftLockedError):
            edit_field(draft, 0, "quantity", "9")
        with pytest.raises(DraftLockedError):
            set_customer(draft, customer_name="Someone Else")

        assert draft.items[0].quantity == 2


def test_line_item_recompute_total():
    item = LineItem(name="Widget", quantity=4, price=1.25, total=0)
    item.recompute_total()
    assert item.total == 5.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
