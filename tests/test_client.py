"""
Tests for the backend HTTP client.
"""

import pytest
import requests
from unittest.mock import Mock, patch

from order_intake.client import BackendClient
from order_intake.errors import RequestError


def make_response(status_code=200, payload=None, json_error=None):
    response = Mock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    return BackendClient(base_url="http://backend.test/", timeout=5, session=session)


def test_base_url_trailing_slash_stripped(client):
    assert client.base_url == "http://backend.test"


def test_default_base_url_from_config():
    client = BackendClient(session=Mock(spec=requests.Session))
    assert client.base_url == "http://backend.test"
    assert client.timeout == 5.0


def test_extract_sends_multipart_file(client, session):
    records = [{"Request_Item": "Widget", "Amount": "2", "Unit_Price": "5", "Total": "10"}]
    session.request.return_value = make_response(payload=records)

    result = client.extract("order.pdf", b"%PDF", "application/pdf")

    assert result == records
    session.request.assert_called_once_with(
        "POST",
        "http://backend.test/extract",
        timeout=5,
        files={"file": ("order.pdf", b"%PDF", "application/pdf")},
    )


def test_extract_rejects_non_list_response(client, session):
    session.request.return_value = make_response(payload={"items": []})

    with pytest.raises(RequestError, match="Unexpected extraction response shape"):
        client.extract("order.pdf", b"%PDF")


def test_match_sends_json_array(client, session):
    session.request.return_value = make_response(payload={"results": {}})

    assert client.match(["Widget", "Gadget"]) == {"results": {}}
    session.request.assert_called_once_with(
        "POST", "http://backend.test/match", timeout=5, json=["Widget", "Gadget"]
    )


def test_finalize_posts_order(client, session):
    order = {"customerName": "ACME", "customerId": "C-1", "items": []}
    session.request.return_value = make_response(payload={"status": "ok"})

    assert client.finalize(order) == {"status": "ok"}
    session.request.assert_called_once_with(
        "POST", "http://backend.test/finalize", timeout=5, json=order
    )


def test_list_orders(client, session):
    session.request.return_value = make_response(payload=[{"id": 1}])

    assert client.list_orders() == [{"id": 1}]
    session.request.assert_called_once_with("GET", "http://backend.test/orders", timeout=5)


@pytest.mark.parametrize("status", [400, 404, 500, 503])
def test_non_2xx_raises_with_status(client, session, status):
    session.request.return_value = make_response(status_code=status)

    with pytest.raises(RequestError) as exc_info:
        client.match(["Widget"])

    assert exc_info.value.status == status
    assert str(exc_info.value) == f"HTTP error! status: {status}"


def test_201_is_success(client, session):
    session.request.return_value = make_response(status_code=201, payload={"id": 7})
    assert client.finalize({}) == {"id": 7}


def test_transport_failure_has_no_status(client, session):
    session.request.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(RequestError) as exc_info:
        client.list_orders()

    assert exc_info.value.status is None
    assert "refused" in str(exc_info.value)


def test_timeout_is_request_error(client, session):
    session.request.side_effect = requests.exceptions.Timeout("slow")

    with pytest.raises(RequestError):
        client.match(["Widget"])


def test_invalid_json_is_request_error(client, session):
    session.request.return_value = make_response(json_error=ValueError("Expecting value"))

    with pytest.raises(RequestError) as exc_info:
        client.finalize({})

    assert exc_info.value.status == 200
    assert "Invalid JSON" in str(exc_info.value)


def test_default_session_is_used():
    with patch("order_intake.client.requests.Session") as session_cls:
        session_cls.return_value.request.return_value = make_response(payload=[])
        client = BackendClient(base_url="http://other.test")

        client.list_orders()
        client.close()

    session_cls.return_value.request.assert_called_once_with("GET", "http://other.test/orders", timeout=5.0)
    session_cls.return_value.close.assert_called_once()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
