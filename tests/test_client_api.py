"""Tests for the HTTP client's request building and error mapping."""

from unittest.mock import MagicMock

import pytest
import requests

from request_board.client.api import RequestBoardAPI
from request_board.errors import (
    InternalError,
    InvalidStatus,
    NotFound,
    TransientTransportError,
    ValidationError,
)


def fake_response(status_code=200, body=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.content = b"x" if body is not None else b""
    response.text = text
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def http():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def api(http):
    return RequestBoardAPI(base_url="http://board.local/api/v1/", timeout=3, session=http)


def test_list_requests_parses_camel_case(api, http):
    http.request.return_value = fake_response(
        body=[
            {
                "id": 1,
                "text": "Alien",
                "submittedBy": "Sam",
                "submittedAt": "2024-05-01T12:00:00+00:00",
                "status": "in-progress",
                "priority": True,
                "sortPosition": 0,
                "year": 1979,
                "type": "Movie",
            }
        ]
    )
    (item,) = api.list_requests()
    assert item.submitted_by == "Sam"
    assert item.status == "in-progress"
    http.request.assert_called_once_with(
        method="GET", url="http://board.local/api/v1/requests", json=None, timeout=3
    )


def test_list_requests_rejects_malformed_payload(api, http):
    http.request.return_value = fake_response(body={"requests": []})
    with pytest.raises(InternalError):
        api.list_requests()
    http.request.return_value = fake_response(body=[{"id": "x"}])
    with pytest.raises(InternalError):
        api.list_requests()


def test_create_request_sends_camel_case(api, http):
    http.request.return_value = fake_response(201, {"id": 12, "message": "Request created successfully"})
    assert api.create_request("Heat", "Lee", priority=True, year=1995, request_type="Movie") == 12
    _, kwargs = http.request.call_args
    assert kwargs["method"] == "POST"
    assert kwargs["json"] == {
        "text": "Heat",
        "submittedBy": "Lee",
        "priority": True,
        "year": 1995,
        "type": "Movie",
    }


def test_reorder_body(api, http):
    http.request.return_value = fake_response(body={"message": "ok"})
    api.reorder((3, 1, 2))
    _, kwargs = http.request.call_args
    assert kwargs["method"] == "PUT"
    assert kwargs["url"].endswith("/requests/reorder")
    assert kwargs["json"] == {"ids": [3, 1, 2]}


def test_set_sort_position_body(api, http):
    http.request.return_value = fake_response(body={"message": "ok"})
    api.set_sort_position(4, 9)
    _, kwargs = http.request.call_args
    assert kwargs["url"].endswith("/requests/4/position")
    assert kwargs["json"] == {"position": 9}


def test_connection_error_is_transient(api, http):
    http.request.side_effect = requests.ConnectionError("refused")
    with pytest.raises(TransientTransportError):
        api.list_requests()


def test_timeout_is_transient(api, http):
    http.request.side_effect = requests.Timeout("slow")
    with pytest.raises(TransientTransportError):
        api.delete_request(1)


@pytest.mark.parametrize(
    "status_code, error",
    [
        (400, ValidationError),
        (422, ValidationError),
        (404, NotFound),
        (502, TransientTransportError),
        (503, TransientTransportError),
        (500, InternalError),
    ],
)
def test_status_code_mapping(api, http, status_code, error):
    http.request.return_value = fake_response(status_code, {"detail": "nope"})
    with pytest.raises(error):
        api.reorder([1])


def test_not_found_carries_id(api, http):
    http.request.return_value = fake_response(404, {"detail": "Request 8 not found"})
    with pytest.raises(NotFound) as excinfo:
        api.delete_request(8)
    assert excinfo.value.request_id == 8


def test_bad_status_raises_invalid_status(api, http):
    http.request.return_value = fake_response(400, {"detail": "Invalid status: 'done'"})
    with pytest.raises(InvalidStatus) as excinfo:
        api.set_status(1, "done")
    assert excinfo.value.status == "done"


def test_internal_error_keeps_status_and_text(api, http):
    http.request.return_value = fake_response(500, text="Internal Server Error")
    with pytest.raises(InternalError) as excinfo:
        api.delete_request(1)
    assert excinfo.value.status_code == 500
    assert "Internal Server Error" in str(excinfo.value)
