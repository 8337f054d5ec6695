import threading
from unittest.mock import MagicMock

import pytest
import requests

from sipspot.services.http_client import ApiClient, ApiError, NetworkError, error_message


def _response(status: int, body=None):
    resp = MagicMock()
    resp.status_code = status
    resp.content = b"" if body is None else b"{}"
    resp.json.return_value = body
    return resp


def _client(resp=None, side_effect=None, **kwargs):
    session = MagicMock()
    session.request.return_value = resp
    session.request.side_effect = side_effect
    return ApiClient(base_url="http://api.test/api/", session=session, **kwargs), session


def test_error_message_prefers_server_message():
    assert error_message(400, {"message": "Name is required"}) == "Name is required"
    assert error_message(404, {}) == "The requested resource does not exist"
    assert error_message(418, None) == "Request failed (418)"


def test_get_builds_url_drops_empty_params_and_sends_token():
    client, session = _client(_response(200, {"success": True, "data": []}), token="abc")
    body = client.get("/cafes", params={"city": "Seattle", "search": "", "minRating": None})

    assert body == {"success": True, "data": []}
    method, url = session.request.call_args.args
    kwargs = session.request.call_args.kwargs
    assert (method, url) == ("GET", "http://api.test/api/cafes")
    assert kwargs["params"] == {"city": "Seattle"}
    assert kwargs["headers"]["Authorization"] == "Bearer abc"
    assert kwargs["timeout"] == client.timeout


def test_error_status_raises_api_error_with_server_message():
    client, _ = _client(_response(409, {"success": False, "message": "Already reviewed"}))
    with pytest.raises(ApiError) as info:
        client.post("/cafes/1/reviews", {"rating": 5})
    assert info.value.status == 409
    assert info.value.message == "Already reviewed"


def test_unauthorized_calls_hook():
    hook = MagicMock()
    client, _ = _client(_response(401, {}), on_unauthorized=hook)
    with pytest.raises(ApiError):
        client.get("/auth/me")
    hook.assert_called_once_with()


def test_rejected_password_does_not_end_the_session():
    hook = MagicMock()
    client, _ = _client(_response(401, {"message": "Current password is incorrect"}), on_unauthorized=hook)
    with pytest.raises(ApiError) as exc:
        client.put("/auth/password", {"currentPassword": "x"}, notify_unauthorized=False)
    assert exc.value.message == "Current password is incorrect"
    hook.assert_not_called()


def test_timeout_and_connection_errors_become_network_errors():
    client, _ = _client(side_effect=requests.Timeout("slow"))
    with pytest.raises(NetworkError) as info:
        client.get("/cafes")
    assert info.value.status is None

    client, _ = _client(side_effect=requests.ConnectionError("refused"))
    with pytest.raises(NetworkError):
        client.delete("/cafes/1")


def test_empty_body_is_an_empty_dict():
    client, _ = _client(_response(204))
    assert client.delete("/cafes/1/favorite") == {}


def test_upload_files_sends_multipart_with_json_encoded_fields():
    client, session = _client(_response(201, {"data": {"_id": "r1"}}))
    client.upload_files(
        "/cafes/1/reviews",
        [("a.jpg", b"123", "image/jpeg")],
        data={"rating": 5, "detailedRatings": {"coffee": 4}, "visitDate": None},
    )
    kwargs = session.request.call_args.kwargs
    assert kwargs["data"] == {"rating": "5", "detailedRatings": '{"coffee": 4}'}
    assert kwargs["files"] == [("images", ("a.jpg", b"123", "image/jpeg"))]


def test_each_thread_gets_its_own_session_sharing_one_cookie_jar():
    client = ApiClient(base_url="http://api.test/api")
    sessions = []
    threads = [threading.Thread(target=lambda: sessions.append(client.session)) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(sessions) == 2
    assert sessions[0] is not sessions[1]
    assert all(s.cookies is client.cookies for s in sessions)
    assert client.session is client.session


def test_explicit_session_is_shared():
    client, session = _client(_response(200, {}))
    assert client.session is session
    assert client.cookies is session.cookies
