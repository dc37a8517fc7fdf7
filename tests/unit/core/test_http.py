import pytest
import requests

from app.core.http import ThrottledSession


def test_get_returns_successful_response(mocker):
    http = ThrottledSession(min_interval_sec=0, headers={"User-Agent": "test"})
    resp = mocker.Mock(status_code=200)
    get = mocker.patch.object(http.session, "get", return_value=resp)

    assert http.get("https://example.test/x", params={"a": 1}) is resp
    get.assert_called_once_with("https://example.test/x", params={"a": 1}, timeout=10.0)
    assert http.session.headers["User-Agent"] == "test"


def test_get_raises_without_retry(mocker):
    http = ThrottledSession(min_interval_sec=0)
    resp = mocker.Mock(status_code=503)
    resp.raise_for_status.side_effect = requests.HTTPError("HTTP 503")
    get = mocker.patch.object(http.session, "get", return_value=resp)

    with pytest.raises(requests.HTTPError):
        http.get("https://example.test/x")

    assert get.call_count == 1


def test_get_spaces_consecutive_calls(mocker):
    http = ThrottledSession(min_interval_sec=5)
    mocker.patch.object(http.session, "get", return_value=mocker.Mock(status_code=200))
    sleep = mocker.patch("app.core.http.time.sleep")

    http.get("https://example.test/a")
    http.get("https://example.test/b")

    assert sleep.call_count == 1
    assert 0 < sleep.call_args.args[0] <= 5
