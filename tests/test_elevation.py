import json
from unittest import mock

import pytest
import requests

from crack_monitor.config_loader import get_default_config
from crack_monitor.elevation import ElevationClient, create_app
from crack_monitor.exceptions import ElevationLookupError

UPSTREAM_BODY = {
    "results": [{"elevation": 38.2, "location": {"lat": 37.56, "lng": 126.97}, "resolution": 9.5}],
    "status": "OK",
}
# Unsorted keys, as the upstream sends them
UPSTREAM_RAW = b'{"status": "OK", "results": [{"location": {"lng": 126.97, "lat": 37.56}, "elevation": 38.2, "resolution": 9.5}]}'


@pytest.fixture
def upstream():
    client = mock.Mock(spec=ElevationClient)
    client.lookup.return_value = UPSTREAM_RAW
    return client


@pytest.fixture
def http(upstream):
    app = create_app(get_default_config(), client=upstream)
    app.config['TESTING'] = True
    return app.test_client()


def test_missing_lon_returns_400(http, upstream):
    response = http.get('/elevation?lat=37.56')
    assert response.status_code == 400
    assert response.get_json() == {"error": "Missing lat/lon"}
    upstream.lookup.assert_not_called()


@pytest.mark.parametrize("query", ['', '?lon=126.97', '?lat=&lon=126.97'])
def test_missing_or_empty_params_return_400(http, query):
    response = http.get('/elevation' + query)
    assert response.status_code == 400
    assert response.get_json() == {"error": "Missing lat/lon"}


def test_success_returns_upstream_body_verbatim(http, upstream):
    response = http.get('/elevation?lat=37.56&lon=126.97')
    assert response.status_code == 200
    assert response.data == UPSTREAM_RAW
    assert response.mimetype == "application/json"
    assert response.get_json() == UPSTREAM_BODY
    upstream.lookup.assert_called_once_with('37.56', '126.97')


def test_upstream_failure_returns_500(http, upstream):
    upstream.lookup.side_effect = ElevationLookupError("timeout")
    response = http.get('/elevation?lat=37.56&lon=126.97')
    assert response.status_code == 500
    assert response.get_json() == {"error": "Failed to fetch elevation data"}


def test_client_builds_upstream_request():
    session = mock.Mock()
    session.get.return_value.content = UPSTREAM_RAW
    session.get.return_value.json.return_value = json.loads(UPSTREAM_RAW)
    client = ElevationClient("secret", upstream_url="https://elev.example.com/json", timeout=4, session=session)

    assert client.lookup("37.56", "126.97") == UPSTREAM_RAW
    session.get.assert_called_once_with(
        "https://elev.example.com/json",
        params={'locations': '37.56,126.97', 'key': 'secret'},
        timeout=4
    )


def test_client_without_key_still_forwards():
    session = mock.Mock()
    session.get.return_value.content = b'{"status": "REQUEST_DENIED"}'
    session.get.return_value.json.return_value = {"status": "REQUEST_DENIED"}
    client = ElevationClient(None, session=session)

    assert client.lookup("1", "2") == b'{"status": "REQUEST_DENIED"}'
    assert 'key' not in session.get.call_args.kwargs['params']


@pytest.mark.parametrize("error", [requests.Timeout("slow"), ValueError("not json")])
def test_client_wraps_failures(error):
    session = mock.Mock()
    if isinstance(error, requests.RequestException):
        session.get.side_effect = error
    else:
        session.get.return_value.json.side_effect = error
    client = ElevationClient("secret", session=session)

    with pytest.raises(ElevationLookupError):
        client.lookup("1", "2")


def test_create_app_reads_key_from_environment(monkeypatch):
    monkeypatch.setenv("GOOGLE_ELEVATION_KEY", "from-env")
    app = create_app(get_default_config())
    assert app.extensions['elevation_client'].api_key == "from-env"
