import http.client
import io
import json
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from storefront_fx.core.config import Settings
from storefront_fx.services.http_client import HttpError, get_json
from storefront_fx.services.rates.providers import (
    ExchangeRateApiClient,
    InvalidPayloadError,
    StaticRateClient,
    extract_zmw_rate,
    make_rate_client,
    to_epoch_ms,
)

URL = "https://v6.exchangerate-api.com/v6/test-key/latest/USD"


def _payload(**rates):
    return {"result": "success", "base_code": "USD", "rates": {"USD": 1, **rates}}


def test_extract_zmw_rate():
    assert extract_zmw_rate(_payload(ZMW=18.5)) == 18.5
    assert extract_zmw_rate(_payload(ZMW=27)) == 27.0


@pytest.mark.parametrize(
    "payload",
    [
        {"result": "error", "error-type": "invalid-key"},
        {"result": "success"},
        {"result": "success", "rates": []},
        _payload(),
        _payload(ZMW=0),
        _payload(ZMW="18.5"),
        _payload(ZMW=True),
        _payload(ZMW=float("nan")),
        _payload(ZMW=float("inf")),
    ],
)
def test_extract_zmw_rate_rejects_malformed(payload):
    with pytest.raises(InvalidPayloadError):
        extract_zmw_rate(payload)


def test_client_success(clock):
    client = ExchangeRateApiClient(URL, clock=clock)
    with patch(
        "storefront_fx.services.rates.providers.get_json", return_value=_payload(ZMW=18.5)
    ) as get:
        result = client.fetch_exchange_rate()

    assert result.success is True
    assert result.rate == 18.5
    assert result.timestamp == to_epoch_ms(clock())
    get.assert_called_once_with(URL, timeout=10.0, retries=0)


def test_client_http_failure_returns_fallback(clock):
    client = ExchangeRateApiClient(URL, clock=clock)
    with patch(
        "storefront_fx.services.rates.providers.get_json",
        side_effect=HttpError("API request failed: 503 Service Unavailable"),
    ):
        result = client.fetch_exchange_rate()

    assert result.success is False
    assert result.rate == 18.89
    assert "503" in result.error


def test_client_malformed_payload_returns_fallback(clock):
    client = ExchangeRateApiClient(URL, fallback_rate=20.0, clock=clock)
    with patch(
        "storefront_fx.services.rates.providers.get_json",
        return_value={"result": "error"},
    ):
        result = client.fetch_exchange_rate()

    assert result.success is False
    assert result.rate == 20.0
    assert result.error == "Invalid API response format"


def test_static_client_never_fails(clock):
    result = StaticRateClient(19.0, clock=clock).fetch_exchange_rate()

    assert result.success is True
    assert result.rate == 19.0


def test_make_rate_client(tmp_path):
    live = Settings(db_path=tmp_path / "a.db", exchange_api_key="k")
    static = Settings(db_path=tmp_path / "b.db", exchange_rate_provider="static")
    bogus = Settings(db_path=tmp_path / "c.db", exchange_rate_provider="carrier-pigeon")

    assert isinstance(make_rate_client(live), ExchangeRateApiClient)
    assert isinstance(make_rate_client(static), StaticRateClient)
    with pytest.raises(ValueError):
        make_rate_client(bogus)


def test_settings_build_api_url(tmp_path):
    s = Settings(db_path=tmp_path / "a.db", exchange_api_key="abc123")

    assert s.exchange_api_url == "https://v6.exchangerate-api.com/v6/abc123/latest/USD"


def _response(body: bytes, status: int = 200):
    resp = MagicMock()
    resp.status = status
    resp.read.return_value = body
    resp.__enter__.return_value = resp
    return resp


def test_get_json_parses_body():
    body = json.dumps(_payload(ZMW=18.5)).encode()
    with patch("urllib.request.urlopen", return_value=_response(body)):
        assert get_json(URL)["rates"]["ZMW"] == 18.5


def test_get_json_wraps_http_errors():
    err = urllib.error.HTTPError(URL, 500, "Internal Server Error", None, io.BytesIO(b""))
    with patch("urllib.request.urlopen", side_effect=err):
        with pytest.raises(HttpError, match="500"):
            get_json(URL)


def test_get_json_retries_then_gives_up():
    with patch(
        "urllib.request.urlopen", side_effect=urllib.error.URLError("unreachable")
    ) as urlopen, patch("storefront_fx.services.http_client.time.sleep") as sleep:
        with pytest.raises(HttpError):
            get_json(URL, retries=2)

    assert urlopen.call_count == 3
    assert sleep.call_count == 2


def test_get_json_rejects_invalid_json():
    with patch("urllib.request.urlopen", return_value=_response(b"<html>")):
        with pytest.raises(HttpError):
            get_json(URL)


@pytest.mark.parametrize("literal", [b"NaN", b"Infinity", b"-Infinity"])
def test_client_rejects_non_finite_rate_literals(clock, literal):
    body = b'{"result": "success", "rates": {"USD": 1, "ZMW": ' + literal + b"}}"
    client = ExchangeRateApiClient(URL, clock=clock)
    with patch("urllib.request.urlopen", return_value=_response(body)):
        result = client.fetch_exchange_rate()

    assert result.success is False
    assert result.rate == 18.89


@pytest.mark.parametrize(
    "error",
    [
        ConnectionResetError("reset"),
        http.client.RemoteDisconnected("closed without response"),
        http.client.IncompleteRead(b"{"),
    ],
)
def test_get_json_retries_low_level_connection_errors(error):
    with patch("urllib.request.urlopen", side_effect=error) as urlopen, patch(
        "storefront_fx.services.http_client.time.sleep"
    ):
        with pytest.raises(HttpError):
            get_json(URL, retries=2)

    assert urlopen.call_count == 3


def test_client_turns_connection_reset_into_failed_result(clock):
    client = ExchangeRateApiClient(URL, retries=2, clock=clock)
    with patch(
        "urllib.request.urlopen", side_effect=ConnectionResetError("reset")
    ), patch("storefront_fx.services.http_client.time.sleep"):
        result = client.fetch_exchange_rate()

    assert result.success is False
    assert result.rate == 18.89
    assert result.error == "reset"
