from urllib.parse import parse_qs, urlsplit

from integrations.netfunnel import NetFunnelClient
from integrations.netfunnel.models import OpCode
from integrations.netfunnel.utils import MillisClock, build_params, build_request_url, build_url, query_utils

ENDPOINT = "https://nf.example.com/ts.wseq"


def _split(url):
    parts = urlsplit(url)
    query, _, stamp = parts.query.rpartition("&")
    return parts, parse_qs(query), stamp


def test_status_check_params():
    params = build_params(OpCode.CHECK_STATUS, key="abc")

    assert params == {
        "opcode": "5002",
        "key": "abc",
        "nfid": "0",
        "prefix": "NetFunnel.gRtype=5002;",
        "ttl": "0",
        "js": "yes",
    }


def test_ticket_request_params_have_no_key():
    params = build_params(OpCode.GET_TICKET)

    assert params == {
        "opcode": "5101",
        "nfid": "0",
        "prefix": "NetFunnel.gRtype=5101;",
        "sid": "service_1",
        "aid": "act_1",
        "js": "yes",
    }


def test_dispatch_params_use_configured_ids():
    params = build_params(OpCode.DISPATCH_TICKET, key="abc", service_id="svc", action_id="act")

    assert params["opcode"] == "5004"
    assert params["key"] == "abc"
    assert params["sid"] == "svc"
    assert params["aid"] == "act"
    assert params["prefix"] == "NetFunnel.gRtype=5004;"
    assert "ttl" not in params


def test_build_url_encodes_reserved_characters_and_appends_timestamp():
    url = build_url(ENDPOINT, {"prefix": "NetFunnel.gRtype=5101;", "key": "a b&c"}, clock=lambda: 1700000000123)

    assert url == f"{ENDPOINT}?key=a+b%26c&prefix=NetFunnel.gRtype%3D5101%3B&1700000000123"


def test_request_url_round_trips_all_params():
    url = build_request_url(ENDPOINT, OpCode.DISPATCH_TICKET, key="k/1", clock=lambda: 42)
    parts, query, stamp = _split(url)

    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == ENDPOINT
    assert query["key"] == ["k/1"]
    assert query["prefix"] == ["NetFunnel.gRtype=5004;"]
    assert stamp == "42"


def test_timestamp_suffix_is_non_decreasing():
    stamps = []
    for opcode in (OpCode.GET_TICKET, OpCode.CHECK_STATUS, OpCode.DISPATCH_TICKET, OpCode.CHECK_STATUS):
        _, _, stamp = _split(build_request_url(ENDPOINT, opcode, key="abc"))
        assert stamp.isdigit()
        stamps.append(int(stamp))

    assert stamps == sorted(stamps)


def test_millis_clock_never_steps_back():
    readings = iter([1000, 1005, 990, 1003, 1010])
    clock = MillisClock(source=lambda: next(readings))

    assert [clock() for _ in range(5)] == [1000, 1005, 1005, 1005, 1010]


def test_client_urls_keep_order_across_clock_adjustment(monkeypatch):
    readings = iter([2_000_000_000_000, 1_999_999_999_000, 2_000_000_000_500])
    monkeypatch.setattr(query_utils, "now_millis", lambda: next(readings))
    client = NetFunnelClient(api_endpoint=ENDPOINT)

    stamps = [
        int(_split(client._build_url(OpCode.CHECK_STATUS, "abc"))[2])
        for _ in range(3)
    ]

    assert stamps == [2_000_000_000_000, 2_000_000_000_000, 2_000_000_000_500]
