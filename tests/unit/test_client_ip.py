"""Tests for client IP resolution."""

from starlette.requests import Request

from src.bo_gateway.client_ip import UNKNOWN_IP, get_client_ip


def _request(
    headers: dict[str, str], client: tuple[str, int] | None = ("10.0.0.9", 5000)
) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        "client": client,
    }
    return Request(scope)


def test_first_forwarded_hop_wins() -> None:
    req = _request({"X-Forwarded-For": "203.0.113.5, 10.0.0.1", "X-Real-IP": "198.51.100.2"})
    assert get_client_ip(req) == "203.0.113.5"


def test_real_ip_then_cloudflare() -> None:
    assert get_client_ip(_request({"X-Real-IP": " 198.51.100.2 "})) == "198.51.100.2"
    assert get_client_ip(_request({"CF-Connecting-IP": "192.0.2.7"})) == "192.0.2.7"


def test_socket_peer_fallback() -> None:
    assert get_client_ip(_request({})) == "10.0.0.9"


def test_unknown_without_any_source() -> None:
    assert get_client_ip(_request({}, client=None)) == UNKNOWN_IP
