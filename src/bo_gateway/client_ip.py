"""Client IP resolution behind reverse proxies / CDNs.

Order: first X-Forwarded-For hop, X-Real-IP, CF-Connecting-IP, socket peer.
"""

from starlette.requests import Request

UNKNOWN_IP = "Unknown"


def get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    for header in ("x-real-ip", "cf-connecting-ip"):
        value = request.headers.get(header)
        if value and value.strip():
            return value.strip()

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_IP
