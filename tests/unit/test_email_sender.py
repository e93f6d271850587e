"""EmailSender provider fallback, driven through httpx.MockTransport."""

import json

import httpx

from src.bo_notify.email import RESEND_URL, SENDGRID_URL, EmailSender


def _sender(handler, resend: str = "re_key", sendgrid: str = "sg_key") -> EmailSender:
    return EmailSender(
        resend_api_key=resend,
        sendgrid_api_key=sendgrid,
        sender="Back Office <noreply@example.com>",
        transport=httpx.MockTransport(handler),
    )


async def test_not_configured_returns_false() -> None:
    sender = EmailSender(resend_api_key="", sendgrid_api_key="")
    assert sender.configured is False
    assert await sender.send("a@example.com", "Hi", "<p>hi</p>") is False


async def test_resend_success_skips_sendgrid() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        assert request.headers["Authorization"] == "Bearer re_key"
        body = json.loads(request.content)
        assert body["to"] == ["a@example.com"]
        return httpx.Response(200, json={"id": "1"})

    assert await _sender(handler).send("a@example.com", "Hi", "<p>hi</p>") is True
    assert calls == [RESEND_URL]


async def test_falls_back_to_sendgrid() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        if str(request.url) == RESEND_URL:
            return httpx.Response(500, text="boom")
        body = json.loads(request.content)
        assert body["from"] == {"email": "noreply@example.com", "name": "Back Office"}
        assert body["personalizations"][0]["to"] == [{"email": "a@example.com"}]
        return httpx.Response(202)

    assert await _sender(handler).send("a@example.com", "Hi", "<p>hi</p>") is True
    assert calls == [RESEND_URL, SENDGRID_URL]


async def test_transport_errors_are_reported_as_not_sent() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    assert await _sender(handler).send("a@example.com", "Hi", "<p>hi</p>") is False


async def test_only_sendgrid_configured() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(202)

    assert await _sender(handler, resend="").send("a@example.com", "Hi", "x") is True
    assert calls == [SENDGRID_URL]
