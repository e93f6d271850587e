"""Outbound email over provider HTTP APIs.

Providers are tried in order: Resend, then SendGrid. A provider without an
API key is skipped. `send()` reports delivery as a bool and never raises:
callers fall back to handing credentials/OTPs over manually.
"""

import logging
from email.utils import parseaddr

import httpx

from config.settings import settings

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"
SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"
_TIMEOUT_SECONDS = 10.0


class EmailSender:
    def __init__(
        self,
        resend_api_key: str | None = None,
        sendgrid_api_key: str | None = None,
        sender: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._resend_key = resend_api_key if resend_api_key is not None else settings.RESEND_API_KEY
        self._sendgrid_key = (
            sendgrid_api_key if sendgrid_api_key is not None else settings.SENDGRID_API_KEY
        )
        self._sender = sender or settings.EMAIL_FROM
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._resend_key or self._sendgrid_key)

    async def send(self, to: str, subject: str, html: str) -> bool:
        if not self.configured:
            logger.info("No email provider configured; not sending '%s' to %s", subject, to)
            return False

        async with httpx.AsyncClient(timeout=_TIMEOUT_SECONDS, transport=self._transport) as client:
            if self._resend_key and await self._send_resend(client, to, subject, html):
                return True
            if self._sendgrid_key and await self._send_sendgrid(client, to, subject, html):
                return True

        logger.error("All email providers failed for '%s' to %s", subject, to)
        return False

    async def _send_resend(
        self, client: httpx.AsyncClient, to: str, subject: str, html: str
    ) -> bool:
        payload = {"from": self._sender, "to": [to], "subject": subject, "html": html}
        return await self._post(client, "Resend", RESEND_URL, self._resend_key, payload, to)

    async def _send_sendgrid(
        self, client: httpx.AsyncClient, to: str, subject: str, html: str
    ) -> bool:
        name, address = parseaddr(self._sender)
        sender: dict[str, str] = {"email": address or self._sender}
        if name:
            sender["name"] = name
        payload = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": sender,
            "subject": subject,
            "content": [{"type": "text/html", "value": html}],
        }
        return await self._post(client, "SendGrid", SENDGRID_URL, self._sendgrid_key, payload, to)

    async def _post(
        self,
        client: httpx.AsyncClient,
        provider: str,
        url: str,
        api_key: str | None,
        payload: dict,
        to: str,
    ) -> bool:
        try:
            resp = await client.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {api_key}"},
            )
        except httpx.HTTPError as exc:
            logger.warning("%s request failed: %s", provider, exc)
            return False

        if resp.status_code >= 300:
            logger.warning(
                "%s rejected email (%d): %s", provider, resp.status_code, resp.text[:200]
            )
            return False

        logger.info("Email sent via %s to %s", provider, to)
        return True
