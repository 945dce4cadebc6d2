"""
Email gateway client.

Transactional emails (account verification, password reset) are handed to an
external HTTP email gateway. When no gateway URL is configured the client
only logs the message, which keeps local and test runs self-contained.

Usage:
    from libs.common.emails.client import get_email_client

    await get_email_client().send(
        to_email="user@example.com",
        subject="Email Verification",
        body="Your code is 123456",
        html_body="<h2>123456</h2>",
    )
"""

from typing import Any, Optional

import httpx
from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)


class EmailDeliveryError(Exception):
    """The gateway did not accept the message."""


class EmailClient:
    """
    HTTP client for the email gateway.

    Unlike a fire-and-forget notifier, failures raise `EmailDeliveryError` so
    that callers can roll back state that depends on the email arriving
    (for example a freshly issued OTP).
    """

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None):
        settings = get_settings()
        self.base_url = (base_url if base_url is not None else settings.EMAIL_GATEWAY_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.EMAIL_GATEWAY_API_KEY
        self.from_email = settings.DEFAULT_FROM_EMAIL
        self.from_name = settings.DEFAULT_FROM_NAME
        self.timeout = 15.0

    def _get_auth_headers(self) -> dict[str, str]:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    async def send(
        self,
        to_email: str,
        subject: str,
        body: str,
        html_body: Optional[str] = None,
    ) -> None:
        """
        Send a single email.

        Raises:
            EmailDeliveryError: gateway unreachable or returned a non-2xx status.
        """
        if not self.base_url:
            logger.info("Email gateway not configured - would have sent to %s: %s", to_email, subject)
            logger.debug("Email body: %s", body[:200])
            return

        payload: dict[str, Any] = {
            "to_email": to_email,
            "subject": subject,
            "body": body,
            "from_email": self.from_email,
            "from_name": self.from_name,
        }
        if html_body:
            payload["html_body"] = html_body

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/email/send",
                    json=payload,
                    headers=self._get_auth_headers(),
                )
        except httpx.RequestError as e:
            logger.error("Failed to reach email gateway: %s", e)
            raise EmailDeliveryError("Email gateway unreachable") from e

        if response.is_error:
            logger.error(
                "Email gateway returned %s: %s", response.status_code, response.text
            )
            raise EmailDeliveryError(f"Email gateway returned {response.status_code}")

        logger.info("Email sent to %s: %s", to_email, subject)


# Singleton instance for convenience
_email_client: Optional[EmailClient] = None


def get_email_client() -> EmailClient:
    """Get or create the singleton EmailClient instance."""
    global _email_client
    if _email_client is None:
        _email_client = EmailClient()
    return _email_client
