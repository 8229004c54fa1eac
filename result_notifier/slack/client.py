"""
Slack incoming-webhook client.

Handles:
- default username / icon applied to every message it creates
- Webhook: send (no auth needed, the URL is the credential)
"""

import httpx
import structlog

from result_notifier.config import settings
from result_notifier.schemas.message import SlackMessage

logger = structlog.get_logger()


class SlackClient:
    def __init__(
        self,
        webhook: str,
        default_username: str | None = None,
        default_icon: str | None = None,
        timeout: float | None = None,
        http: httpx.Client | None = None,
    ):
        self.webhook = webhook
        self.default_username = default_username
        self.default_icon = default_icon
        self._http = http or httpx.Client(
            timeout=settings.SLACK_TIMEOUT if timeout is None else timeout
        )

    def __enter__(self) -> "SlackClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self):
        """Close the httpx client."""
        self._http.close()

    def set_default_username(self, username: str):
        self.default_username = username

    def set_default_icon(self, icon: str):
        self.default_icon = icon

    def create_message(self) -> SlackMessage:
        """Empty message carrying the client defaults."""
        return SlackMessage(username=self.default_username, icon=self.default_icon)

    # ------------------------------------------------------------------
    # Webhook
    # ------------------------------------------------------------------

    def send(self, message: SlackMessage) -> None:
        """Post a message to the webhook.

        Raises:
            httpx.HTTPStatusError: Slack answered with a non-2xx status.
            httpx.TransportError: the request never completed.
        """
        resp = self._http.post(self.webhook, json=message.to_payload())
        if resp.is_error:
            logger.error(
                "slack.webhook_failed",
                webhook=self.webhook[:60],
                status=resp.status_code,
                detail=resp.text[:200],
            )
        resp.raise_for_status()
        logger.info("slack.sent", channel=message.channel, attachments=len(message.attachments))
