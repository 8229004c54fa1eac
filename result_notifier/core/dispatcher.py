"""
Notification dispatcher: posts a test run summary to chat channels.

Flow:
1. Validate configuration, build the webhook client (once, at startup)
2. Read whether the previous run failed
3. On "results printed": pick success / failure / nothing via the strategy
4. Send one message per target channel
"""

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import structlog

from result_notifier.core import formatting
from result_notifier.core.history import last_run_failed
from result_notifier.core.strategy import should_notify
from result_notifier.schemas.message import SlackMessage
from result_notifier.schemas.notifier import NotifierConfig
from result_notifier.schemas.outcome import RunOutcome
from result_notifier.slack.client import SlackClient

logger = structlog.get_logger()

TRIM_CHARS = " \t\n\r\0\x0b"


class NotificationDispatcher:
    def __init__(
        self,
        config: Mapping[str, Any],
        log_dir: str | Path,
        client_factory: Callable[[str], SlackClient] = SlackClient,
    ):
        """Set up the webhook client and the message template.

        Args:
            config: Configuration map (``webhook``, ``channel``, ``strategy`` ...).
            log_dir: Run log directory; a ``failed`` file there marks a failed previous run.
            client_factory: Builds the webhook client from the webhook URL.

        Raises:
            ConfigurationError: invalid configuration, nothing is set up.
        """
        self.config = NotifierConfig.from_mapping(config)
        self.last_run_failed = last_run_failed(log_dir)

        self.client = client_factory(self.config.webhook)
        try:
            if self.config.username is not None:
                self.client.set_default_username(self.config.username)
            if self.config.icon is not None:
                self.client.set_default_icon(self.config.icon)
            self.message: SlackMessage = self.client.create_message()
        except Exception:
            self.client.close()
            raise

        logger.info(
            "dispatcher.initialized",
            webhook=self.config.webhook[:60],
            strategy=self.config.strategy.value,
            channels=list(self.config.channels),
            last_run_failed=self.last_run_failed,
        )

    def send_test_results(self, outcome: RunOutcome) -> None:
        """Handle the "results printed" event of the test engine."""
        if self.client is None:
            return

        log = logger.bind(success=outcome.success, strategy=self.config.strategy.value)
        if not should_notify(self.config.strategy, outcome.success, self.last_run_failed):
            log.info("dispatcher.skipped", last_run_failed=self.last_run_failed)
            return

        if outcome.success:
            self._send_success(outcome)
        else:
            self._send_failure(outcome)

    def _send_success(self, outcome: RunOutcome) -> None:
        text = formatting.success_text(self.config, outcome)
        self._broadcast(self.message.with_text(text), self.config.channels)

    def _send_failure(self, outcome: RunOutcome) -> None:
        template = self.message.with_text(formatting.failure_text(self.config, outcome))
        if self.config.extended:
            template = template.attach(formatting.extended_attachment(self.config, outcome))
        self._broadcast(template, self.config.fail_channels)

    def _broadcast(self, template: SlackMessage, channels: tuple[str, ...]) -> None:
        for channel in channels:
            self.client.send(template.with_channel(channel.strip(TRIM_CHARS)))
        logger.info("dispatcher.sent", channels=len(channels))
