"""
Message composition for success and failure notifications.

Extended mode adds one attachment field per failed test:
- failures first, then errors, each in reported order
- optionally capped at ``extended_max_errors`` entries, with a trailing
  "<N> other tests..." field for the rest
- each message cut to its first line, unwrapped from a JSON
  ``{"errorMessage": ...}`` envelope, and truncated to ``extended_max_length``
"""

import json

from result_notifier.schemas.message import Attachment, AttachmentField
from result_notifier.schemas.notifier import NotifierConfig
from result_notifier.schemas.outcome import FailureRecord, RunOutcome

SUCCESS_ICON = ":white_check_mark:"
FAILURE_ICON = ":interrobang:"
TRUNCATION_MARK = " ..."


def _expand_newlines(text: str) -> str:
    return text.replace("\\n", "\n")


def success_text(config: NotifierConfig, outcome: RunOutcome) -> str:
    return (
        f"{SUCCESS_ICON} {config.message_prefix}"
        f"{outcome.total} of {outcome.total} tests passed."
        f"{_expand_newlines(config.message_suffix)}"
    )


def failure_text(config: NotifierConfig, outcome: RunOutcome) -> str:
    return (
        f"{FAILURE_ICON} {config.message_prefix}"
        f"{outcome.failed_count} of {outcome.total} tests failed."
        f"{_expand_newlines(config.message_suffix)}"
        f"{config.message_suffix_on_fail}"
    )


def first_line(text: str) -> str:
    """First non-empty line of ``text``; leading blank lines are skipped."""
    return next((line for line in text.split("\n") if line), "")


def failure_value(raw: str, max_length: int) -> str:
    """Condense a raw exception message into a single attachment value."""
    text = first_line(raw)

    try:
        decoded = json.loads(text)
    except (ValueError, RecursionError):
        decoded = None
    if isinstance(decoded, dict) and decoded.get("errorMessage") is not None:
        error_message = decoded["errorMessage"]
        text = error_message if isinstance(error_message, str) else str(error_message)

    if max_length > 0 and len(text) > max_length:
        text = text[:max_length] + TRUNCATION_MARK
    return text


def extended_fields(config: NotifierConfig, outcome: RunOutcome) -> list[AttachmentField]:
    records: list[FailureRecord] = [*outcome.failures, *outcome.errors]
    omitted = 0
    if config.extended_max_errors > 0:
        omitted = len(records) - config.extended_max_errors
        records = records[: config.extended_max_errors]

    fields = [
        AttachmentField(
            title=record.test_name,
            value=failure_value(record.message, config.extended_max_length),
        )
        for record in records
    ]

    if omitted > 0:
        fields.append(AttachmentField(title=f"{omitted} other tests...", value=""))
    return fields


def extended_attachment(config: NotifierConfig, outcome: RunOutcome) -> Attachment:
    return Attachment(color="danger", fields=tuple(extended_fields(config, outcome)))
