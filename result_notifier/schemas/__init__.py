from result_notifier.schemas.message import Attachment, AttachmentField, SlackMessage
from result_notifier.schemas.notifier import NotifierConfig
from result_notifier.schemas.outcome import FailureRecord, RunOutcome

__all__ = [
    "Attachment",
    "AttachmentField",
    "SlackMessage",
    "NotifierConfig",
    "FailureRecord",
    "RunOutcome",
]
