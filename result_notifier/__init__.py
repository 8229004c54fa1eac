from result_notifier.core.dispatcher import NotificationDispatcher
from result_notifier.errors import ConfigurationError
from result_notifier.schemas.outcome import FailureRecord, RunOutcome

__all__ = ["NotificationDispatcher", "ConfigurationError", "FailureRecord", "RunOutcome"]
