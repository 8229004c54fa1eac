import pytest
import structlog

from result_notifier.schemas.message import SlackMessage
from result_notifier.schemas.outcome import FailureRecord, RunOutcome

pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True, scope="session")
def _structlog_to_stdlib():
    # Uncached stdlib loggers: in-process pytester runs swap sys.stdout
    structlog.configure(
        processors=[structlog.processors.KeyValueRenderer()],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


WEBHOOK = "https://hooks.slack.com/services/T000/B000/XXXX"


class FakeSlackClient:
    """Records messages instead of posting them."""

    def __init__(self, webhook: str):
        self.webhook = webhook
        self.default_username = None
        self.default_icon = None
        self.sent: list[SlackMessage] = []
        self.closed = False

    def set_default_username(self, username):
        self.default_username = username

    def set_default_icon(self, icon):
        self.default_icon = icon

    def create_message(self) -> SlackMessage:
        return SlackMessage(username=self.default_username, icon=self.default_icon)

    def send(self, message: SlackMessage):
        self.sent.append(message)

    def close(self):
        self.closed = True


@pytest.fixture
def log_dir(tmp_path):
    d = tmp_path / "_output"
    d.mkdir()
    return d


@pytest.fixture
def failed_log_dir(tmp_path):
    d = tmp_path / "_output_failed"
    d.mkdir()
    (d / "failed").write_text("")
    return d


@pytest.fixture
def make_dispatcher(log_dir):
    from result_notifier.core.dispatcher import NotificationDispatcher

    def _make(directory=None, **config):
        config.setdefault("webhook", WEBHOOK)
        return NotificationDispatcher(config, directory or log_dir, client_factory=FakeSlackClient)

    return _make


@pytest.fixture
def success_outcome():
    return RunOutcome(total=5, success=True)


@pytest.fixture
def failure_outcome():
    return RunOutcome(
        total=10,
        success=False,
        failure_count=2,
        error_count=1,
        failures=[
            FailureRecord(test_name="test_login", message="Expected 200, got 500\nstack..."),
            FailureRecord(test_name="test_logout", message='{"errorMessage":"boom"}'),
        ],
        errors=[FailureRecord(test_name="test_signup", message="RuntimeError: db down")],
    )
