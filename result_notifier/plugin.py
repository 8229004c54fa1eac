"""
pytest plugin: post the run summary to Slack once the terminal summary is printed.

Enable with ``--slack-notify`` or ``slack_notify = true`` in the ini file.

The plugin only reads ``<slack_log_dir>/failed`` to learn whether the previous
run failed; it never writes it. The ``failandrecover`` and ``statuschange``
strategies need the CI job (or another plugin) to create that file after a
failed run and remove it after a passing one, e.g.::

    pytest --slack-notify && rm -f tests/_output/failed || touch tests/_output/failed
"""

from pathlib import Path

import httpx
import pytest
import structlog

from result_notifier.config import settings
from result_notifier.core.dispatcher import NotificationDispatcher
from result_notifier.errors import ConfigurationError
from result_notifier.schemas.outcome import FailureRecord, RunOutcome

logger = structlog.get_logger()

# ini option -> configuration key
INI_KEYS = {
    "slack_webhook": "webhook",
    "slack_channel": "channel",
    "slack_channel_on_fail": "channelOnFail",
    "slack_username": "username",
    "slack_icon": "icon",
    "slack_message_prefix": "messagePrefix",
    "slack_message_suffix": "messageSuffix",
    "slack_message_suffix_on_fail": "messageSuffixOnFail",
    "slack_strategy": "strategy",
    "slack_extended": "extended",
    "slack_extended_max_errors": "extendedMaxErrors",
    "slack_extended_max_length": "extendedMaxLength",
}

COUNTED_OUTCOMES = ("passed", "failed", "error", "skipped", "xfailed", "xpassed")

DISPATCHER_KEY = pytest.StashKey[NotificationDispatcher]()


def configure_logging():
    if structlog.is_configured():
        return
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.dev.ConsoleRenderer()
                if settings.APP_ENV == "development"
                else structlog.processors.JSONRenderer()
            ),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        # pytest swaps sys.stdout while capturing; resolve it per call
        cache_logger_on_first_use=False,
    )


def pytest_addoption(parser: pytest.Parser):
    group = parser.getgroup("slack", "Slack test result notifications")
    group.addoption(
        "--slack-notify",
        action="store_true",
        default=False,
        help="Post the test run summary to Slack",
    )
    group.addoption(
        "--slack-log-dir",
        default=None,
        help="Directory checked for the 'failed' marker of the previous run",
    )
    parser.addini("slack_notify", "Post the test run summary to Slack", type="bool", default=False)
    parser.addini("slack_log_dir", "Directory checked for the 'failed' marker", default="")
    for name, key in INI_KEYS.items():
        parser.addini(name, f"Slack notifier '{key}' setting", default="")


def read_config(config: pytest.Config) -> dict:
    """Collect the notifier configuration map from the ini file."""
    raw = {}
    for name, key in INI_KEYS.items():
        value = config.getini(name)
        if value != "":
            raw[key] = value
    if "webhook" not in raw and settings.SLACK_WEBHOOK_URL:
        raw["webhook"] = settings.SLACK_WEBHOOK_URL
    return raw


def resolve_log_dir(config: pytest.Config) -> Path:
    log_dir = (
        config.getoption("slack_log_dir")
        or config.getini("slack_log_dir")
        or settings.NOTIFIER_LOG_DIR
    )
    return config.rootpath / log_dir


def _failure_message(report) -> str:
    crash = getattr(report.longrepr, "reprcrash", None)
    if crash is not None:
        return crash.message
    return report.longreprtext


def outcome_from_stats(stats: dict) -> RunOutcome:
    """Build a RunOutcome from the terminal reporter's stats.

    pytest files one report per phase, so a test that fails its call and errors
    in teardown shows up under both "failed" and "error". Tests are counted
    once by nodeid; a test that failed anywhere is a failure, never an error.
    """
    nodeids = {r.nodeid for key in COUNTED_OUTCOMES for r in stats.get(key, [])}

    failed: dict[str, str] = {}
    for r in stats.get("failed", []):
        failed.setdefault(r.nodeid, _failure_message(r))
    errored: dict[str, str] = {}
    for r in stats.get("error", []):
        if r.nodeid not in failed:
            errored.setdefault(r.nodeid, _failure_message(r))

    failures = [FailureRecord(test_name=n, message=m) for n, m in failed.items()]
    errors = [FailureRecord(test_name=n, message=m) for n, m in errored.items()]
    return RunOutcome(
        total=len(nodeids),
        success=not failures and not errors,
        failure_count=len(failures),
        error_count=len(errors),
        failures=failures,
        errors=errors,
    )


@pytest.hookimpl(trylast=True)
def pytest_configure(config: pytest.Config):
    if not (config.getoption("slack_notify") or config.getini("slack_notify")):
        return

    configure_logging()
    try:
        dispatcher = NotificationDispatcher(read_config(config), resolve_log_dir(config))
    except ConfigurationError as e:
        raise pytest.UsageError(f"Slack notifier: {e}") from e
    config.stash[DISPATCHER_KEY] = dispatcher


def pytest_unconfigure(config: pytest.Config):
    dispatcher = config.stash.get(DISPATCHER_KEY, None)
    if dispatcher is not None:
        dispatcher.client.close()


@pytest.hookimpl(trylast=True)
def pytest_terminal_summary(terminalreporter, exitstatus, config: pytest.Config):
    dispatcher = config.stash.get(DISPATCHER_KEY, None)
    if dispatcher is None:
        return

    outcome = outcome_from_stats(terminalreporter.stats)
    try:
        dispatcher.send_test_results(outcome)
    except httpx.HTTPError as e:
        logger.exception("plugin.dispatch_failed")
        terminalreporter.write_line(f"Slack notification failed: {e}", yellow=True)
