from pathlib import Path

import structlog

logger = structlog.get_logger()

FAILED_MARKER = "failed"


def last_run_failed(log_dir: str | Path) -> bool:
    """Whether the previous run left a ``failed`` marker in the log directory."""
    failed = (Path(log_dir) / FAILED_MARKER).is_file()
    logger.debug("history.last_run", log_dir=str(log_dir), failed=failed)
    return failed
