"""
Event logger utility for authentication events.
"""
from typing import Optional
import sys
import logging
import os

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(message)s"

ALLOWED_EVENT_TYPES = {
    "register_success",
    "register_conflict",
    "login_success",
    "login_failure",
    "token_refresh",
    "token_rejected",
}


def configure_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """
    Configure stdout logging, plus a file handler when `log_dir` is usable.

    Args:
        level: Log level name, e.g. "INFO" or "DEBUG"
        log_dir: Directory for `auth_events.log`; skipped when None
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    # Try to add file handler, but continue without it if directory creation fails
    if log_dir:
        try:
            os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(os.path.join(log_dir, "auth_events.log")))
        except OSError as e:
            print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def log_auth_event(
    event_type: str,
    user_id: Optional[str] = None,
    email: Optional[str] = None,
    **metadata
) -> None:
    """
    Log an authentication event.

    Args:
        event_type: One of ALLOWED_EVENT_TYPES
        user_id: Id of the user involved, when known
        email: Normalized email involved, when known
        metadata: Extra key=value context appended to the line

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    extra = "".join(f" {key}={value}" for key, value in sorted(metadata.items()))
    level = logging.WARNING if event_type in ("login_failure", "token_rejected") else logging.INFO
    logger.log(level, "AUTH %s user_id=%s email=%s%s", event_type, user_id, email, extra)
