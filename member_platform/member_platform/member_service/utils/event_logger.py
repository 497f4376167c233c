"""
Event logger utility for account events.
"""
from fastapi import Request
from typing import Optional
import sys
import logging
import os

from ..models import User

LOG_FORMAT = "%(asctime)s %(levelname)s:%(message)s"

logger = logging.getLogger(__name__)


ALLOWED_EVENT_TYPES = {
    "register",
    "login_success",
    "login_failure",
    "access_denied",
    "account_deleted",
}


def configure_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """
    Configure stdout logging and, when ``log_dir`` is given, a file handler
    writing to ``<log_dir>/account_events.log``.
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    # Try to add file handler, but continue without it if directory creation fails
    if log_dir:
        try:
            os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(os.path.join(log_dir, "account_events.log")))
        except OSError as e:
            print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers
    )


def client_ip(request: Request) -> Optional[str]:
    ip_address = None
    if request.client:
        ip_address = request.client.host

    # Check for X-Forwarded-For header (proxy/load balancer scenarios)
    if not ip_address and request.headers.get("x-forwarded-for"):
        # X-Forwarded-For can contain multiple IPs, take the first one
        ip_address = request.headers.get("x-forwarded-for").split(",")[0].strip()

    return ip_address


def log_account_event(
    event_type: str,
    user: Optional[User],
    request: Request,
    metadata: Optional[dict] = None,
) -> None:
    """
    Log an account event.

    Args:
        event_type: One of: register, login_success, login_failure,
                    access_denied, account_deleted
        user: Account the event concerns, or None when it is not known
        request: FastAPI Request object
        metadata: Optional key/value context appended to the line

    Raises:
        ValueError: If event_type is invalid
    """
    # Validate event type
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    user_id = user.id if user is not None else None
    username = user.username if user is not None else None

    extra = "".join(f" {key}={value}" for key, value in (metadata or {}).items())

    logger.info(
        "ACCOUNT %s user_id=%s username=%s ip=%s user_agent=%s%s",
        event_type, user_id, username, client_ip(request), request.headers.get("user-agent"), extra
    )
