"""
Sentry error tracking for the notification feed.

Provides:
- Exception capture for failures the store swallows
- Scrubbing of bearer tokens before events leave the device
"""

import logging
from typing import Optional, Dict, Any

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from pawfeed.config import Settings

logger = logging.getLogger(__name__)

# Global flag to track initialization
_sentry_initialized = False


def init_sentry(settings: Settings) -> bool:
    """
    Initialize Sentry SDK when a DSN is configured.

    Called from the composition root in pawfeed.main.
    """
    global _sentry_initialized

    if not settings.SENTRY_DSN:
        logger.info("Sentry DSN not configured, error tracking disabled")
        return False

    try:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.ENVIRONMENT,
            release=settings.VERSION,
            traces_sample_rate=0.1 if settings.is_production else 1.0,
            integrations=[
                LoggingIntegration(
                    level=logging.WARNING,
                    event_level=logging.ERROR,
                ),
            ],
            before_send=filter_sensitive_data,
            send_default_pii=False,
            attach_stacktrace=True,
            max_breadcrumbs=50,
        )
    except Exception as e:
        logger.warning(f"Failed to initialize Sentry: {e}")
        return False

    _sentry_initialized = True
    logger.info(f"Sentry initialized for {settings.ENVIRONMENT} environment")
    return True


def filter_sensitive_data(event: Dict[str, Any], hint: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Filter sensitive data before sending to Sentry.

    Removes:
    - Authorization headers
    - Bearer tokens in extra context
    """
    if "request" in event and "headers" in event["request"]:
        headers = event["request"]["headers"]
        for header in ("authorization", "Authorization", "cookie"):
            if header in headers:
                headers[header] = "[Filtered]"

    extra = event.get("extra")
    if isinstance(extra, dict):
        for field in ("token", "authorization", "access_token"):
            if field in extra:
                extra[field] = "[Filtered]"

    return event


def capture_exception(
    exception: BaseException,
    context: Optional[Dict[str, Any]] = None,
) -> Optional[str]:
    """
    Capture an exception to Sentry with additional context.

    Returns:
        Sentry event ID if captured, None otherwise
    """
    if not _sentry_initialized:
        return None

    try:
        with sentry_sdk.new_scope() as scope:
            if context:
                for key, value in context.items():
                    scope.set_extra(key, value)
            return sentry_sdk.capture_exception(exception)
    except Exception as e:
        logger.warning(f"Failed to capture exception to Sentry: {e}")
        return None
