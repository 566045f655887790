# luxejewel/utils/retry.py
from tenacity import (
    retry,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
import requests
import redis

from luxejewel.utils.settings import AI_RETRY_ATTEMPTS, AI_RETRY_DELAY_SECONDS
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)


def http_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(requests.RequestException),
    )


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )


def is_quota_error(exc: BaseException) -> bool:
    """Rate limit / quota exhaustion reported by an AI provider."""
    if getattr(exc, "status", None) == 429:
        return True
    message = str(exc).lower()
    return "429" in message or "quota" in message


def _log_quota_retry(retry_state):
    delay = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        f"Quota exceeded, retrying in {delay:.1f}s "
        f"(attempt {retry_state.attempt_number})"
    )


def quota_retry(retries: int | None = None, delay: float | None = None):
    """
    Retry only on quota errors, doubling the delay each time:
    delay, 2*delay, 4*delay ... for `retries` extra attempts.
    """
    retries = AI_RETRY_ATTEMPTS if retries is None else retries
    delay = AI_RETRY_DELAY_SECONDS if delay is None else delay
    return retry(
        reraise=True,
        stop=stop_after_attempt(retries + 1),
        wait=wait_exponential(multiplier=delay, min=0, max=max(delay, 0) * 2 ** retries),
        retry=retry_if_exception(is_quota_error),
        before_sleep=_log_quota_retry,
    )
