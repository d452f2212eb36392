import logging
import operator

import backoff

logger = logging.getLogger(__name__)


def retry_on_empty_response(retries: int = 1, on_retry=None):
    """ When used as a decorator, when the wrapped function returns an empty (falsy) result, we'll retry
    The logger answers within its read timeout or not at all, so retries happen immediately with no backoff.

    After `retries` retries, the last empty result is returned rather than raised: running out of
    attempts is an expected outcome that callers check for.

    Example usage:
    >>> @retry_on_empty_response(retries=1, on_retry=flush_buffers)
    >>> def write_and_read(request): ...

    Args:
        retries: number of additional attempts after the first one
        on_retry: optional callable, called with no arguments before each additional attempt

    Returns:
        decorator which can be used to wrap a function
    """

    def _retry_handler(details):
        logger.info(f"Retrying after empty response. Call details: {details}")
        if on_retry is not None:
            on_retry()

    return backoff.on_predicate(
        backoff.constant,
        operator.not_,
        max_tries=retries + 1,
        jitter=None,
        interval=0,
        on_backoff=_retry_handler,
        logger=None,
    )
