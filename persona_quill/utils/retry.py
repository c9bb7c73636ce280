import logging
import time
from typing import Any, Callable

from openai import APIConnectionError, RateLimitError

_log = logging.getLogger(__name__)

_RETRYABLE = (RateLimitError, APIConnectionError)


def llm_call_with_retry(
    fn: Callable[..., Any],
    *args: Any,
    max_retries: int = 4,
    base_delay: float = 5.0,
    **kwargs: Any,
) -> Any:
    """Call an OpenAI-compatible API function, backing off on rate limits and dropped connections.

    Waits base_delay * 2**attempt seconds between attempts (5, 10, 20 by default)
    and re-raises the last error once max_retries attempts are used up.
    """
    for attempt in range(max_retries):
        try:
            return fn(*args, **kwargs)
        except _RETRYABLE as exc:
            if attempt == max_retries - 1:
                raise
            wait = base_delay * (2 ** attempt)
            _log.warning("LLM call failed (%s); retry %d/%d in %.0fs",
                         type(exc).__name__, attempt + 1, max_retries - 1, wait)
            time.sleep(wait)
