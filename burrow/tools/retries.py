import logging
import time
from functools import wraps
from typing import Any, Callable, Tuple, Type, TypeVar, Union, cast

_T = TypeVar("_T")

_log = logging.getLogger(__name__)


def retryablemethod(
    types: Tuple[Type[BaseException], ...],
    *,
    timeout: Union[float, str],
    interval: Union[float, str],
) -> Callable[[_T], _T]:
    """
    Decorator to make a (blocking) method retryable.

    The method is called until it stops raising one of `types`,
    sleeping `interval` seconds between attempts. Once `timeout`
    seconds have passed, the last error is raised.

    `timeout` and `interval` may be attribute names, read off the
    instance on each call.
    """

    def make_retryable(func: _T) -> _T:
        f: Any = cast(Any, func)

        @wraps(f)
        def retryable_decorator(self: Any, *args: Any, **kwargs: Any) -> Any:
            max_wait: float
            if isinstance(timeout, str):
                max_wait = getattr(self, timeout)
            else:
                max_wait = timeout

            wait: float
            if isinstance(interval, str):
                wait = getattr(self, interval)
            else:
                wait = interval

            deadline = time.monotonic() + max_wait
            attempt = 0

            while True:
                attempt += 1

                try:
                    return f(self, *args, **kwargs)
                except types as exc:
                    if time.monotonic() >= deadline:
                        _log.error(
                            "Attempt %r failed, giving up after %.2fs",
                            attempt,
                            max_wait,
                            exc_info=exc,
                        )
                        raise

                    _log.debug("Attempt %r failed: %s", attempt, exc)

                _log.debug("Waiting %.2fs before next attempt", wait)

                time.sleep(wait)

        return cast(_T, retryable_decorator)

    return make_retryable
