import logging
import time
from typing import Any, Callable, Dict, List, Optional

from burrow.admin.admin_config import PollingConfig
from burrow.admin.rabbit_admin import RabbitAdmin
from burrow.exceptions.base_exceptions import BurrowError, DrainError

_log = logging.getLogger(__name__)


class QueueDrainer:
    """
    Consumes messages off a queue through the management API.

    `drain_all` empties whatever is ready right now, in batches.
    `await_messages` polls with `drain_all` until enough messages
    arrived, or the configured deadline passes.

    Only the absence of messages is retried. Any error aborts
    the drain with a `DrainError` carrying the messages consumed so far;
    those messages are gone from the queue, so callers must treat
    the drain as inconclusive.
    """

    def __init__(
        self,
        admin: RabbitAdmin,
        config: Optional[PollingConfig] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        self.admin = admin
        self.config = config or PollingConfig()

        self._clock = clock
        self._sleep = sleep

    def drain_all(
        self, queue: str, vhost: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        # A batch shorter than requested is taken to mean that the queue
        # has nothing else ready. If messages arrive while the last
        # (full) batch is fetched, they are left for the next round.
        request = self.config.batch_request(vhost)

        messages: List[Dict[str, Any]] = []
        batches = 0

        while True:
            try:
                batch = self.admin.get_messages(queue, request)
            except BurrowError as exc:
                _log.debug(
                    "Drain of queue=%r failed after %r batch(es)", queue, batches
                )
                raise DrainError(queue, messages) from exc

            batches += 1
            messages.extend(batch)

            if len(batch) < request.count:
                break

        _log.debug(
            "Consumed %r message(s) from queue=%r in %r batch(es)",
            len(messages),
            queue,
            batches,
        )

        return messages

    def await_messages(
        self, queue: str, count: int, vhost: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Drain `queue` until at least `count` messages were consumed,
        or until `config.wait_for` seconds passed.

        Never raises because of missing messages: on timeout, the (short)
        list of consumed messages is returned, and it's up to the caller
        to assert on its length.
        """

        messages: List[Dict[str, Any]] = []

        deadline = self._clock() + self.config.wait_for
        rounds = 0

        while True:
            rounds += 1

            try:
                messages.extend(self.drain_all(queue, vhost))
            except DrainError as exc:
                messages.extend(exc.messages)
                exc.messages = messages
                raise

            if len(messages) >= count:
                _log.debug(
                    "Got %r/%r message(s) from queue=%r after %r round(s)",
                    len(messages),
                    count,
                    queue,
                    rounds,
                )
                return messages

            remaining = deadline - self._clock()
            if remaining <= 0:
                break

            self._sleep(min(self.config.poll_interval, remaining))

        _log.warning(
            "Timed out after %.2fs waiting for %r message(s) on queue=%r, got %r",
            self.config.wait_for,
            count,
            queue,
            len(messages),
        )

        return messages
