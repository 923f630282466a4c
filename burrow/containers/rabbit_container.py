import logging
from typing import Any, Dict, List, Optional

from burrow.admin.admin_config import PollingConfig
from burrow.admin.queue_drainer import QueueDrainer
from burrow.admin.rabbit_admin import RabbitAdmin
from burrow.containers.container_config import RabbitContainerOptions
from burrow.containers.launcher import ContainerHandle, Launcher, launch_container
from burrow.exceptions.admin_exceptions import AdminError
from burrow.exceptions.base_exceptions import BurrowError, DrainError, TransportError
from burrow.model.publish import PublishResponse
from burrow.model.queue_info import QueueInfo
from burrow.testing.failure import Fail, pytest_fail
from burrow.tools.retries import retryablemethod
from burrow.tools.urls import build_url, censor_credentials

_log = logging.getLogger(__name__)


def _describe_drain_error(exc: DrainError) -> str:
    payloads = [message.get("payload") for message in exc.messages]
    return f"{exc}\nConsumed before the failure: {payloads!r}"


class RabbitContainer:
    """
    A RabbitMQ broker running in a throwaway container.

    `uri` is meant for the system under test. The other methods are
    assertion helpers built on the management API; any error they hit
    fails the current test.
    """

    _retry = retryablemethod(
        (TransportError, AdminError),
        timeout="_startup_timeout",
        interval="_startup_poll_interval",
    )

    def __init__(
        self,
        container: ContainerHandle,
        options: RabbitContainerOptions,
        *,
        fail: Fail = pytest_fail,
        polling: Optional[PollingConfig] = None,
    ) -> None:
        self.options = options

        self._container = container
        self._fail = fail

        self._amqp_uri = build_url(
            "amqp",
            container.host,
            container.mapped_port(options.amqp_port),
            user=options.username,
            password=options.password,
        )
        self._admin_uri = build_url(
            "http",
            container.host,
            container.mapped_port(options.management_port),
            user=options.username,
            password=options.password,
            path="/api",
        )

        self.admin = RabbitAdmin(self._admin_uri)
        self.drainer = QueueDrainer(self.admin, polling)

        # Attributes for @retryablemethod
        self._startup_timeout = options.startup_timeout
        self._startup_poll_interval = options.startup_poll_interval

    @classmethod
    def start(
        cls,
        options: Optional[RabbitContainerOptions] = None,
        *,
        fail: Fail = pytest_fail,
        launcher: Launcher = launch_container,
        polling: Optional[PollingConfig] = None,
    ) -> "RabbitContainer":
        """
        Start a broker and wait for its management API to be up.

        Fails the current test if anything goes wrong; there's no point
        in going on without a broker.
        """

        options = options or RabbitContainerOptions()

        try:
            container = launcher(
                options.image,
                [options.amqp_port, options.management_port],
                {
                    "RABBITMQ_DEFAULT_USER": options.username,
                    "RABBITMQ_DEFAULT_PASS": options.password,
                },
            )
        except Exception as exc:  # pylint: disable=broad-except
            fail(f"Could not start RabbitMQ container {options.image!r}: {exc}")

        try:
            rabbit = cls(container, options, fail=fail, polling=polling)
            rabbit._wait_for_management()
        except Exception as exc:  # pylint: disable=broad-except
            container.stop()
            fail(f"RabbitMQ container {options.image!r} is not usable: {exc}")

        _log.info(
            "RabbitMQ is up at %s (management at %s)",
            censor_credentials(rabbit.uri),
            censor_credentials(rabbit.admin_uri),
        )

        return rabbit

    @_retry
    def _wait_for_management(self) -> None:
        self.admin.overview()

    @property
    def uri(self) -> str:
        return self._amqp_uri

    @property
    def admin_uri(self) -> str:
        return self._admin_uri

    def drain_all(self, queue: str, vhost: str = "/") -> List[Dict[str, Any]]:
        try:
            return self.drainer.drain_all(queue, vhost)
        except DrainError as exc:
            self._fail(_describe_drain_error(exc))
        except BurrowError as exc:
            self._fail(str(exc))

    def await_messages(
        self, queue: str, count: int, vhost: str = "/"
    ) -> List[Dict[str, Any]]:
        """
        Consume messages from `queue` until at least `count` arrived,
        or the polling deadline passed.

        A short result is returned as-is, it does not fail the test.
        """

        try:
            return self.drainer.await_messages(queue, count, vhost)
        except DrainError as exc:
            self._fail(_describe_drain_error(exc))
        except BurrowError as exc:
            self._fail(str(exc))

    def purge(self, queue: str, vhost: str = "/") -> None:
        try:
            self.admin.purge_queue(queue, vhost)
        except BurrowError as exc:
            self._fail(str(exc))

    def get_queue(self, queue: str, vhost: str = "/") -> QueueInfo:
        try:
            return self.admin.get_queue(queue, vhost)
        except BurrowError as exc:
            self._fail(str(exc))

    def publish(self, routing_key: str, body: str, vhost: str = "/") -> PublishResponse:
        try:
            return self.admin.publish(routing_key, body, vhost)
        except BurrowError as exc:
            self._fail(str(exc))

    def stop(self) -> None:
        self._container.stop()

    def __enter__(self) -> "RabbitContainer":
        return self

    def __exit__(self, *args: Any, **kwargs: Any) -> None:
        self.stop()

    def __repr__(self) -> str:
        return f"RabbitContainer(uri={censor_credentials(self._amqp_uri)!r})"
