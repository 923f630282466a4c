import logging
from typing import Any, Optional

from redis import from_url
from redis.exceptions import ConnectionError, TimeoutError

from burrow.containers.container_config import RedisContainerOptions
from burrow.containers.launcher import ContainerHandle, Launcher, launch_container
from burrow.testing.failure import Fail, pytest_fail
from burrow.tools.retries import retryablemethod
from burrow.tools.urls import build_url

_log = logging.getLogger(__name__)


class RedisContainer:
    """A Redis server running in a throwaway container."""

    _retry = retryablemethod(
        (ConnectionError, TimeoutError),
        timeout="_startup_timeout",
        interval="_startup_poll_interval",
    )

    def __init__(self, container: ContainerHandle, options: RedisContainerOptions) -> None:
        self.options = options

        self._container = container
        self._uri = build_url("redis", container.host, container.mapped_port(options.port))

        # Attributes for @retryablemethod
        self._startup_timeout = options.startup_timeout
        self._startup_poll_interval = options.startup_poll_interval

    @classmethod
    def start(
        cls,
        options: Optional[RedisContainerOptions] = None,
        *,
        fail: Fail = pytest_fail,
        launcher: Launcher = launch_container,
    ) -> "RedisContainer":
        options = options or RedisContainerOptions()

        try:
            container = launcher(options.image, [options.port], None)
        except Exception as exc:  # pylint: disable=broad-except
            fail(f"Could not start Redis container {options.image!r}: {exc}")

        try:
            redis = cls(container, options)
            redis._ping()
        except Exception as exc:  # pylint: disable=broad-except
            container.stop()
            fail(f"Redis container {options.image!r} is not usable: {exc}")

        _log.info("Redis is up at %s", redis.uri)

        return redis

    @_retry
    def _ping(self) -> None:
        client = from_url(self._uri)
        try:
            client.ping()
        finally:
            client.close()

    @property
    def uri(self) -> str:
        return self._uri

    def stop(self) -> None:
        self._container.stop()

    def __enter__(self) -> "RedisContainer":
        return self

    def __exit__(self, *args: Any, **kwargs: Any) -> None:
        self.stop()

    def __repr__(self) -> str:
        return f"RedisContainer(uri={self._uri!r})"
