import logging
from typing import Callable, Dict, Optional, Sequence

from testcontainers.core.container import DockerContainer

_log = logging.getLogger(__name__)


class ContainerHandle:
    """A running container, as far as the facades are concerned."""

    def __init__(self, container: DockerContainer) -> None:
        self._container = container
        self.host: str = container.get_container_host_ip()

    def mapped_port(self, port: int) -> int:
        return int(self._container.get_exposed_port(port))

    def stop(self) -> None:
        _log.info("Stopping container %r", self._container.image)
        self._container.stop()

    def __repr__(self) -> str:
        return f"ContainerHandle(image={self._container.image!r}, host={self.host!r})"


Launcher = Callable[[str, Sequence[int], Optional[Dict[str, str]]], ContainerHandle]


def launch_container(
    image: str, ports: Sequence[int], env: Optional[Dict[str, str]] = None
) -> ContainerHandle:
    """Start `image` with `ports` exposed on random host ports."""

    container = DockerContainer(image).with_exposed_ports(*ports)

    for key, value in (env or {}).items():
        container = container.with_env(key, value)

    _log.info("Starting container image=%r, ports=%r", image, list(ports))

    container.start()

    try:
        return ContainerHandle(container)
    except Exception:
        container.stop()
        raise
