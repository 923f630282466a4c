from .admin.admin_config import PollingConfig
from .admin.queue_drainer import QueueDrainer
from .admin.rabbit_admin import RabbitAdmin
from .containers.container_config import RabbitContainerOptions, RedisContainerOptions
from .containers.rabbit_container import RabbitContainer
from .containers.redis_container import RedisContainer
from .exceptions.admin_exceptions import AdminError
from .exceptions.base_exceptions import (
    BurrowError,
    ConfigurationError,
    DecodeError,
    DrainError,
    TransportError,
)
from .model.get_messages_request import AckMode, GetMessagesRequest, PayloadEncoding
from .model.queue_info import QueueInfo

__all__ = [
    "RabbitAdmin",
    "QueueDrainer",
    "PollingConfig",
    "RabbitContainer",
    "RabbitContainerOptions",
    "RedisContainer",
    "RedisContainerOptions",
    "GetMessagesRequest",
    "AckMode",
    "PayloadEncoding",
    "QueueInfo",
    "BurrowError",
    "ConfigurationError",
    "TransportError",
    "AdminError",
    "DecodeError",
    "DrainError",
]
