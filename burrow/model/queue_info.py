from typing import Any, Dict

from pydantic import BaseModel, Field


class QueueInfo(BaseModel):
    """Point-in-time snapshot of a queue, as reported by the management API."""

    name: str
    vhost: str = "/"
    type: str = "classic"

    durable: bool = False
    arguments: Dict[str, Any] = Field(default_factory=dict)

    # The broker omits the counters until it has collected stats
    # for a freshly declared queue.
    messages: int = 0
    messages_ready: int = 0
    messages_unacknowledged: int = 0
    consumers: int = 0
