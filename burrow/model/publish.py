from typing import Any, Dict

from pydantic import BaseModel, Field


class PublishProperties(BaseModel):
    # 2 = persistent
    delivery_mode: int = 2
    headers: Dict[str, Any] = Field(default_factory=dict)


class PublishRequest(BaseModel):
    """Body of `POST /exchanges/{vhost}/amq.default/publish`."""

    delivery_mode: str = "2"
    properties: PublishProperties = Field(default_factory=PublishProperties)
    routing_key: str
    payload: str
    payload_encoding: str = "string"


class PublishResponse(BaseModel):
    # False when no queue is bound to the routing key.
    # Assumed routed when the broker does not say.
    routed: bool = True


class PurgeRequest(BaseModel):
    vhost: str
    name: str
    mode: str = "purge"
