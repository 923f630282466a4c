from enum import Enum

from pydantic import BaseModel


class AckMode(str, Enum):
    """What the broker does with the messages returned by a `get`."""

    ACK_REQUEUE_TRUE = "ack_requeue_true"
    ACK_REQUEUE_FALSE = "ack_requeue_false"
    REJECT_REQUEUE_TRUE = "reject_requeue_true"
    REJECT_REQUEUE_FALSE = "reject_requeue_false"


class PayloadEncoding(str, Enum):
    AUTO = "auto"
    BASE64 = "base64"


class GetMessagesRequest(BaseModel):
    """Body of `POST /queues/{vhost}/{queue}/get`."""

    vhost: str = "/"

    # Payloads longer than this (in bytes) are truncated by the broker.
    truncate: int = 50000

    # The default consumes the messages destructively.
    ackmode: AckMode = AckMode.ACK_REQUEUE_FALSE

    encoding: PayloadEncoding = PayloadEncoding.AUTO

    # Maximum number of messages to return.
    count: int = 100
