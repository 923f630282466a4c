from typing import Optional

from pydantic import BaseModel, Field, field_validator

from burrow.exceptions.base_exceptions import ConfigurationError
from burrow.model.get_messages_request import AckMode, GetMessagesRequest

# Modes that remove the messages from the queue. Draining with any
# other mode gets the same messages back on every call.
DESTRUCTIVE_ACK_MODES = frozenset(
    {AckMode.ACK_REQUEUE_FALSE, AckMode.REJECT_REQUEUE_FALSE}
)


def _ensure_destructive(request: GetMessagesRequest) -> GetMessagesRequest:
    if request.ackmode not in DESTRUCTIVE_ACK_MODES:
        raise ValueError(
            f"Cannot drain with ackmode {request.ackmode.value!r}, the messages "
            "would be requeued. Use 'ack_requeue_false' or 'reject_requeue_false'."
        )

    return request


class PollingConfig(BaseModel):
    """Configuration for draining and awaiting messages on a queue."""

    # How long (in seconds) `await_messages` keeps polling before
    # giving up and returning what it has.
    wait_for: float = Field(default=10, ge=0)

    # Time to sleep between two unsuccessful polling rounds.
    poll_interval: float = Field(default=1, ge=0)

    # Number of messages requested per `get` call. A batch shorter
    # than this ends a drain round.
    batch_size: int = Field(default=100, gt=0)

    # Template for the `get` calls. Its `count` is overridden by `batch_size`.
    # Must consume the messages, see DESTRUCTIVE_ACK_MODES.
    request: GetMessagesRequest = Field(default_factory=GetMessagesRequest)

    @field_validator("request")
    @classmethod
    def _validate_request(cls, request: GetMessagesRequest) -> GetMessagesRequest:
        return _ensure_destructive(request)

    def batch_request(self, vhost: Optional[str] = None) -> GetMessagesRequest:
        # The fields aren't re-validated on assignment.
        try:
            _ensure_destructive(self.request)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        update = {"count": self.batch_size}

        if vhost is not None:
            update["vhost"] = vhost

        return self.request.model_copy(update=update)
