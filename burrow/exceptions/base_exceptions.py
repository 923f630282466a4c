from typing import Any, Dict, List


class BurrowError(Exception):
    """Base class for all Burrow errors"""


class ConfigurationError(BurrowError):
    """Base class for configuration-based errors"""


class TransportError(BurrowError):
    """The request could not be sent, or no response was received"""


class DecodeError(BurrowError):
    """The response body did not have the expected shape"""


class DrainError(BurrowError):
    """
    Raised when a drain round fails midway.

    The messages that were consumed before the failure are kept
    on `messages`, and the original error is the `__cause__`.
    """

    def __init__(self, queue: str, messages: List[Dict[str, Any]]) -> None:
        super().__init__(queue, messages)
        self.queue = queue
        self.messages = messages

    def __str__(self) -> str:
        return (
            f"Draining queue {self.queue!r} failed after "
            f"{len(self.messages)!r} message(s): {self.__cause__}"
        )
