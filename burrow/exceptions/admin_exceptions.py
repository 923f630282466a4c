from burrow.exceptions.base_exceptions import BurrowError


class AdminError(BurrowError):
    """The management API replied with an error status (>= 400)"""

    def __init__(self, status_code: int, error: str, reason: str = "") -> None:
        super().__init__(status_code, error, reason)
        self.status_code = status_code
        self.error = error
        self.reason = reason

    def __str__(self) -> str:
        return f"Error {self.status_code} ({self.error}): {self.reason}"
