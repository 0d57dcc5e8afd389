from typing import Optional


class TreeUnavailable(Exception):
    """The universal tree could not be fetched or parsed."""


class PathRequestFailed(Exception):
    """The path service failed or answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
