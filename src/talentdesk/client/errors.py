from __future__ import annotations


class ClientError(Exception):
    """Base class for failures seen by the terminal client."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkError(ClientError):
    """The server could not be reached or did not answer in time."""


class ApiError(ClientError):
    """The server answered with an error status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class InterviewNotFound(ClientError):
    pass


class InvalidInterviewData(ClientError):
    pass
