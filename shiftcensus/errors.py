"""Error taxonomy shared by the scheduling services and the HTTP layer."""

from __future__ import annotations


class ScheduleError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ScheduleError):
    """Malformed month, missing identifiers or references that do not resolve."""

    status_code = 400


class NotFoundError(ScheduleError):
    status_code = 404


class ConflictError(ScheduleError):
    """Another generate/publish currently holds the batch."""

    status_code = 409


class StorageError(ScheduleError):
    """Any failure raised by the backing store. The original message is kept verbatim."""

    status_code = 500
