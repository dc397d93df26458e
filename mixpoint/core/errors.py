"""Exception types raised inside the session state subsystem."""

from __future__ import annotations


class MixPointError(Exception):
    """Base exception for all mixpoint errors."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class StorageError(MixPointError):
    """Raised when the persistence layer fails to read or write."""

    def __init__(self, message: str, operation: str | None = None, details: str | None = None):
        super().__init__(message, details)
        self.operation = operation


class CancelledOperation(MixPointError):
    """The user aborted a file pick. Not a failure."""


class AnalysisUnavailable(MixPointError):
    """The decode/tempo collaborator could not produce a tempo."""

    def __init__(self, message: str, file_name: str | None = None, details: str | None = None):
        super().__init__(message, details)
        self.file_name = file_name


class UnknownStateField(MixPointError, ValueError):
    """A state patch named a field its document type does not define."""

    def __init__(self, document: str, fields: list[str]):
        super().__init__(f"unknown {document} field(s)", ", ".join(sorted(fields)))
        self.document = document
        self.fields = fields


class SlotUnavailable(MixPointError):
    """No slot can take the track: all are held by other tracks, or a field patch hit an empty slot."""
