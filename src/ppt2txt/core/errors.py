from __future__ import annotations


class Ppt2TxtError(Exception):
    """Base class for every error raised by ppt2txt."""


class UsageError(Ppt2TxtError):
    """Bad command line: unknown flag, missing value, unresolvable input."""


class DocumentOpenError(Ppt2TxtError):
    """The presentation file could not be opened or decoded."""

    def __init__(self, path: object, detail: str) -> None:
        super().__init__(f"unable to open presentation '{path}': {detail}")
        self.path = path
        self.detail = detail


class OutputError(Ppt2TxtError):
    """The output target could not be opened or written."""


class ReportValidationError(Ppt2TxtError):
    """A generated JSON report does not conform to its schema."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__(f"report does not conform to schema ({len(errors)} errors)")
        self.errors = errors
