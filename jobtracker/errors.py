"""Exceptions raised by the import and export commands."""


class JobTrackerError(Exception):
    """Base class for errors reported to the user by the CLI."""


class ReadError(JobTrackerError):
    """The import file could not be opened or read."""


class ParseError(JobTrackerError):
    """The import file is not a usable semicolon-delimited file."""


class ExportError(JobTrackerError):
    """The PDF report could not be rendered or written."""
