"""Error taxonomy for archive ingestion.

Every fatal error is scoped to a single archive: the pipeline records it next
to the archive path and moves on. ``reason`` never contains the path, so
identical causes across many archives collapse into one summary line.
"""


class IngestError(Exception):
    """Base class for per-archive ingestion failures."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    @property
    def cause(self) -> str:
        """Path-free description used to de-duplicate failures in a run summary."""
        return f"{type(self).__name__}: {self.reason}"


class IngestIOError(IngestError):
    """The archive path could not be opened or read."""


class MalformedArchiveError(IngestError):
    """Corrupt container, missing member, or undecodable member contents."""


class MissingRequiredFieldError(IngestError):
    """The control stanza lacks a mandatory field (Package or Version)."""

    def __init__(self, tag: str):
        super().__init__(f"control stanza is missing required field '{tag}'")
        self.tag = tag


class DependencyParseError(IngestError):
    """A relationship field does not follow the dependency grammar."""


class UnknownComparatorError(DependencyParseError):
    def __init__(self, token: str):
        super().__init__(f"unknown version comparator '{token}'")
        self.token = token


class InvalidConstraintError(DependencyParseError):
    def __init__(self, text: str):
        super().__init__(f"invalid version constraint '({text})'")
        self.text = text


class UnrecognizedTagWarning(UserWarning):
    """A control field name outside the known vocabulary was encountered."""
