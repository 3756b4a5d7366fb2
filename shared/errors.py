"""Exceptions raised by vital checks and the orchestrator."""


class VitalsError(Exception):
    """Base class for all codebase vitals errors."""


class PathNotFoundError(VitalsError):
    """The path handed to a vital check does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Path does not exist: {path}")
        self.path = path


class NoDataAvailableError(VitalsError):
    """A vital check could not find the precomputed data it reads.

    The orchestrator skips the vital and carries on; a direct run
    surfaces it to the caller.
    """


class UnknownVitalError(VitalsError):
    """A configured vital name has no matching check."""

    def __init__(self, name: object):
        super().__init__(f"Unknown vital: {name}")
        self.name = name
