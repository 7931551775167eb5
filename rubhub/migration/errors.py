"""
Error taxonomy for the legacy migration.

Row-level errors (RecordInsertError and its DuplicateRecordError subclass) are
caught inside a stage and never stop the run. ConfigurationError and
TargetConnectionError are fatal and reach the process entry point.
"""


class MigrationError(Exception):
    """Base class for migration errors"""


class ConfigurationError(MigrationError):
    """Connection string missing or unusable"""


class TargetConnectionError(MigrationError):
    """Target store became unreachable while writing"""


class RecordInsertError(MigrationError):
    """A single row could not be written"""

    def __init__(self, message: str, context: str = ""):
        super().__init__(message)
        self.context = context

    def __str__(self) -> str:
        base = super().__str__()
        return f"{self.context}: {base}" if self.context else base


class DuplicateRecordError(RecordInsertError):
    """A single row hit a unique constraint"""
