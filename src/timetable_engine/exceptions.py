"""Custom exceptions for the timetable engine."""


class TimetableError(Exception):
    """Base exception for timetable engine errors."""

    pass


class ConfigError(TimetableError):
    """Constraints configuration or reference file is invalid."""

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        location = f" in '{source}'" if source else ""
        super().__init__(f"Invalid configuration{location}: {message}")


class UpstreamDataError(TimetableError):
    """Input data references a record that does not exist or cannot hold.

    Raised for problems that make a whole run meaningless, such as a lock
    pointing at a time slot or room the session does not have, or two locks
    claiming the same room, lecturer or level at once.
    """

    def __init__(
        self,
        entity: str,
        entity_id: str,
        referenced_by: str | None = None,
        message: str | None = None,
    ):
        self.entity = entity
        self.entity_id = entity_id
        self.referenced_by = referenced_by
        if message is None:
            message = f"{entity} '{entity_id}' not found"
        if referenced_by:
            message += f" (referenced by {referenced_by})"
        super().__init__(message)


class NotFoundError(TimetableError):
    """Requested record does not exist in the store."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found")
