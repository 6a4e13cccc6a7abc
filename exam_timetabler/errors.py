from typing import List, NamedTuple, Optional

class FieldIssue(NamedTuple):
    field: str
    reason: str    # "missing" | "too_short" | "invalid_type"
    message: str


class TimetablerError(Exception):
    """Base class for failures surfaced by the timetable generation boundary."""


class ValidationError(TimetablerError):
    """Caller input failed the request constraints. No external call was made."""

    def __init__(self, issues: List[FieldIssue]):
        self.issues = list(issues)
        details = "; ".join(f"{i.field}: {i.reason}" for i in self.issues)
        super().__init__(f"Invalid timetable request ({details})")

    @property
    def fields(self) -> List[str]:
        return [i.field for i in self.issues]


class GenerationError(TimetablerError):
    """The external generation call failed or returned something unusable."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
