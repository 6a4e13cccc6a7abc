from __future__ import annotations

import os
import tempfile

# Keep log files out of the working tree; must run before the package is imported.
os.environ.setdefault("EXAM_TIMETABLER_LOG_DIR", tempfile.mkdtemp(prefix="exam_timetabler_logs_"))
os.environ.pop("EXAM_TIMETABLER_ARCHIVE_DIR", None)

import pytest

from exam_timetabler.errors import GenerationError
from exam_timetabler.gateway import GenerationCapability
from exam_timetabler.models.schemas import ExamTimetableOutput, TimetableEntry


class RecordingLogger:
    def __init__(self) -> None:
        self.entries = []

    def log(self, message_type, data):
        self.entries.append((message_type, data))

    def types(self):
        return [t for t, _ in self.entries]


class StubCapability(GenerationCapability):
    def __init__(self, output=None, error: BaseException | None = None) -> None:
        self.output = output
        self.error = error
        self.requests = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def generate(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.output


def make_output() -> ExamTimetableOutput:
    return ExamTimetableOutput(
        timetable=[
            TimetableEntry(
                id="e1",
                date="2024-06-10",
                time="09:00-12:00",
                subject="Mathematics",
                room="Room B",
                department="Science",
                course_code="MTH101",
                instructor="Dr. Smith",
            ),
            TimetableEntry(id="e2", date="2024-06-12", time="09:00-12:00", subject="Physics", room="Room A"),
        ],
        conflicts=None,
    )


@pytest.fixture
def valid_values():
    return {
        "subjectDependencies": "Math before Physics",
        "studentEnrollment": "120 students enrolled",
        "facultyAvailability": "Dr. Smith free Mon-Wed",
        "roomCapacities": "Room A: 50, Room B: 80",
        "examDuration": "3 hours",
    }


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def ok_capability():
    return StubCapability(output=make_output())


@pytest.fixture
def failing_capability():
    return StubCapability(error=GenerationError("provider rejected the request"))
