import uuid
from pathlib import Path
from typing import Optional

from exam_timetabler.agents.base import BaseAgent
from exam_timetabler.errors import GenerationError
from exam_timetabler.gateway import GenerationCapability
from exam_timetabler.models.schemas import ExamTimetableOutput, TimetableRequest
from exam_timetabler.utils.config import TIMETABLE_MODEL_NAME, TIMETABLE_PROMPT_FILE
from exam_timetabler.utils.file_io import load_text_file
from exam_timetabler.utils.logger import DetailedLogger

class ExamTimetableAgent(BaseAgent, GenerationCapability):
    """Gemini-backed generation capability: one prompt in, one structured timetable out."""

    def __init__(
        self,
        prompt_file: Path = TIMETABLE_PROMPT_FILE,
        model_name: str = TIMETABLE_MODEL_NAME,
        logger: Optional[DetailedLogger] = None,
    ):
        super().__init__(agent_name="timetable", model_name=model_name, logger=logger)
        self.prompt_file = prompt_file

    def build_prompt(self, request: TimetableRequest) -> str:
        template = load_text_file(self.prompt_file, "Timetable Prompt")
        if not template:
            raise GenerationError(f"Timetable prompt template missing: {self.prompt_file}")

        return f"""{template}
# --- Scheduling Data ---
## Subject Dependencies
{request.subject_dependencies}
## Student Enrollment
{request.student_enrollment}
## Faculty Availability
{request.faculty_availability}
## Room Capacities
{request.room_capacities}
## Exam Duration
{request.exam_duration}
## Additional Constraints
{request.additional_constraints or "None"}
# --- End Data ---
"""

    def generate(self, request: TimetableRequest) -> ExamTimetableOutput:
        request_id = uuid.uuid4().hex[:8]
        self.logger.log("MILESTONE", {"request_id": request_id, "summary": "--- Timetable Generation Started ---"})

        prompt = self.build_prompt(request)
        output, metrics = self.call_llm(
            prompt,
            log_context={"request_id": request_id},
            response_schema=ExamTimetableOutput,
        )

        self.logger.log("MILESTONE", {
            "request_id": request_id,
            "summary": f"Timetable received: {len(output.timetable)} entries in {metrics.get('duration', 0.0):.2f}s",
        })
        return output
