import uuid
from pathlib import Path
from typing import Optional

from google.genai import types

from exam_timetabler.agents.base import BaseAgent
from exam_timetabler.constraints.documents import DocumentInput
from exam_timetabler.errors import GenerationError
from exam_timetabler.models.schemas import AcademicDataAnalysisOutput
from exam_timetabler.utils.config import ACADEMIC_ANALYZER_MODEL_NAME, ACADEMIC_ANALYZER_PROMPT_FILE
from exam_timetabler.utils.file_io import load_text_file
from exam_timetabler.utils.logger import DetailedLogger

class AcademicDataAnalyzerAgent(BaseAgent):
    """Extracts colleges, departments, programs, levels and courses (with parent links) from an uploaded document."""

    def __init__(
        self,
        prompt_file: Path = ACADEMIC_ANALYZER_PROMPT_FILE,
        model_name: str = ACADEMIC_ANALYZER_MODEL_NAME,
        logger: Optional[DetailedLogger] = None,
    ):
        super().__init__(agent_name="academic_analyzer", model_name=model_name, logger=logger)
        self.prompt_file = prompt_file

    def analyze(self, document: DocumentInput) -> AcademicDataAnalysisOutput:
        prompt = load_text_file(self.prompt_file, "Academic Analyzer Prompt")
        if not prompt:
            raise GenerationError(f"Academic analyzer prompt template missing: {self.prompt_file}")

        request_id = uuid.uuid4().hex[:8]
        self.logger.log("MILESTONE", {
            "request_id": request_id,
            "summary": f"Analyzing {document.mime_type} document ({len(document.data)} bytes)",
        })

        output, _ = self.call_llm(
            prompt,
            log_context={"request_id": request_id},
            response_schema=AcademicDataAnalysisOutput,
            attachments=[types.Part.from_bytes(data=document.data, mime_type=document.mime_type)],
        )

        self.logger.log("MILESTONE", {
            "request_id": request_id,
            "summary": f"Document analysis found {len(output.entities)} entities",
        })
        return output
