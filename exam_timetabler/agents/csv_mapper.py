import json
import uuid
from pathlib import Path
from typing import List, Optional, Sequence

from exam_timetabler.agents.base import BaseAgent
from exam_timetabler.errors import GenerationError
from exam_timetabler.models.schemas import HeaderMappingOutput
from exam_timetabler.utils.config import CSV_MAPPER_MODEL_NAME, CSV_MAPPER_PROMPT_FILE, STAFF_IMPORT_FIELDS
from exam_timetabler.utils.file_io import load_text_file
from exam_timetabler.utils.logger import DetailedLogger

class CsvHeaderMapperAgent(BaseAgent):
    """Suggests which import field each header of an uploaded CSV file corresponds to."""

    def __init__(
        self,
        prompt_file: Path = CSV_MAPPER_PROMPT_FILE,
        model_name: str = CSV_MAPPER_MODEL_NAME,
        logger: Optional[DetailedLogger] = None,
    ):
        super().__init__(agent_name="csv_mapper", model_name=model_name, logger=logger)
        self.prompt_file = prompt_file

    def map_headers(self, headers: Sequence[str], target_fields: Optional[List[str]] = None) -> HeaderMappingOutput:
        target_fields = list(target_fields or STAFF_IMPORT_FIELDS)
        template = load_text_file(self.prompt_file, "CSV Mapper Prompt")
        if not template:
            raise GenerationError(f"CSV mapper prompt template missing: {self.prompt_file}")

        prompt = f"""{template}
# --- Data ---
## Target Fields
{json.dumps(target_fields, indent=2)}
## User's CSV Headers
{json.dumps(list(headers), indent=2)}
# --- End Data ---
"""
        output, _ = self.call_llm(
            prompt,
            log_context={"request_id": uuid.uuid4().hex[:8]},
            response_schema=HeaderMappingOutput,
        )

        unknown = sorted({m.mapped_to for m in output.mappings if m.mapped_to and m.mapped_to not in target_fields})
        if unknown:
            self.logger.log("ERROR", {"summary": f"Header mapper returned unknown target fields: {unknown}"})
            raise GenerationError(f"Header mapping used unknown target fields: {unknown}")

        return output
