from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator

from exam_timetabler.constraints import TimetableRequestValidator
from exam_timetabler.errors import GenerationError, TimetablerError, ValidationError
from exam_timetabler.models.schemas import ExamTimetableOutput, TimetableRequest
from exam_timetabler.utils.config import RUN_NAME
from exam_timetabler.utils.logger import DetailedLogger


class GenerationCapability(ABC):
    """The external service that turns a timetable request into a timetable."""

    @abstractmethod
    def generate(self, request: TimetableRequest) -> ExamTimetableOutput:
        ...


class GenerationResult(BaseModel):
    """Exactly one of `data` / `error` is set."""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    data: Optional[ExamTimetableOutput] = None
    error: Optional[TimetablerError] = None

    @model_validator(mode="after")
    def _one_of(self):
        if (self.data is None) == (self.error is None):
            raise ValueError("GenerationResult needs exactly one of data or error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None


class TimetableGenerationGateway:
    """
    Single request/single response boundary around the generation capability.

    Input is re-validated, the capability is called at most once, and every
    failure comes back as a classified error in the result instead of being raised.
    """

    def __init__(
        self,
        capability: GenerationCapability,
        validator: Optional[TimetableRequestValidator] = None,
        logger: Optional[DetailedLogger] = None,
    ):
        self.capability = capability
        self.validator = validator or TimetableRequestValidator()
        self.logger = logger or DetailedLogger(agent_name="gateway", run_name=RUN_NAME)

    def generate(self, request: Union[Mapping[str, Any], TimetableRequest]) -> GenerationResult:
        try:
            normalized = self.validator.validate(request)
        except ValidationError as e:
            self.logger.log("VALIDATION_ERROR", {
                "summary": str(e),
                "issues": [issue._asdict() for issue in e.issues],
            })
            return GenerationResult(error=e)

        try:
            output = self.capability.generate(normalized)
            if not isinstance(output, ExamTimetableOutput):
                # Stubs and alternative capabilities may hand back plain dicts.
                output = ExamTimetableOutput.model_validate(output)
        except GenerationError as e:
            self.logger.log("ERROR", {"summary": f"Timetable generation failed: {e}", "cause": repr(e.cause)})
            return GenerationResult(error=e)
        except Exception as e:
            self.logger.log("ERROR", {"summary": f"Unexpected error during timetable generation: {e!r}"})
            return GenerationResult(error=GenerationError("Unexpected generation failure.", cause=e))

        self.logger.log("INFO", {"summary": f"Generated timetable with {len(output.timetable)} entries."})
        return GenerationResult(data=output)
