from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, model_validator

from exam_timetabler.agents.academic_analyzer import AcademicDataAnalyzerAgent
from exam_timetabler.agents.csv_mapper import CsvHeaderMapperAgent
from exam_timetabler.agents.timetable import ExamTimetableAgent
from exam_timetabler.constraints import TimetableRequestValidator
from exam_timetabler.constraints.documents import parse_document_data_uri
from exam_timetabler.errors import FieldIssue, ValidationError
from exam_timetabler.gateway import TimetableGenerationGateway
from exam_timetabler.processing.archive import TimetableArchive
from exam_timetabler.utils.config import RUN_NAME, TIMETABLE_ARCHIVE_DIR
from exam_timetabler.utils.logger import DetailedLogger

INVALID_INPUT_MESSAGE = "Invalid input. Please check your data."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."

_USE_CONFIGURED = object()


class ActionResult(BaseModel):
    """The {data, error} pair handed back to callers. Exactly one side is populated."""
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _one_of(self):
        if (self.data is None) == (self.error is None):
            raise ValueError("ActionResult needs exactly one of data or error")
        if self.error is not None and not self.error:
            raise ValueError("ActionResult error message must not be empty")
        return self


def _logger() -> DetailedLogger:
    return DetailedLogger(agent_name="actions", run_name=RUN_NAME)


def handle_generate_timetable(
    values: Union[Mapping[str, Any], Any],
    gateway: Optional[TimetableGenerationGateway] = None,
    archive_dir: Any = _USE_CONFIGURED,
) -> ActionResult:
    """
    Validates the form values, asks the generation gateway for a timetable and
    folds every outcome into an ActionResult. Never raises.

    When an archive directory is configured the timetable is also saved; a failed
    save is logged and the timetable is still returned.
    """
    if archive_dir is _USE_CONFIGURED:
        archive_dir = TIMETABLE_ARCHIVE_DIR

    try:
        validator = TimetableRequestValidator()
        request = validator.validate(values)

        gateway = gateway or TimetableGenerationGateway(ExamTimetableAgent(), validator=validator)
        result = gateway.generate(request)
    except ValidationError as e:
        _logger().log("VALIDATION_ERROR", {"summary": str(e), "fields": e.fields})
        return ActionResult(error=INVALID_INPUT_MESSAGE)
    except Exception as e:
        _logger().log("ERROR", {"summary": f"Error generating timetable: {e!r}"})
        return ActionResult(error=UNEXPECTED_ERROR_MESSAGE)

    if not result.ok:
        if isinstance(result.error, ValidationError):
            return ActionResult(error=INVALID_INPUT_MESSAGE)
        return ActionResult(error=UNEXPECTED_ERROR_MESSAGE)

    if archive_dir:
        try:
            path = TimetableArchive.save(archive_dir, result.data, request)
            _logger().log("INFO", {"summary": f"Timetable archived to {path}"})
        except Exception as e:
            _logger().log("ERROR", {"summary": f"Error archiving timetable: {e!r}"})

    return ActionResult(data=result.data.model_dump(by_alias=True))


def _check_headers(headers: Any) -> List[str]:
    if isinstance(headers, (str, bytes)) or not isinstance(headers, Sequence) or not headers:
        raise ValidationError([FieldIssue("headers", "missing", "Please upload a CSV file with a header row.")])
    for h in headers:
        if not isinstance(h, str):
            raise ValidationError([FieldIssue("headers", "invalid_type", "CSV headers must be text.")])
        if not h.strip():
            raise ValidationError([FieldIssue("headers", "too_short", "CSV headers must not be blank.")])
    return list(headers)


def handle_map_csv_headers(
    headers: Sequence[str],
    target_fields: Optional[List[str]] = None,
    mapper: Optional[CsvHeaderMapperAgent] = None,
) -> ActionResult:
    """Suggests a target field for every CSV header, using the same {data, error} contract."""
    try:
        checked = _check_headers(headers)
        mapper = mapper or CsvHeaderMapperAgent()
        output = mapper.map_headers(checked, target_fields)
    except ValidationError as e:
        _logger().log("VALIDATION_ERROR", {"summary": str(e), "fields": e.fields})
        return ActionResult(error=INVALID_INPUT_MESSAGE)
    except Exception as e:
        _logger().log("ERROR", {"summary": f"Error mapping CSV headers: {e!r}"})
        return ActionResult(error=UNEXPECTED_ERROR_MESSAGE)

    return ActionResult(data=output.model_dump(by_alias=True))


def handle_analyze_academic_data(
    document_data_uri: str,
    analyzer: Optional[AcademicDataAnalyzerAgent] = None,
) -> ActionResult:
    """
    Extracts academic entities and their parent links from an uploaded document
    (base64 data URI), using the same {data, error} contract.
    """
    try:
        document = parse_document_data_uri(document_data_uri)
        analyzer = analyzer or AcademicDataAnalyzerAgent()
        output = analyzer.analyze(document)
    except ValidationError as e:
        _logger().log("VALIDATION_ERROR", {"summary": str(e), "fields": e.fields})
        return ActionResult(error=INVALID_INPUT_MESSAGE)
    except Exception as e:
        _logger().log("ERROR", {"summary": f"Error analyzing academic document: {e!r}"})
        return ActionResult(error=UNEXPECTED_ERROR_MESSAGE)

    return ActionResult(data=output.model_dump(by_alias=True))
