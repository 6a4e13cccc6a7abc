from __future__ import annotations

import base64
import itertools
import json

import pydantic
import pytest

from exam_timetabler.agents import base
from exam_timetabler.errors import GenerationError
from exam_timetabler.gateway import TimetableGenerationGateway
from exam_timetabler.models.schemas import AcademicDataAnalysisOutput, HeaderMapping, HeaderMappingOutput
from exam_timetabler.pipeline import actions, controller
from exam_timetabler.utils import config
from exam_timetabler.utils.logger import DetailedLogger
from exam_timetabler.pipeline.actions import (
    INVALID_INPUT_MESSAGE,
    UNEXPECTED_ERROR_MESSAGE,
    ActionResult,
    handle_analyze_academic_data,
    handle_generate_timetable,
    handle_map_csv_headers,
)

from conftest import StubCapability


def _gateway(capability, logger):
    return TimetableGenerationGateway(capability, logger=logger)


def test_capability_failure_returns_generic_message(valid_values, failing_capability, recording_logger) -> None:
    result = handle_generate_timetable(valid_values, gateway=_gateway(failing_capability, recording_logger), archive_dir=None)

    assert failing_capability.calls == 1
    assert result.model_dump() == {"data": None, "error": UNEXPECTED_ERROR_MESSAGE}
    assert result.error == "An unexpected error occurred. Please try again."


def test_short_field_returns_invalid_input_without_calls(valid_values, ok_capability, recording_logger) -> None:
    valid_values["subjectDependencies"] = "short"
    result = handle_generate_timetable(valid_values, gateway=_gateway(ok_capability, recording_logger), archive_dir=None)

    assert ok_capability.calls == 0
    assert result.model_dump() == {"data": None, "error": "Invalid input. Please check your data."}


def test_success_returns_camel_case_data(valid_values, ok_capability, recording_logger) -> None:
    result = handle_generate_timetable(valid_values, gateway=_gateway(ok_capability, recording_logger), archive_dir=None)

    assert result.error is None
    assert ok_capability.calls == 1
    first = result.data["timetable"][0]
    assert first["courseCode"] == "MTH101"
    assert {"id", "date", "time", "subject", "room"} <= set(first)


def test_detail_never_reaches_the_caller(valid_values, recording_logger) -> None:
    capability = StubCapability(error=RuntimeError("API key sk-secret rejected"))
    result = handle_generate_timetable(valid_values, gateway=_gateway(capability, recording_logger), archive_dir=None)

    assert result.error == UNEXPECTED_ERROR_MESSAGE
    assert "sk-secret" not in result.model_dump_json()


def test_default_gateway_without_api_key(monkeypatch, valid_values) -> None:
    monkeypatch.setattr(base, "IS_GEMINI_CONFIGURED", False)
    result = handle_generate_timetable(valid_values, archive_dir=None)
    assert result.model_dump() == {"data": None, "error": UNEXPECTED_ERROR_MESSAGE}


def test_successful_timetable_is_archived(tmp_path, valid_values, ok_capability, recording_logger) -> None:
    result = handle_generate_timetable(valid_values, gateway=_gateway(ok_capability, recording_logger), archive_dir=tmp_path)

    assert result.data is not None
    files = list(tmp_path.glob("timetable_*.json"))
    assert len(files) == 1
    document = json.loads(files[0].read_text(encoding="utf-8"))
    assert document["name"].startswith("Timetable - ")
    assert document["inputs"]["roomCapacities"] == "Room A: 50, Room B: 80"
    assert [e["id"] for e in document["timetable"]] == ["e1", "e2"]
    assert document["conflicts"] == ""


def test_failed_generation_is_not_archived(tmp_path, valid_values, failing_capability, recording_logger) -> None:
    handle_generate_timetable(valid_values, gateway=_gateway(failing_capability, recording_logger), archive_dir=tmp_path)
    assert list(tmp_path.iterdir()) == []


def test_archive_failure_still_returns_timetable(tmp_path, valid_values, ok_capability, recording_logger) -> None:
    blocker = tmp_path / "not_a_directory"
    blocker.write_text("occupied", encoding="utf-8")

    result = handle_generate_timetable(valid_values, gateway=_gateway(ok_capability, recording_logger), archive_dir=blocker)

    assert result.error is None
    assert len(result.data["timetable"]) == 2


def test_action_result_pair_is_exclusive() -> None:
    with pytest.raises(pydantic.ValidationError):
        ActionResult()
    with pytest.raises(pydantic.ValidationError):
        ActionResult(data={"timetable": []}, error="boom")
    with pytest.raises(pydantic.ValidationError):
        ActionResult(error="")


class StubMapper:
    def __init__(self, output=None, error=None) -> None:
        self.output = output
        self.error = error
        self.calls = []

    def map_headers(self, headers, target_fields=None):
        self.calls.append((headers, target_fields))
        if self.error is not None:
            raise self.error
        return self.output


def test_map_csv_headers_success() -> None:
    mapper = StubMapper(output=HeaderMappingOutput(mappings=[
        HeaderMapping(user_header="E-mail", mapped_to="email", confidence=0.9),
    ]))
    result = handle_map_csv_headers(["E-mail"], mapper=mapper)

    assert result.data == {"mappings": [{"userHeader": "E-mail", "mappedTo": "email", "confidence": 0.9}]}


@pytest.mark.parametrize("headers", [[], "name,email", ["name", "  "], ["name", 3]])
def test_map_csv_headers_invalid_input(headers) -> None:
    mapper = StubMapper()
    result = handle_map_csv_headers(headers, mapper=mapper)

    assert result.error == INVALID_INPUT_MESSAGE
    assert mapper.calls == []


def test_map_csv_headers_failure() -> None:
    result = handle_map_csv_headers(["name"], mapper=StubMapper(error=GenerationError("bad mapping")))
    assert result.model_dump() == {"data": None, "error": UNEXPECTED_ERROR_MESSAGE}


def test_controller_runs_request_file(tmp_path, monkeypatch, valid_values) -> None:
    request_path = tmp_path / "request.json"
    request_path.write_text(json.dumps(valid_values), encoding="utf-8")
    save_path = tmp_path / "out" / "result.json"
    seen = []

    def fake_handle(values):
        seen.append(values)
        return ActionResult(data={"timetable": [], "conflicts": None})

    monkeypatch.setattr(controller, "handle_generate_timetable", fake_handle)

    assert controller.main([str(request_path), "--save", str(save_path)]) == 0
    assert seen == [valid_values]
    assert json.loads(save_path.read_text(encoding="utf-8"))["error"] is None


def test_controller_reports_failure(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(controller, "handle_generate_timetable",
                        lambda values: ActionResult(error=actions.INVALID_INPUT_MESSAGE))
    assert controller.main([str(tmp_path / "missing.json")]) == 1


def test_controller_usage() -> None:
    assert controller.main([]) == 2


def test_controller_rejects_save_without_path(tmp_path, monkeypatch, valid_values) -> None:
    request_path = tmp_path / "request.json"
    request_path.write_text(json.dumps(valid_values), encoding="utf-8")
    seen = []
    monkeypatch.setattr(controller, "handle_generate_timetable", lambda values: seen.append(values))

    assert controller.main([str(request_path), "--save"]) == 2
    assert controller.main([str(request_path), "--output", "x.json"]) == 2
    assert seen == []


def test_repeated_default_calls_reuse_loggers(monkeypatch, valid_values) -> None:
    counter = itertools.count()
    monkeypatch.setattr(config, "get_run_name", lambda prefix: f"{prefix}_{next(counter)}")
    monkeypatch.setattr(base, "IS_GEMINI_CONFIGURED", False)

    handle_generate_timetable(valid_values, archive_dir=None)
    before = len(DetailedLogger._instances)
    for _ in range(50):
        result = handle_generate_timetable(valid_values, archive_dir=None)
        assert result.error == UNEXPECTED_ERROR_MESSAGE

    assert len(DetailedLogger._instances) == before


def _data_uri(payload: bytes, mime_type: str = "application/pdf") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(payload).decode('ascii')}"


class StubAnalyzer:
    def __init__(self, output=None, error=None) -> None:
        self.output = output
        self.error = error
        self.documents = []

    def analyze(self, document):
        self.documents.append(document)
        if self.error is not None:
            raise self.error
        return self.output


def test_analyze_academic_data_success() -> None:
    output = AcademicDataAnalysisOutput.model_validate({
        "entities": [
            {"id": "c1", "type": "College", "name": "COLLEGE OF LAW", "properties": {"code": "COL"},
             "parentId": None, "confidence": 0.95, "reasoning": "Table heading.", "status": "new"},
            {"id": "d1", "type": "Department", "name": "Department of Private Law", "properties": {},
             "parentId": "c1", "confidence": 0.8, "reasoning": "Listed under the college.", "status": "new"},
        ],
        "summary": "One college with one department.",
    })
    analyzer = StubAnalyzer(output=output)

    result = handle_analyze_academic_data(_data_uri(b"%PDF-1.4 law"), analyzer=analyzer)

    assert analyzer.documents[0].mime_type == "application/pdf"
    assert analyzer.documents[0].data == b"%PDF-1.4 law"
    assert result.data["entities"][1]["parentId"] == "c1"
    assert result.data["entities"][0]["properties"]["code"] == "COL"
    assert result.data["summary"] == "One college with one department."


@pytest.mark.parametrize(
    "uri",
    [
        None,
        "",
        "https://example.com/colleges.pdf",
        "data:application/zip;base64,UEsDBA==",
        "data:application/pdf;base64,not*base64!",
        "data:application/pdf;base64,",
        "data:application/pdf,plain-text-not-base64",
    ],
    ids=["none", "empty", "url", "unsupported-type", "bad-base64", "empty-payload", "not-base64-uri"],
)
def test_analyze_academic_data_invalid_document(uri) -> None:
    analyzer = StubAnalyzer()
    result = handle_analyze_academic_data(uri, analyzer=analyzer)

    assert result.model_dump() == {"data": None, "error": INVALID_INPUT_MESSAGE}
    assert analyzer.documents == []


def test_analyze_academic_data_failure() -> None:
    analyzer = StubAnalyzer(error=GenerationError("Entity 'd1' references unknown parent 'x9'"))
    result = handle_analyze_academic_data(_data_uri(b"\x89PNG data", "image/png"), analyzer=analyzer)

    assert len(analyzer.documents) == 1
    assert result.model_dump() == {"data": None, "error": UNEXPECTED_ERROR_MESSAGE}
