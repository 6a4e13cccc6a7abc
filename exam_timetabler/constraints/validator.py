from typing import Any, Mapping, Union

from pydantic import ValidationError as SchemaValidationError

from exam_timetabler.errors import FieldIssue, ValidationError
from exam_timetabler.models.schemas import TimetableRequest
from .rules import classify

class TimetableRequestValidator:
    """
    Checks caller-supplied timetable constraints before anything is sent out.

    Only presence and minimum length are enforced. Accepted values are passed
    through untouched (no trimming, no case changes).
    """

    def validate(self, values: Union[Mapping[str, Any], TimetableRequest]) -> TimetableRequest:
        """
        Returns a normalized TimetableRequest or raises ValidationError listing
        every failing field. Pure: no side effects either way.
        """
        if isinstance(values, TimetableRequest):
            # Re-check: a model can be built with model_construct() and skip validation.
            values = dict(values.__dict__)

        try:
            return TimetableRequest.model_validate(values)
        except SchemaValidationError as e:
            issues = []
            seen = set()
            for err in e.errors():
                field, reason, message = classify(err)
                if field in seen:
                    continue
                seen.add(field)
                issues.append(FieldIssue(field, reason, message))
            raise ValidationError(issues) from e
