import base64
import binascii
import re
from typing import Any, NamedTuple

from exam_timetabler.errors import FieldIssue, ValidationError
from exam_timetabler.utils.config import SUPPORTED_DOCUMENT_MIME_TYPES

# data:<mimetype>[;param=value]*;base64,<encoded_data>
DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?:;[\w.+-]+=[^;,]*)*;base64,(?P<data>.*)$",
    re.DOTALL,
)


class DocumentInput(NamedTuple):
    mime_type: str
    data: bytes


def _reject(reason: str, message: str) -> ValidationError:
    return ValidationError([FieldIssue("document_data_uri", reason, message)])


def parse_document_data_uri(uri: Any) -> DocumentInput:
    """
    Decodes an uploaded document given as a base64 data URI.
    Raises ValidationError for anything that is not a non-empty, supported document.
    """
    if not isinstance(uri, str) or not uri:
        raise _reject("missing", "Please upload a document to analyze.")

    match = DATA_URI_PATTERN.match(uri)
    if not match:
        raise _reject("invalid_type", "The document must be a base64 data URI.")

    mime_type = match.group("mime").lower()
    if mime_type not in SUPPORTED_DOCUMENT_MIME_TYPES:
        raise _reject("invalid_type", f"Unsupported document type: {mime_type}.")

    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error:
        raise _reject("invalid_type", "The document data is not valid base64.")

    if not data:
        raise _reject("too_short", "The uploaded document is empty.")

    return DocumentInput(mime_type, data)
