from exam_timetabler.errors import GenerationError, TimetablerError, ValidationError
from exam_timetabler.gateway import GenerationCapability, GenerationResult, TimetableGenerationGateway
from exam_timetabler.constraints import TimetableRequestValidator
