from .validator import TimetableRequestValidator
