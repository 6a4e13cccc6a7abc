from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    # Field names are snake_case in Python, camelCase on the wire and in prompts.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# 1. What the caller asks for: free-text scheduling constraints
class TimetableRequest(CamelModel):
    model_config = ConfigDict(frozen=True)

    subject_dependencies: str = Field(min_length=10, description="Which subjects must be examined before others.")
    student_enrollment: str = Field(min_length=10, description="Student enrollment per subject.")
    faculty_availability: str = Field(min_length=10, description="When each faculty member can invigilate.")
    room_capacities: str = Field(min_length=10, description="Rooms and how many students each seats.")
    exam_duration: str = Field(min_length=3, description="Length of each exam (e.g., '3 hours').")
    additional_constraints: Optional[str] = Field(default=None, description="Any other preferences from the administrator.")


# 2. The fundamental output unit: a single scheduled exam
class TimetableEntry(CamelModel):
    id: str = Field(min_length=1, description="Unique identifier of this entry within the timetable.")
    date: str = Field(min_length=1, description="Exam date (e.g., '2024-06-10').")
    time: str = Field(min_length=1, description="Exam start time or time range (e.g., '09:00-12:00').")
    subject: str = Field(min_length=1, description="The subject being examined.")
    room: str = Field(min_length=1, description="The room hosting the exam.")
    department: Optional[str] = Field(default=None, description="Department offering the subject.")
    course_code: Optional[str] = Field(default=None, description="Course code of the subject (e.g., 'CSC101').")
    instructor: Optional[str] = Field(default=None, description="Invigilating or responsible instructor.")


# 3. What the generation capability returns
class ExamTimetableOutput(CamelModel):
    timetable: List[TimetableEntry] = Field(description="The generated exam timetable.")
    conflicts: Optional[str] = Field(default=None, description="Any conflicts or rule violations that could not be avoided.")

    @model_validator(mode="after")
    def _check_unique_ids(self):
        seen = set()
        duplicates = set()
        for entry in self.timetable:
            if entry.id in seen:
                duplicates.add(entry.id)
            seen.add(entry.id)
        if duplicates:
            raise ValueError(f"Duplicate timetable entry ids: {sorted(duplicates)}")
        return self


# 4. CSV import helper: one suggested header mapping
class HeaderMapping(CamelModel):
    user_header: str = Field(description="The original header from the uploaded CSV file.")
    mapped_to: Optional[str] = Field(default=None, description="The target field this header maps to, or null if none fits.")
    confidence: float = Field(ge=0.0, le=1.0, description="Confidence in this mapping, from 0.0 to 1.0.")


class HeaderMappingOutput(CamelModel):
    mappings: List[HeaderMapping]


# 5. Document import helper: academic entities found in an uploaded document
EntityType = Literal["College", "Department", "Program", "Level", "Course"]


class EntityProperties(BaseModel):
    # Property keys stay snake_case; they are written to the store as-is.
    code: Optional[str] = Field(default=None, description="A short code for the entity, e.g., 'CNAS' for a college.")
    course_code: Optional[str] = Field(default=None, description="The course code, e.g., 'CSC 101'.")
    credit_unit: Optional[float] = Field(default=None, description="The number of credit units for a course.")
    students_count: Optional[int] = Field(default=None, description="The number of students in a level.")
    max_level: Optional[int] = Field(default=None, description="The maximum level for a program.")
    exam_type: Optional[Literal["CBT", "Written"]] = Field(default=None, description="The type of exam for a course.")


class AnalyzedEntity(CamelModel):
    id: str = Field(min_length=1, description="A unique identifier for this entity within the analysis.")
    type: EntityType = Field(description="The type of academic entity detected.")
    name: str = Field(min_length=1, description="The primary name of the entity.")
    properties: EntityProperties = Field(default_factory=EntityProperties)
    parent_id: Optional[str] = Field(description="The id of the parent entity in this same analysis, or null.")
    confidence: float = Field(ge=0.0, le=1.0, description="Confidence in the extracted data and parent link, from 0.0 to 1.0.")
    reasoning: str = Field(description="A brief explanation of how the entity and its parent were identified.")
    status: Literal["new", "matched", "ambiguous", "error"] = Field(description="Processing status of this entity.")
    suggestions: Optional[List[str]] = Field(default=None, description="Possible existing matches when ambiguous.")


class AcademicDataAnalysisOutput(CamelModel):
    entities: List[AnalyzedEntity] = Field(description="A flat list of all academic entities found in the document.")
    summary: str = Field(description="A high-level summary of the document's content and structure.")

    @model_validator(mode="after")
    def _check_hierarchy_links(self):
        ids = [e.id for e in self.entities]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate entity ids: {duplicates}")

        known = set(ids)
        for entity in self.entities:
            if entity.parent_id is None:
                continue
            if entity.parent_id == entity.id:
                raise ValueError(f"Entity {entity.id!r} is its own parent")
            if entity.parent_id not in known:
                raise ValueError(f"Entity {entity.id!r} references unknown parent {entity.parent_id!r}")
        return self
