from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

__all__ = [
    "PercentileLookupRequest",
    "PercentileLookupResponse",
    "SubjectTallyWrite",
    "SubmissionRequest",
    "SubjectResultRead",
    "SubmissionResponse",
]


class PercentileLookupRequest(BaseModel):
    test_id: str = Field(min_length=1, max_length=128)
    score: float
    max_possible_score: float = Field(gt=0)


class PercentileLookupResponse(BaseModel):
    test_id: str
    score: float
    percentile: float
    source: Literal["table", "fallback"]
    index: Optional[int]
    rank_estimate: int


class SubjectTallyWrite(BaseModel):
    subject: str = Field(min_length=1, max_length=40)
    total_questions: int = Field(ge=0)
    attempted: int = Field(ge=0)
    correct: int = Field(ge=0)
    time_taken: int = Field(default=0, ge=0, description="Seconds spent on the subject")

    @model_validator(mode="after")
    def _check_counts(self) -> "SubjectTallyWrite":
        if self.attempted > self.total_questions:
            raise ValueError("attempted cannot exceed total_questions")
        if self.correct > self.attempted:
            raise ValueError("correct cannot exceed attempted")
        return self


class SubmissionRequest(BaseModel):
    subjects: List[SubjectTallyWrite] = Field(min_length=1)

    @model_validator(mode="after")
    def _unique_subjects(self) -> "SubmissionRequest":
        names = [s.subject for s in self.subjects]
        if len(names) != len(set(names)):
            raise ValueError("Subjects must be unique")
        return self


class SubjectResultRead(BaseModel):
    subject: str
    total_questions: int
    attempted: int
    correct: int
    incorrect: int
    score: int
    accuracy: float
    time_taken: int


class SubmissionResponse(BaseModel):
    test_id: str
    total_questions: int
    total_marks: int
    total_score: int
    percentage: float
    correct: int
    incorrect: int
    attempted: int
    accuracy: float
    percentile: float
    percentile_source: Literal["table", "fallback"]
    rank: int
    subjects: Dict[str, SubjectResultRead]
