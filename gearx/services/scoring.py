"""Submission scoring for JEE-style tests.

Each subject is marked ``correct * marks_per_correct - incorrect *
marks_per_incorrect`` (default +4/-1). The overall score is converted to a
percentile through the test's percentile map (or the fallback heuristic) and
to an estimated rank.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from sqlalchemy.orm import Session

from gearx.core.config import settings
from gearx.core.errors import ValidationError
from gearx.core.logging import get_logger
from gearx.core.numeric import safe_div, safe_round
from gearx.engine.percentiles.lookup import estimate_rank
from gearx.i18n.en_messages import ScoringMessages
from gearx.services.percentiles import resolve_score_percentile

logger = get_logger("gearx.services.scoring", component="services")

__all__ = [
    "SubjectTally",
    "SubjectResult",
    "SubmissionResult",
    "score_subject",
    "score_submission",
]


@dataclass(frozen=True, slots=True)
class SubjectTally:
    subject: str
    total_questions: int
    attempted: int
    correct: int
    time_taken: int = 0


@dataclass(frozen=True, slots=True)
class SubjectResult:
    subject: str
    total_questions: int
    attempted: int
    correct: int
    incorrect: int
    score: int
    accuracy: float
    time_taken: int


@dataclass(frozen=True, slots=True)
class SubmissionResult:
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
    percentile_source: str
    rank: int
    subjects: Dict[str, SubjectResult]


def _validate_tally(tally: SubjectTally) -> None:
    if tally.attempted > tally.total_questions:
        raise ValidationError(
            ScoringMessages.ATTEMPTED_EXCEEDS_TOTAL.format(
                subject=tally.subject, attempted=tally.attempted, total=tally.total_questions
            )
        )
    if tally.correct > tally.attempted:
        raise ValidationError(
            ScoringMessages.CORRECT_EXCEEDS_ATTEMPTED.format(
                subject=tally.subject, correct=tally.correct, attempted=tally.attempted
            )
        )


def score_subject(
    tally: SubjectTally,
    *,
    marks_per_correct: Optional[int] = None,
    marks_per_incorrect: Optional[int] = None,
) -> SubjectResult:
    _validate_tally(tally)
    plus = settings.marks_per_correct if marks_per_correct is None else marks_per_correct
    minus = settings.marks_per_incorrect if marks_per_incorrect is None else marks_per_incorrect
    incorrect = tally.attempted - tally.correct
    accuracy = safe_div(tally.correct, tally.attempted) * 100.0
    return SubjectResult(
        subject=tally.subject,
        total_questions=tally.total_questions,
        attempted=tally.attempted,
        correct=tally.correct,
        incorrect=incorrect,
        score=tally.correct * plus - incorrect * minus,
        accuracy=safe_round(accuracy, 2),
        time_taken=tally.time_taken,
    )


def score_submission(db: Session, test_id: str, tallies: Sequence[SubjectTally]) -> SubmissionResult:
    """Score a submitted test and attach its percentile and estimated rank."""
    subjects: Dict[str, SubjectResult] = {}
    for tally in tallies:
        if tally.subject in subjects:
            raise ValidationError(ScoringMessages.DUPLICATE_SUBJECT.format(subject=tally.subject))
        subjects[tally.subject] = score_subject(tally)

    results = list(subjects.values())
    total_questions = sum(r.total_questions for r in results)
    correct = sum(r.correct for r in results)
    incorrect = sum(r.incorrect for r in results)
    attempted = correct + incorrect
    total_score = sum(r.score for r in results)
    total_marks = total_questions * settings.marks_per_correct

    lookup = resolve_score_percentile(db, test_id, total_score, total_marks)
    rank = estimate_rank(lookup.percentile)
    logger.info(
        "submission_scored",
        extra={
            "structured_data": {
                "test_id": test_id,
                "total_score": total_score,
                "percentile_source": lookup.source,
            }
        },
    )
    return SubmissionResult(
        test_id=test_id,
        total_questions=total_questions,
        total_marks=total_marks,
        total_score=total_score,
        percentage=safe_round(safe_div(total_score, total_marks) * 100.0, 2),
        correct=correct,
        incorrect=incorrect,
        attempted=attempted,
        accuracy=safe_round(safe_div(correct, attempted) * 100.0, 2),
        percentile=lookup.percentile,
        percentile_source=lookup.source,
        rank=rank,
        subjects=subjects,
    )
