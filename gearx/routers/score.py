from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gearx.db.database import get_db
from gearx.engine.percentiles.lookup import estimate_rank
from gearx.schemas.score import (
    PercentileLookupRequest,
    PercentileLookupResponse,
    SubmissionRequest,
    SubmissionResponse,
)
from gearx.services.percentiles import resolve_score_percentile
from gearx.services.scoring import SubjectTally, score_submission

router = APIRouter(prefix="/score", tags=["score"])


@router.post("/percentile", response_model=PercentileLookupResponse)
def score_percentile(payload: PercentileLookupRequest, db: Session = Depends(get_db)) -> PercentileLookupResponse:
    result = resolve_score_percentile(db, payload.test_id, payload.score, payload.max_possible_score)
    return PercentileLookupResponse(
        test_id=payload.test_id,
        score=payload.score,
        percentile=result.percentile,
        source=result.source,
        index=result.index,
        rank_estimate=estimate_rank(result.percentile),
    )


@router.post("/submissions/{test_id}", response_model=SubmissionResponse)
def score_test_submission(
    test_id: str,
    payload: SubmissionRequest,
    db: Session = Depends(get_db),
) -> SubmissionResponse:
    tallies = [SubjectTally(**subject.model_dump()) for subject in payload.subjects]
    result = score_submission(db, test_id, tallies)
    return SubmissionResponse.model_validate(asdict(result))
