from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from gearx.core.metrics import get_counters, get_last_runs, get_metrics
from gearx.db.database import get_db
from gearx.i18n.en_messages import AdminMessages
from gearx.schemas.percentile import (
    PercentileCsvRequest,
    PercentileImportResponse,
    PercentileMapResponse,
    PercentilePreviewResponse,
)
from gearx.services import percentiles as percentile_service
from gearx.services.security import require_admin

router = APIRouter(prefix="/admin", tags=["admin"])

_ALLOWED_SUFFIXES = (".csv", ".txt")


def _import_response(summary: percentile_service.ImportSummary) -> PercentileImportResponse:
    return PercentileImportResponse(
        test_id=summary.test_id,
        max_marks=summary.max_marks,
        slots=summary.slots,
        anchors=summary.anchors,
        hash=summary.payload_hash,
        errors=summary.errors,
    )


@router.post("/percentiles/preview", response_model=PercentilePreviewResponse)
def preview_percentiles(
    payload: PercentileCsvRequest,
    admin_email: str = Depends(require_admin),
) -> PercentilePreviewResponse:
    """Parse and interpolate pasted data without saving it."""
    result = percentile_service.preview_percentile_map(payload.csv_text, payload.max_marks)
    return PercentilePreviewResponse(
        max_marks=payload.max_marks,
        table=result.table,
        errors=result.errors,
        anchors=result.anchor_count,
    )


@router.put("/percentiles/{test_id}", response_model=PercentileImportResponse)
def put_percentiles(
    test_id: str,
    payload: PercentileCsvRequest,
    db: Session = Depends(get_db),
    admin_email: str = Depends(require_admin),
) -> PercentileImportResponse:
    summary = percentile_service.import_percentile_map(
        db, test_id, payload.csv_text, payload.max_marks, actor=admin_email
    )
    db.commit()
    return _import_response(summary)


@router.post("/percentiles/{test_id}/upload", response_model=PercentileImportResponse)
def upload_percentiles(
    test_id: str,
    max_marks: int = Query(ge=0),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    admin_email: str = Depends(require_admin),
) -> PercentileImportResponse:
    fname = (file.filename or "").lower()
    if not fname.endswith(_ALLOWED_SUFFIXES):
        raise HTTPException(status_code=400, detail=AdminMessages.FILE_MUST_BE_CSV)
    try:
        content = file.file.read().decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail=AdminMessages.FILE_NOT_UTF8) from None
    summary = percentile_service.import_percentile_map(db, test_id, content, max_marks, actor=admin_email)
    db.commit()
    return _import_response(summary)


@router.get("/percentiles/{test_id}", response_model=PercentileMapResponse)
def get_percentiles(
    test_id: str,
    db: Session = Depends(get_db),
    admin_email: str = Depends(require_admin),
) -> PercentileMapResponse:
    document = percentile_service.get_percentile_map(db, test_id)
    return PercentileMapResponse(
        test_id=document.test_id,
        max_marks=document.max_marks,
        table=list(document.table),
        updated_at=document.updated_at,
    )


@router.delete("/percentiles/{test_id}", status_code=204)
def delete_percentiles(
    test_id: str,
    db: Session = Depends(get_db),
    admin_email: str = Depends(require_admin),
) -> None:
    percentile_service.delete_percentile_map(db, test_id, actor=admin_email)
    db.commit()


@router.get("/perf-metrics")
def get_perf_metrics(
    reset: bool = False,
    admin_email: str = Depends(require_admin),
):
    """Timings, counters and last-run snapshots; ``reset=true`` clears them after reading."""
    return {
        "timings": get_metrics(reset=reset),
        "counters": get_counters(reset=reset),
        "last_runs": get_last_runs(reset=reset),
    }
