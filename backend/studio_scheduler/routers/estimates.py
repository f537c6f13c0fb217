from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from studio_scheduler.database import get_db
from studio_scheduler.models.estimate import EstimateRecord
from studio_scheduler.schemas.estimate import EstimateResponse
from studio_scheduler.services.estimate_source import save_estimate

router = APIRouter(prefix="/estimates", tags=["estimates"])


def _estimate_to_response(record: EstimateRecord) -> EstimateResponse:
    return EstimateResponse(
        id=record.id,
        status=record.status,
        client_name=record.client_name,
        updated_at=record.updated_at,
    )


@router.put("/{estimate_id}", response_model=EstimateResponse)
async def put_estimate(estimate_id: str, payload: Any = Body(...), db: Session = Depends(get_db)):
    """Store an estimate document exactly as the estimate tool produced it."""
    return _estimate_to_response(save_estimate(db, estimate_id, payload))


@router.get("", response_model=list[EstimateResponse])
async def list_estimates(status: str | None = None, db: Session = Depends(get_db)):
    query = db.query(EstimateRecord)
    if status:
        query = query.filter(EstimateRecord.status == status)
    return [_estimate_to_response(r) for r in query.order_by(EstimateRecord.updated_at.desc()).all()]
