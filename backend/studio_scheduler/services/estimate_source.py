"""
Read side of the estimate authoring tool.

Sources hand back raw approved estimate documents; ``parse_estimate_payload``
and ``normalize_estimate`` turn one document into the canonical shape the
conversion engine works with.
"""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studio_scheduler.exceptions import DataFormatError, StoreError
from studio_scheduler.models.estimate import EstimateRecord
from studio_scheduler.schemas.estimate import (
    EstimatePackage,
    EstimatePayload,
    FlatEstimate,
    NormalizedEstimate,
    PackagedEstimate,
)

logger = logging.getLogger(__name__)

APPROVED = "approved"


class EstimateSource(Protocol):
    def get_approved(self) -> list[dict]:
        ...


def _approved_only(documents: list) -> list[dict]:
    approved = []
    for doc in documents:
        if not isinstance(doc, dict):
            logger.warning("Ignoring malformed estimate entry of type %s", type(doc).__name__)
            continue
        if doc.get("status") == APPROVED:
            approved.append(doc)
    return approved


class SqlEstimateSource:
    """Estimates stored as JSON documents in the ``estimates`` table."""

    def __init__(self, db: Session):
        self.db = db

    def get_approved(self) -> list[dict]:
        try:
            rows = (
                self.db.query(EstimateRecord)
                .filter(EstimateRecord.status == APPROVED)
                .order_by(EstimateRecord.id)
                .all()
            )
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not read estimates: {exc}") from exc

        documents = []
        for row in rows:
            try:
                documents.append(json.loads(row.payload))
            except ValueError:
                logger.warning("Estimate %s has an unreadable payload, skipping", row.id)
        return _approved_only(documents)


class JsonEstimateSource:
    """Estimates exported as one JSON array, the way the browser app kept them."""

    def __init__(self, path: Path):
        self.path = path

    def get_approved(self) -> list[dict]:
        if not self.path.exists():
            logger.info("No estimates export at %s", self.path)
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise StoreError(f"Could not read {self.path}: {exc}") from exc
        except ValueError as exc:
            logger.error("Estimates export %s is not valid JSON: %s", self.path, exc)
            return []
        if not isinstance(raw, list):
            logger.error(
                "Estimates export %s holds %s, expected a list", self.path, type(raw).__name__
            )
            return []
        return _approved_only(raw)


def save_estimate(db: Session, estimate_id: str, payload: dict) -> EstimateRecord:
    """Store (or replace) an estimate document as received."""
    if not isinstance(payload, dict):
        raise DataFormatError("Estimate payload must be a JSON object")
    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    document = {**payload, "id": estimate_id}
    record = EstimateRecord(
        id=estimate_id,
        status=payload.get("status"),
        client_name=payload.get("clientName"),
        payload=json.dumps(document),
        updated_at=now,
    )
    try:
        record = db.merge(record)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError(f"Could not save estimate {estimate_id}: {exc}") from exc
    return record


def parse_estimate_payload(document: dict) -> EstimatePayload:
    packages = document.get("packages")
    if packages is not None and not isinstance(packages, list):
        raise DataFormatError("'packages' must be a list")
    if packages:
        return PackagedEstimate.model_validate(document)
    return FlatEstimate.model_validate(document)


def normalize_estimate(payload: EstimatePayload) -> NormalizedEstimate:
    """Resolve the selected package so conversion sees one list of services and deliverables."""
    if payload.id is None or not str(payload.id).strip():
        raise DataFormatError("Estimate has no id")

    common = {
        "id": payload.id,
        "client_name": payload.client_name,
        "client_phone": payload.client_phone,
        "client_email": payload.client_email,
    }

    if isinstance(payload, FlatEstimate):
        return NormalizedEstimate(
            **common,
            services=payload.services,
            deliverables=payload.deliverables,
        )

    index = payload.selected_package_index or 0
    if not 0 <= index < len(payload.packages):
        logger.warning(
            "Estimate %s selects package %d of %d, using its flat services",
            payload.id, index, len(payload.packages),
        )
        return NormalizedEstimate(
            **common,
            services=payload.services,
            deliverables=payload.deliverables,
        )
    try:
        package = EstimatePackage.model_validate(payload.packages[index])
    except ValidationError as exc:
        raise DataFormatError(f"Selected package {index} of estimate {payload.id} is malformed") from exc
    return NormalizedEstimate(
        **common,
        package_name=package.name or f"Option {index + 1}",
        services=package.services,
        deliverables=package.deliverables or payload.deliverables,
    )
