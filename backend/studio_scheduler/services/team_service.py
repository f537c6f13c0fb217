import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from studio_scheduler.exceptions import NotFoundError
from studio_scheduler.models.team_member import TeamMemberRecord
from studio_scheduler.schemas.team import TeamMember, TeamMemberCreate


def record_to_member(record: TeamMemberRecord) -> TeamMember:
    return TeamMember(
        id=record.id,
        name=record.name,
        role=record.role,
        email=record.email,
        phone=record.phone,
        whatsapp=record.whatsapp,
        is_freelancer=record.is_freelancer,
        availability=record.availability or {},
    )


def create_member(db: Session, req: TeamMemberCreate) -> TeamMember:
    record = TeamMemberRecord(
        id=str(uuid.uuid4()),
        name=req.name,
        role=req.role,
        email=req.email,
        phone=req.phone,
        whatsapp=req.whatsapp,
        is_freelancer=req.is_freelancer,
        availability=dict(req.availability),
        created_at=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record_to_member(record)


def get_member(db: Session, member_id: str) -> TeamMember:
    record = db.query(TeamMemberRecord).filter(TeamMemberRecord.id == member_id).first()
    if not record:
        raise NotFoundError("Team member", member_id)
    return record_to_member(record)


def list_members(db: Session, role: str | None = None) -> list[TeamMember]:
    query = db.query(TeamMemberRecord)
    if role:
        query = query.filter(TeamMemberRecord.role == role)
    return [record_to_member(r) for r in query.order_by(TeamMemberRecord.name).all()]


def update_availability(db: Session, member_id: str, changes: dict[str, str | None]) -> TeamMember:
    record = db.query(TeamMemberRecord).filter(TeamMemberRecord.id == member_id).first()
    if not record:
        raise NotFoundError("Team member", member_id)
    availability = dict(record.availability or {})
    for day, value in changes.items():
        if value is None:
            availability.pop(day, None)
        else:
            availability[day] = value
    # Reassign so SQLAlchemy sees the JSON column change.
    record.availability = availability
    db.commit()
    db.refresh(record)
    return record_to_member(record)
