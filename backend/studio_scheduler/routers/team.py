from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from studio_scheduler.database import get_db
from studio_scheduler.schemas.team import AvailabilityUpdate, MemberRole, TeamMember, TeamMemberCreate
from studio_scheduler.services import team_service

router = APIRouter(prefix="/team", tags=["team"])


@router.post("", response_model=TeamMember, status_code=201)
async def create_member(req: TeamMemberCreate, db: Session = Depends(get_db)):
    return team_service.create_member(db, req)


@router.get("", response_model=list[TeamMember])
async def list_members(role: MemberRole | None = None, db: Session = Depends(get_db)):
    return team_service.list_members(db, role)


@router.get("/{member_id}", response_model=TeamMember)
async def get_member(member_id: str, db: Session = Depends(get_db)):
    return team_service.get_member(db, member_id)


@router.put("/{member_id}/availability", response_model=TeamMember)
async def update_availability(member_id: str, req: AvailabilityUpdate, db: Session = Depends(get_db)):
    return team_service.update_availability(db, member_id, req.availability)
