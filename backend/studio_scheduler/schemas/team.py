from typing import Literal

from pydantic import BaseModel

MemberRole = Literal["photographer", "videographer", "editor", "production", "album_designer"]
Availability = Literal["available", "busy", "tentative"]


class TeamMember(BaseModel):
    id: str
    name: str
    role: MemberRole
    email: str = ""
    phone: str = ""
    whatsapp: str | None = None
    is_freelancer: bool = False
    availability: dict[str, Availability] = {}


class TeamMemberCreate(BaseModel):
    name: str
    role: MemberRole
    email: str = ""
    phone: str = ""
    whatsapp: str | None = None
    is_freelancer: bool = False
    availability: dict[str, Availability] = {}


class AvailabilityUpdate(BaseModel):
    """Entries to merge into the member's calendar; None clears a date."""
    availability: dict[str, Availability | None]
