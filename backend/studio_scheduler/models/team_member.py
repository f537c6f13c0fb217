from sqlalchemy import JSON, Boolean, Column, Text
from studio_scheduler.database import Base


class TeamMemberRecord(Base):
    __tablename__ = "team_members"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    role = Column(Text, nullable=False)
    email = Column(Text, nullable=False, default="")
    phone = Column(Text, nullable=False, default="")
    whatsapp = Column(Text)
    is_freelancer = Column(Boolean, nullable=False, default=False)
    availability = Column(JSON, nullable=False, default=dict)
    created_at = Column(Text, nullable=False)
