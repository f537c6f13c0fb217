from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from studio_scheduler.database import Base


class AssignmentRecord(Base):
    __tablename__ = "event_assignments"

    id = Column(Text, primary_key=True)
    event_id = Column(Text, ForeignKey("scheduled_events.id", ondelete="CASCADE"), nullable=False)
    team_member_id = Column(Text, ForeignKey("team_members.id"), nullable=False)
    role = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    position = Column(Integer, nullable=False)
    notes = Column(Text)
    reporting_time = Column(Text)
    assigned_at = Column(Text, nullable=False)

    event = relationship("ScheduledEventRecord", back_populates="assignments")
