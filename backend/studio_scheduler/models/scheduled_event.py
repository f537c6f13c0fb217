from sqlalchemy import Column, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from studio_scheduler.database import Base


class ScheduledEventRecord(Base):
    __tablename__ = "scheduled_events"
    __table_args__ = (UniqueConstraint("estimate_id", "name"),)

    id = Column(Text, primary_key=True)
    estimate_id = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    date = Column(Text, nullable=False)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    location = Column(Text, nullable=False)
    client_name = Column(Text, nullable=False, default="")
    client_phone = Column(Text, nullable=False, default="")
    client_email = Column(Text)
    guest_count = Column(Text, nullable=False, default="0")
    photographers_count = Column(Integer, nullable=False, default=1)
    videographers_count = Column(Integer, nullable=False, default=0)
    stage = Column(Text, nullable=False, default="pre-production")
    notes = Column(Text)
    client_requirements = Column(Text)
    estimate_package = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    assignments = relationship(
        "AssignmentRecord",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="AssignmentRecord.position",
    )
    deliverables = relationship(
        "DeliverableRecord",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="DeliverableRecord.position",
    )
