from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from studio_scheduler.database import Base


class DeliverableRecord(Base):
    __tablename__ = "event_deliverables"

    id = Column(Text, primary_key=True)
    event_id = Column(Text, ForeignKey("scheduled_events.id", ondelete="CASCADE"), nullable=False)
    type = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    description = Column(Text)
    assigned_to = Column(Text)
    delivery_date = Column(Text)
    position = Column(Integer, nullable=False)

    event = relationship("ScheduledEventRecord", back_populates="deliverables")
