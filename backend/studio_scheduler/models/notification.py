from sqlalchemy import Column, ForeignKey, Integer, Text
from studio_scheduler.database import Base


class NotificationRecord(Base):
    __tablename__ = "notification_outbox"

    id = Column(Text, primary_key=True)
    kind = Column(Text, nullable=False)
    event_id = Column(Text, ForeignKey("scheduled_events.id", ondelete="CASCADE"), nullable=False)
    team_member_id = Column(Text, ForeignKey("team_members.id"), nullable=False)
    recipient = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    attempts = Column(Integer, nullable=False, default=0)
    last_error = Column(Text)
    created_at = Column(Text, nullable=False)
    sent_at = Column(Text)
