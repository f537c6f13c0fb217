from sqlalchemy import Column, Text
from studio_scheduler.database import Base


class EstimateRecord(Base):
    __tablename__ = "estimates"

    id = Column(Text, primary_key=True)
    status = Column(Text)
    client_name = Column(Text)
    payload = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)
