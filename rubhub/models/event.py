"""
Provider event (class, workshop, open house)
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from rubhub.database import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(Integer, ForeignKey("providers.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    city = Column(String(255), nullable=True)
    state = Column(String(50), nullable=True)
    country = Column(String(10), nullable=True, default="US")
    zip = Column(String(20), nullable=True)
    hidden = Column(Boolean, nullable=False, default=False)

    provider = relationship("Provider", back_populates="events")
