"""
Provider gallery photo
"""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from rubhub.database import Base


class Photo(Base):
    __tablename__ = "photos"

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(Integer, ForeignKey("providers.id"), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    caption = Column(String(1024), nullable=True)
    url = Column(String(1024), nullable=False)
    thumb_url = Column(String(1024), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    hidden = Column(Boolean, nullable=False, default=False)

    provider = relationship("Provider", back_populates="photos")
