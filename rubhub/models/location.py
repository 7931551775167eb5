"""
Provider practice location (address)
"""
from sqlalchemy import Column, Integer, String, Float, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from rubhub.database import Base


class Location(Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(Integer, ForeignKey("providers.id"), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    address1 = Column(String(255), nullable=False)
    address2 = Column(String(255), nullable=True)
    city = Column(String(255), nullable=False)
    state = Column(String(50), nullable=False)   # short name, e.g. "CA"
    zip = Column(String(20), nullable=False)
    country = Column(String(10), nullable=False, default="US")
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    hidden = Column(Boolean, nullable=False, default=False)

    provider = relationship("Provider", back_populates="locations")
